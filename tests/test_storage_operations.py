"""
Tests for StorageGate stat, listing and mutation operations.
"""

import os
import pytest

from filestore.StorageGate import (
    FileMetadata,
    FilesystemError,
    NotFoundError,
    PathSecurityError,
    PreconditionError,
    WrongTypeError,
)


class TestStat:
    """Tests for StorageDriver.stat."""

    def test_stat_file(self, driver):
        """Should return metadata for a file."""
        meta = driver.stat("readme.txt")

        assert isinstance(meta, FileMetadata)
        assert meta.name == "readme.txt"
        assert meta.path == "readme.txt"
        assert meta.size == 11
        assert meta.is_directory is False
        assert meta.owner == "root"
        assert meta.group == "root"

    def test_stat_directory(self, driver):
        """Should flag directories."""
        meta = driver.stat("/subfolder")

        assert meta.is_directory is True
        assert meta.name == "subfolder"

    def test_stat_root(self, driver, sample_folder):
        """Empty path is the root itself."""
        meta = driver.stat("")

        assert meta.is_directory is True
        assert meta.path == ""
        assert meta.name == sample_folder.name

    def test_stat_missing(self, driver):
        """Should raise NotFoundError for missing entries."""
        with pytest.raises(NotFoundError):
            driver.stat("missing.txt")

    def test_stat_below_a_file(self, driver):
        """A path under a regular file does not exist."""
        with pytest.raises(NotFoundError):
            driver.stat("readme.txt/child")

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_stat_does_not_follow_symlinks(self, driver, sample_folder):
        """A symlink to a directory is reported as the link itself."""
        os.symlink(sample_folder / "subfolder", sample_folder / "link")

        meta = driver.stat("link")

        assert meta.is_directory is False

    def test_metadata_is_frozen(self, driver):
        """Metadata snapshots cannot be mutated."""
        meta = driver.stat("readme.txt")

        with pytest.raises(Exception):
            meta.size = 0

    def test_custom_owner_and_group(self, sample_folder):
        """Owner and group come from the factory, not the filesystem."""
        from filestore.StorageGate import DriverFactory

        driver = DriverFactory(str(sample_folder), owner="ftp", group="users").new_driver()
        meta = driver.stat("readme.txt")

        assert meta.owner == "ftp"
        assert meta.group == "users"


class TestListDirectory:
    """Tests for StorageDriver.list_directory."""

    def test_lists_immediate_children_only(self, driver):
        """Should list children without grandchildren."""
        entries = driver.list_directory("")
        names = {e.name for e in entries}

        assert names == {"readme.txt", "data.json", "subfolder"}
        assert "nested.txt" not in names

    def test_listing_paths_are_relative(self, driver):
        """Entry paths are relative to the root."""
        entries = driver.list_directory("subfolder")

        assert len(entries) == 1
        assert entries[0].name == "nested.txt"
        assert entries[0].path == "subfolder/nested.txt"
        assert entries[0].size == len("Nested content")

    def test_list_empty_directory(self, driver, sample_folder):
        """An empty directory lists as an empty sequence."""
        (sample_folder / "empty").mkdir()

        assert driver.list_directory("empty") == []

    def test_list_missing_directory(self, driver):
        """Should raise NotFoundError, not return an empty list."""
        with pytest.raises(NotFoundError):
            driver.list_directory("nope")

    def test_list_file(self, driver):
        """Listing a file is a type error."""
        with pytest.raises(WrongTypeError):
            driver.list_directory("readme.txt")

    def test_list_deep_tree(self, driver, sample_folder):
        """Deeply nested entries never leak into the listing."""
        deep = sample_folder / "a" / "b" / "c"
        deep.mkdir(parents=True)
        (deep / "leaf.txt").write_text("x")

        entries = driver.list_directory("a")

        assert [e.name for e in entries] == ["b"]
        assert entries[0].is_directory is True


class TestChangeDir:
    """Tests for StorageDriver.change_dir."""

    def test_change_to_directory(self, driver):
        """Should succeed for a directory."""
        driver.change_dir("subfolder")
        driver.change_dir("/")

    def test_change_to_file(self, driver):
        """Should refuse a file."""
        with pytest.raises(WrongTypeError):
            driver.change_dir("readme.txt")

    def test_change_to_missing(self, driver):
        """Should raise NotFoundError for missing paths."""
        with pytest.raises(NotFoundError):
            driver.change_dir("missing")


class TestMakeDir:
    """Tests for StorageDriver.make_dir."""

    def test_make_dir(self, driver, sample_folder):
        """Should create a directory."""
        driver.make_dir("reports")

        assert (sample_folder / "reports").is_dir()

    def test_make_existing_dir(self, driver):
        """Existing target is a filesystem error."""
        with pytest.raises(FilesystemError):
            driver.make_dir("subfolder")

    def test_make_dir_missing_parent(self, driver, sample_folder):
        """Only one level is created."""
        with pytest.raises(FilesystemError):
            driver.make_dir("missing/child")

        assert not (sample_folder / "missing").exists()


class TestDeleteDir:
    """Tests for StorageDriver.delete_dir."""

    def test_delete_empty_dir(self, driver, sample_folder):
        """Should remove an empty directory."""
        (sample_folder / "empty").mkdir()

        driver.delete_dir("empty")

        assert not (sample_folder / "empty").exists()

    def test_delete_non_empty_dir(self, driver, sample_folder):
        """Non-empty directories are reported, not ignored."""
        with pytest.raises(FilesystemError) as exc:
            driver.delete_dir("subfolder")

        assert "not empty" in exc.value.message.lower()
        assert (sample_folder / "subfolder" / "nested.txt").exists()

    def test_delete_dir_on_file(self, driver, sample_folder):
        """Should refuse a file and leave it in place."""
        with pytest.raises(WrongTypeError):
            driver.delete_dir("readme.txt")

        assert (sample_folder / "readme.txt").exists()

    def test_delete_missing_dir(self, driver):
        """Should raise NotFoundError."""
        with pytest.raises(NotFoundError):
            driver.delete_dir("missing")

    def test_delete_root(self, driver, sample_folder):
        """The root itself cannot be removed."""
        with pytest.raises(PreconditionError):
            driver.delete_dir("/")

        assert sample_folder.is_dir()


class TestDeleteFile:
    """Tests for StorageDriver.delete_file."""

    def test_delete_file(self, driver, sample_folder):
        """Should remove a file."""
        driver.delete_file("data.json")

        assert not (sample_folder / "data.json").exists()

    def test_delete_file_on_directory(self, driver, sample_folder):
        """Should refuse a directory and leave it in place."""
        with pytest.raises(WrongTypeError):
            driver.delete_file("subfolder")

        assert (sample_folder / "subfolder").is_dir()

    def test_delete_missing_file(self, driver):
        """Should raise NotFoundError."""
        with pytest.raises(NotFoundError):
            driver.delete_file("missing.txt")


class TestRename:
    """Tests for StorageDriver.rename."""

    def test_rename_file(self, driver):
        """Renamed file keeps its metadata under the new name."""
        before = driver.stat("readme.txt")

        driver.rename("readme.txt", "renamed.txt")

        after = driver.stat("renamed.txt")
        assert after.size == before.size
        assert after.is_directory is False
        with pytest.raises(NotFoundError):
            driver.stat("readme.txt")

    def test_rename_directory(self, driver):
        """Directories can be renamed, contents included."""
        driver.rename("subfolder", "moved")

        assert driver.stat("moved").is_directory is True
        assert [e.name for e in driver.list_directory("moved")] == ["nested.txt"]
        with pytest.raises(NotFoundError):
            driver.stat("subfolder")

    def test_rename_into_subdirectory(self, driver, sample_folder):
        """Both paths resolve under the same root."""
        driver.rename("/data.json", "/subfolder/data.json")

        assert (sample_folder / "subfolder" / "data.json").exists()

    def test_rename_missing_source(self, driver):
        """Should raise NotFoundError when the source is missing."""
        with pytest.raises(NotFoundError):
            driver.rename("missing.txt", "other.txt")

    def test_rename_out_of_root(self, driver, sample_folder):
        """Destination outside the root is refused."""
        with pytest.raises(PathSecurityError):
            driver.rename("readme.txt", "../escaped.txt")

        assert (sample_folder / "readme.txt").exists()
        assert not (sample_folder.parent / "escaped.txt").exists()

    def test_rename_failure_names_both_paths(self, driver, sample_folder):
        """OS failures report the source path and mention the destination."""
        with pytest.raises(FilesystemError) as exc:
            driver.rename("readme.txt", "subfolder")

        assert exc.value.path == "readme.txt"
        assert "'subfolder'" in exc.value.message
        assert (sample_folder / "readme.txt").exists()

    def test_rename_root(self, driver):
        """The root cannot be renamed."""
        with pytest.raises(PreconditionError):
            driver.rename("", "elsewhere")


class TestErrors:
    """Tests for the error payload."""

    def test_error_to_dict(self, driver):
        """Errors carry operation and caller path."""
        with pytest.raises(NotFoundError) as exc:
            driver.delete_file("missing.txt")

        data = exc.value.to_dict()
        assert data["error"] == "NotFoundError"
        assert data["operation"] == "delete"
        assert data["path"] == "missing.txt"

    def test_filesystem_error_keeps_cause(self, driver):
        """The OSError is chained for diagnosis."""
        with pytest.raises(FilesystemError) as exc:
            driver.make_dir("subfolder")

        assert isinstance(exc.value.__cause__, OSError)
