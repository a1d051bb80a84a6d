"""
Pytest configuration and fixtures for filestore tests.
"""

import logging
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from filestore.StorageGate import DriverFactory, StorageDriver


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    # Cleanup
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def temp_data_dir(temp_dir: Path) -> Path:
    """Create a temporary data directory structure."""
    data_dir = temp_dir / "data"
    (data_dir / "config").mkdir(parents=True, exist_ok=True)
    return data_dir


@pytest.fixture
def sample_folder(temp_dir: Path) -> Path:
    """Create a sample root folder with test files."""
    folder = temp_dir / "sample_folder"
    folder.mkdir(parents=True, exist_ok=True)

    (folder / "readme.txt").write_text("Hello World")
    (folder / "data.json").write_text('{"key": "value"}')

    subfolder = folder / "subfolder"
    subfolder.mkdir()
    (subfolder / "nested.txt").write_text("Nested content")

    return folder


@pytest.fixture
def driver(sample_folder: Path) -> StorageDriver:
    """A driver rooted at the sample folder."""
    return DriverFactory(str(sample_folder)).new_driver()


@pytest.fixture(autouse=True)
def clean_storage_env(monkeypatch):
    """Keep STORAGE_* variables from the host out of the tests."""
    for key in (
        "STORAGE_ROOT",
        "STORAGE_OWNER",
        "STORAGE_GROUP",
        "STORAGE_COPY_CHUNK_SIZE",
        "STORAGE_CREATE_ROOT",
        "STORAGE_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_module_state():
    """Reset module-level state between tests."""
    yield

    # Reset StorageGate
    try:
        import filestore.StorageGate as storage_gate
        storage_gate._config = None
        storage_gate._factory = None
        storage_gate._initialized = False
        storage_gate._config_path = None
    except (ImportError, AttributeError):
        pass

    # Reset log level applied by initialize()
    logging.getLogger("filestore").setLevel(logging.INFO)

    # Reset Config
    try:
        import filestore.Config as config_module
        config_module._manager = None
    except (ImportError, AttributeError):
        pass
