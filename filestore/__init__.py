"""filestore - sandboxed filesystem back-end for file-transfer services."""

__version__ = "0.1.0"
