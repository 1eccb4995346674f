"""File existence and access tests."""

import os
from pathlib import Path

__all__ = [
    "file_exists",
    "file_exists_access",
    "file_exists_read",
    "file_exists_read_write",
    "file_exists_write",
]


def file_exists(filename: str | Path) -> bool:
    """Whether the path exists, of any type."""
    return Path(filename).exists()


def file_exists_access(filename: str | Path, access: int) -> bool:
    """Whether the path is a regular file, with the given os.access mode."""
    path = Path(filename)
    return path.is_file() and os.access(path, access)


def file_exists_read(filename: str | Path) -> bool:
    return file_exists_access(filename, os.R_OK)


def file_exists_write(filename: str | Path) -> bool:
    return file_exists_access(filename, os.W_OK)


def file_exists_read_write(filename: str | Path) -> bool:
    return file_exists_access(filename, os.R_OK | os.W_OK)
