"""Exception types raised by dupescan."""

from __future__ import annotations

import pathlib


class DupescanError(Exception):
    """Base class for all dupescan errors."""


class ScanError(DupescanError):
    """The scan root failed validation; fatal to the run."""


class PathNotFoundError(ScanError, FileNotFoundError):
    """The scan root does not exist."""

    def __init__(self, path: pathlib.Path):
        super().__init__(f"File not found: {path}")
        self.path = path


class RootNotADirectoryError(ScanError, NotADirectoryError):
    """The scan root exists but is not a directory."""

    def __init__(self, path: pathlib.Path):
        super().__init__(f"Not a directory: {path}")
        self.path = path


class FileHashError(DupescanError, OSError):
    """A file could not be hashed. Recoverable: the file is skipped."""

    action = "hash"

    def __init__(self, path: pathlib.Path, reason: BaseException | str):
        super().__init__(f"Could not {self.action} {path}: {reason}")
        self.path = path
        self.reason = reason


class FileOpenError(FileHashError):
    """The file could not be opened (or stat'ed) for hashing."""

    action = "open"


class FileReadError(FileHashError):
    """A read failed partway through the file."""

    action = "read"
