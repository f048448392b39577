"""Error kinds raised by the in-memory filesystem."""
from __future__ import annotations

from typing import Optional


class FileSystemError(Exception):
    """Base class for failed filesystem preconditions."""

    code = "Unknown"
    reason = "filesystem error"

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"{self.reason}: {path}")


class EntryNotFound(FileSystemError):
    """Raised when a path does not resolve to an entry."""

    code = "FileNotFound"
    reason = "No such file or directory"


class NotADirectory(FileSystemError):
    """Raised when a directory was expected but a file was found."""

    code = "FileNotADirectory"
    reason = "Not a directory"


class IsADirectory(FileSystemError):
    """Raised when a file was expected but a directory was found."""

    code = "FileIsADirectory"
    reason = "Is a directory"


class EntryExists(FileSystemError):
    """Raised when the target of a create/write/rename is already taken."""

    code = "FileExists"
    reason = "Entry already exists"


class NoPermissions(FileSystemError):
    """Raised by the provider when a mutating call hits a read-only filesystem."""

    code = "NoPermissions"
    reason = "Filesystem is read-only"
