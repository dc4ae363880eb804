"""Persistence errors raised by document I/O.

The progression store catches all of these; none of them reach
gameplay or UI code.
"""

from __future__ import annotations


class PersistenceError(Exception):
    """Base class for save-file problems."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}" if reason else path)


class SaveFileMissing(PersistenceError):
    """No save document exists yet (first run)."""


class CorruptSaveDocument(PersistenceError):
    """The save document could not be read or does not match the schema."""


class SaveWriteError(PersistenceError):
    """Writing the save document failed."""
