"""Error taxonomy for the opportunity board."""
from __future__ import annotations


class BoardError(Exception):
    """Base class for every error raised by the board core."""


class ValidationError(BoardError, ValueError):
    """A mutation was rejected before touching the collection."""


class CorruptStateError(BoardError):
    """The persisted snapshot exists but cannot be read back."""


class PersistenceError(BoardError):
    """Writing the snapshot to storage failed."""
