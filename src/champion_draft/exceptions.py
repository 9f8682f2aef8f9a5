class DraftException(Exception):
    """Base class for errors raised by champion_draft."""


class DraftConfigError(DraftException):
    """Raised when draft.toml holds invalid values."""


class SnapshotDecodeError(DraftException):
    """Raised when a locally persisted record cannot be decoded."""
