from dataclasses import dataclass


@dataclass(frozen=True)
class DraftError:
    message: str


@dataclass(frozen=True)
class SyncError(DraftError):
    operation: str
    target: str = ""
