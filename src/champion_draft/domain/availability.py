from dataclasses import dataclass

from champion_draft.domain.role import Role


@dataclass(frozen=True)
class AvailabilitySnapshot:
    role: Role
    champions: tuple[str, ...]
    # Empty when the list was derived from the champion pool after a failed read.
    fetched_at: str = ""
