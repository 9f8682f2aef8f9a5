from dataclasses import dataclass, field
from datetime import UTC, datetime

from champion_draft.domain.role import ROLES, Role


def empty_mapping() -> dict[Role, str | None]:
    return {role: None for role in ROLES}


def iso_timestamp(moment: datetime) -> str:
    """Format *moment* as a UTC ISO-8601 string with millisecond precision and a ``Z`` suffix.

    Strings in this format sort lexicographically in time order, which the ledger relies on.
    """
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class SavedTeam:
    timestamp: str
    team: dict[Role, str | None] = field(default_factory=empty_mapping)
    is_admin_created: bool = False

    def picks(self) -> list[tuple[Role, str]]:
        return [(role, champion) for role in ROLES if (champion := self.team.get(role)) is not None]

    def champions(self) -> list[str]:
        return [champion for _, champion in self.picks()]

    def is_empty(self) -> bool:
        return not self.picks()
