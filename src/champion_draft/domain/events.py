from dataclasses import dataclass
from typing import TypeAlias

from champion_draft.domain.role import Role
from champion_draft.domain.team import SavedTeam


@dataclass(frozen=True)
class TeamLocked:
    team: SavedTeam
    session_id: str | None = None


@dataclass(frozen=True)
class TeamDeleted:
    team: SavedTeam


@dataclass(frozen=True)
class AllTeamsDeleted:
    teams: tuple[SavedTeam, ...] = ()


@dataclass(frozen=True)
class RolesReset:
    roles: tuple[Role, ...]
    at: str


@dataclass(frozen=True)
class ChampionBanned:
    champion: str
    at: str


@dataclass(frozen=True)
class ChampionRolesSaved:
    roles: dict[str, tuple[Role, ...]]


DraftEvent: TypeAlias = TeamLocked | TeamDeleted | AllTeamsDeleted | RolesReset | ChampionBanned | ChampionRolesSaved


@dataclass(frozen=True)
class Ack:
    event: DraftEvent
    writes: int


@dataclass(frozen=True)
class QueuedEvent:
    """An event whose remote writes have not all landed; *done* holds the step keys that have."""

    id: str
    event: DraftEvent
    done: frozenset[str] = frozenset()
    attempts: int = 1
