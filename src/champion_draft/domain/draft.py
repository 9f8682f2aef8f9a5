from collections.abc import Mapping
from dataclasses import dataclass, field

from champion_draft.domain.role import ROLES, Role
from champion_draft.domain.team import empty_mapping


@dataclass(frozen=True)
class RerollOffer:
    role: Role
    original: str
    rerolled: str

    def choices(self) -> tuple[str, str]:
        return (self.original, self.rerolled)


@dataclass(frozen=True)
class DraftSession:
    selections: Mapping[Role, str | None] = field(default_factory=empty_mapping)
    randomized_roles: frozenset[Role] = frozenset()
    reroll: RerollOffer | None = None
    pending_selections: Mapping[Role, str | None] = field(default_factory=dict)
    has_used_reroll: bool = False
    session_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.randomized_roles and self.session_id is None

    @property
    def is_complete(self) -> bool:
        return all(self.selections.get(role) is not None for role in ROLES)

    def selection(self, role: Role) -> str | None:
        return self.selections.get(role)

    def selected_champions(self, *, exclude: Role | None = None) -> set[str]:
        return {
            champion
            for role, champion in self.selections.items()
            if champion is not None and role is not exclude
        }

    def has_unresolved_reroll(self) -> bool:
        return any(choice is None for choice in self.pending_selections.values())


@dataclass(frozen=True)
class IncompleteTeam:
    id: str
    timestamp: str
    session: DraftSession
    version: int = 1
