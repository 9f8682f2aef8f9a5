from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from champion_draft.domain.draft import DraftSession, IncompleteTeam
    from champion_draft.domain.role import Role


def reserved_by_others(session_id: str | None, snapshots: Iterable[IncompleteTeam]) -> set[str]:
    """Champions held by every in-progress draft on this device except *session_id*."""
    return {
        champion
        for snapshot in snapshots
        if snapshot.id != session_id
        for champion in snapshot.session.selected_champions()
    }


def available_champions(
    role: Role,
    availability: Sequence[str],
    session: DraftSession,
    snapshots: Iterable[IncompleteTeam],
) -> list[str]:
    """Candidates for *role*: the store's list minus other local drafts' picks.

    The session's own picks in other roles are excluded too, so a team never holds
    a champion twice; its pick for *role* itself stays a candidate (a reroll needs it).
    """
    reserved = reserved_by_others(session.session_id, snapshots)
    reserved |= session.selected_champions(exclude=role)
    return [champion for champion in availability if champion not in reserved]
