"""Pure transitions of the draft session state machine.

Every function takes a session and returns the next one. A call whose
precondition does not hold returns the input unchanged, so callers detect a
rejected action with an identity check (``new is old``).

    Empty -> Picking -> AllRolesFilled -> [RerollOffered -> PendingChoice -> Resolved] -> Lockable -> Locked
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from champion_draft.domain.draft import DraftSession, RerollOffer
from champion_draft.domain.role import ROLES, Role
from champion_draft.domain.team import SavedTeam

if TYPE_CHECKING:
    import random
    from collections.abc import Callable, Sequence


def pick(
    session: DraftSession,
    role: Role,
    candidates: Sequence[str],
    rng: random.Random,
    new_session_id: Callable[[], str],
) -> DraftSession:
    """Draw a champion for *role* uniformly from *candidates*.

    Rejected when the role was already randomized in this session or nothing is
    available. The first accepted pick allocates the session id.
    """
    if role in session.randomized_roles or not candidates:
        return session
    champion = rng.choice(list(candidates))
    return replace(
        session,
        selections={**session.selections, role: champion},
        randomized_roles=session.randomized_roles | {role},
        session_id=session.session_id or new_session_id(),
    )


def reroll(session: DraftSession, role: Role, candidates: Sequence[str], rng: random.Random) -> DraftSession:
    """Offer one alternative for *role*; allowed once per session.

    The alternative is drawn uniformly from *candidates* minus the current pick.
    The role is left pending until ``resolve_reroll`` picks one of the two.
    """
    original = session.selections.get(role)
    if session.has_used_reroll or original is None:
        return session
    alternatives = [champion for champion in candidates if champion != original]
    if not alternatives:
        return session
    offer = RerollOffer(role=role, original=original, rerolled=rng.choice(alternatives))
    return replace(
        session,
        reroll=offer,
        pending_selections={**session.pending_selections, role: None},
        has_used_reroll=True,
    )


def resolve_reroll(session: DraftSession, role: Role, choice: str) -> DraftSession:
    """Settle the pending reroll on *role* with *choice*; any other input leaves *session* unchanged."""
    offer = session.reroll
    if offer is None or offer.role is not role or choice not in offer.choices():
        return session
    return replace(
        session,
        selections={**session.selections, role: choice},
        pending_selections={**session.pending_selections, role: choice},
        reroll=None,
    )


def can_lock_in(session: DraftSession) -> bool:
    """A draft can be locked in unless a reroll is still waiting for a choice."""
    return not session.has_unresolved_reroll()


def final_selections(session: DraftSession) -> dict[Role, str | None]:
    final = {role: session.selections.get(role) for role in ROLES}
    for role, choice in session.pending_selections.items():
        if choice is not None:
            final[role] = choice
    return final


def lock_in(session: DraftSession, timestamp: str, *, is_admin_created: bool = False) -> tuple[DraftSession, SavedTeam | None]:
    """Turn *session* into a saved team stamped *timestamp* and start over from ``Empty``.

    Returns the input session and no team when a reroll is still unresolved. A
    session without any champion resets but produces no team.
    """
    if not can_lock_in(session):
        return session, None
    team = SavedTeam(timestamp=timestamp, team=final_selections(session), is_admin_created=is_admin_created)
    return DraftSession(), (None if team.is_empty() else team)
