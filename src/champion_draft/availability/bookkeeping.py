from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from champion_draft.domain.role import ROLES, Role

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from champion_draft.availability.role_index import RoleIndex
    from champion_draft.domain.availability import AvailabilitySnapshot


def fan_out(picks: Iterable[tuple[Role | None, str]], index: RoleIndex) -> list[tuple[Role, str]]:
    """Expand ``(role, champion)`` picks to one write per role each champion can play.

    The role a champion was picked for is always included, even if the champion-role
    configuration no longer lists it there.
    """
    writes: list[tuple[Role, str]] = []
    seen: set[tuple[Role, str]] = set()
    for picked_role, champion in picks:
        lanes = set(index.lanes_for(champion))
        if picked_role is not None:
            lanes.add(picked_role)
        for role in ROLES:
            if role in lanes and (role, champion) not in seen:
                seen.add((role, champion))
                writes.append((role, champion))
    return writes


def effective_availability(
    snapshot: AvailabilitySnapshot,
    pool: tuple[str, ...],
    played: Mapping[str, str],
    reset_at: str | None = None,
) -> list[str]:
    """Champions a role can draw from right now, local writes applied over the last read.

    ``played`` maps champion to the time it was locked locally. A champion stays hidden
    while that time is newer than both the availability read and the role's last reset;
    once a read newer than the lock has been absorbed, the remote list decides. A reset
    newer than the read makes the whole pool available again.
    """
    base = snapshot.champions
    floor = snapshot.fetched_at
    if reset_at is not None and reset_at > floor:
        base = pool
        floor = reset_at
    return [champion for champion in base if played.get(champion, "") <= floor]


def restore_champions(snapshot: AvailabilitySnapshot, champions: Iterable[str], pool: tuple[str, ...]) -> AvailabilitySnapshot:
    """Add *champions* back to a role's cached list, keeping pool order; champions outside the pool are ignored."""
    wanted = set(snapshot.champions) | {c for c in champions if c in pool}
    ordered = [c for c in pool if c in wanted]
    ordered.extend(c for c in snapshot.champions if c not in pool)
    return replace(snapshot, champions=tuple(ordered))
