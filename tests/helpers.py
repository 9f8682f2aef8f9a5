import itertools
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from champion_draft.availability.role_index import RoleIndex
from champion_draft.domain.role import Role
from champion_draft.repos.availability_repo import (
    AvailabilityCache,
    ChampionRoleCache,
    PlayedChampionCache,
    ResetMarkerRepo,
)
from champion_draft.repos.pending_write_repo import PendingWriteRepo
from champion_draft.repos.saved_team_repo import SavedTeamCache
from champion_draft.sync.reconciler import Reconciler
from tests.fakes.backend import FakeBackend
from tests.fakes.store import InMemoryLocalStore

# Gragas plays top and jungle, Lux plays mid and support.
POOLS: dict[Role, tuple[str, ...]] = {
    Role.TOP: ("Darius", "Garen", "Gragas"),
    Role.JUNGLE: ("Gragas", "Lee Sin", "Vi"),
    Role.MID: ("Ahri", "Lux", "Zed"),
    Role.ADC: ("Caitlyn", "Jinx"),
    Role.SUPPORT: ("Lux", "Thresh"),
}


class StepClock:
    """Advances one second per reading so every timestamp is distinct and ordered."""

    def __init__(self, start: datetime = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)) -> None:
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


def sequential_ids() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"team-{next(counter)}"


def build_reconciler(backend: FakeBackend, store: InMemoryLocalStore, clock: StepClock | None = None) -> Reconciler:
    return Reconciler(
        backend,
        SavedTeamCache(store),
        AvailabilityCache(store),
        PlayedChampionCache(store),
        ResetMarkerRepo(store),
        PendingWriteRepo(store),
        ChampionRoleCache(store),
        index=RoleIndex.from_pools(POOLS),
        clock=clock or StepClock(),
    )
