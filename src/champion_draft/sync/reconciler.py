from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import partial
from typing import TYPE_CHECKING

import httpx

from champion_draft.availability.bookkeeping import effective_availability, fan_out, restore_champions
from champion_draft.availability.role_index import RoleIndex
from champion_draft.data.champions import CHAMPION_POOLS
from champion_draft.domain.availability import AvailabilitySnapshot
from champion_draft.domain.errors import SyncError
from champion_draft.domain.events import (
    Ack,
    AllTeamsDeleted,
    ChampionBanned,
    ChampionRolesSaved,
    DraftEvent,
    QueuedEvent,
    RolesReset,
    TeamDeleted,
    TeamLocked,
)
from champion_draft.domain.result import Err, Ok, Result, errors_of
from champion_draft.domain.role import ROLES, Role
from champion_draft.domain.team import SavedTeam, iso_timestamp
from champion_draft.sync.merge import merge_by_key

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from champion_draft.client.protocol import DraftBackend
    from champion_draft.repos.availability_repo import (
        AvailabilityCache,
        ChampionRoleCache,
        PlayedChampionCache,
        ResetMarkerRepo,
    )
    from champion_draft.repos.pending_write_repo import PendingWriteRepo
    from champion_draft.repos.saved_team_repo import SavedTeamCache

logger = logging.getLogger(__name__)

# httpx.HTTPError covers transport failures and non-2xx responses; ValueError covers bad JSON bodies.
_REMOTE_ERRORS = (httpx.HTTPError, ValueError)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_queue_id() -> str:
    return f"{time.time_ns():020d}-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class _Step:
    key: str
    run: Callable[[], Awaitable[object]]


class Reconciler:
    """Keeps the local caches and the shared backend converging.

    State changes are two-phase: ``apply_local`` updates the caches synchronously
    and ``reconcile`` performs the remote writes afterwards, then reloads. Reads
    never fail: they fall back to the cache or the champion pool. Writes that fail
    are queued in the local store with the steps that already succeeded and
    replayed by ``sync``, from this process or the next one.
    """

    def __init__(
        self,
        backend: DraftBackend,
        saved_teams: SavedTeamCache,
        availability: AvailabilityCache,
        played: PlayedChampionCache,
        resets: ResetMarkerRepo,
        pending: PendingWriteRepo,
        champion_roles: ChampionRoleCache,
        *,
        index: RoleIndex | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._backend = backend
        self._saved_teams = saved_teams
        self._availability = availability
        self._played = played
        self._resets = resets
        self._pending = pending
        self._champion_roles = champion_roles
        self._index = index or self._cached_index()
        self._clock = clock
        self._fallback: dict[Role, AvailabilitySnapshot] = {}

    @property
    def index(self) -> RoleIndex:
        return self._index

    @property
    def queued(self) -> tuple[QueuedEvent, ...]:
        return tuple(self._pending.all())

    def now(self) -> str:
        return iso_timestamp(self._clock())

    # -- Local reads -------------------------------------------------------------

    def saved_teams(self) -> list[SavedTeam]:
        return self._saved_teams.all()

    def find_team(self, timestamp: str) -> SavedTeam | None:
        return self._saved_teams.get(timestamp)

    def available(self, role: Role) -> list[str]:
        pool = self._index.pool(role)
        snapshot = self._fallback.get(role) or self._availability.get(role) or AvailabilitySnapshot(role, pool)
        reset_at = self._resets.get(role)
        if role in self._pending_resets():
            # Reset still queued: the remote list predates it.
            snapshot = AvailabilitySnapshot(role, pool)
        visible = effective_availability(snapshot, pool, self._played.all(), reset_at)
        pending = self._pending_removals()
        return [champion for champion in visible if champion not in pending]

    def played_count(self) -> int:
        return len({champion for team in self._saved_teams.all() for champion in team.champions()})

    # -- Remote reads ------------------------------------------------------------

    async def load_champion_roles(self) -> RoleIndex:
        try:
            roles = await self._backend.get_champion_roles()
        except _REMOTE_ERRORS as e:
            logger.warning("Could not load champion roles, keeping current pools: %s", e)
            return self._index
        if roles:
            self._set_index(RoleIndex.from_champion_roles(roles))
            logger.debug("Loaded roles for %d champions", len(self._index))
            return self._index

        try:
            pools = await self._backend.get_champion_pools()
        except _REMOTE_ERRORS as e:
            logger.warning("Could not load champion pools, keeping current pools: %s", e)
            return self._index
        if any(pools.values()):
            self._set_index(RoleIndex.from_pools(pools))
        return self._index

    async def load_saved_teams(self) -> list[SavedTeam]:
        try:
            remote = await self._backend.get_saved_teams()
        except _REMOTE_ERRORS as e:
            local = self._saved_teams.all()
            logger.warning("Could not load saved teams, keeping %d cached: %s", len(local), e)
            return local

        # Read after the fetch so writes made while it was in flight are kept.
        local = self._saved_teams.all()
        deleting = self._pending_deletes()
        remote = [team for team in remote if team.timestamp not in deleting]
        merged = merge_by_key(local, remote, key_fn=lambda team: team.timestamp)
        merged.sort(key=lambda team: team.timestamp, reverse=True)
        self._saved_teams.replace_all(merged)
        logger.debug("Ledger has %d teams (%d from backend)", len(merged), len(remote))
        return merged

    async def load_availability(self, role: Role) -> list[str]:
        fetched_at = self.now()
        try:
            champions = await self._backend.get_available_champions(role)
        except _REMOTE_ERRORS as e:
            logger.warning("Could not load availability for %s, assuming the full pool: %s", role, e)
            self._fallback[role] = AvailabilitySnapshot(role=role, champions=self._index.pool(role))
        else:
            self._fallback.pop(role, None)
            self._availability.put(AvailabilitySnapshot(role=role, champions=tuple(champions), fetched_at=fetched_at))
        return self.available(role)

    async def load_availability_batch(self) -> dict[Role, list[str]]:
        fetched_at = self.now()
        try:
            by_role = await self._backend.get_available_champions_batch()
        except _REMOTE_ERRORS as e:
            logger.warning("Could not load availability, assuming the full pools: %s", e)
            for role in ROLES:
                self._fallback[role] = AvailabilitySnapshot(role=role, champions=self._index.pool(role))
        else:
            for role in ROLES:
                self._fallback.pop(role, None)
                champions = tuple(by_role.get(role, ()))
                self._availability.put(AvailabilitySnapshot(role=role, champions=champions, fetched_at=fetched_at))
            pruned = self._played.prune(fetched_at, keep=self._pending_removals())
            if pruned:
                logger.debug("Backend has absorbed %d locally played champions", pruned)
        return {role: self.available(role) for role in ROLES}

    async def reload(self) -> None:
        await asyncio.gather(self.load_saved_teams(), self.load_availability_batch())

    # -- Two-phase writes --------------------------------------------------------

    def apply_local(self, event: DraftEvent) -> None:
        """Apply *event* to the local caches. Synchronous and never touches the network."""
        if isinstance(event, TeamLocked):
            if not event.team.is_empty():
                self._saved_teams.upsert(event.team)
                self._played.mark(event.team.champions(), event.team.timestamp)
        elif isinstance(event, TeamDeleted):
            self._saved_teams.delete(event.team.timestamp)
            self._restore_locally(event.team.champions())
        elif isinstance(event, AllTeamsDeleted):
            self._saved_teams.clear()
            self._restore_locally(c for team in event.teams for c in team.champions())
        elif isinstance(event, RolesReset):
            self._resets.mark(event.roles, event.at)
            self._restore_locally(self._index.champions_in(event.roles))
        elif isinstance(event, ChampionBanned):
            self._played.mark([event.champion], event.at)
        elif isinstance(event, ChampionRolesSaved):
            self._set_index(RoleIndex.from_champion_roles(event.roles))

    async def reconcile(
        self,
        event: DraftEvent,
        *,
        done: frozenset[str] = frozenset(),
        reload: bool = True,
        attempt: int = 1,
        queue_id: str | None = None,
    ) -> Result[Ack, SyncError]:
        """Perform the remote writes for *event*, then reload both stores.

        Steps listed in *done* are skipped. If any step fails the event is queued
        (under *queue_id* when replaying) with the steps that succeeded before the
        reload runs, and the first failure is returned. A replay that succeeds
        removes its queue entry.
        """
        completed = set(done)
        failures: list[tuple[str, Exception]] = []
        writes = 0
        for step in self._steps(event):
            if step.key in completed:
                continue
            try:
                await step.run()
            except _REMOTE_ERRORS as e:
                logger.warning("Background write %s failed (attempt %d): %s", step.key, attempt, e)
                failures.append((step.key, e))
            else:
                completed.add(step.key)
                writes += 1

        if failures:
            self._pending.put(
                QueuedEvent(id=queue_id or _new_queue_id(), event=event, done=frozenset(completed), attempts=attempt)
            )
        elif queue_id is not None:
            self._pending.delete(queue_id)

        if reload:
            await self.reload()

        if failures:
            key, error = failures[0]
            return Err(
                SyncError(
                    message=f"{len(failures)} write(s) failed, first: {error}",
                    operation=key.split(":", 1)[0],
                    target=key,
                )
            )
        logger.debug("Reconciled %s with %d write(s)", type(event).__name__, writes)
        return Ok(Ack(event=event, writes=writes))

    def enqueue(self, event: DraftEvent) -> None:
        """Queue *event*'s remote writes for the next ``sync`` without attempting them now."""
        self._pending.put(QueuedEvent(id=_new_queue_id(), event=event, attempts=0))

    async def submit(self, event: DraftEvent) -> Result[Ack, SyncError]:
        self.apply_local(event)
        return await self.reconcile(event)

    async def sync(self) -> list[SyncError]:
        """Replay queued writes, then reload the ledger and availability."""
        queued = self._pending.all()
        results = [
            await self.reconcile(
                item.event, done=item.done, reload=False, attempt=item.attempts + 1, queue_id=item.id
            )
            for item in queued
        ]
        await self.reload()
        errors = errors_of(results)
        if queued:
            logger.info("Replayed %d queued event(s), %d still pending", len(queued), len(errors))
        return errors

    async def run_periodic(self, interval: float, stop: asyncio.Event) -> None:
        while not stop.is_set():
            await self.sync()
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except TimeoutError:
                continue

    # -- Ledger and availability operations -------------------------------------

    async def delete_saved_team(self, timestamp: str) -> Result[Ack, SyncError]:
        team = self._saved_teams.get(timestamp)
        if team is None:
            return Err(SyncError(message="no saved team with that timestamp", operation="delete_team", target=timestamp))
        return await self.submit(TeamDeleted(team=team))

    async def delete_all_teams(self) -> Result[Ack, SyncError]:
        return await self.submit(AllTeamsDeleted(teams=tuple(self._saved_teams.all())))

    async def reset_by_roles(self, roles: Iterable[Role]) -> Result[Ack, SyncError]:
        ordered = tuple(role for role in ROLES if role in set(roles))
        return await self.submit(RolesReset(roles=ordered, at=self.now()))

    async def create_admin_team(self, mapping: dict[Role, str | None]) -> Result[Ack, SyncError]:
        team = SavedTeam(timestamp=self.now(), team={role: mapping.get(role) for role in ROLES}, is_admin_created=True)
        if team.is_empty():
            return Err(SyncError(message="an admin team needs at least one champion", operation="save_team"))
        return await self.submit(TeamLocked(team=team))

    async def ban_champion(self, champion: str) -> Result[Ack, SyncError]:
        return await self.submit(ChampionBanned(champion=champion, at=self.now()))

    async def save_champion_roles(self, roles: dict[str, tuple[Role, ...]]) -> Result[Ack, SyncError]:
        return await self.submit(ChampionRolesSaved(roles=roles))

    # -- Internals ---------------------------------------------------------------

    def _steps(self, event: DraftEvent) -> list[_Step]:
        backend = self._backend
        if isinstance(event, TeamLocked):
            if event.team.is_empty():
                return []
            steps = [
                _Step(f"remove:{role}:{champion}", partial(backend.remove_available_champion, role, champion))
                for role, champion in fan_out(event.team.picks(), self._index)
            ]
            steps.append(_Step(f"save_team:{event.team.timestamp}", partial(backend.save_team, event.team)))
            return steps
        if isinstance(event, TeamDeleted):
            steps = [_Step(f"delete_team:{event.team.timestamp}", partial(backend.delete_team, event.team.timestamp))]
            steps.extend(self._restore_steps(event.team.picks()))
            return steps
        if isinstance(event, AllTeamsDeleted):
            steps = [_Step("delete_all_teams:", backend.delete_all_teams)]
            steps.extend(self._restore_steps(pick for team in event.teams for pick in team.picks()))
            return steps
        if isinstance(event, RolesReset):
            return [_Step(f"reset:{role}", partial(backend.reset_available_champions, role)) for role in event.roles]
        if isinstance(event, ChampionBanned):
            return [_Step(f"ban:{event.champion}", partial(backend.set_champion_unavailable, event.champion))]
        if isinstance(event, ChampionRolesSaved):
            return [_Step("save_champion_roles:", partial(backend.save_champion_roles, event.roles))]
        return []

    def _restore_steps(self, picks: Iterable[tuple[Role, str]]) -> list[_Step]:
        return [
            _Step(f"restore:{role}:{champion}", partial(self._backend.restore_available_champion, role, champion))
            for role, champion in fan_out(picks, self._index)
        ]

    def _restore_locally(self, champions: Iterable[str]) -> None:
        restored = list(dict.fromkeys(champions))
        if not restored:
            return
        self._played.unmark(restored)
        for role in ROLES:
            snapshot = self._availability.get(role)
            if snapshot is not None:
                self._availability.put(restore_champions(snapshot, restored, self._index.pool(role)))

    def _pending_removals(self) -> set[str]:
        champions: set[str] = set()
        for item in self._pending.all():
            if isinstance(item.event, TeamLocked):
                champions.update(item.event.team.champions())
            elif isinstance(item.event, ChampionBanned):
                champions.add(item.event.champion)
        return champions

    def _pending_resets(self) -> set[Role]:
        return {role for item in self._pending.all() if isinstance(item.event, RolesReset) for role in item.event.roles}

    def _pending_deletes(self) -> set[str]:
        timestamps: set[str] = set()
        for item in self._pending.all():
            if isinstance(item.event, TeamDeleted):
                timestamps.add(item.event.team.timestamp)
            elif isinstance(item.event, AllTeamsDeleted):
                timestamps.update(team.timestamp for team in item.event.teams)
        return timestamps

    def _cached_index(self) -> RoleIndex:
        cached = self._champion_roles.all()
        return RoleIndex.from_champion_roles(cached) if cached else RoleIndex.from_pools(CHAMPION_POOLS)

    def _set_index(self, index: RoleIndex) -> None:
        self._index = index
        self._champion_roles.replace_all(index.champion_roles())
