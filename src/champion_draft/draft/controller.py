from __future__ import annotations

import asyncio
import logging
import random
import uuid
from typing import TYPE_CHECKING

from champion_draft.domain.draft import DraftSession
from champion_draft.domain.events import TeamLocked
from champion_draft.draft import session as transitions
from champion_draft.draft.candidates import available_champions

if TYPE_CHECKING:
    from collections.abc import Callable

    from champion_draft.domain.draft import IncompleteTeam, RerollOffer
    from champion_draft.domain.role import Role
    from champion_draft.domain.team import SavedTeam
    from champion_draft.repos.snapshot_repo import IncompleteTeamRepo
    from champion_draft.sync.reconciler import Reconciler

logger = logging.getLogger(__name__)


def _new_session_id() -> str:
    return f"team-{uuid.uuid4().hex[:12]}"


class DraftController:
    """The current user's draft: the session state machine plus its local snapshot.

    Each action runs to completion synchronously before the next one is accepted.
    Lock-in hands its remote writes to the reconciler as a background task when an
    event loop is running, otherwise queues them for the next sync.
    """

    def __init__(
        self,
        reconciler: Reconciler,
        snapshots: IncompleteTeamRepo,
        *,
        rng: random.Random | None = None,
        new_session_id: Callable[[], str] = _new_session_id,
    ) -> None:
        self._reconciler = reconciler
        self._snapshots = snapshots
        self._rng = rng or random.Random()
        self._new_session_id = new_session_id
        self._session = DraftSession()
        self._tasks: set[asyncio.Task[object]] = set()

    @property
    def session(self) -> DraftSession:
        return self._session

    def restore(self) -> bool:
        """Resume the draft this device was working on last, if its snapshot still exists."""
        current = self._snapshots.current_id()
        return current is not None and self.resume(current)

    # -- Candidates --------------------------------------------------------------

    def available_champions(self, role: Role) -> list[str]:
        return available_champions(role, self._reconciler.available(role), self._session, self._snapshots.all())

    def available_count(self, role: Role) -> int:
        return len(self.available_champions(role))

    # -- Session actions ---------------------------------------------------------

    def pick(self, role: Role) -> str | None:
        updated = transitions.pick(self._session, role, self.available_champions(role), self._rng, self._new_session_id)
        if updated is self._session:
            logger.debug("Pick for %s rejected", role)
            return None
        self._commit(updated)
        return updated.selection(role)

    def reroll(self, role: Role) -> RerollOffer | None:
        updated = transitions.reroll(self._session, role, self.available_champions(role), self._rng)
        if updated is self._session:
            logger.debug("Reroll for %s rejected", role)
            return None
        self._commit(updated)
        return updated.reroll

    def resolve_reroll(self, role: Role, choice: str) -> bool:
        updated = transitions.resolve_reroll(self._session, role, choice)
        if updated is self._session:
            return False
        self._commit(updated)
        return True

    def can_lock_in(self) -> bool:
        return transitions.can_lock_in(self._session)

    def lock_in(self) -> SavedTeam | None:
        previous = self._session
        updated, team = transitions.lock_in(previous, self._reconciler.now())
        if updated is previous:
            logger.debug("Lock-in rejected: reroll still unresolved")
            return None
        if previous.session_id is not None:
            self._snapshots.delete(previous.session_id)
        self._session = updated
        if team is None:
            return None

        event = TeamLocked(team=team, session_id=previous.session_id)
        self._reconciler.apply_local(event)
        self._spawn(event)
        logger.info("Locked team %s: %s", team.timestamp, ", ".join(team.champions()))
        return team

    def discard(self) -> None:
        if self._session.session_id is not None:
            self._snapshots.delete(self._session.session_id)
        self._session = DraftSession()

    def park(self) -> IncompleteTeam | None:
        """Keep the current draft as an incomplete team and start a new one."""
        parked: IncompleteTeam | None = None
        if self._session.randomized_roles and self._session.session_id is not None:
            parked = self._snapshots.save(self._session, self._reconciler.now())
        self._snapshots.clear_current()
        self._session = DraftSession()
        return parked

    # -- Incomplete teams --------------------------------------------------------

    def incomplete_teams(self) -> list[IncompleteTeam]:
        return self._snapshots.all()

    def resume(self, snapshot_id: str) -> bool:
        snapshot = self._snapshots.get(snapshot_id)
        if snapshot is None:
            return False
        self._session = snapshot.session
        self._snapshots.set_current(snapshot.id)
        return True

    def delete_incomplete(self, snapshot_id: str) -> None:
        self._snapshots.delete(snapshot_id)
        if self._session.session_id == snapshot_id:
            self._session = DraftSession()

    # -- Background work ---------------------------------------------------------

    async def drain(self) -> None:
        """Wait for every background reconcile started by this controller."""
        while self._tasks:
            await asyncio.gather(*self._tasks)

    def _commit(self, updated: DraftSession) -> None:
        self._session = updated
        if updated.session_id is not None:
            self._snapshots.save(updated, self._reconciler.now())
            self._snapshots.set_current(updated.session_id)

    def _spawn(self, event: TeamLocked) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._reconciler.enqueue(event)
            logger.info("No event loop running; lock-in of %s queued for the next sync", event.team.timestamp)
            return
        task = loop.create_task(self._reconciler.reconcile(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
