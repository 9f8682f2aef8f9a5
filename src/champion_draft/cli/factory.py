from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from champion_draft.cache.sqlite_store import SqliteLocalStore
from champion_draft.client.api import DraftApiClient
from champion_draft.config import DraftConfig
from champion_draft.draft.controller import DraftController
from champion_draft.repos.availability_repo import (
    AvailabilityCache,
    ChampionRoleCache,
    PlayedChampionCache,
    ResetMarkerRepo,
)
from champion_draft.repos.pending_write_repo import PendingWriteRepo
from champion_draft.repos.saved_team_repo import SavedTeamCache
from champion_draft.repos.snapshot_repo import IncompleteTeamRepo
from champion_draft.sync.reconciler import Reconciler


@dataclass(frozen=True)
class DraftContext:
    config: DraftConfig
    reconciler: Reconciler
    controller: DraftController


@asynccontextmanager
async def build_draft_context(config: DraftConfig, *, sync_on_open: bool = True) -> AsyncIterator[DraftContext]:
    """Composition root: opens the local store and backend client, resumes the current draft, syncs.

    On exit waits for background writes started during the command, then closes both.
    """
    store = SqliteLocalStore(config.db_path)
    client = DraftApiClient(config.api_url, timeout=config.request_timeout_seconds)
    try:
        reconciler = Reconciler(
            client,
            SavedTeamCache(store),
            AvailabilityCache(store),
            PlayedChampionCache(store),
            ResetMarkerRepo(store),
            PendingWriteRepo(store),
            ChampionRoleCache(store),
        )
        controller = DraftController(reconciler, IncompleteTeamRepo(store))
        controller.restore()
        if sync_on_open:
            await reconciler.load_champion_roles()
            await reconciler.sync()
        yield DraftContext(config=config, reconciler=reconciler, controller=controller)
        await controller.drain()
    finally:
        await client.aclose()
        store.close()
