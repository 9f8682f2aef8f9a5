"""Shared pytest fixtures for test modules."""

from __future__ import annotations

import random

import pytest

from champion_draft.draft.controller import DraftController
from champion_draft.repos.snapshot_repo import IncompleteTeamRepo
from champion_draft.sync.reconciler import Reconciler
from tests.fakes.backend import FakeBackend
from tests.fakes.store import InMemoryLocalStore
from tests.helpers import POOLS, build_reconciler, sequential_ids


@pytest.fixture
def store() -> InMemoryLocalStore:
    return InMemoryLocalStore()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(pools=POOLS)


@pytest.fixture
def reconciler(backend: FakeBackend, store: InMemoryLocalStore) -> Reconciler:
    return build_reconciler(backend, store)


@pytest.fixture
def snapshots(store: InMemoryLocalStore) -> IncompleteTeamRepo:
    return IncompleteTeamRepo(store)


@pytest.fixture
def controller(reconciler: Reconciler, snapshots: IncompleteTeamRepo) -> DraftController:
    """A controller whose draws are reproducible and whose session ids count up from team-1."""
    return DraftController(reconciler, snapshots, rng=random.Random(7), new_session_id=sequential_ids())
