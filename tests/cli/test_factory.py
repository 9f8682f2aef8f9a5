from pathlib import Path

import pytest

from champion_draft.cli import factory
from champion_draft.cli.factory import build_draft_context
from champion_draft.config import DraftConfig
from champion_draft.domain.role import Role
from tests.fakes.backend import FakeBackend

# Darius is configured for mid as well as top; the bundled pools only list him at top.
_ROLES = {"Darius": [Role.TOP, Role.MID], "Ahri": [Role.MID]}
_POOLS = {Role.TOP: ["Darius"], Role.MID: ["Ahri", "Darius"]}


@pytest.fixture
def remote(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    backend = FakeBackend(pools=_POOLS, roles=_ROLES)
    monkeypatch.setattr(factory, "DraftApiClient", lambda *args, **kwargs: backend)
    return backend


class TestBuildDraftContext:
    async def test_lock_in_without_sync_uses_remembered_roles(self, remote: FakeBackend, tmp_path: Path) -> None:
        config = DraftConfig(db_path=tmp_path / "draft.db")
        async with build_draft_context(config):
            pass
        remote.calls.clear()

        async with build_draft_context(config, sync_on_open=False) as ctx:
            assert ctx.reconciler.index.lanes_for("Darius") == frozenset({Role.TOP, Role.MID})
            assert ctx.controller.pick(Role.TOP) == "Darius"
            ctx.controller.lock_in()

        assert ("remove_available_champion", Role.TOP, "Darius") in remote.calls
        assert ("remove_available_champion", Role.MID, "Darius") in remote.calls
        assert remote.available[Role.MID] == ["Ahri"]

    async def test_write_queued_by_one_command_is_replayed_by_the_next(
        self, remote: FakeBackend, tmp_path: Path
    ) -> None:
        config = DraftConfig(db_path=tmp_path / "draft.db")
        async with build_draft_context(config):
            pass
        remote.failing.add("save_team")

        async with build_draft_context(config, sync_on_open=False) as ctx:
            ctx.controller.pick(Role.TOP)
            team = ctx.controller.lock_in()
        assert team is not None
        assert remote.teams == {}

        remote.failing.clear()
        async with build_draft_context(config) as ctx:
            assert ctx.reconciler.queued == ()
        assert team.timestamp in remote.teams
