from champion_draft.domain.team import SavedTeam
from champion_draft.sync.merge import merge_by_key


def _key(team: SavedTeam) -> str:
    return team.timestamp


class TestMergeByKey:
    def test_remote_wins_on_shared_key(self) -> None:
        local = [SavedTeam("a", is_admin_created=False)]
        remote = [SavedTeam("a", is_admin_created=True)]
        assert merge_by_key(local, remote, _key) == remote

    def test_union_keeps_local_only_items(self) -> None:
        local = [SavedTeam("a"), SavedTeam("b")]
        remote = [SavedTeam("c"), SavedTeam("a")]
        assert [t.timestamp for t in merge_by_key(local, remote, _key)] == ["a", "b", "c"]

    def test_empty_remote_keeps_everything(self) -> None:
        local = [SavedTeam("a")]
        assert merge_by_key(local, [], _key) == local

    def test_duplicate_local_keys_collapse(self) -> None:
        assert merge_by_key([1, 1, 2], [], lambda x: x) == [1, 2]
