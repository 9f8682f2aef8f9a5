import json

import pytest

from champion_draft.domain.availability import AvailabilitySnapshot
from champion_draft.domain.draft import DraftSession, IncompleteTeam, RerollOffer
from champion_draft.domain.events import AllTeamsDeleted, ChampionRolesSaved, RolesReset, TeamLocked
from champion_draft.domain.role import Role
from champion_draft.domain.team import SavedTeam
from champion_draft.exceptions import SnapshotDecodeError
from champion_draft.serialization import (
    AvailabilitySnapshotSerializer,
    DraftEventSerializer,
    IncompleteTeamSerializer,
    SavedTeamSerializer,
)


class TestSavedTeamSerializer:
    def test_wire_shape(self) -> None:
        team = SavedTeam("2026-03-01T12:00:00.000Z", {Role.TOP: "Darius", Role.MID: "Ahri"}, is_admin_created=True)
        assert SavedTeamSerializer().to_dict(team) == {
            "timestamp": "2026-03-01T12:00:00.000Z",
            "team": {"top": "Darius", "jungle": None, "mid": "Ahri", "adc": None, "support": None},
            "isAdminCreated": True,
        }

    def test_regular_team_omits_admin_flag(self) -> None:
        assert "isAdminCreated" not in SavedTeamSerializer().to_dict(SavedTeam("t"))

    def test_unknown_roles_and_empty_names_dropped(self) -> None:
        team = SavedTeamSerializer().from_dict({"timestamp": "t", "team": {"TOP": "Darius", "bot": "Jinx", "mid": ""}})
        assert team.picks() == [(Role.TOP, "Darius")]
        assert not team.is_admin_created

    def test_missing_timestamp_raises(self) -> None:
        with pytest.raises(SnapshotDecodeError):
            SavedTeamSerializer().from_dict({"team": {"top": "Darius"}})


class TestIncompleteTeamSerializer:
    def test_camel_case_record(self) -> None:
        session = DraftSession(
            selections={Role.ADC: "Jinx"},
            randomized_roles=frozenset({Role.ADC}),
            reroll=RerollOffer(Role.ADC, "Jinx", "Caitlyn"),
            pending_selections={Role.ADC: None},
            has_used_reroll=True,
            session_id="team-1",
        )
        data = IncompleteTeamSerializer().to_dict(IncompleteTeam("team-1", "t", session, version=3))
        assert data["randomizedLanes"] == ["adc"]
        assert data["rerolledLanes"] == {"adc": {"original": "Jinx", "rerolled": "Caitlyn"}}
        assert data["pendingSelections"] == {"adc": None}
        assert data["hasUsedReroll"] is True
        assert data["version"] == 3

    def test_older_record_without_randomized_lanes(self) -> None:
        raw = {"id": "team-7", "timestamp": "t", "team": {"top": "Darius", "mid": "Ahri"}}
        snapshot = IncompleteTeamSerializer().deserialize(json.dumps(raw))
        assert snapshot.session.randomized_roles == frozenset({Role.TOP, Role.MID})
        assert not snapshot.session.has_used_reroll
        assert snapshot.session.session_id == "team-7"
        assert snapshot.version == 1

    def test_pending_selection_implies_used_reroll(self) -> None:
        raw = {"id": "team-7", "timestamp": "t", "team": {"mid": "Zed"}, "pendingSelections": {"mid": "Zed"}}
        snapshot = IncompleteTeamSerializer().from_dict(raw)
        assert snapshot.session.has_used_reroll
        assert not snapshot.session.has_unresolved_reroll()

    def test_missing_id_raises(self) -> None:
        with pytest.raises(SnapshotDecodeError):
            IncompleteTeamSerializer().from_dict({"timestamp": "t"})


class TestAvailabilitySnapshotSerializer:
    def test_unknown_role_raises(self) -> None:
        with pytest.raises(SnapshotDecodeError):
            AvailabilitySnapshotSerializer().deserialize('{"role": "bench", "champions": []}')

    def test_missing_fetched_at_means_pool_fallback(self) -> None:
        snapshot = AvailabilitySnapshotSerializer().deserialize('{"role": "mid", "champions": ["Ahri"]}')
        assert snapshot == AvailabilitySnapshot(Role.MID, ("Ahri",))
        assert snapshot.fetched_at == ""


class TestDraftEventSerializer:
    def test_lock_in_keeps_team_and_session(self) -> None:
        serializer = DraftEventSerializer()
        team = SavedTeam("2026-03-01T12:00:00.000Z", {Role.ADC: "Jinx"})
        raw = serializer.to_dict(TeamLocked(team, session_id="team-3"))

        assert raw["type"] == "teamLocked"
        restored = serializer.from_dict(json.loads(json.dumps(raw)))
        assert isinstance(restored, TeamLocked)
        assert restored.session_id == "team-3"
        assert restored.team.picks() == [(Role.ADC, "Jinx")]

    def test_reset_drops_unknown_roles(self) -> None:
        restored = DraftEventSerializer().from_dict({"type": "rolesReset", "roles": ["adc", "bot"], "at": "t"})
        assert restored == RolesReset(roles=(Role.ADC,), at="t")

    def test_roles_and_bulk_delete(self) -> None:
        serializer = DraftEventSerializer()
        roles = ChampionRolesSaved({"Lux": (Role.MID, Role.SUPPORT)})
        assert serializer.from_dict(serializer.to_dict(roles)) == roles
        bulk = serializer.from_dict(serializer.to_dict(AllTeamsDeleted((SavedTeam("a"), SavedTeam("b")))))
        assert isinstance(bulk, AllTeamsDeleted)
        assert [t.timestamp for t in bulk.teams] == ["a", "b"]

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(SnapshotDecodeError):
            DraftEventSerializer().from_dict({"type": "teamRenamed"})
