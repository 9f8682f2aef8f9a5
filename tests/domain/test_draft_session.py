from champion_draft.domain.draft import DraftSession, RerollOffer
from champion_draft.domain.role import Role


class TestDraftSession:
    def test_new_session_is_empty(self) -> None:
        session = DraftSession()
        assert session.is_empty
        assert not session.is_complete
        assert session.selection(Role.MID) is None

    def test_complete_when_every_role_selected(self) -> None:
        session = DraftSession(
            selections={role: f"champ-{role.value}" for role in Role},
            randomized_roles=frozenset(Role),
            session_id="team-1",
        )
        assert session.is_complete
        assert not session.is_empty

    def test_selected_champions_can_exclude_a_role(self) -> None:
        session = DraftSession(selections={Role.TOP: "Darius", Role.MID: "Ahri", Role.ADC: None})
        assert session.selected_champions() == {"Darius", "Ahri"}
        assert session.selected_champions(exclude=Role.MID) == {"Darius"}

    def test_unresolved_reroll_is_a_none_pending_choice(self) -> None:
        offered = DraftSession(
            reroll=RerollOffer(Role.MID, "Ahri", "Zed"),
            pending_selections={Role.MID: None},
            has_used_reroll=True,
        )
        resolved = DraftSession(pending_selections={Role.MID: "Zed"}, has_used_reroll=True)
        assert offered.has_unresolved_reroll()
        assert not resolved.has_unresolved_reroll()

    def test_reroll_choices(self) -> None:
        assert RerollOffer(Role.TOP, "Darius", "Garen").choices() == ("Darius", "Garen")
