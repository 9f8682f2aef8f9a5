from champion_draft.domain.errors import DraftError, SyncError
from champion_draft.domain.result import Err, Ok, Result, errors_of


class TestResult:
    def test_ok_and_err_compare_by_value(self) -> None:
        assert Ok(1) == Ok(1)
        assert Err("a") != Err("b")

    def test_pattern_matching(self) -> None:
        result: Result[int, SyncError] = Err(SyncError(message="down", operation="save_team"))
        match result:
            case Ok(value):
                raise AssertionError(f"unexpected value {value}")
            case Err(error):
                assert error.operation == "save_team"

    def test_errors_of_keeps_order(self) -> None:
        first = SyncError(message="a", operation="remove", target="remove:top:Darius")
        second = SyncError(message="b", operation="save_team")
        assert errors_of([Err(first), Ok(3), Err(second)]) == [first, second]


class TestErrors:
    def test_sync_error_is_a_draft_error(self) -> None:
        error = SyncError(message="x", operation="ban", target="ban:Zed")
        assert isinstance(error, DraftError)
        assert error.target == "ban:Zed"
