"""Tests for the result module."""

from pitch_counter.domain.result import Err, Ok


class TestResult:
    def test_ok_holds_value(self) -> None:
        assert Ok(42).value == 42

    def test_err_holds_error(self) -> None:
        assert Err("boom").error == "boom"

    def test_pattern_matching(self) -> None:
        def describe(result: Ok[int] | Err[str]) -> str:
            match result:
                case Ok(value):
                    return f"ok {value}"
                case Err(error):
                    return f"err {error}"

        assert describe(Ok(1)) == "ok 1"
        assert describe(Err("x")) == "err x"
