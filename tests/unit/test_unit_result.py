"""Tests for UnitResult — the payload-less result."""

from __future__ import annotations

import pytest

from railkit import Error, InvalidResultError, Result, UnitResult

E1 = Error.validation("E1", "first")
E2 = Error.conflict("E2", "second")


class TestCreation:
    def test_success(self):
        result = UnitResult.success()
        assert result.is_success
        assert result.errors_or_empty == ()

    def test_failure(self):
        result = UnitResult.failure(E1, E2)
        assert result.is_failure
        assert result.errors == (E1, E2)

    def test_empty_errors_fail_fast(self):
        with pytest.raises(InvalidResultError):
            UnitResult.from_errors([])

    def test_direct_construction_is_rejected(self):
        with pytest.raises(InvalidResultError):
            UnitResult()

    def test_from_bool(self):
        assert UnitResult.from_bool(True, E1).is_success
        assert UnitResult.from_bool(False, E1).errors == (E1,)

    def test_sentinels_on_success(self):
        result = UnitResult.success()
        assert result.first_error.code == "Result.NoFirstError"
        assert result.last_error.code == "Result.NoLastError"
        assert [error.code for error in result.errors] == ["Result.NoErrors"]


class TestThen:
    def test_none_output_keeps_unit_success(self):
        assert UnitResult.success().then(lambda: None) == UnitResult.success()

    def test_value_output_becomes_result(self):
        result = UnitResult.success().then(lambda: 42)
        assert isinstance(result, Result)
        assert result.value == 42

    def test_error_output_becomes_failure(self):
        assert UnitResult.success().then(lambda: E1).errors == (E1,)

    def test_failure_never_calls_continuation(self):
        calls = []
        result = UnitResult.failure(E1).then(lambda: calls.append("called"))
        assert calls == []
        assert result.errors == (E1,)


class TestOrElse:
    def test_success_never_calls_fallback(self):
        calls = []
        UnitResult.success().or_else(lambda errors: calls.append(errors))
        assert calls == []

    def test_none_recovers(self):
        assert UnitResult.failure(E1).or_else(lambda errors: None).is_success

    def test_error_sequence_replaces_errors(self):
        assert UnitResult.failure(E1).or_else(lambda errors: [E2, E1]).errors == (E2, E1)

    def test_empty_error_list_fails_fast(self):
        """
        GIVEN a failing UnitResult
        WHEN the fallback returns an empty list
        THEN InvalidResultError is raised and no error is silently dropped
        """
        with pytest.raises(InvalidResultError):
            UnitResult.failure(E1).or_else(lambda errors: [])

    def test_plain_value_is_rejected(self):
        with pytest.raises(TypeError, match="UnitResult fallback"):
            UnitResult.failure(E1).or_else(lambda errors: 42)

    def test_result_outcome_keeps_unit_type(self):
        recovered = UnitResult.failure(E1).or_else(lambda errors: Result.success("ignored"))
        assert isinstance(recovered, UnitResult)
        assert recovered.is_success

    def test_failing_result_outcome_keeps_errors(self):
        replaced = UnitResult.failure(E1).or_else(Result.failure(E2))
        assert isinstance(replaced, UnitResult)
        assert replaced.errors == (E2,)


class TestEnsureAndEffects:
    def test_ensure(self):
        assert UnitResult.success().ensure(lambda: True, E1).is_success
        assert UnitResult.success().ensure(lambda: False, E1).errors == (E1,)

    def test_then_do_and_or_else_do(self):
        seen = []
        UnitResult.success().then_do(lambda: seen.append("ok"))
        UnitResult.failure(E1).or_else_do(lambda errors: seen.append(errors))
        assert seen == ["ok", (E1,)]

    def test_map_errors(self):
        result = UnitResult.failure(E1).map_errors(lambda e: E2)
        assert result.errors == (E2,)

    def test_to_result(self):
        assert UnitResult.success().to_result("v").value == "v"
        assert UnitResult.failure(E1).to_result("v").errors == (E1,)


class TestMatchAndCombine:
    def test_match(self):
        assert UnitResult.success().match(lambda: "ok", lambda errors: "ko") == "ok"
        assert UnitResult.failure(E1).match(lambda: "ok", lambda errors: errors) == (E1,)

    def test_match_first_and_last(self):
        result = UnitResult.failure(E1, E2)
        assert result.match_first(lambda: None, lambda e: e) == E1
        assert result.match_last(lambda: None, lambda e: e) == E2

    def test_combine_concatenates_errors(self):
        combined = UnitResult.combine(
            UnitResult.failure(E1), UnitResult.success(), UnitResult.failure(E2)
        )
        assert combined.errors == (E1, E2)

    def test_plus_operator(self):
        assert (UnitResult.success() + UnitResult.success()).is_success
        assert (UnitResult.failure(E1) + UnitResult.failure(E2)).errors == (E1, E2)

    def test_combine_accepts_valued_results(self):
        assert UnitResult.combine(Result.success(1), UnitResult.success()).is_success

    def test_plus_with_valued_result_on_either_side(self):
        """
        GIVEN a UnitResult and a Result on either side of +
        WHEN they are added
        THEN the outcome is a UnitResult with errors in left-to-right order
        """
        assert isinstance(UnitResult.success() + Result.success(1), UnitResult)
        assert (Result.failure(E1) + UnitResult.failure(E2)).errors == (E1, E2)
        assert (UnitResult.failure(E1) + Result.failure(E2)).errors == (E1, E2)

    def test_repr(self):
        assert repr(UnitResult.success()) == "UnitResult.Success()"
        assert repr(UnitResult.failure(E1)) == "UnitResult.Failure(E1: 'first')"
