"""
Test assertions for results.

Expressive assert helpers with failure messages that show what the result
actually held:

    def test_register_rejects_bad_email():
        result = register(bad_command)
        ResultAssertions.assert_failure(result, ErrorType.VALIDATION)
        ResultAssertions.assert_failure_code(result, "User.Email")
        ResultAssertions.assert_failure_description_contains(result, "email")
"""

from __future__ import annotations

from typing import Any, TypeVar

from railkit.error import Error, ErrorType
from railkit.result import Result, UnitResult

T = TypeVar("T")


def _describe_errors(result: Result[Any] | UnitResult) -> str:
    return ", ".join(
        f"{error.type.display_name}({error.code}: {error.description!r})"
        for error in result.errors_or_empty
    )


def _describe_success(result: Result[Any] | UnitResult) -> str:
    if isinstance(result, Result):
        return f"Success({result.value!r})"
    return "Success()"


class ResultAssertions:
    """Expressive test assertions for Result and UnitResult values."""

    @staticmethod
    def assert_success(result: Result[T] | UnitResult, message: str = "") -> T | None:
        """
        Assert the result succeeded and return its value (None for a UnitResult).

            user = ResultAssertions.assert_success(result)
        """
        context = f" — {message}" if message else ""
        assert result.is_success, (
            f"Expected Success but got Failure({_describe_errors(result)}){context}"
        )
        return result.value if isinstance(result, Result) else None

    @staticmethod
    def assert_failure(
        result: Result[T] | UnitResult,
        expected_type: ErrorType | None = None,
        message: str = "",
    ) -> Error:
        """
        Assert the result failed, optionally with a first error of `expected_type`.

        Returns the first error.
        """
        context = f" — {message}" if message else ""
        assert result.is_failure, f"Expected Failure but got {_describe_success(result)}{context}"
        error = result.first_error
        if expected_type is not None:
            assert error.type == expected_type, (
                f"Expected error type {expected_type.display_name} "
                f"but got {error.type.display_name}({error.code}: {error.description!r}){context}"
            )
        return error

    @staticmethod
    def assert_failure_code(result: Result[T] | UnitResult, expected_code: str) -> Error:
        """Assert that some error of the failure carries `expected_code`; return it."""
        assert result.is_failure, f"Expected Failure but got {_describe_success(result)}"
        for error in result.errors:
            if error.code == expected_code:
                return error
        raise AssertionError(
            f"Expected an error with code {expected_code!r} "
            f"but got: {_describe_errors(result)}"
        )

    @staticmethod
    def assert_failure_description_contains(result: Result[T] | UnitResult, substring: str) -> None:
        """Assert that the first error's description contains `substring` (case-insensitive)."""
        assert result.is_failure, f"Expected Failure but got {_describe_success(result)}"
        description = result.first_error.description
        assert substring.lower() in description.lower(), (
            f"Expected failure description to contain {substring!r} "
            f"but description was: {description!r}"
        )

    @staticmethod
    def assert_success_value(result: Result[T], expected_value: Any) -> None:
        """Assert the result succeeded with exactly `expected_value`."""
        value = ResultAssertions.assert_success(result)
        assert value == expected_value, (
            f"Expected success value {expected_value!r} but got {value!r}"
        )
