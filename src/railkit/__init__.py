"""
railkit — railway-oriented error handling and rule evaluation for Python.

Expected failures are values, not exceptions:

    from railkit import Error, Result

    def parse_age(raw: str) -> Result[int]:
        if not raw.isdigit():
            return Result.failure(Error.validation("Age", "Age must be a number"))
        return Result.success(int(raw))

    greeting = (
        parse_age("42")
        .ensure(lambda age: age >= 18, Error.validation("Age", "Must be an adult"))
        .map(lambda age: f"Welcome, {age}-year-old")
    )

Also included: Maybe for optional values, Any2..Any8 tagged unions and a rule
engine (railkit.rules) that composes checks into UnitResult outcomes.
"""

from railkit.assertions import ResultAssertions
from railkit.cancellation import CancellationToken, with_cancellation
from railkit.config import RailkitSettings, get_settings
from railkit.error import Error, ErrorType, map_exception_to_type
from railkit.exceptions import DomainError, InvalidResultError, NoValueError, RailkitError
from railkit.execution import (
    ComposableExecutionContext,
    ExecutionContext,
    LoggingExecutionContext,
    NoOpExecutionContext,
    with_context,
)
from railkit.log import configure_structlog
from railkit.maybe import Maybe, choose, try_find, try_first
from railkit.metadata import ErrorMetadata
from railkit.result import UnitResult, Result
from railkit.rules import (
    all_of,
    any_of,
    as_rule,
    conditional,
    evaluate,
    evaluate_async,
    linear,
)
from railkit.union import Any2, Any3, Any4, Any5, Any6, Any7, Any8

__all__ = [
    "Any2",
    "Any3",
    "Any4",
    "Any5",
    "Any6",
    "Any7",
    "Any8",
    "CancellationToken",
    "ComposableExecutionContext",
    "DomainError",
    "Error",
    "ErrorMetadata",
    "ErrorType",
    "ExecutionContext",
    "InvalidResultError",
    "LoggingExecutionContext",
    "Maybe",
    "NoOpExecutionContext",
    "NoValueError",
    "RailkitError",
    "RailkitSettings",
    "Result",
    "ResultAssertions",
    "UnitResult",
    "all_of",
    "any_of",
    "as_rule",
    "choose",
    "conditional",
    "configure_structlog",
    "evaluate",
    "evaluate_async",
    "get_settings",
    "linear",
    "map_exception_to_type",
    "try_find",
    "try_first",
    "with_cancellation",
    "with_context",
]

__version__ = "1.0.0"
