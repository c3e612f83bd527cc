"""
Rule adapter — lift a plain function into a rule.

    is_adult = as_rule(lambda person: person.age >= 18)
    has_email = as_rule(
        lambda person: person.email is not None,
        Error.validation("Person.Email", "Email is required"),
    )

The function receives the context, plus the cancellation token when it
declares a second positional parameter. It may return:
  - a UnitResult (or Result[T], whose value is dropped)
  - an Error → failure carrying it
  - a bool → success, or a failure carrying the adapter's error

Coroutine functions are accepted and must be evaluated through
evaluate_async().
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from railkit.cancellation import CancellationToken, discard, resolve
from railkit.config import get_settings
from railkit.error import Error
from railkit.result import Result, UnitResult
from railkit.rules.abstractions import AndRule, AsyncRule, OrRule, Rule


class FunctionRule:
    """A rule backed by a plain (sync or async) function."""

    __slots__ = ("_function", "_passes_token", "_error", "name")

    def __init__(
        self,
        function: Callable[..., Any],
        error: Error | None = None,
        name: str | None = None,
    ) -> None:
        if not callable(function):
            raise TypeError(f"Expected a callable, got {type(function).__name__}")
        self._function = function
        self._passes_token = _accepts_token(function)
        self._error = error
        self.name = name or getattr(function, "__qualname__", None) or type(function).__name__

    def evaluate(self, context: Any, token: CancellationToken | None = None) -> UnitResult:
        outcome = self._invoke(context, token)
        if inspect.isawaitable(outcome):
            discard(outcome)
            raise TypeError(f"Rule {self.name!r} is asynchronous; evaluate it with evaluate_async()")
        return to_unit_result(outcome, self._failure_error)

    async def evaluate_async(
        self, context: Any, token: CancellationToken | None = None
    ) -> UnitResult:
        outcome = await resolve(self._invoke(context, token), token)
        return to_unit_result(outcome, self._failure_error)

    def _invoke(self, context: Any, token: CancellationToken | None) -> Any:
        if self._passes_token:
            return self._function(context, token)
        return self._function(context)

    def _failure_error(self) -> Error:
        if self._error is not None:
            return self._error
        return Error.validation(
            code=get_settings().rule_failure_code,
            description=f"Rule '{self.name}' was not satisfied.",
        )

    def __repr__(self) -> str:
        return f"FunctionRule({self.name})"


def as_rule(
    rule: Any,
    error: Error | None = None,
    name: str | None = None,
) -> Any:
    """
    Return `rule` as something the engine can evaluate.

    Objects that already are rules (or And/Or composites) are returned
    unchanged; plain callables are wrapped in a FunctionRule.
    """
    if isinstance(rule, (AndRule, OrRule, Rule, AsyncRule)):
        return rule
    if callable(rule):
        return FunctionRule(rule, error=error, name=name)
    raise TypeError(f"{type(rule).__name__} is not a rule")


def to_unit_result(outcome: Any, error: Error | Callable[[], Error]) -> UnitResult:
    """
    Coerce what a rule returned into a UnitResult.

    `error` (or the Error it builds, when callable) is the failure for False.
    """
    match outcome:
        case UnitResult():
            return outcome
        case Result():
            return outcome.to_unit_result()
        case bool():
            if outcome:
                return UnitResult.success()
            return UnitResult.from_error(error() if callable(error) else error)
        case Error():
            return UnitResult.from_error(outcome)
        case _:
            raise TypeError(
                f"A rule must return a UnitResult, Result, Error or bool, got {type(outcome).__name__}"
            )


def _accepts_token(function: Callable[..., Any]) -> bool:
    try:
        parameters = list(inspect.signature(function).parameters.values())
    except (TypeError, ValueError):
        return False
    positional = [
        parameter
        for parameter in parameters
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
    ]
    return len(positional) >= 2 or any(
        parameter.kind is parameter.VAR_POSITIONAL for parameter in parameters
    )

