"""
Rule shapes — the contracts the rule engine evaluates.

A rule checks a context and answers with a UnitResult. Shapes add wiring on
top of that single check:

    Rule             evaluate(context, token) → UnitResult
    LinearRule       + next                    run `next` after a success
    ConditionalRule  + success / failure       branch on the outcome
    AndRule          rules                     every child must pass
    OrRule           rules                     one child must pass

Rule, LinearRule and ConditionalRule are Protocols: any object with the right
members satisfies them, no inheritance needed. AndRule and OrRule expose the
same member (`rules`) and differ only in meaning, so they are nominal marker
bases that a composite subclasses to declare which one it is.

Plain callables `context -> UnitResult | bool` (optionally taking the token as
a second argument) are rules too once lifted with railkit.rules.as_rule; the
engine lifts them on the fly.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol, TypeAlias, Union, runtime_checkable

from railkit.cancellation import CancellationToken
from railkit.result import UnitResult


@runtime_checkable
class Rule(Protocol):
    """A single check over a context."""

    def evaluate(self, context: Any, token: CancellationToken | None = None) -> UnitResult: ...


@runtime_checkable
class AsyncRule(Protocol):
    """A check that may suspend, for example to call an external service."""

    async def evaluate_async(
        self, context: Any, token: CancellationToken | None = None
    ) -> UnitResult: ...


@runtime_checkable
class LinearRule(Protocol):
    """
    A check followed by the next rule in the chain.

    The chain's outcome is the outcome of its last evaluated link: a failing
    link stops the chain, a passing one hands over to `next`.
    """

    next: RuleLike | None

    def evaluate(self, context: Any, token: CancellationToken | None = None) -> UnitResult: ...


@runtime_checkable
class ConditionalRule(Protocol):
    """A check whose outcome selects the `success` or `failure` branch."""

    success: RuleLike | None
    failure: RuleLike | None

    def evaluate(self, context: Any, token: CancellationToken | None = None) -> UnitResult: ...


class AndRule:
    """Marker base: every rule in `rules` must pass, evaluated in order."""

    __slots__ = ()

    rules: Sequence[RuleLike]


class OrRule:
    """Marker base: at least one rule in `rules` must pass, evaluated in order."""

    __slots__ = ()

    rules: Sequence[RuleLike]


RuleFunction: TypeAlias = Union[
    Callable[[Any], Any],
    Callable[[Any, CancellationToken | None], Any],
    Callable[..., Awaitable[Any]],
]
"""A plain callable the engine can lift into a rule."""

RuleLike: TypeAlias = Union[Rule, AsyncRule, AndRule, OrRule, RuleFunction]
"""Anything the engine accepts where a rule is expected."""
