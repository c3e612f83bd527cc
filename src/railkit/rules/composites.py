"""
Composite rules and the builders that wire them.

    eligible = all_of(
        is_adult,
        any_of(has_email, has_phone),
        conditional(is_member, success=member_discount_allowed),
    )
    outcome = evaluate(eligible, person)

Composites are immutable values that satisfy the rule shapes, so they nest
freely and can be mixed with plain functions and custom rule objects.

RuleChain and RuleBranch follow the shape contract: their own evaluate() runs
the head rule only, and the engine follows `next` / `success` / `failure`.
Evaluate a whole chain with railkit.rules.evaluate(chain, context).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from railkit.cancellation import CancellationToken
from railkit.result import UnitResult
from railkit.rules import engine
from railkit.rules.abstractions import AndRule, OrRule, RuleLike


@dataclass(frozen=True, slots=True)
class RuleChain:
    """Linear rule: `rule`, then `next` when `rule` passed."""

    rule: RuleLike
    next: RuleLike | None = None

    def evaluate(self, context: Any, token: CancellationToken | None = None) -> UnitResult:
        return engine.evaluate(self.rule, context, token)

    async def evaluate_async(
        self, context: Any, token: CancellationToken | None = None
    ) -> UnitResult:
        return await engine.evaluate_async(self.rule, context, token)


@dataclass(frozen=True, slots=True)
class RuleBranch:
    """Conditional rule: `rule` selects the `success` or the `failure` branch."""

    rule: RuleLike
    success: RuleLike | None = None
    failure: RuleLike | None = None

    def evaluate(self, context: Any, token: CancellationToken | None = None) -> UnitResult:
        return engine.evaluate(self.rule, context, token)

    async def evaluate_async(
        self, context: Any, token: CancellationToken | None = None
    ) -> UnitResult:
        return await engine.evaluate_async(self.rule, context, token)


@dataclass(frozen=True, slots=True)
class AllOfRule(AndRule):
    """Every child must pass; the first failing child is the outcome."""

    rules: tuple[RuleLike, ...]

    def evaluate(self, context: Any, token: CancellationToken | None = None) -> UnitResult:
        return engine.evaluate(self, context, token)

    async def evaluate_async(
        self, context: Any, token: CancellationToken | None = None
    ) -> UnitResult:
        return await engine.evaluate_async(self, context, token)


@dataclass(frozen=True, slots=True)
class AnyOfRule(OrRule):
    """One child must pass; when none does, every child's errors are reported."""

    rules: tuple[RuleLike, ...]

    def __post_init__(self) -> None:
        if not self.rules:
            raise ValueError("any_of() needs at least one rule")

    def evaluate(self, context: Any, token: CancellationToken | None = None) -> UnitResult:
        return engine.evaluate(self, context, token)

    async def evaluate_async(
        self, context: Any, token: CancellationToken | None = None
    ) -> UnitResult:
        return await engine.evaluate_async(self, context, token)


# ──────────────────────── Builders ────────────────────────


def linear(rule: RuleLike, *rest: RuleLike | None) -> RuleChain:
    """
    Chain rules so each runs only after the previous one passed.

        linear(has_account, is_active, can_withdraw)
        # RuleChain(has_account, RuleChain(is_active, can_withdraw))
    """
    links = [link for link in rest if link is not None]
    chain = links[-1] if links else None
    for link in reversed(links[:-1]):
        chain = RuleChain(link, chain)
    return RuleChain(rule, chain)


def conditional(
    rule: RuleLike,
    success: RuleLike | None = None,
    failure: RuleLike | None = None,
) -> RuleBranch:
    return RuleBranch(rule, success, failure)


def all_of(*rules: RuleLike) -> AllOfRule:
    return AllOfRule(_flatten(rules))


def any_of(*rules: RuleLike) -> AnyOfRule:
    return AnyOfRule(_flatten(rules))


def _flatten(rules: Sequence[Any]) -> tuple[RuleLike, ...]:
    # all_of([a, b]) and all_of(a, b) build the same rule
    if len(rules) == 1 and isinstance(rules[0], (list, tuple)):
        return tuple(rules[0])
    return tuple(rules)
