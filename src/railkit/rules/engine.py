"""
Rule engine — evaluates rule graphs with railway semantics.

Each shape has its own evaluator; evaluate() dispatches on the shape:

    Linear       own check ──Success──→ next ──Success──→ ... ──→ UnitResult
                     │ Failure               │ Failure
                     └───────────────────────┴──→ first failure (next never runs)

    Conditional  own check ──Success──→ success branch (or own success)
                     └────Failure──→ failure branch (or own failure)

    And          r1 → r2 → r3      stops at the first failure
    Or           r1 → r2 → r3      stops at the first success; when every
                                   child fails, all their errors in order

Evaluation order is strictly left to right. Expected failures travel as
UnitResult values; the engine only raises for programmer errors (a None
context, an asynchronous rule handed to the synchronous engine, something
that is not a rule).

evaluate_async() mirrors evaluate() for rules that suspend. The cancellation
token is checked before every rule and observed while a rule is in flight;
cancellation raises asyncio.CancelledError and no further rule runs.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Sequence
from typing import Any

import structlog

from railkit.cancellation import CancellationToken, check_cancellation, discard, resolve
from railkit.config import get_settings
from railkit.error import Error
from railkit.result import UnitResult
from railkit.rules.abstractions import (
    AndRule,
    AsyncRule,
    ConditionalRule,
    LinearRule,
    OrRule,
    Rule,
    RuleLike,
)
from railkit.rules.adapters import FunctionRule, to_unit_result

log = structlog.get_logger(__name__)


def evaluate(
    rule: RuleLike,
    context: Any,
    token: CancellationToken | None = None,
) -> UnitResult:
    """
    Evaluate any rule shape against `context`.

        outcome = evaluate(all_of(is_adult, has_email), person)
    """
    if context is None:
        raise TypeError("Rule context must not be None")
    return _evaluate(rule, context, token)


async def evaluate_async(
    rule: RuleLike,
    context: Any,
    token: CancellationToken | None = None,
) -> UnitResult:
    """
    Evaluate any rule shape against `context`, awaiting rules that suspend.

        outcome = await evaluate_async(any_of(in_cache, in_registry), key, token)
    """
    if context is None:
        raise TypeError("Rule context must not be None")
    try:
        return await _evaluate_async(rule, context, token)
    except asyncio.CancelledError:
        log.debug("rule.cancelled", rule=_describe(rule))
        raise


# ──────────────────────── Synchronous evaluators ────────────────────────


def _evaluate(rule: RuleLike, context: Any, token: CancellationToken | None) -> UnitResult:
    match rule:
        case AndRule():
            return evaluate_and(rule, context, token)
        case OrRule():
            return evaluate_or(rule, context, token)
        case ConditionalRule():
            return evaluate_conditional(rule, context, token)
        case LinearRule():
            return evaluate_linear(rule, context, token)
        case Rule():
            return evaluate_simple(rule, context, token)
        case AsyncRule():
            raise TypeError(
                f"Rule {_describe(rule)!r} is asynchronous; evaluate it with evaluate_async()"
            )
        case _ if callable(rule):
            return evaluate_simple(FunctionRule(rule), context, token)
        case _:
            raise TypeError(f"{type(rule).__name__} is not a rule")


def evaluate_simple(rule: Rule, context: Any, token: CancellationToken | None = None) -> UnitResult:
    """Run the rule's own check."""
    outcome = rule.evaluate(context, token)
    if inspect.isawaitable(outcome):
        discard(outcome)
        raise TypeError(
            f"Rule {_describe(rule)!r} is asynchronous; evaluate it with evaluate_async()"
        )
    result = to_unit_result(outcome, lambda: _rejected(rule))
    _trace(rule, result)
    return result


def evaluate_linear(
    rule: LinearRule, context: Any, token: CancellationToken | None = None
) -> UnitResult:
    """Own check, then `next`; the last evaluated link decides."""
    result = evaluate_simple(rule, context, token)
    if result.is_failure:
        if rule.next is not None:
            _short_circuit(rule, result)
        return result
    if rule.next is None:
        return result
    return _evaluate(rule.next, context, token)


def evaluate_conditional(
    rule: ConditionalRule, context: Any, token: CancellationToken | None = None
) -> UnitResult:
    """Own check, then the branch matching its outcome when that branch is set."""
    result = evaluate_simple(rule, context, token)
    branch = rule.failure if result.is_failure else rule.success
    if branch is None:
        return result
    return _evaluate(branch, context, token)


def evaluate_and(rule: AndRule, context: Any, token: CancellationToken | None = None) -> UnitResult:
    """Children in order; the first failure is returned as is."""
    for child in rule.rules:
        result = _evaluate(child, context, token)
        if result.is_failure:
            _short_circuit(child, result)
            return result
    return UnitResult.success()


def evaluate_or(rule: OrRule, context: Any, token: CancellationToken | None = None) -> UnitResult:
    """
    Children in order; the first success is returned as is.

    When every child fails, the failure carries all of their errors in
    evaluation order.
    """
    children = _require_children(rule)
    errors: list[Error] = []
    for child in children:
        result = _evaluate(child, context, token)
        if result.is_success:
            _short_circuit(child, result)
            return result
        errors.extend(result.errors)
    return UnitResult.from_errors(errors)


# ──────────────────────── Asynchronous evaluators ────────────────────────


async def _evaluate_async(
    rule: RuleLike, context: Any, token: CancellationToken | None
) -> UnitResult:
    match rule:
        case AndRule():
            return await evaluate_and_async(rule, context, token)
        case OrRule():
            return await evaluate_or_async(rule, context, token)
        case ConditionalRule():
            return await evaluate_conditional_async(rule, context, token)
        case LinearRule():
            return await evaluate_linear_async(rule, context, token)
        case AsyncRule() | Rule():
            return await evaluate_simple_async(rule, context, token)
        case _ if callable(rule):
            return await evaluate_simple_async(FunctionRule(rule), context, token)
        case _:
            raise TypeError(f"{type(rule).__name__} is not a rule")


async def evaluate_simple_async(
    rule: Any, context: Any, token: CancellationToken | None = None
) -> UnitResult:
    """
    Run the rule's own check, preferring evaluate_async() when the rule has one.

    The token is checked before the check starts and observed while it runs.
    """
    check_cancellation(token)
    evaluate_async_method = getattr(rule, "evaluate_async", None)
    if evaluate_async_method is not None:
        outcome = evaluate_async_method(context, token)
    else:
        outcome = rule.evaluate(context, token)
    result = to_unit_result(await resolve(outcome, token), lambda: _rejected(rule))
    _trace(rule, result)
    return result


async def evaluate_linear_async(
    rule: LinearRule, context: Any, token: CancellationToken | None = None
) -> UnitResult:
    result = await evaluate_simple_async(rule, context, token)
    if result.is_failure:
        if rule.next is not None:
            _short_circuit(rule, result)
        return result
    if rule.next is None:
        return result
    return await _evaluate_async(rule.next, context, token)


async def evaluate_conditional_async(
    rule: ConditionalRule, context: Any, token: CancellationToken | None = None
) -> UnitResult:
    result = await evaluate_simple_async(rule, context, token)
    branch = rule.failure if result.is_failure else rule.success
    if branch is None:
        return result
    return await _evaluate_async(branch, context, token)


async def evaluate_and_async(
    rule: AndRule, context: Any, token: CancellationToken | None = None
) -> UnitResult:
    for child in rule.rules:
        check_cancellation(token)
        result = await _evaluate_async(child, context, token)
        if result.is_failure:
            _short_circuit(child, result)
            return result
    return UnitResult.success()


async def evaluate_or_async(
    rule: OrRule, context: Any, token: CancellationToken | None = None
) -> UnitResult:
    children = _require_children(rule)
    errors: list[Error] = []
    for child in children:
        check_cancellation(token)
        result = await _evaluate_async(child, context, token)
        if result.is_success:
            _short_circuit(child, result)
            return result
        errors.extend(result.errors)
    return UnitResult.from_errors(errors)


# ──────────────────────── Helpers ────────────────────────


def _require_children(rule: OrRule) -> Sequence[RuleLike]:
    # An Or over nothing has no error to report
    if not rule.rules:
        raise ValueError("An Or rule needs at least one child rule")
    return rule.rules


def _rejected(rule: Any) -> Error:
    return Error.validation(
        code=get_settings().rule_failure_code,
        description=f"Rule '{_describe(rule)}' was not satisfied.",
    )


def _describe(rule: Any) -> str:
    name = getattr(rule, "name", None)
    if isinstance(name, str):
        return name
    return getattr(rule, "__qualname__", None) or type(rule).__name__


def _trace(rule: Any, result: UnitResult) -> None:
    if get_settings().log_rule_evaluations:
        log.debug(
            "rule.evaluated",
            rule=_describe(rule),
            outcome="SUCCESS" if result.is_success else "FAILURE",
            errors=[error.code for error in result.errors_or_empty],
        )


def _short_circuit(rule: Any, result: UnitResult) -> None:
    if get_settings().log_rule_evaluations:
        log.debug(
            "rule.short_circuit",
            rule=_describe(rule),
            outcome="SUCCESS" if result.is_success else "FAILURE",
        )
