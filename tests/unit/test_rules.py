"""
Tests for the synchronous rule engine.

Spy rules count their evaluations so short-circuit behaviour can be asserted
directly: a rule that must not run has a count of zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from structlog.testing import capture_logs

from railkit import Error, ErrorType, Result, UnitResult
from railkit.rules import (
    AllOfRule,
    AnyOfRule,
    FunctionRule,
    RuleBranch,
    RuleChain,
    all_of,
    any_of,
    as_rule,
    conditional,
    evaluate,
    linear,
)

E1 = Error.validation("E1", "first")
E2 = Error.validation("E2", "second")


@dataclass
class SpyRule:
    """A rule object returning a fixed outcome and counting its evaluations."""

    outcome: UnitResult
    calls: int = 0

    def evaluate(self, context, token=None) -> UnitResult:
        self.calls += 1
        return self.outcome


def passing() -> SpyRule:
    return SpyRule(UnitResult.success())


def failing(error: Error) -> SpyRule:
    return SpyRule(UnitResult.failure(error))


@dataclass
class LinearSpy(SpyRule):
    next: object = None


@dataclass
class ConditionalSpy(SpyRule):
    success: object = None
    failure: object = None


@dataclass
class Person:
    age: int
    email: str | None = None
    phone: str | None = None
    tags: list[str] = field(default_factory=list)


class TestSimpleRule:
    def test_rule_object(self):
        rule = passing()
        assert evaluate(rule, Person(30)).is_success
        assert rule.calls == 1

    def test_plain_function_returning_result(self):
        result = evaluate(lambda p: UnitResult.from_bool(p.age >= 18, E1), Person(12))
        assert result.errors == (E1,)

    def test_plain_predicate_false_uses_default_failure_code(self):
        result = evaluate(lambda p: p.age >= 18, Person(12))
        assert result.is_failure
        assert result.first_error.code == "Rule.Failed"
        assert result.first_error.type is ErrorType.VALIDATION

    def test_failure_code_comes_from_settings(self, monkeypatch):
        from railkit.config import get_settings

        monkeypatch.setenv("RAILKIT_RULE_FAILURE_CODE", "Rules.Rejected")
        get_settings.cache_clear()

        assert evaluate(lambda p: False, Person(1)).first_error.code == "Rules.Rejected"

    def test_function_returning_error_or_result(self):
        assert evaluate(lambda p: E2, Person(1)).errors == (E2,)
        assert evaluate(lambda p: Result.success(p.age), Person(1)).is_success

    def test_none_context_is_rejected(self):
        with pytest.raises(TypeError):
            evaluate(passing(), None)

    def test_not_a_rule(self):
        with pytest.raises(TypeError):
            evaluate(42, Person(1))

    def test_unsupported_return_value(self):
        with pytest.raises(TypeError):
            evaluate(lambda p: "yes", Person(1))

    def test_token_passed_to_two_argument_functions(self):
        seen = []

        def rule(person, token):
            seen.append(token)
            return True

        sentinel = object()
        evaluate(rule, Person(1), sentinel)
        assert seen == [sentinel]

    def test_exceptions_propagate(self):
        def broken(person):
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError, match="bug"):
            evaluate(broken, Person(1))


class TestRuleAdapter:
    def test_as_rule_wraps_functions(self):
        rule = as_rule(lambda p: p.age >= 18, E1)
        assert isinstance(rule, FunctionRule)
        assert rule.evaluate(Person(10)).errors == (E1,)
        assert rule.evaluate(Person(20)).is_success

    def test_as_rule_keeps_rule_objects(self):
        rule = passing()
        assert as_rule(rule) is rule

    def test_as_rule_rejects_non_callables(self):
        with pytest.raises(TypeError):
            as_rule("nope")

    def test_name_defaults_to_function_name(self):
        def is_adult(person):
            return person.age >= 18

        rule = as_rule(is_adult)
        assert rule.name.endswith("is_adult")
        assert "is_adult" in rule.evaluate(Person(3)).first_error.description


class TestLinear:
    def test_failing_link_never_evaluates_next(self):
        nxt = passing()
        head = LinearSpy(UnitResult.failure(E1), next=nxt)
        result = evaluate(head, Person(1))
        assert result.errors == (E1,)
        assert nxt.calls == 0

    def test_success_returns_next_outcome(self):
        nxt = failing(E2)
        result = evaluate(LinearSpy(UnitResult.success(), next=nxt), Person(1))
        assert result.errors == (E2,)
        assert nxt.calls == 1

    def test_without_next_returns_own_success(self):
        assert evaluate(LinearSpy(UnitResult.success()), Person(1)).is_success

    def test_builder_chains_every_link(self):
        a, b, c = passing(), passing(), failing(E1)
        chain = linear(a, b, c)
        assert isinstance(chain, RuleChain)
        assert chain.rule is a
        assert evaluate(chain, Person(1)).errors == (E1,)
        assert (a.calls, b.calls, c.calls) == (1, 1, 1)

    def test_builder_stops_at_first_failure(self):
        a, b, c = passing(), failing(E1), passing()
        assert evaluate(linear(a, b, c), Person(1)).errors == (E1,)
        assert c.calls == 0

    def test_builder_two_rules(self):
        a, b = passing(), passing()
        chain = linear(a, b)
        assert chain.next is b


class TestConditional:
    def test_success_branch(self):
        on_success, on_failure = failing(E2), passing()
        rule = ConditionalSpy(UnitResult.success(), success=on_success, failure=on_failure)
        assert evaluate(rule, Person(1)).errors == (E2,)
        assert on_failure.calls == 0

    def test_failure_branch(self):
        on_success, on_failure = passing(), passing()
        rule = ConditionalSpy(UnitResult.failure(E1), success=on_success, failure=on_failure)
        assert evaluate(rule, Person(1)).is_success
        assert on_success.calls == 0
        assert on_failure.calls == 1

    def test_missing_branches_return_own_outcome(self):
        assert evaluate(ConditionalSpy(UnitResult.failure(E1)), Person(1)).errors == (E1,)
        assert evaluate(ConditionalSpy(UnitResult.success()), Person(1)).is_success

    def test_builder(self):
        rule = conditional(lambda p: p.age >= 18, success=lambda p: p.email is not None)
        assert isinstance(rule, RuleBranch)
        assert evaluate(rule, Person(30, email="a@b.c")).is_success
        assert evaluate(rule, Person(30)).is_failure
        assert evaluate(rule, Person(10, email="a@b.c")).is_failure


class TestAnd:
    def test_returns_first_failure_and_stops(self):
        """
        GIVEN children [fail(E1), success, fail(E2)]
        WHEN the And rule is evaluated
        THEN exactly E1 is returned and later children never run
        """
        first, second, third = failing(E1), passing(), failing(E2)
        result = evaluate(all_of(first, second, third), Person(1))
        assert result.errors == (E1,)
        assert (first.calls, second.calls, third.calls) == (1, 0, 0)

    def test_all_pass(self):
        children = [passing(), passing()]
        assert evaluate(all_of(children), Person(1)).is_success
        assert [child.calls for child in children] == [1, 1]

    def test_empty_is_success(self):
        assert evaluate(all_of(), Person(1)).is_success

    def test_composite_is_a_rule(self):
        rule = all_of(lambda p: p.age > 0)
        assert isinstance(rule, AllOfRule)
        assert rule.evaluate(Person(1)).is_success


class TestOr:
    def test_all_fail_aggregates_errors_in_order(self):
        first, second = failing(E1), failing(E2)
        result = evaluate(any_of(first, second), Person(1))
        assert result.errors == (E1, E2)
        assert (first.calls, second.calls) == (1, 1)

    def test_first_success_stops(self):
        first, second = passing(), failing(E1)
        assert evaluate(any_of(first, second), Person(1)).is_success
        assert second.calls == 0

    def test_empty_is_rejected(self):
        with pytest.raises(ValueError):
            any_of()

    def test_composite_is_a_rule(self):
        rule = any_of(lambda p: False, lambda p: True)
        assert isinstance(rule, AnyOfRule)
        assert rule.evaluate(Person(1)).is_success


class TestMixedComposition:
    def test_functions_and_objects_nest(self):
        has_contact = any_of(
            as_rule(lambda p: p.email is not None, Error.validation("Person.Email")),
            as_rule(lambda p: p.phone is not None, Error.validation("Person.Phone")),
        )
        eligible = all_of(
            as_rule(lambda p: p.age >= 18, Error.validation("Person.Age")),
            has_contact,
            linear(passing(), lambda p: "vip" not in p.tags or p.age > 21),
        )

        assert evaluate(eligible, Person(30, phone="555")).is_success
        assert evaluate(eligible, Person(12, phone="555")).first_error.code == "Person.Age"
        codes = [error.code for error in evaluate(eligible, Person(30)).errors]
        assert codes == ["Person.Email", "Person.Phone"]


class TestLogging:
    def test_evaluations_logged_when_enabled(self, monkeypatch):
        from railkit.config import get_settings

        monkeypatch.setenv("RAILKIT_LOG_RULE_EVALUATIONS", "true")
        get_settings.cache_clear()

        with capture_logs() as logs:
            evaluate(all_of(failing(E1), passing()), Person(1))

        events = [entry["event"] for entry in logs]
        assert "rule.evaluated" in events
        assert "rule.short_circuit" in events

    def test_silent_by_default(self):
        with capture_logs() as logs:
            evaluate(all_of(failing(E1), passing()), Person(1))
        assert logs == []
