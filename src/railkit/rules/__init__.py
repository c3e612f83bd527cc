"""
Rule engine — compose checks over a context into UnitResult outcomes.

    from railkit.rules import all_of, any_of, evaluate

    outcome = evaluate(all_of(is_adult, any_of(has_email, has_phone)), person)
"""

from railkit.rules.abstractions import (
    AndRule,
    AsyncRule,
    ConditionalRule,
    LinearRule,
    OrRule,
    Rule,
    RuleFunction,
    RuleLike,
)
from railkit.rules.adapters import FunctionRule, as_rule
from railkit.rules.engine import (
    evaluate,
    evaluate_and,
    evaluate_and_async,
    evaluate_async,
    evaluate_conditional,
    evaluate_conditional_async,
    evaluate_linear,
    evaluate_linear_async,
    evaluate_or,
    evaluate_or_async,
    evaluate_simple,
    evaluate_simple_async,
)
from railkit.rules.composites import (
    AllOfRule,
    AnyOfRule,
    RuleBranch,
    RuleChain,
    all_of,
    any_of,
    conditional,
    linear,
)

__all__ = [
    "AllOfRule",
    "AndRule",
    "AnyOfRule",
    "AsyncRule",
    "ConditionalRule",
    "FunctionRule",
    "LinearRule",
    "OrRule",
    "Rule",
    "RuleBranch",
    "RuleChain",
    "RuleFunction",
    "RuleLike",
    "all_of",
    "any_of",
    "as_rule",
    "conditional",
    "evaluate",
    "evaluate_and",
    "evaluate_and_async",
    "evaluate_async",
    "evaluate_conditional",
    "evaluate_conditional_async",
    "evaluate_linear",
    "evaluate_linear_async",
    "evaluate_or",
    "evaluate_or_async",
    "evaluate_simple",
    "evaluate_simple_async",
    "linear",
]
