"""
Execution contexts — separate WHAT a pipeline computes from HOW it runs.

A pipeline built from Result combinators is pure: it describes what should
happen. An ExecutionContext wraps its evaluation with the side effects that
belong around it (logging, timing, transactions owned by the application).

    def pipeline(order: Order) -> Result[Order]:
        return (
            Result.success(order)
            .then(validate)
            .then(price)
        )

    # Hand a finished result to a context
    result = pipeline(order).within(LoggingExecutionContext(operation="PriceOrder"))

    # Or wrap the whole handler
    @with_context(LoggingExecutionContext(operation="PriceOrder"))
    def handle(order: Order) -> Result[Order]:
        return pipeline(order)
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

import structlog

from railkit.error import Error, ErrorType
from railkit.result import Result, UnitResult

R = TypeVar("R", Result[Any], UnitResult)

log = structlog.get_logger(__name__)


# ──────────────────────── Protocol ────────────────────────


@runtime_checkable
class ExecutionContext(Protocol):
    """Anything with execute(computation) can host a pipeline."""

    def execute(self, computation: Callable[[], R]) -> R:
        """Run a result-returning computation within this context."""
        ...


# ──────────────────────── NoOp ────────────────────────


class NoOpExecutionContext:
    """
    Runs the computation as is.

    Handy in unit tests and for code that needs a context but has no side
    effects to add.
    """

    def execute(self, computation: Callable[[], R]) -> R:
        return computation()


# ──────────────────────── Logging ────────────────────────


class LoggingExecutionContext:
    """
    Logs start, duration and outcome (SUCCESS/FAILURE) of the computation.

    An exception escaping the computation is logged and turned into an
    UNEXPECTED failure whose metadata describes the exception. The failure is
    built with `result_type`, so a context hosting a unit pipeline passes
    UnitResult to keep the computation's result type.

        ctx = LoggingExecutionContext(inner=tx_context, operation="CreateOrder")
        unit_ctx = LoggingExecutionContext(operation="Notify", result_type=UnitResult)
    """

    def __init__(
        self,
        inner: ExecutionContext | None = None,
        operation: str = "unknown",
        log_level: int = logging.INFO,
        result_type: type[Result[Any]] | type[UnitResult] = Result,
    ) -> None:
        self._inner = inner or NoOpExecutionContext()
        self._operation = operation
        self._log_level = log_level
        self._result_type = result_type

    def execute(self, computation: Callable[[], R]) -> R:
        log.log(self._log_level, "execution.started", operation=self._operation)
        start = time.monotonic()

        try:
            result = self._inner.execute(computation)
        except Exception as e:
            log.error(
                "execution.failed",
                operation=self._operation,
                duration_s=round(time.monotonic() - start, 3),
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._result_type.from_error(  # type: ignore[return-value]
                Error.from_exception(e, error_type=ErrorType.UNEXPECTED)
            )

        log.log(
            self._log_level,
            "execution.completed",
            operation=self._operation,
            duration_s=round(time.monotonic() - start, 3),
            outcome="SUCCESS" if result.is_success else "FAILURE",
            errors=[error.code for error in result.errors_or_empty],
        )
        return result


# ──────────────────────── Composable ────────────────────────


class ComposableExecutionContext:
    """
    Nest several contexts; the first one given is the outermost.

        composed = ComposableExecutionContext(
            LoggingExecutionContext(operation="CreateOrder"),
            tx_context,
        )
        # Logging wraps tx_context wraps the computation
    """

    def __init__(self, *contexts: ExecutionContext) -> None:
        if not contexts:
            raise ValueError("At least one execution context is required")
        self._contexts = contexts

    def execute(self, computation: Callable[[], R]) -> R:
        wrapped = computation
        for ctx in reversed(self._contexts):
            wrapped = functools.partial(ctx.execute, wrapped)
        return wrapped()


# ──────────────────────── Decorator ────────────────────────


def with_context(ctx: ExecutionContext) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """
    Run every call of the decorated handler inside `ctx`.

        @with_context(LoggingExecutionContext(operation="Register"))
        def register(command: RegisterUser) -> Result[User]: ...

    is equivalent to calling `ctx.execute(lambda: register(command))`.
    """

    def decorator(fn: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> R:
            return ctx.execute(lambda: fn(*args, **kwargs))

        return wrapper

    return decorator
