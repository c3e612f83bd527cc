"""
Result monads — the core of railway-oriented error handling.

Two flavours share the same error track:

  - UnitResult  — success carries nothing, failure carries ≥1 Error
  - Result[T]   — success carries a value of type T, failure carries ≥1 Error

    ┌───────────┐     then      ┌───────────┐     then      ┌──────────┐
    │ validate  │──Success──────│  enrich   │──Success──────│ persist  │──→ Result[T]
    └─────┬─────┘               └─────┬─────┘               └─────┬────┘
          │ Failure                   │ Failure                   │ Failure
          └───────────────────────────┴───────────────────────────┴──→ Result[T]

A failing result is data: no combinator raises because a result failed. The
only errors raised are programmer mistakes (a result built without a state,
a failure built from zero errors, a None success value).

Error inspection is total. On a successful result first_error, last_error
and errors answer with sentinel Errors (Result.NoFirstError,
Result.NoLastError, Result.NoErrors) so inspection code can run
unconditionally.

Continuation outputs are coerced into results:
  - a Result or UnitResult is returned as is
  - an Error becomes a failure
  - anything else becomes a success value

Every synchronous combinator has an *_async counterpart whose continuation
may suspend. Those accept an optional CancellationToken that is checked
before the continuation runs and observed while it is awaited.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, Generic, NoReturn, TypeVar

from railkit.cancellation import CancellationToken, check_cancellation, resolve
from railkit.error import Error, ErrorType
from railkit.exceptions import DomainError, InvalidResultError

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

NO_FIRST_ERROR = Error(
    code="Result.NoFirstError",
    description="The result is successful and has no first error.",
    type=ErrorType.UNEXPECTED,
)
NO_LAST_ERROR = Error(
    code="Result.NoLastError",
    description="The result is successful and has no last error.",
    type=ErrorType.UNEXPECTED,
)
NO_ERRORS = Error(
    code="Result.NoErrors",
    description="The result is successful and has no errors.",
    type=ErrorType.UNEXPECTED,
)

_EMPTY_ERRORS_MESSAGE = (
    "Cannot create a Result from an empty collection of errors. Provide at least one error."
)


def _normalize_errors(errors: Error | Iterable[Error] | None) -> tuple[Error, ...]:
    """Validate a failure payload: ≥1 Error, nothing else."""
    if errors is None:
        raise TypeError("errors must not be None")
    collected = (errors,) if isinstance(errors, Error) else tuple(errors)
    if not collected:
        raise InvalidResultError(_EMPTY_ERRORS_MESSAGE)
    for error in collected:
        if not isinstance(error, Error):
            raise TypeError(f"Expected Error, got {type(error).__name__}")
    return collected


class _ResultBase:
    """State and error inspection shared by UnitResult and Result[T]."""

    __slots__ = ("_is_failure", "_errors")

    _is_failure: bool
    _errors: tuple[Error, ...]

    def __init__(self) -> NoReturn:
        raise InvalidResultError(
            f"{type(self).__name__} must be created through success() or failure()"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ──────────────────────── Introspection ────────────────────────

    @property
    def is_success(self) -> bool:
        return not self._is_failure

    @property
    def is_failure(self) -> bool:
        return self._is_failure

    @property
    def errors(self) -> tuple[Error, ...]:
        """All errors in order; a single NO_ERRORS sentinel on success."""
        return self._errors if self._is_failure else (NO_ERRORS,)

    @property
    def errors_or_empty(self) -> tuple[Error, ...]:
        """All errors in order; an empty tuple on success."""
        return self._errors

    @property
    def first_error(self) -> Error:
        return self._errors[0] if self._is_failure else NO_FIRST_ERROR

    @property
    def last_error(self) -> Error:
        return self._errors[-1] if self._is_failure else NO_LAST_ERROR

    def __bool__(self) -> bool:
        """Truthy only on success: `if result: ...`."""
        return not self._is_failure


# ═══════════════════════════════════════════════════════════════
# UnitResult
# ═══════════════════════════════════════════════════════════════


class UnitResult(_ResultBase):
    """
    Success/failure outcome without a payload.

    This is what rules return: they either pass or explain why they did not.

        >>> UnitResult.success().is_success
        True
        >>> UnitResult.failure(Error.conflict()).first_error.code
        'Conflict'
    """

    __slots__ = ()

    # ──────────────────────── Static factories ────────────────────────

    @classmethod
    def _create(cls, errors: tuple[Error, ...]) -> UnitResult:
        instance = object.__new__(cls)
        object.__setattr__(instance, "_is_failure", bool(errors))
        object.__setattr__(instance, "_errors", errors)
        return instance

    @classmethod
    def success(cls) -> UnitResult:
        return cls._create(())

    @classmethod
    def failure(cls, *errors: Error | Iterable[Error]) -> UnitResult:
        """
        Build a failing result from one or more Errors or iterables of Errors.

        Raises InvalidResultError when no error is supplied.
        """
        if len(errors) == 1:
            return cls._create(_normalize_errors(errors[0]))
        return cls._create(_normalize_errors(Error.create_many(*errors)))

    @classmethod
    def from_error(cls, error: Error) -> UnitResult:
        return cls._create(_normalize_errors(error))

    @classmethod
    def from_errors(cls, errors: Iterable[Error] | None) -> UnitResult:
        return cls._create(_normalize_errors(errors))

    @classmethod
    def from_bool(cls, condition: bool, error: Error) -> UnitResult:
        """Success when `condition` holds, else a failure carrying `error`."""
        return cls.success() if condition else cls.from_error(error)

    @staticmethod
    def combine(*results: _ResultBase) -> UnitResult:
        """
        Concatenate the errors of every failing result, left to right.

        Succeeds only when every input succeeded.
        """
        errors = tuple(error for result in results for error in result.errors_or_empty)
        return UnitResult._create(errors)

    # ──────────────────────── Transformations ────────────────────────

    def then(self, on_success: Callable[[], Any]) -> UnitResult | Result[Any]:
        """
        Run `on_success` only if this result succeeded and return its coerced output.

        A None output keeps the unit success; a plain value becomes Result[T].
        """
        if self._is_failure:
            return self
        return _to_unit_or_result(on_success())

    def then_do(self, action: Callable[[], Any]) -> UnitResult:
        """Run `action` for its effect on success; the result is unchanged."""
        if not self._is_failure:
            action()
        return self

    def or_else(self, fallback: Any) -> UnitResult:
        """
        Replace a failure. Success passes through untouched.

        `fallback` may be an Error, a result, or a callable receiving the
        errors tuple and returning an Error, a sequence of Errors, a result,
        or None (recover to success). A Result outcome loses its value; an
        empty error sequence raises InvalidResultError and any other value
        raises TypeError.
        """
        if not self._is_failure:
            return self
        outcome = fallback(self._errors) if callable(fallback) else fallback
        return _fallback_to_unit(outcome)

    def or_else_do(self, action: Callable[[tuple[Error, ...]], Any]) -> UnitResult:
        """Run `action` with the errors for its effect on failure."""
        if self._is_failure:
            action(self._errors)
        return self

    def ensure(self, predicate: Callable[[], bool], error: Error) -> UnitResult:
        """Turn a success into a failure carrying `error` unless `predicate()` holds."""
        if self._is_failure:
            return self
        return self if predicate() else UnitResult.from_error(error)

    def map_errors(self, mapper: Callable[[Error], Error]) -> UnitResult:
        if not self._is_failure:
            return self
        return UnitResult._create(tuple(mapper(error) for error in self._errors))

    def to_result(self, value: T) -> Result[T]:
        """Attach a value to a success; failures keep their errors."""
        if self._is_failure:
            return Result.from_errors(self._errors)
        return Result.success(value)

    # ──────────────────────── Pattern dispatch ────────────────────────

    def match(
        self,
        on_success: Callable[[], R],
        on_failure: Callable[[tuple[Error, ...]], R],
    ) -> R:
        return on_failure(self._errors) if self._is_failure else on_success()

    def match_first(self, on_success: Callable[[], R], on_first_error: Callable[[Error], R]) -> R:
        return on_first_error(self.first_error) if self._is_failure else on_success()

    def match_last(self, on_success: Callable[[], R], on_last_error: Callable[[Error], R]) -> R:
        return on_last_error(self.last_error) if self._is_failure else on_success()

    # ──────────────────────── Execution Context ────────────────────────

    def within(self, execution_context: Any) -> UnitResult:
        """Hand this result to an ExecutionContext (logging, transactions, ...)."""
        return execution_context.execute(lambda: self)

    # ──────────────────────── Async Support ────────────────────────

    async def then_async(
        self,
        on_success: Callable[[], Awaitable[Any] | Any],
        token: CancellationToken | None = None,
    ) -> UnitResult | Result[Any]:
        if self._is_failure:
            return self
        check_cancellation(token)
        return _to_unit_or_result(await resolve(on_success(), token))

    async def then_do_async(
        self,
        action: Callable[[], Awaitable[Any] | Any],
        token: CancellationToken | None = None,
    ) -> UnitResult:
        if self._is_failure:
            return self
        check_cancellation(token)
        await resolve(action(), token)
        return self

    async def or_else_async(
        self,
        fallback: Callable[[tuple[Error, ...]], Awaitable[Any] | Any],
        token: CancellationToken | None = None,
    ) -> UnitResult:
        if not self._is_failure:
            return self
        check_cancellation(token)
        return _fallback_to_unit(await resolve(fallback(self._errors), token))

    async def ensure_async(
        self,
        predicate: Callable[[], Awaitable[bool] | bool],
        error: Error,
        token: CancellationToken | None = None,
    ) -> UnitResult:
        if self._is_failure:
            return self
        check_cancellation(token)
        holds = await resolve(predicate(), token)
        return self if holds else UnitResult.from_error(error)

    async def match_async(
        self,
        on_success: Callable[[], Awaitable[R] | R],
        on_failure: Callable[[tuple[Error, ...]], Awaitable[R] | R],
        token: CancellationToken | None = None,
    ) -> R:
        check_cancellation(token)
        outcome = on_failure(self._errors) if self._is_failure else on_success()
        return await resolve(outcome, token)

    async def match_first_async(
        self,
        on_success: Callable[[], Awaitable[R] | R],
        on_first_error: Callable[[Error], Awaitable[R] | R],
        token: CancellationToken | None = None,
    ) -> R:
        check_cancellation(token)
        outcome = on_first_error(self.first_error) if self._is_failure else on_success()
        return await resolve(outcome, token)

    async def match_last_async(
        self,
        on_success: Callable[[], Awaitable[R] | R],
        on_last_error: Callable[[Error], Awaitable[R] | R],
        token: CancellationToken | None = None,
    ) -> R:
        check_cancellation(token)
        outcome = on_last_error(self.last_error) if self._is_failure else on_success()
        return await resolve(outcome, token)

    # ──────────────────────── Dunder methods ────────────────────────

    def __add__(self, other: object) -> UnitResult:
        if not isinstance(other, _ResultBase):
            return NotImplemented
        return UnitResult.combine(self, other)

    def __radd__(self, other: object) -> UnitResult:
        if not isinstance(other, _ResultBase):
            return NotImplemented
        return UnitResult.combine(other, self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitResult):
            return NotImplemented
        return self._errors == other._errors

    def __hash__(self) -> int:
        return hash(("UnitResult", self._errors))

    def __repr__(self) -> str:
        if self._is_failure:
            return f"UnitResult.Failure({_render_errors(self._errors)})"
        return "UnitResult.Success()"


# ═══════════════════════════════════════════════════════════════
# Result[T]
# ═══════════════════════════════════════════════════════════════


class Result(_ResultBase, Generic[T]):
    """
    Success/failure outcome carrying a value of type T on success.

    Reading `value` on a failure is a safe read that returns None; use
    unwrap() to raise instead.

        >>> Result.success(4).then(lambda v: Result.success(v * 2)).value
        8
        >>> Result.failure(Error.validation("Age")).map(lambda v: v + 1).first_error.code
        'Age'
    """

    __slots__ = ("_value",)

    _value: T | None

    # ──────────────────────── Static factories ────────────────────────

    @classmethod
    def _create(cls, value: T | None, errors: tuple[Error, ...]) -> Result[T]:
        instance = object.__new__(cls)
        object.__setattr__(instance, "_is_failure", bool(errors))
        object.__setattr__(instance, "_errors", errors)
        object.__setattr__(instance, "_value", value)
        return instance

    @classmethod
    def success(cls, value: T) -> Result[T]:
        """Wrap a value. None is rejected: use Maybe or UnitResult for absence."""
        if value is None:
            raise TypeError("Success value must not be None")
        return cls._create(value, ())

    @classmethod
    def from_value(cls, value: T) -> Result[T]:
        return cls.success(value)

    @classmethod
    def failure(cls, *errors: Error | Iterable[Error]) -> Result[T]:
        """
        Build a failing result from one or more Errors or iterables of Errors.

        Raises InvalidResultError when no error is supplied.
        """
        if len(errors) == 1:
            return cls._create(None, _normalize_errors(errors[0]))
        return cls._create(None, _normalize_errors(Error.create_many(*errors)))

    @classmethod
    def from_error(cls, error: Error) -> Result[T]:
        return cls._create(None, _normalize_errors(error))

    @classmethod
    def from_errors(cls, errors: Iterable[Error] | None) -> Result[T]:
        return cls._create(None, _normalize_errors(errors))

    @classmethod
    def from_optional(cls, value: T | None, error: Error) -> Result[T]:
        """Success when `value` is not None, else a failure carrying `error`."""
        if value is not None:
            return cls.success(value)
        return cls.from_error(error)

    @classmethod
    def from_computation(
        cls,
        computation: Callable[[], T],
        error_type: ErrorType | None = None,
        code: str | None = None,
    ) -> Result[T]:
        """
        Run a computation that may raise and capture the exception as a failure.

        Before:
            try:
                return Result.success(repo.find(user_id))
            except Exception as e:
                return Result.failure(Error.from_exception(e))

        After:
            return Result.from_computation(lambda: repo.find(user_id))
        """
        try:
            return cls.success(computation())
        except Exception as e:
            return cls.from_error(Error.from_exception(e, code=code, error_type=error_type))

    @staticmethod
    def combine(*results: Result[T]) -> Result[list[T]]:
        """
        Collect results into a Result of list.

        Unlike a flat_map chain, every input is inspected: when any failed the
        combined failure carries all errors in input order. Inputs must all be
        Result[T]; use UnitResult.combine when any side carries no value.
        """
        for result in results:
            if not isinstance(result, Result):
                raise TypeError(
                    f"Result.combine expects Result inputs, got {type(result).__name__}; "
                    "use UnitResult.combine to combine payload-less results"
                )
        errors = tuple(error for result in results for error in result.errors_or_empty)
        if errors:
            return Result._create(None, errors)
        return Result._create([result._value for result in results], ())

    # ──────────────────────── Introspection ────────────────────────

    @property
    def value(self) -> T | None:
        """The success value, or None on failure."""
        return self._value

    def unwrap(self) -> T:
        """Return the success value or raise DomainError carrying the first error."""
        if self._is_failure:
            raise DomainError(self._errors[0])
        return self._value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default if self._is_failure else self._value  # type: ignore[return-value]

    # ──────────────────────── Transformations ────────────────────────

    def then(self, on_success: Callable[[T], Result[U] | Error | U]) -> Result[U]:
        """
        Chain a continuation on the success value. Short-circuits on failure.

        The continuation may return a result, an Error (becomes a failure) or a
        plain value (becomes a success):

            Result.success(4).then(
                lambda v: Result.success(v * 2) if v > 0 else Error.validation("neg")
            )
        """
        if self._is_failure:
            return Result._create(None, self._errors)
        return _to_result(on_success(self._value))  # type: ignore[arg-type]

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        """Transform the success value; the output is always wrapped as a value."""
        if self._is_failure:
            return Result._create(None, self._errors)
        return Result.success(mapper(self._value))  # type: ignore[arg-type]

    def then_do(self, action: Callable[[T], Any]) -> Result[T]:
        """Run `action` with the value for its effect; the result is unchanged."""
        if not self._is_failure:
            action(self._value)  # type: ignore[arg-type]
        return self

    def or_else(self, fallback: Any) -> Result[T]:
        """
        Replace a failure. Success passes through untouched.

        `fallback` may be:
          - an Error → failure with that single error
          - a result → returned as is
          - a plain value → success with that value
          - a callable receiving the errors tuple and returning any of the
            above, or a sequence of Errors

        A list or tuple outcome is always read as errors, so an empty one
        raises InvalidResultError. Recover to a list value with Result.success.
        """
        if not self._is_failure:
            return self
        outcome = fallback(self._errors) if callable(fallback) else fallback
        return _fallback_to_result(outcome)

    def or_else_do(self, action: Callable[[tuple[Error, ...]], Any]) -> Result[T]:
        """Run `action` with the errors for its effect on failure."""
        if self._is_failure:
            action(self._errors)
        return self

    def ensure(self, predicate: Callable[[T], bool], error: Error) -> Result[T]:
        """
        Validate the success value against a condition.

            Result.success(order).ensure(
                lambda o: o.total > 0,
                Error.validation("Order.Total", "Order total must be positive"),
            )
        """
        if self._is_failure:
            return self
        return self if predicate(self._value) else Result.from_error(error)  # type: ignore[arg-type]

    def map_errors(self, mapper: Callable[[Error], Error]) -> Result[T]:
        if not self._is_failure:
            return self
        return Result._create(None, tuple(mapper(error) for error in self._errors))

    def to_unit_result(self) -> UnitResult:
        """Drop the value, keep the outcome."""
        return UnitResult._create(self._errors)

    # ──────────────────────── Pattern dispatch ────────────────────────

    def match(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[tuple[Error, ...]], R],
    ) -> R:
        """
        Apply one of two functions depending on the state.

            result.match(
                on_success=lambda user: f"Hello {user.name}",
                on_failure=lambda errors: f"{len(errors)} problem(s)",
            )
        """
        if self._is_failure:
            return on_failure(self._errors)
        return on_success(self._value)  # type: ignore[arg-type]

    def match_first(self, on_success: Callable[[T], R], on_first_error: Callable[[Error], R]) -> R:
        if self._is_failure:
            return on_first_error(self.first_error)
        return on_success(self._value)  # type: ignore[arg-type]

    def match_last(self, on_success: Callable[[T], R], on_last_error: Callable[[Error], R]) -> R:
        if self._is_failure:
            return on_last_error(self.last_error)
        return on_success(self._value)  # type: ignore[arg-type]

    # ──────────────────────── Execution Context ────────────────────────

    def within(self, execution_context: Any) -> Result[T]:
        """
        Hand this result to an ExecutionContext (logging, transactions, ...).

            result = (
                Result.success(data)
                .then(validate)
                .then(persist)
                .within(LoggingExecutionContext(operation="CreateOrder"))
            )
        """
        return execution_context.execute(lambda: self)

    # ──────────────────────── Async Support ────────────────────────

    async def then_async(
        self,
        on_success: Callable[[T], Awaitable[Result[U] | Error | U] | Result[U] | Error | U],
        token: CancellationToken | None = None,
    ) -> Result[U]:
        """
        Async then — chain a continuation that may suspend.

            result = await Result.success(user_id).then_async(fetch_user, token)
        """
        if self._is_failure:
            return Result._create(None, self._errors)
        check_cancellation(token)
        return _to_result(await resolve(on_success(self._value), token))  # type: ignore[arg-type]

    async def map_async(
        self,
        mapper: Callable[[T], Awaitable[U] | U],
        token: CancellationToken | None = None,
    ) -> Result[U]:
        if self._is_failure:
            return Result._create(None, self._errors)
        check_cancellation(token)
        return Result.success(await resolve(mapper(self._value), token))  # type: ignore[arg-type]

    async def then_do_async(
        self,
        action: Callable[[T], Awaitable[Any] | Any],
        token: CancellationToken | None = None,
    ) -> Result[T]:
        if self._is_failure:
            return self
        check_cancellation(token)
        await resolve(action(self._value), token)  # type: ignore[arg-type]
        return self

    async def or_else_async(
        self,
        fallback: Callable[[tuple[Error, ...]], Awaitable[Any] | Any],
        token: CancellationToken | None = None,
    ) -> Result[T]:
        if not self._is_failure:
            return self
        check_cancellation(token)
        return _fallback_to_result(await resolve(fallback(self._errors), token))

    async def ensure_async(
        self,
        predicate: Callable[[T], Awaitable[bool] | bool],
        error: Error,
        token: CancellationToken | None = None,
    ) -> Result[T]:
        if self._is_failure:
            return self
        check_cancellation(token)
        holds = await resolve(predicate(self._value), token)  # type: ignore[arg-type]
        return self if holds else Result.from_error(error)

    async def match_async(
        self,
        on_success: Callable[[T], Awaitable[R] | R],
        on_failure: Callable[[tuple[Error, ...]], Awaitable[R] | R],
        token: CancellationToken | None = None,
    ) -> R:
        check_cancellation(token)
        outcome = on_failure(self._errors) if self._is_failure else on_success(self._value)  # type: ignore[arg-type]
        return await resolve(outcome, token)

    async def match_first_async(
        self,
        on_success: Callable[[T], Awaitable[R] | R],
        on_first_error: Callable[[Error], Awaitable[R] | R],
        token: CancellationToken | None = None,
    ) -> R:
        check_cancellation(token)
        outcome = on_first_error(self.first_error) if self._is_failure else on_success(self._value)  # type: ignore[arg-type]
        return await resolve(outcome, token)

    async def match_last_async(
        self,
        on_success: Callable[[T], Awaitable[R] | R],
        on_last_error: Callable[[Error], Awaitable[R] | R],
        token: CancellationToken | None = None,
    ) -> R:
        check_cancellation(token)
        outcome = on_last_error(self.last_error) if self._is_failure else on_success(self._value)  # type: ignore[arg-type]
        return await resolve(outcome, token)

    # ──────────────────────── Dunder methods ────────────────────────

    def __add__(self, other: object) -> Result[list[T]]:
        """`a + b` → Result[[a.value, b.value]], or the concatenated errors."""
        if not isinstance(other, Result):
            return NotImplemented
        return Result.combine(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        if self._is_failure or other._is_failure:
            return self._errors == other._errors
        return self._value == other._value

    def __hash__(self) -> int:
        if self._is_failure:
            return hash(("Failure", self._errors))
        return hash(("Success", self._value))

    def __repr__(self) -> str:
        if self._is_failure:
            return f"Failure({_render_errors(self._errors)})"
        return f"Success({self._value!r})"


# ──────────────────────── Coercion helpers ────────────────────────


def _render_errors(errors: Sequence[Error]) -> str:
    return ", ".join(f"{error.code}: {error.description!r}" for error in errors)


def _to_result(outcome: Any) -> Any:
    match outcome:
        case Result() | UnitResult():
            return outcome
        case Error():
            return Result.from_error(outcome)
        case _:
            return Result.success(outcome)


def _to_unit_or_result(outcome: Any) -> Any:
    match outcome:
        case None:
            return UnitResult.success()
        case Error():
            return UnitResult.from_error(outcome)
        case _:
            return _to_result(outcome)


def _fallback_to_result(outcome: Any) -> Any:
    if isinstance(outcome, (list, tuple)):
        return Result.from_errors(outcome)
    return _to_result(outcome)


def _fallback_to_unit(outcome: Any) -> UnitResult:
    match outcome:
        case None:
            return UnitResult.success()
        case UnitResult():
            return outcome
        case Result():
            return outcome.to_unit_result()
        case Error():
            return UnitResult.from_error(outcome)
        case list() | tuple():
            return UnitResult.from_errors(outcome)
        case _:
            raise TypeError(
                f"A UnitResult fallback must return None, an Error, a sequence of Errors "
                f"or a result, got {type(outcome).__name__}"
            )
