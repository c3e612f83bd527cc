"""
Maybe monad — an explicit present/absent wrapper.

Maybe[T] replaces `T | None` where absence should be handled through the same
combinator vocabulary as Result:

    >>> Maybe.from_value(" ada ").map(str.strip).where(bool).get_value_or_default("anonymous")
    'ada'
    >>> Maybe.from_value(None).to_result(Error.not_found("User")).first_error.code
    'User'

bind() obeys the monad laws:
    left identity   Maybe.from_value(x).bind(f) == f(x)
    right identity  m.bind(Maybe.from_value) == m
    associativity   m.bind(f).bind(g) == m.bind(lambda x: f(x).bind(g))
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from typing import Any, Generic, NoReturn, TypeVar, overload

from railkit.cancellation import CancellationToken, check_cancellation, resolve
from railkit.error import Error
from railkit.exceptions import NoValueError
from railkit.result import Result

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")
R = TypeVar("R")

_ABSENT: Any = object()


class Maybe(Generic[T]):
    """
    Either holds a value (has_value) or holds nothing (has_no_value).

    A present Maybe never holds None: Maybe.from_value(None) is absent.
    """

    __slots__ = ("_value",)

    _value: T

    def __init__(self) -> NoReturn:
        raise TypeError("Maybe must be created through from_value() or none()")

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Maybe is immutable")

    # ──────────────────────── Static factories ────────────────────────

    @classmethod
    def _create(cls, value: Any) -> Maybe[T]:
        instance = object.__new__(cls)
        object.__setattr__(instance, "_value", value)
        return instance

    @classmethod
    def from_value(cls, value: T | None) -> Maybe[T]:
        """Wrap a nullable value: None becomes an absent Maybe."""
        return cls._create(_ABSENT if value is None else value)

    @classmethod
    def none(cls) -> Maybe[T]:
        return cls._create(_ABSENT)

    # ──────────────────────── Introspection ────────────────────────

    @property
    def has_value(self) -> bool:
        return self._value is not _ABSENT

    @property
    def has_no_value(self) -> bool:
        return self._value is _ABSENT

    @property
    def value(self) -> T:
        """The wrapped value. Raises NoValueError when absent."""
        if self._value is _ABSENT:
            raise NoValueError("Maybe has no value")
        return self._value

    # ──────────────────────── Transformations ────────────────────────

    def map(self, selector: Callable[[T], K | None]) -> Maybe[K]:
        """Absent stays absent; present becomes Maybe.from_value(selector(value))."""
        if self._value is _ABSENT:
            return Maybe.none()
        return Maybe.from_value(selector(self._value))

    def bind(self, selector: Callable[[T], Maybe[K]]) -> Maybe[K]:
        """Absent stays absent; present is replaced by selector(value)."""
        if self._value is _ABSENT:
            return Maybe.none()
        return selector(self._value)

    def where(self, predicate: Callable[[T], bool]) -> Maybe[T]:
        """Present becomes absent unless the predicate holds."""
        if self._value is _ABSENT or predicate(self._value):
            return self
        return Maybe.none()

    def or_(self, fallback: Maybe[T] | T | Callable[[], Maybe[T] | T]) -> Maybe[T]:
        """
        Return self when present, otherwise the fallback.

        The fallback may be a value, a Maybe, or a zero-argument factory of
        either; factories are only called when needed.
        """
        if self._value is not _ABSENT:
            return self
        outcome = fallback() if callable(fallback) else fallback
        return outcome if isinstance(outcome, Maybe) else Maybe.from_value(outcome)

    # ──────────────────────── Extraction ────────────────────────

    @overload
    def get_value_or_default(self) -> T | None: ...

    @overload
    def get_value_or_default(self, default: T) -> T: ...

    def get_value_or_default(self, default: Any = None) -> Any:
        return default if self._value is _ABSENT else self._value

    def get_value_or_else(self, factory: Callable[[], T]) -> T:
        """Like get_value_or_default, with a lazily computed default."""
        return factory() if self._value is _ABSENT else self._value

    def to_optional(self) -> T | None:
        return None if self._value is _ABSENT else self._value

    def to_list(self) -> list[T]:
        return [] if self._value is _ABSENT else [self._value]

    def to_result(self, error: Error) -> Result[T]:
        """Present → Result.success(value); absent → failure carrying `error`."""
        if self._value is _ABSENT:
            return Result.from_error(error)
        return Result.success(self._value)

    # ──────────────────────── Pattern dispatch & effects ────────────────────────

    def match(self, some: Callable[[T], R], none: Callable[[], R]) -> R:
        return none() if self._value is _ABSENT else some(self._value)

    def execute(self, action: Callable[[T], Any]) -> None:
        """Run `action` with the value when present."""
        if self._value is not _ABSENT:
            action(self._value)

    def execute_no_value(self, action: Callable[[], Any]) -> None:
        """Run `action` when absent."""
        if self._value is _ABSENT:
            action()

    # ──────────────────────── Async Support ────────────────────────

    async def map_async(
        self,
        selector: Callable[[T], Awaitable[K | None] | K | None],
        token: CancellationToken | None = None,
    ) -> Maybe[K]:
        if self._value is _ABSENT:
            return Maybe.none()
        check_cancellation(token)
        return Maybe.from_value(await resolve(selector(self._value), token))

    async def bind_async(
        self,
        selector: Callable[[T], Awaitable[Maybe[K]] | Maybe[K]],
        token: CancellationToken | None = None,
    ) -> Maybe[K]:
        if self._value is _ABSENT:
            return Maybe.none()
        check_cancellation(token)
        return await resolve(selector(self._value), token)

    async def where_async(
        self,
        predicate: Callable[[T], Awaitable[bool] | bool],
        token: CancellationToken | None = None,
    ) -> Maybe[T]:
        if self._value is _ABSENT:
            return self
        check_cancellation(token)
        holds = await resolve(predicate(self._value), token)
        return self if holds else Maybe.none()

    async def or_async(
        self,
        fallback: Callable[[], Awaitable[Maybe[T] | T] | Maybe[T] | T],
        token: CancellationToken | None = None,
    ) -> Maybe[T]:
        if self._value is not _ABSENT:
            return self
        check_cancellation(token)
        outcome = await resolve(fallback(), token)
        return outcome if isinstance(outcome, Maybe) else Maybe.from_value(outcome)

    async def get_value_or_default_async(
        self,
        default: Callable[[], Awaitable[T] | T],
        token: CancellationToken | None = None,
    ) -> T:
        if self._value is not _ABSENT:
            return self._value
        check_cancellation(token)
        return await resolve(default(), token)

    async def match_async(
        self,
        some: Callable[[T], Awaitable[R] | R],
        none: Callable[[], Awaitable[R] | R],
        token: CancellationToken | None = None,
    ) -> R:
        check_cancellation(token)
        outcome = none() if self._value is _ABSENT else some(self._value)
        return await resolve(outcome, token)

    async def execute_async(
        self,
        action: Callable[[T], Awaitable[Any] | Any],
        token: CancellationToken | None = None,
    ) -> None:
        if self._value is _ABSENT:
            return
        check_cancellation(token)
        await resolve(action(self._value), token)

    # ──────────────────────── Dunder methods ────────────────────────

    def __bool__(self) -> bool:
        return self._value is not _ABSENT

    def __iter__(self) -> Iterator[T]:
        """Iterate over zero or one value."""
        if self._value is not _ABSENT:
            yield self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Maybe):
            return NotImplemented
        if self._value is _ABSENT or other._value is _ABSENT:
            return self._value is other._value
        return self._value == other._value

    def __hash__(self) -> int:
        if self._value is _ABSENT:
            return hash(("Maybe", None))
        return hash(("Maybe", self._value))

    def __repr__(self) -> str:
        if self._value is _ABSENT:
            return "Maybe.none()"
        return f"Maybe({self._value!r})"


# ──────────────────────── Helpers ────────────────────────


def try_first(source: Iterable[T], predicate: Callable[[T], bool] | None = None) -> Maybe[T]:
    """The first item (matching `predicate`, when given) or an absent Maybe."""
    for item in source:
        if predicate is None or predicate(item):
            return Maybe.from_value(item)
    return Maybe.none()


def try_find(mapping: Mapping[K, V], key: K) -> Maybe[V]:
    """Look up `key` without raising KeyError."""
    if key in mapping:
        return Maybe.from_value(mapping[key])
    return Maybe.none()


def choose(source: Iterable[Maybe[T]], selector: Callable[[T], K] | None = None) -> Iterator[Any]:
    """
    Yield the values of the present Maybes, optionally projected by `selector`.

        list(choose([Maybe.from_value(1), Maybe.none(), Maybe.from_value(3)]))  # → [1, 3]
    """
    for maybe in source:
        if maybe.has_value:
            yield maybe.value if selector is None else selector(maybe.value)
