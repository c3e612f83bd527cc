"""
Any2 .. Any8 — closed tagged unions over 2 to 8 distinct types.

A union instance boxes exactly one value and remembers which member type it
was created from through `index`:

    >>> shape = Any2[int, str]("x")
    >>> shape.index, shape.is_second, shape.as_second
    (1, True, 'x')
    >>> shape.match(lambda n: n * 2, lambda s: s.upper())
    'X'

Members can be built by tag (`Any3.first(1)`, `Any3.third(b"")`), or from a
value against the declared member types (`Any3[int, str, bytes](b"")`), which
picks the member whose type matches exactly, falling back to isinstance.

Reading a slot that is not the active one is a programmer error and raises
NoValueError("No value").

Each arity is its own class with fixed-arity switch()/match() signatures.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import cache
from typing import ClassVar, Generic, TypeVar, get_origin

from railkit.exceptions import NoValueError

T0 = TypeVar("T0")
T1 = TypeVar("T1")
T2 = TypeVar("T2")
T3 = TypeVar("T3")
T4 = TypeVar("T4")
T5 = TypeVar("T5")
T6 = TypeVar("T6")
T7 = TypeVar("T7")
R = TypeVar("R")

_ORDINALS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth")


def _runtime_type(member: object) -> type | None:
    if member is None:
        return type(None)
    origin = get_origin(member) or member
    return origin if isinstance(origin, type) else None


def _resolve_index(members: tuple[object, ...], value: object) -> int:
    runtime_types = [_runtime_type(member) for member in members]
    for index, runtime_type in enumerate(runtime_types):
        if type(value) is runtime_type:
            return index
    for index, runtime_type in enumerate(runtime_types):
        if runtime_type is not None and isinstance(value, runtime_type):
            return index
    names = ", ".join(getattr(member, "__name__", repr(member)) for member in members)
    raise TypeError(f"{type(value).__name__} is not one of the union members ({names})")


@cache
def _specialize(base: type[_AnyBase], members: tuple[object, ...]) -> type[_AnyBase]:
    if len(members) != base._arity:
        raise TypeError(f"{base.__name__} takes exactly {base._arity} member types, got {len(members)}")
    if len(set(members)) != len(members):
        raise TypeError(f"{base.__name__} member types must be distinct")
    names = ", ".join(getattr(member, "__name__", repr(member)) for member in members)
    return type(
        f"{base.__name__}[{names}]",
        (base,),
        {"__slots__": (), "_members": members, "__module__": base.__module__},
    )


def _is_slot(index: int) -> property:
    def getter(self: _AnyBase) -> bool:
        return self._index == index

    return property(getter, doc=f"True when the {_ORDINALS[index]} member is active.")


def _as_slot(index: int) -> property:
    def getter(self: _AnyBase) -> object:
        if self._index != index:
            raise NoValueError()
        return self._value

    return property(getter, doc=f"The {_ORDINALS[index]} member. Raises NoValueError otherwise.")


class _AnyBase:
    """Storage, construction and dispatch shared by every arity."""

    __slots__ = ("_index", "_value")

    _arity: ClassVar[int] = 0
    _members: ClassVar[tuple[object, ...]] = ()

    _index: int
    _value: object

    def __init__(self, value: object) -> None:
        if not self._members:
            raise TypeError(
                f"Declare the member types to build from a value, e.g. "
                f"{type(self).__name__}[int, str](value), or build by tag with "
                f"{type(self).__name__}.first(value)"
            )
        object.__setattr__(self, "_index", _resolve_index(self._members, value))
        object.__setattr__(self, "_value", value)

    def __class_getitem__(cls, members: object) -> type[_AnyBase]:
        if not isinstance(members, tuple):
            members = (members,)
        return _specialize(cls, members)

    @classmethod
    def _create(cls, index: int, value: object) -> _AnyBase:
        instance = object.__new__(cls)
        object.__setattr__(instance, "_index", index)
        object.__setattr__(instance, "_value", value)
        return instance

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def index(self) -> int:
        """Tag of the active member, in [0, arity)."""
        return self._index

    @property
    def value(self) -> object:
        """The boxed value, whatever its member type."""
        return self._value

    def _dispatch(self, *handlers: Callable[[object], R]) -> R:
        if len(handlers) != self._arity:
            raise TypeError(f"Expected {self._arity} handlers, got {len(handlers)}")
        return handlers[self._index](self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _AnyBase):
            return NotImplemented
        return (
            self._arity == other._arity
            and self._index == other._index
            and self._value is other._value
        )

    def __hash__(self) -> int:
        return hash((self._arity, self._index, id(self._value)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{_ORDINALS[self._index]}({self._value!r})"


class Any2(_AnyBase, Generic[T0, T1]):
    """Tagged union over two distinct types."""

    __slots__ = ()
    _arity = 2

    is_first = _is_slot(0)
    is_second = _is_slot(1)

    as_first = _as_slot(0)
    as_second = _as_slot(1)

    @classmethod
    def first(cls, value: T0) -> Any2[T0, T1]:
        return cls._create(0, value)  # type: ignore[return-value]

    @classmethod
    def second(cls, value: T1) -> Any2[T0, T1]:
        return cls._create(1, value)  # type: ignore[return-value]

    def switch(self, f0: Callable[[T0], object], f1: Callable[[T1], object]) -> None:
        """Invoke only the handler matching the active member, for its effect."""
        self._dispatch(f0, f1)  # type: ignore[arg-type]

    def match(self, f0: Callable[[T0], R], f1: Callable[[T1], R]) -> R:
        """Invoke only the handler matching the active member and return its result."""
        return self._dispatch(f0, f1)  # type: ignore[arg-type]


class Any3(_AnyBase, Generic[T0, T1, T2]):
    """Tagged union over three distinct types."""

    __slots__ = ()
    _arity = 3

    is_first = _is_slot(0)
    is_second = _is_slot(1)
    is_third = _is_slot(2)

    as_first = _as_slot(0)
    as_second = _as_slot(1)
    as_third = _as_slot(2)

    @classmethod
    def first(cls, value: T0) -> Any3[T0, T1, T2]:
        return cls._create(0, value)  # type: ignore[return-value]

    @classmethod
    def second(cls, value: T1) -> Any3[T0, T1, T2]:
        return cls._create(1, value)  # type: ignore[return-value]

    @classmethod
    def third(cls, value: T2) -> Any3[T0, T1, T2]:
        return cls._create(2, value)  # type: ignore[return-value]

    def switch(
        self,
        f0: Callable[[T0], object],
        f1: Callable[[T1], object],
        f2: Callable[[T2], object],
    ) -> None:
        self._dispatch(f0, f1, f2)  # type: ignore[arg-type]

    def match(self, f0: Callable[[T0], R], f1: Callable[[T1], R], f2: Callable[[T2], R]) -> R:
        return self._dispatch(f0, f1, f2)  # type: ignore[arg-type]


class Any4(_AnyBase, Generic[T0, T1, T2, T3]):
    """Tagged union over four distinct types."""

    __slots__ = ()
    _arity = 4

    is_first = _is_slot(0)
    is_second = _is_slot(1)
    is_third = _is_slot(2)
    is_fourth = _is_slot(3)

    as_first = _as_slot(0)
    as_second = _as_slot(1)
    as_third = _as_slot(2)
    as_fourth = _as_slot(3)

    @classmethod
    def first(cls, value: T0) -> Any4[T0, T1, T2, T3]:
        return cls._create(0, value)  # type: ignore[return-value]

    @classmethod
    def second(cls, value: T1) -> Any4[T0, T1, T2, T3]:
        return cls._create(1, value)  # type: ignore[return-value]

    @classmethod
    def third(cls, value: T2) -> Any4[T0, T1, T2, T3]:
        return cls._create(2, value)  # type: ignore[return-value]

    @classmethod
    def fourth(cls, value: T3) -> Any4[T0, T1, T2, T3]:
        return cls._create(3, value)  # type: ignore[return-value]

    def switch(
        self,
        f0: Callable[[T0], object],
        f1: Callable[[T1], object],
        f2: Callable[[T2], object],
        f3: Callable[[T3], object],
    ) -> None:
        self._dispatch(f0, f1, f2, f3)  # type: ignore[arg-type]

    def match(
        self,
        f0: Callable[[T0], R],
        f1: Callable[[T1], R],
        f2: Callable[[T2], R],
        f3: Callable[[T3], R],
    ) -> R:
        return self._dispatch(f0, f1, f2, f3)  # type: ignore[arg-type]


class Any5(_AnyBase, Generic[T0, T1, T2, T3, T4]):
    """Tagged union over five distinct types."""

    __slots__ = ()
    _arity = 5

    is_first = _is_slot(0)
    is_second = _is_slot(1)
    is_third = _is_slot(2)
    is_fourth = _is_slot(3)
    is_fifth = _is_slot(4)

    as_first = _as_slot(0)
    as_second = _as_slot(1)
    as_third = _as_slot(2)
    as_fourth = _as_slot(3)
    as_fifth = _as_slot(4)

    @classmethod
    def first(cls, value: T0) -> Any5[T0, T1, T2, T3, T4]:
        return cls._create(0, value)  # type: ignore[return-value]

    @classmethod
    def second(cls, value: T1) -> Any5[T0, T1, T2, T3, T4]:
        return cls._create(1, value)  # type: ignore[return-value]

    @classmethod
    def third(cls, value: T2) -> Any5[T0, T1, T2, T3, T4]:
        return cls._create(2, value)  # type: ignore[return-value]

    @classmethod
    def fourth(cls, value: T3) -> Any5[T0, T1, T2, T3, T4]:
        return cls._create(3, value)  # type: ignore[return-value]

    @classmethod
    def fifth(cls, value: T4) -> Any5[T0, T1, T2, T3, T4]:
        return cls._create(4, value)  # type: ignore[return-value]

    def switch(
        self,
        f0: Callable[[T0], object],
        f1: Callable[[T1], object],
        f2: Callable[[T2], object],
        f3: Callable[[T3], object],
        f4: Callable[[T4], object],
    ) -> None:
        self._dispatch(f0, f1, f2, f3, f4)  # type: ignore[arg-type]

    def match(
        self,
        f0: Callable[[T0], R],
        f1: Callable[[T1], R],
        f2: Callable[[T2], R],
        f3: Callable[[T3], R],
        f4: Callable[[T4], R],
    ) -> R:
        return self._dispatch(f0, f1, f2, f3, f4)  # type: ignore[arg-type]


class Any6(_AnyBase, Generic[T0, T1, T2, T3, T4, T5]):
    """Tagged union over six distinct types."""

    __slots__ = ()
    _arity = 6

    is_first = _is_slot(0)
    is_second = _is_slot(1)
    is_third = _is_slot(2)
    is_fourth = _is_slot(3)
    is_fifth = _is_slot(4)
    is_sixth = _is_slot(5)

    as_first = _as_slot(0)
    as_second = _as_slot(1)
    as_third = _as_slot(2)
    as_fourth = _as_slot(3)
    as_fifth = _as_slot(4)
    as_sixth = _as_slot(5)

    @classmethod
    def first(cls, value: T0) -> Any6[T0, T1, T2, T3, T4, T5]:
        return cls._create(0, value)  # type: ignore[return-value]

    @classmethod
    def second(cls, value: T1) -> Any6[T0, T1, T2, T3, T4, T5]:
        return cls._create(1, value)  # type: ignore[return-value]

    @classmethod
    def third(cls, value: T2) -> Any6[T0, T1, T2, T3, T4, T5]:
        return cls._create(2, value)  # type: ignore[return-value]

    @classmethod
    def fourth(cls, value: T3) -> Any6[T0, T1, T2, T3, T4, T5]:
        return cls._create(3, value)  # type: ignore[return-value]

    @classmethod
    def fifth(cls, value: T4) -> Any6[T0, T1, T2, T3, T4, T5]:
        return cls._create(4, value)  # type: ignore[return-value]

    @classmethod
    def sixth(cls, value: T5) -> Any6[T0, T1, T2, T3, T4, T5]:
        return cls._create(5, value)  # type: ignore[return-value]

    def switch(
        self,
        f0: Callable[[T0], object],
        f1: Callable[[T1], object],
        f2: Callable[[T2], object],
        f3: Callable[[T3], object],
        f4: Callable[[T4], object],
        f5: Callable[[T5], object],
    ) -> None:
        self._dispatch(f0, f1, f2, f3, f4, f5)  # type: ignore[arg-type]

    def match(
        self,
        f0: Callable[[T0], R],
        f1: Callable[[T1], R],
        f2: Callable[[T2], R],
        f3: Callable[[T3], R],
        f4: Callable[[T4], R],
        f5: Callable[[T5], R],
    ) -> R:
        return self._dispatch(f0, f1, f2, f3, f4, f5)  # type: ignore[arg-type]


class Any7(_AnyBase, Generic[T0, T1, T2, T3, T4, T5, T6]):
    """Tagged union over seven distinct types."""

    __slots__ = ()
    _arity = 7

    is_first = _is_slot(0)
    is_second = _is_slot(1)
    is_third = _is_slot(2)
    is_fourth = _is_slot(3)
    is_fifth = _is_slot(4)
    is_sixth = _is_slot(5)
    is_seventh = _is_slot(6)

    as_first = _as_slot(0)
    as_second = _as_slot(1)
    as_third = _as_slot(2)
    as_fourth = _as_slot(3)
    as_fifth = _as_slot(4)
    as_sixth = _as_slot(5)
    as_seventh = _as_slot(6)

    @classmethod
    def first(cls, value: T0) -> Any7[T0, T1, T2, T3, T4, T5, T6]:
        return cls._create(0, value)  # type: ignore[return-value]

    @classmethod
    def second(cls, value: T1) -> Any7[T0, T1, T2, T3, T4, T5, T6]:
        return cls._create(1, value)  # type: ignore[return-value]

    @classmethod
    def third(cls, value: T2) -> Any7[T0, T1, T2, T3, T4, T5, T6]:
        return cls._create(2, value)  # type: ignore[return-value]

    @classmethod
    def fourth(cls, value: T3) -> Any7[T0, T1, T2, T3, T4, T5, T6]:
        return cls._create(3, value)  # type: ignore[return-value]

    @classmethod
    def fifth(cls, value: T4) -> Any7[T0, T1, T2, T3, T4, T5, T6]:
        return cls._create(4, value)  # type: ignore[return-value]

    @classmethod
    def sixth(cls, value: T5) -> Any7[T0, T1, T2, T3, T4, T5, T6]:
        return cls._create(5, value)  # type: ignore[return-value]

    @classmethod
    def seventh(cls, value: T6) -> Any7[T0, T1, T2, T3, T4, T5, T6]:
        return cls._create(6, value)  # type: ignore[return-value]

    def switch(
        self,
        f0: Callable[[T0], object],
        f1: Callable[[T1], object],
        f2: Callable[[T2], object],
        f3: Callable[[T3], object],
        f4: Callable[[T4], object],
        f5: Callable[[T5], object],
        f6: Callable[[T6], object],
    ) -> None:
        self._dispatch(f0, f1, f2, f3, f4, f5, f6)  # type: ignore[arg-type]

    def match(
        self,
        f0: Callable[[T0], R],
        f1: Callable[[T1], R],
        f2: Callable[[T2], R],
        f3: Callable[[T3], R],
        f4: Callable[[T4], R],
        f5: Callable[[T5], R],
        f6: Callable[[T6], R],
    ) -> R:
        return self._dispatch(f0, f1, f2, f3, f4, f5, f6)  # type: ignore[arg-type]


class Any8(_AnyBase, Generic[T0, T1, T2, T3, T4, T5, T6, T7]):
    """Tagged union over eight distinct types."""

    __slots__ = ()
    _arity = 8

    is_first = _is_slot(0)
    is_second = _is_slot(1)
    is_third = _is_slot(2)
    is_fourth = _is_slot(3)
    is_fifth = _is_slot(4)
    is_sixth = _is_slot(5)
    is_seventh = _is_slot(6)
    is_eighth = _is_slot(7)

    as_first = _as_slot(0)
    as_second = _as_slot(1)
    as_third = _as_slot(2)
    as_fourth = _as_slot(3)
    as_fifth = _as_slot(4)
    as_sixth = _as_slot(5)
    as_seventh = _as_slot(6)
    as_eighth = _as_slot(7)

    @classmethod
    def first(cls, value: T0) -> Any8[T0, T1, T2, T3, T4, T5, T6, T7]:
        return cls._create(0, value)  # type: ignore[return-value]

    @classmethod
    def second(cls, value: T1) -> Any8[T0, T1, T2, T3, T4, T5, T6, T7]:
        return cls._create(1, value)  # type: ignore[return-value]

    @classmethod
    def third(cls, value: T2) -> Any8[T0, T1, T2, T3, T4, T5, T6, T7]:
        return cls._create(2, value)  # type: ignore[return-value]

    @classmethod
    def fourth(cls, value: T3) -> Any8[T0, T1, T2, T3, T4, T5, T6, T7]:
        return cls._create(3, value)  # type: ignore[return-value]

    @classmethod
    def fifth(cls, value: T4) -> Any8[T0, T1, T2, T3, T4, T5, T6, T7]:
        return cls._create(4, value)  # type: ignore[return-value]

    @classmethod
    def sixth(cls, value: T5) -> Any8[T0, T1, T2, T3, T4, T5, T6, T7]:
        return cls._create(5, value)  # type: ignore[return-value]

    @classmethod
    def seventh(cls, value: T6) -> Any8[T0, T1, T2, T3, T4, T5, T6, T7]:
        return cls._create(6, value)  # type: ignore[return-value]

    @classmethod
    def eighth(cls, value: T7) -> Any8[T0, T1, T2, T3, T4, T5, T6, T7]:
        return cls._create(7, value)  # type: ignore[return-value]

    def switch(
        self,
        f0: Callable[[T0], object],
        f1: Callable[[T1], object],
        f2: Callable[[T2], object],
        f3: Callable[[T3], object],
        f4: Callable[[T4], object],
        f5: Callable[[T5], object],
        f6: Callable[[T6], object],
        f7: Callable[[T7], object],
    ) -> None:
        self._dispatch(f0, f1, f2, f3, f4, f5, f6, f7)  # type: ignore[arg-type]

    def match(
        self,
        f0: Callable[[T0], R],
        f1: Callable[[T1], R],
        f2: Callable[[T2], R],
        f3: Callable[[T3], R],
        f4: Callable[[T4], R],
        f5: Callable[[T5], R],
        f6: Callable[[T6], R],
        f7: Callable[[T7], R],
    ) -> R:
        return self._dispatch(f0, f1, f2, f3, f4, f5, f6, f7)  # type: ignore[arg-type]
