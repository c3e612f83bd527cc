"""
ErrorMetadata — an insertion-ordered bag of extra details attached to an Error.

Every mutating helper is first-wins: a key that is already present keeps its
value. Metadata is filled in by its single owner before it is attached to an
Error and is treated as read-only afterwards.
"""

from __future__ import annotations

import traceback
from collections.abc import Iterable, Mapping
from typing import Any

STACK_TRACE = "StackTrace"
EXCEPTION = "Exception"
EXCEPTION_TYPE = "Exception.Type"
EXCEPTION_STACK_TRACE = "Exception.StackTrace"
EXCEPTION_MESSAGE = "Exception.Message"


def _current_stack_trace() -> str:
    # Drop the frames belonging to this module.
    return "".join(traceback.format_stack()[:-2])


def _exception_stack_trace(exception: BaseException) -> str:
    if exception.__traceback__ is None:
        return _current_stack_trace()
    return "".join(traceback.format_tb(exception.__traceback__))


class ErrorMetadata(dict[str, Any]):
    """
    Ordered string-keyed mapping with first-wins merge semantics.

        >>> meta = ErrorMetadata("field", "email")
        >>> meta.combine(ErrorMetadata({"field": "name", "max": 3}))
        {'field': 'email', 'max': 3}
    """

    def __init__(
        self,
        source: Mapping[str, Any] | Iterable[tuple[str, Any]] | str | None = None,
        value: Any = None,
    ) -> None:
        if isinstance(source, str):
            super().__init__({source: value})
        elif source is None:
            super().__init__()
        else:
            super().__init__(source)

    # ──────────────────────── Factories ────────────────────────

    @classmethod
    def create_empty(cls) -> ErrorMetadata:
        return cls()

    @classmethod
    def create_with_stack_trace(cls) -> ErrorMetadata:
        return cls(STACK_TRACE, _current_stack_trace())

    @classmethod
    def create_with_exception(cls, exception: BaseException) -> ErrorMetadata:
        return cls(EXCEPTION, exception)

    @classmethod
    def create_with_exception_detailed(cls, exception: BaseException) -> ErrorMetadata:
        return cls().add_exception_detailed(exception)

    # ──────────────────────── First-wins mutators ────────────────────────

    def try_add(self, key: str, value: Any) -> bool:
        """Insert key only if it is absent. Returns True when inserted."""
        if key in self:
            return False
        self[key] = value
        return True

    def add_stack_trace(self) -> ErrorMetadata:
        self.try_add(STACK_TRACE, _current_stack_trace())
        return self

    def add_exception(self, exception: BaseException) -> ErrorMetadata:
        self.try_add(EXCEPTION, exception)
        return self

    def add_exception_detailed(self, exception: BaseException) -> ErrorMetadata:
        self.try_add(EXCEPTION_TYPE, type(exception).__name__)
        self.try_add(EXCEPTION_STACK_TRACE, _exception_stack_trace(exception))
        self.try_add(EXCEPTION_MESSAGE, str(exception))
        return self

    def combine(self, other: Mapping[str, Any] | None) -> ErrorMetadata:
        """
        Merge another mapping into this one, keeping existing values on collision.

        A None argument is tolerated as a no-op.
        """
        if other is None:
            return self
        for key, value in other.items():
            self.try_add(key, value)
        return self

    def __str__(self) -> str:
        return "".join(f"{key}: {value}\n" for key, value in self.items())
