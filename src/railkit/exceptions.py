"""
Programmer-error exceptions.

Domain failures never raise: they travel as Error values inside a Result.
The exceptions below signal misuse at the call site (building a Result from
zero errors, reading the wrong union slot) or an explicit hand-off from the
railway back into exception-based code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from railkit.error import Error


class RailkitError(Exception):
    """Base class for every exception raised by railkit itself."""


class InvalidResultError(RailkitError, ValueError):
    """A Result was constructed without a success value or with zero errors."""


class NoValueError(RailkitError, LookupError):
    """An accessor was used on a slot that holds no value."""

    def __init__(self, message: str = "No value") -> None:
        super().__init__(message)


class DomainError(RailkitError):
    """
    Carries an Error across an exception boundary.

    Raised by Result.unwrap() and Error.to_exception() when calling code
    needs to leave the railway.
    """

    def __init__(self, error: Error) -> None:
        super().__init__(error.description)
        self.error = error
