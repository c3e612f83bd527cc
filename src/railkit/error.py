"""
Error — structured description of a single failure on the failure track.

An Error is an immutable value identified by code, description, type and
metadata. Named factories exist for every ErrorType and fill in a default
code and description when they are omitted:

    >>> Error.validation("User.Email", "Email is malformed").type
    <ErrorType.VALIDATION: 2>
    >>> Error.conflict().code
    'Conflict'

ErrorType is an IntEnum so its ordinal doubles as the compact numeric_type
used by serializers and transport mappers living outside this package.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum, unique
from typing import TYPE_CHECKING, Any, TypeVar

from railkit.config import get_settings
from railkit.exceptions import DomainError
from railkit.metadata import ErrorMetadata

if TYPE_CHECKING:
    from railkit.result import Result, UnitResult

T = TypeVar("T")


@unique
class ErrorType(IntEnum):
    """
    Failure taxonomy. Ordinals are stable and part of the public contract.
    """

    FAILURE = 0
    """A general, expected failure."""

    UNEXPECTED = 1
    """Something that should not have happened (usually wraps an exception)."""

    VALIDATION = 2
    """Invalid input: missing fields, wrong format, broken invariant."""

    CONFLICT = 3
    """State conflict, duplicate resource, concurrent modification."""

    NOT_FOUND = 4
    """The requested resource does not exist."""

    UNAUTHORIZED = 5
    """Caller is not authenticated."""

    FORBIDDEN = 6
    """Caller is authenticated but not allowed."""

    UNKNOWN = 7
    """Unclassified failure."""

    @property
    def display_name(self) -> str:
        """PascalCase name, used as the default Error code: NOT_FOUND → NotFound."""
        return "".join(part.capitalize() for part in self.name.split("_"))


_DEFAULT_DESCRIPTIONS: dict[ErrorType, str] = {
    ErrorType.FAILURE: "A failure has occurred.",
    ErrorType.UNEXPECTED: "An unexpected error has occurred.",
    ErrorType.VALIDATION: "A validation error has occurred.",
    ErrorType.CONFLICT: "A conflict error has occurred.",
    ErrorType.NOT_FOUND: "A 'Not Found' error has occurred.",
    ErrorType.UNAUTHORIZED: "An 'Unauthorized' error has occurred.",
    ErrorType.FORBIDDEN: "A 'Forbidden' error has occurred.",
    ErrorType.UNKNOWN: "An unknown error has occurred.",
}


@dataclass(frozen=True, slots=True, eq=False)
class Error:
    """
    Immutable failure descriptor.

    Two Errors are equal iff code, description, type and metadata contents are
    equal; missing metadata compares equal to empty metadata.
    """

    code: str
    description: str
    type: ErrorType = ErrorType.FAILURE
    metadata: ErrorMetadata | None = field(default=None, repr=False)

    @property
    def numeric_type(self) -> int:
        """Ordinal of the ErrorType, for fast dispatch and compact serialization."""
        return int(self.type)

    # ──────────────────────── Named factories ────────────────────────

    @classmethod
    def custom(
        cls,
        error_type: ErrorType,
        code: str,
        description: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        """Build an Error of any type with an explicit code and description."""
        return cls(
            code=code,
            description=description,
            type=error_type,
            metadata=_build_metadata(metadata),
        )

    @classmethod
    def failure(
        cls,
        code: str | None = None,
        description: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        return cls._of_type(ErrorType.FAILURE, code, description, metadata)

    @classmethod
    def unexpected(
        cls,
        code: str | None = None,
        description: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        return cls._of_type(ErrorType.UNEXPECTED, code, description, metadata)

    @classmethod
    def validation(
        cls,
        code: str | None = None,
        description: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        return cls._of_type(ErrorType.VALIDATION, code, description, metadata)

    @classmethod
    def conflict(
        cls,
        code: str | None = None,
        description: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        return cls._of_type(ErrorType.CONFLICT, code, description, metadata)

    @classmethod
    def not_found(
        cls,
        code: str | None = None,
        description: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        return cls._of_type(ErrorType.NOT_FOUND, code, description, metadata)

    @classmethod
    def unauthorized(
        cls,
        code: str | None = None,
        description: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        return cls._of_type(ErrorType.UNAUTHORIZED, code, description, metadata)

    @classmethod
    def forbidden(
        cls,
        code: str | None = None,
        description: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        return cls._of_type(ErrorType.FORBIDDEN, code, description, metadata)

    @classmethod
    def unknown(
        cls,
        code: str | None = None,
        description: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Error:
        return cls._of_type(ErrorType.UNKNOWN, code, description, metadata)

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        code: str | None = None,
        error_type: ErrorType | None = None,
    ) -> Error:
        """
        Describe a caught exception as an Error.

        The type is inferred from the exception class unless given:
          - ValueError, TypeError → VALIDATION
          - KeyError, LookupError → NOT_FOUND
          - PermissionError → FORBIDDEN
          - Everything else → UNEXPECTED

        Exception type, message and traceback are stored in the metadata.
        """
        resolved = error_type if error_type is not None else map_exception_to_type(exception)
        metadata = ErrorMetadata.create_with_exception_detailed(exception)
        return cls(
            code=code or type(exception).__name__,
            description=str(exception) or _DEFAULT_DESCRIPTIONS[resolved],
            type=resolved,
            metadata=metadata,
        )

    @classmethod
    def _of_type(
        cls,
        error_type: ErrorType,
        code: str | None,
        description: str | None,
        metadata: Mapping[str, Any] | None,
    ) -> Error:
        return cls(
            code=code if code is not None else error_type.display_name,
            description=description if description is not None else _DEFAULT_DESCRIPTIONS[error_type],
            type=error_type,
            metadata=_build_metadata(metadata),
        )

    # ──────────────────────── Collections ────────────────────────

    @staticmethod
    def create_many(*sources: Any) -> tuple[Error, ...]:
        """
        Flatten a mix of sources into an ordered tuple of Errors.

        Accepts Error values, iterables of Errors, and results (a failing
        result contributes its errors, a successful one contributes nothing).
        None sources are skipped.

            Error.create_many(Error.conflict(), [Error.forbidden()], failed_result)
        """
        from railkit.result import Result, UnitResult

        errors: list[Error] = []
        for source in sources:
            match source:
                case None:
                    continue
                case Error():
                    errors.append(source)
                case Result() | UnitResult():
                    errors.extend(source.errors_or_empty)
                case str() | bytes():
                    raise TypeError(f"Cannot build errors from {type(source).__name__}")
                case Iterable():
                    errors.extend(Error.create_many(*source))
                case _:
                    raise TypeError(f"Cannot build errors from {type(source).__name__}")
        return tuple(errors)

    # ──────────────────────── Conversions ────────────────────────

    def to_result(self) -> Result[Any]:
        """Lift this Error into a failing Result[T]."""
        from railkit.result import Result

        return Result.from_error(self)

    def to_unit_result(self) -> UnitResult:
        """Lift this Error into a failing UnitResult."""
        from railkit.result import UnitResult

        return UnitResult.from_error(self)

    def to_exception(self) -> DomainError:
        """Wrap this Error in a DomainError, ready to be raised."""
        return DomainError(self)

    def with_metadata(self, metadata: Mapping[str, Any] | None) -> Error:
        """Return a copy whose metadata is combined with `metadata` (existing keys win)."""
        merged = ErrorMetadata(self.metadata or {}).combine(metadata)
        return Error(
            code=self.code,
            description=self.description,
            type=self.type,
            metadata=merged or None,
        )

    # ──────────────────────── Dunder methods ────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Error):
            return NotImplemented
        return (
            self.code == other.code
            and self.description == other.description
            and self.type == other.type
            and dict(self.metadata or {}) == dict(other.metadata or {})
        )

    def __hash__(self) -> int:
        return hash((self.code, self.description, self.type))

    def __str__(self) -> str:
        return f"{self.type.display_name}({self.code}): {self.description}"


def map_exception_to_type(exception: BaseException) -> ErrorType:
    """Map a Python exception to the closest ErrorType."""
    match exception:
        case ValueError() | TypeError():
            return ErrorType.VALIDATION
        case PermissionError():
            return ErrorType.FORBIDDEN
        case LookupError():
            return ErrorType.NOT_FOUND
        case _:
            return ErrorType.UNEXPECTED


def _build_metadata(metadata: Mapping[str, Any] | None) -> ErrorMetadata | None:
    """Copy caller metadata and, when enabled, attach the creation stack trace."""
    if not get_settings().capture_stack_traces:
        return ErrorMetadata(metadata) if metadata is not None else None
    return ErrorMetadata(metadata).add_stack_trace()
