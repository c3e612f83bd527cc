"""Tests for ErrorMetadata."""

from __future__ import annotations

from railkit import ErrorMetadata
from railkit.metadata import (
    EXCEPTION,
    EXCEPTION_MESSAGE,
    EXCEPTION_STACK_TRACE,
    EXCEPTION_TYPE,
    STACK_TRACE,
)


class TestConstruction:
    def test_from_mapping(self):
        assert ErrorMetadata({"a": 1, "b": 2}) == {"a": 1, "b": 2}

    def test_from_pairs(self):
        assert list(ErrorMetadata([("b", 2), ("a", 1)])) == ["b", "a"]

    def test_from_single_key_value(self):
        assert ErrorMetadata("field", "email") == {"field": "email"}

    def test_create_empty(self):
        assert ErrorMetadata.create_empty() == {}


class TestFirstWins:
    def test_try_add_keeps_existing_value(self):
        meta = ErrorMetadata("a", 1)
        assert meta.try_add("a", 2) is False
        assert meta.try_add("b", 3) is True
        assert meta == {"a": 1, "b": 3}

    def test_combine_keeps_existing_values(self):
        meta = ErrorMetadata({"field": "email"})
        combined = meta.combine({"field": "name", "max": 3})
        assert combined is meta
        assert meta == {"field": "email", "max": 3}

    def test_combine_none_is_noop(self):
        meta = ErrorMetadata("a", 1)
        assert meta.combine(None) == {"a": 1}

    def test_combine_is_idempotent_per_key(self):
        meta = ErrorMetadata("a", 1)
        meta.combine({"b": 2}).combine({"b": 5})
        assert meta == {"a": 1, "b": 2}


class TestStandardKeys:
    def test_stack_trace(self):
        meta = ErrorMetadata.create_with_stack_trace()
        assert "test_metadata.py" in meta[STACK_TRACE]

    def test_exception(self):
        exception = ValueError("bad")
        assert ErrorMetadata.create_with_exception(exception)[EXCEPTION] is exception

    def test_exception_detailed(self):
        try:
            raise KeyError("missing")
        except KeyError as e:
            meta = ErrorMetadata.create_with_exception_detailed(e)

        assert meta[EXCEPTION_TYPE] == "KeyError"
        assert meta[EXCEPTION_MESSAGE] == "'missing'"
        assert "test_metadata.py" in meta[EXCEPTION_STACK_TRACE]

    def test_add_helpers_do_not_overwrite(self):
        meta = ErrorMetadata(EXCEPTION_TYPE, "Custom")
        meta.add_exception_detailed(RuntimeError("x"))
        assert meta[EXCEPTION_TYPE] == "Custom"
        assert meta[EXCEPTION_MESSAGE] == "x"


def test_str_renders_one_line_per_entry():
    assert str(ErrorMetadata({"a": 1, "b": "two"})) == "a: 1\nb: two\n"
