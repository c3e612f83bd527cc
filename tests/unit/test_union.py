"""Tests for the Any2 .. Any8 tagged unions."""

from __future__ import annotations

import pytest

from railkit import Any2, Any3, Any4, Any7, Any8, NoValueError


class TestConstructionFromValue:
    def test_second_member_selected_by_type(self):
        """
        GIVEN the union Any2[int, str]
        WHEN it is built from "x"
        THEN the second member is active and the first accessor raises
        """
        union = Any2[int, str]("x")
        assert union.index == 1
        assert union.is_second
        assert not union.is_first
        assert union.as_second == "x"
        with pytest.raises(NoValueError, match="No value"):
            union.as_first

    def test_exact_type_wins_over_isinstance(self):
        # bool is an int subclass; the exact match must be preferred
        assert Any2[int, bool](True).index == 1
        assert Any2[int, bool](3).index == 0

    def test_isinstance_fallback(self):
        class Base:
            pass

        class Derived(Base):
            pass

        assert Any2[str, Base](Derived()).index == 1

    def test_unknown_type_is_rejected(self):
        with pytest.raises(TypeError):
            Any2[int, str](b"bytes")

    def test_members_must_be_declared(self):
        with pytest.raises(TypeError):
            Any2("x")

    def test_arity_is_checked(self):
        with pytest.raises(TypeError):
            Any3[int, str]

    def test_members_must_be_distinct(self):
        with pytest.raises(TypeError):
            Any2[int, int]

    def test_specializations_are_cached(self):
        assert Any2[int, str] is Any2[int, str]


class TestConstructionByTag:
    def test_tag_factories(self):
        assert Any3.first(1).index == 0
        assert Any3.third(b"").index == 2
        assert Any8.eighth("last").as_eighth == "last"

    def test_same_type_in_different_slots(self):
        union = Any4.fourth(1)
        assert union.is_fourth
        with pytest.raises(NoValueError):
            union.as_first


class TestDispatch:
    def test_match_returns_handler_result(self):
        union = Any2[int, str]("x")
        assert union.match(lambda n: n * 2, lambda s: s.upper()) == "X"

    def test_switch_runs_only_active_handler(self):
        seen = []
        Any3.second("b").switch(
            lambda v: seen.append(("first", v)),
            lambda v: seen.append(("second", v)),
            lambda v: seen.append(("third", v)),
        )
        assert seen == [("second", "b")]

    def test_seven_way_match(self):
        union = Any7.fifth(5.0)
        handlers = [lambda v, i=i: (i, v) for i in range(7)]
        assert union.match(*handlers) == (4, 5.0)


class TestEquality:
    def test_same_index_same_object(self):
        value = ["shared"]
        assert Any2.first(value) == Any2.first(value)

    def test_identity_not_structural(self):
        assert Any2.first(["a"]) != Any2.first(["a"])

    def test_different_index(self):
        value = "x"
        assert Any2.first(value) != Any2.second(value)

    def test_is_immutable(self):
        union = Any2.first(1)
        with pytest.raises(AttributeError):
            union._value = 2

    def test_repr(self):
        assert repr(Any2.second("x")) == "Any2.second('x')"
