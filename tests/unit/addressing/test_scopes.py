"""Tests for ScopeResolver and scope parameter rendering."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum
from uuid import UUID

import pytest

from rendersync.addressing.entities import EntityRef
from rendersync.addressing.scopes import (
    Literal,
    NamedScope,
    ParentEntity,
    ScopeResolver,
    coerce_qualifier,
    to_path_segment,
)
from rendersync.core.exceptions import UnaddressableParentError, UnknownScopeParamError


class Locale(StrEnum):
    EN = "en"


PROJECT = EntityRef(type_name="project", plural_type_name="projects", id=1)


@pytest.fixture
def resolver() -> ScopeResolver:
    return ScopeResolver()


def test_empty_input(resolver: ScopeResolver) -> None:
    assert resolver.resolve([]) == []


def test_literal(resolver: ScopeResolver) -> None:
    assert resolver.resolve([Literal("admin")]) == ["admin"]


def test_parent_entity(resolver: ScopeResolver) -> None:
    assert resolver.resolve([ParentEntity(PROJECT)]) == ["projects", "1"]


def test_unpersisted_parent_entity_raises(resolver: ScopeResolver) -> None:
    unsaved = EntityRef(type_name="project", plural_type_name="projects")
    with pytest.raises(UnaddressableParentError) as exc_info:
        resolver.resolve([ParentEntity(unsaved)])

    assert exc_info.value.detail == {"type_name": "project"}


def test_named_scope_without_params(resolver: ScopeResolver) -> None:
    assert resolver.resolve([NamedScope("cool")]) == ["cool"]


def test_named_scope_params_keep_declared_order(resolver: ScopeResolver) -> None:
    scope = NamedScope("with_min_age_in_group", (("age", 15), ("group_id", 1)))
    assert resolver.resolve([scope]) == ["with_min_age_in_group", "age", "15", "group_id", "1"]


def test_qualifiers_concatenate_in_order(resolver: ScopeResolver) -> None:
    qualifiers = [Literal("en"), ParentEntity(PROJECT), NamedScope("cool")]

    assert resolver.resolve(qualifiers) == ["en", "projects", "1", "cool"]
    assert resolver.resolve(reversed(qualifiers)) == ["cool", "projects", "1", "en"]


def test_duplicates_are_kept(resolver: ScopeResolver) -> None:
    assert resolver.resolve([Literal("a"), Literal("a")]) == ["a", "a"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (PROJECT, "1"),
        (42, "42"),
        ("abc", "abc"),
        (True, "true"),
        (Decimal("1.50"), "1.50"),
        (UUID("00000000-0000-0000-0000-000000000001"), "00000000-0000-0000-0000-000000000001"),
        (date(2024, 1, 31), "2024-01-31"),
        (Locale.EN, "en"),
    ],
)
def test_to_path_segment(value: object, expected: str) -> None:
    assert to_path_segment(value) == expected


async def test_to_path_segment_renders_mapped_record_as_id(group) -> None:
    assert to_path_segment(group) == "1"


def test_to_path_segment_unpersisted_entity_raises() -> None:
    with pytest.raises(UnknownScopeParamError):
        to_path_segment(EntityRef(type_name="group", plural_type_name="groups"))


@pytest.mark.parametrize("value", [None, object(), [1, 2]])
def test_to_path_segment_unrenderable_raises(value: object) -> None:
    with pytest.raises(UnknownScopeParamError):
        to_path_segment(value)


def test_coerce_qualifier() -> None:
    assert coerce_qualifier("en") == Literal("en")
    assert coerce_qualifier(Locale.EN) == Literal("en")
    assert coerce_qualifier(PROJECT) == ParentEntity(PROJECT)
    assert coerce_qualifier(NamedScope("cool")) == NamedScope("cool")


def test_coerce_qualifier_rejects_numbers() -> None:
    with pytest.raises(TypeError):
        coerce_qualifier(5)


def test_named_scope_params_from_mapping() -> None:
    scope = NamedScope("by", {"id": 5})

    assert scope.params == (("id", 5),)
    assert ScopeResolver().resolve([scope]) == ["by", "id", "5"]


def test_named_scope_params_from_list_of_pairs() -> None:
    assert NamedScope("s", [["age", 15]]).params == (("age", 15),)


@pytest.mark.parametrize("params", [["ab"], [("age",)], [(1, "x")], [("", 1)]])
def test_named_scope_rejects_malformed_params(params: list) -> None:
    with pytest.raises(TypeError):
        NamedScope("s", params)


def test_empty_string_param_has_no_rendering() -> None:
    with pytest.raises(UnknownScopeParamError):
        to_path_segment("")


def test_empty_literal_is_rejected() -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        Literal("")
