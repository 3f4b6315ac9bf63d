"""Scope qualifiers and their resolution into path segments.

A scope qualifier is one element of an addressing chain:

    Literal("en")                     -> en
    ParentEntity(project #1)          -> projects/1
    NamedScope("in_group", group=#1)  -> in_group/group/1

Resolution is purely compositional: each qualifier contributes its own
segments and the results are concatenated in input order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

from rendersync.addressing.entities import EntityRef, is_entity
from rendersync.core.exceptions import UnaddressableParentError, UnknownScopeParamError

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class Literal:
    """A bare path segment, e.g. a locale or a role."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Literal scope name must not be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ParentEntity:
    """A persisted record nesting the subject, e.g. ``/projects/1``."""

    entity: EntityRef


@dataclass(frozen=True, slots=True)
class NamedScope:
    """A named, parameterized query filter with its captured arguments.

    ``params`` keeps the scope's declared parameter order. It accepts an
    ordered mapping or an iterable of ``(name, value)`` pairs and is stored
    as a tuple of pairs.
    """

    name: str
    params: tuple[tuple[str, Any], ...] = field(default=())

    def __post_init__(self) -> None:
        params = self.params.items() if isinstance(self.params, Mapping) else self.params
        pairs = []
        for pair in params:
            malformed = isinstance(pair, str) or len(pair) != 2
            if malformed or not isinstance(pair[0], str) or not pair[0]:
                msg = f"Scope {self.name!r} params must be (name, value) pairs, got {pair!r}"
                raise TypeError(msg)
            pairs.append((pair[0], pair[1]))
        object.__setattr__(self, "params", tuple(pairs))

    @property
    def param_dict(self) -> dict[str, Any]:
        return dict(self.params)


ScopeQualifier = Literal | ParentEntity | NamedScope


def coerce_qualifier(value: Any) -> ScopeQualifier:
    """Turn a raw scope value into a qualifier.

    Strings become literals, records become parents; qualifiers pass through.
    """
    if isinstance(value, (Literal, ParentEntity, NamedScope)):
        return value
    if isinstance(value, str):
        return Literal(value)
    if isinstance(value, Enum) and isinstance(value.value, str):
        return Literal(value.value)
    if is_entity(value):
        return ParentEntity(EntityRef.coerce(value))
    msg = f"{type(value).__name__!r} is not a valid scope"
    raise TypeError(msg)


def to_path_segment(value: Any) -> str:
    """Render a named-scope parameter value as a single path segment."""
    if is_entity(value):
        entity = EntityRef.coerce(value)
        if entity.id is None:
            raise UnknownScopeParamError(
                f"Unpersisted {entity.type_name} cannot be used as a scope parameter.",
                detail={"type_name": entity.type_name},
            )
        return str(entity.id)
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str) and not value:
        raise UnknownScopeParamError(
            "Empty string has no path rendering.", detail={"value_type": "str"}
        )
    if isinstance(value, (str, int, float, Decimal, UUID)):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    raise UnknownScopeParamError(
        f"{type(value).__name__!r} value has no path rendering.",
        detail={"value_type": type(value).__name__},
    )


class ScopeResolver:
    """Resolves scope qualifiers into an ordered list of path segments."""

    def resolve(self, qualifiers: Iterable[ScopeQualifier]) -> list[str]:
        segments: list[str] = []
        for qualifier in qualifiers:
            segments.extend(self.segments_for(qualifier))
        return segments

    def segments_for(self, qualifier: ScopeQualifier) -> list[str]:
        match qualifier:
            case Literal(name=name):
                return [name]
            case ParentEntity(entity=entity):
                if entity.id is None:
                    raise UnaddressableParentError(
                        f"Parent {entity.type_name} has no id.",
                        detail={"type_name": entity.type_name},
                    )
                return [entity.plural_type_name, str(entity.id)]
            case NamedScope(name=name, params=params):
                segments = [name]
                for param_name, value in params:
                    segments.extend((param_name, to_path_segment(value)))
                return segments
        msg = f"Unsupported scope qualifier: {qualifier!r}"
        raise TypeError(msg)


resolver = ScopeResolver()
