"""Resource addresses: canonical paths of records nested inside scopes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

from rendersync.addressing.entities import EntityRef, is_entity
from rendersync.addressing.scopes import (
    Literal,
    NamedScope,
    ParentEntity,
    ScopeQualifier,
    coerce_qualifier,
    resolver,
)
from rendersync.core.exceptions import UnaddressableSubjectError


def join_path(*segments: object) -> str:
    """Join segments into a root-relative path. No segments -> ``/``.

    Each segment is percent-encoded on its own, so a ``/`` inside a segment
    can never read as a boundary between two segments.
    """
    parts = [quote(str(s), safe="") for s in segments]
    return "/" + "/".join(p for p in parts if p)


def normalize_scopes(scopes: Any) -> tuple[ScopeQualifier, ...] | None:
    """``None`` stays ``None``; a scalar becomes a one-element tuple."""
    if scopes is None:
        return None
    if isinstance(scopes, (str, Enum, Literal, ParentEntity, NamedScope)) or is_entity(scopes):
        return (coerce_qualifier(scopes),)
    return tuple(coerce_qualifier(scope) for scope in scopes)


@dataclass(frozen=True, slots=True, init=False)
class ResourceAddress:
    """A record's identity combined with the scopes it is addressed under."""

    subject: EntityRef
    scopes: tuple[ScopeQualifier, ...] | None

    def __init__(self, subject: Any, scopes: Any = None) -> None:
        object.__setattr__(self, "subject", EntityRef.coerce(subject))
        object.__setattr__(self, "scopes", normalize_scopes(scopes))

    @property
    def name(self) -> str:
        return self.subject.type_name

    @property
    def plural_name(self) -> str:
        return self.subject.plural_type_name

    @property
    def id(self) -> int | str | None:
        return self.subject.id

    def scope_segments(self) -> list[str]:
        return resolver.resolve(self.scopes or ())

    def scopes_path(self) -> str:
        return join_path(*self.scope_segments())

    def canonical_segments(self) -> list[str]:
        if self.id is None:
            raise UnaddressableSubjectError(
                f"Unpersisted {self.name} has no canonical path.",
                detail={"type_name": self.name},
            )
        return [*self.scope_segments(), self.plural_name, str(self.id)]

    def new_item_segments(self) -> list[str]:
        return [*self.scope_segments(), self.plural_name, "new"]

    def canonical_path(self) -> str:
        return join_path(*self.canonical_segments())

    def new_item_path(self) -> str:
        return join_path(*self.new_item_segments())

    def with_scopes(self, scopes: Any) -> ResourceAddress:
        """Same subject, addressed under different scopes."""
        return ResourceAddress(self.subject, scopes)
