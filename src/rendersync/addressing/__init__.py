"""Scoped resource addressing."""

from rendersync.addressing.entities import EntityProvider, EntityRef
from rendersync.addressing.registry import NamedScopeRegistry, ScopeDefinition
from rendersync.addressing.resource import ResourceAddress
from rendersync.addressing.scopes import (
    Literal,
    NamedScope,
    ParentEntity,
    ScopeQualifier,
    ScopeResolver,
)

__all__ = [
    "EntityProvider",
    "EntityRef",
    "Literal",
    "NamedScope",
    "NamedScopeRegistry",
    "ParentEntity",
    "ResourceAddress",
    "ScopeDefinition",
    "ScopeQualifier",
    "ScopeResolver",
]
