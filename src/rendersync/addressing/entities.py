"""Entity references: the identity of a record as seen by channel addressing.

An entity is anything exposing ``type_name``, ``plural_type_name`` and
``id``. SQLAlchemy mapped instances are adapted through
:meth:`EntityRef.from_model`, which reads the class name, ``__tablename__``
and the primary-key identity (``None`` until the row has been flushed).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import InstanceState

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@runtime_checkable
class EntityProvider(Protocol):
    """Anything that can be addressed as a record."""

    @property
    def type_name(self) -> str: ...

    @property
    def plural_type_name(self) -> str: ...

    @property
    def id(self) -> int | str | None: ...


def underscore(name: str) -> str:
    """``ProjectMember`` -> ``project_member``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def is_mapped_instance(value: object) -> bool:
    """True for instances of SQLAlchemy mapped classes."""
    try:
        state = inspect(value)
    except NoInspectionAvailable:
        return False
    return isinstance(state, InstanceState)


@dataclass(frozen=True, slots=True)
class EntityRef:
    """Immutable reference to a (possibly unpersisted) record."""

    type_name: str
    plural_type_name: str
    id: int | str | None = None

    @property
    def persisted(self) -> bool:
        return self.id is not None

    @classmethod
    def from_model(cls, instance: Any) -> EntityRef:
        """Build a reference from a SQLAlchemy mapped instance."""
        state = inspect(instance)
        mapped_class = state.mapper.class_
        plural = getattr(mapped_class, "__tablename__", None) or state.mapper.local_table.name

        identity = state.identity
        if identity is None:
            record_id = None
        elif len(identity) == 1:
            record_id = identity[0]
        else:
            # Composite keys render the same way Rails' to_param joins them
            record_id = "_".join(str(part) for part in identity)

        return cls(
            type_name=underscore(mapped_class.__name__),
            plural_type_name=plural,
            id=record_id,
        )

    @classmethod
    def coerce(cls, value: Any) -> EntityRef:
        """Return ``value`` as an :class:`EntityRef`.

        Accepts an ``EntityRef``, any :class:`EntityProvider`, or a SQLAlchemy
        mapped instance. Raises ``TypeError`` otherwise.
        """
        if isinstance(value, EntityRef):
            return value
        if is_mapped_instance(value):
            return cls.from_model(value)
        if isinstance(value, EntityProvider):
            return cls(
                type_name=value.type_name,
                plural_type_name=value.plural_type_name,
                id=value.id,
            )
        msg = f"{type(value).__name__!r} cannot be addressed as an entity"
        raise TypeError(msg)


def is_entity(value: object) -> bool:
    """True when ``value`` can be coerced into an :class:`EntityRef`."""
    if isinstance(value, EntityRef):
        return True
    return is_mapped_instance(value) or isinstance(value, EntityProvider)
