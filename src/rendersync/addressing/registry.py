"""Named scope registry.

A model declares its sync scopes once, with their parameter names in order:

    user_scopes = NamedScopeRegistry("user")
    user_scopes.define("cool")
    user_scopes.define("in_group", params=("group",),
                       predicate=lambda user, group: user.group_id == group.id)

Invoking a scope captures its arguments as an ordered ``NamedScope``:

    user_scopes.in_group(group)   # NamedScope("in_group", (("group", group),))

The optional predicate answers whether a record belongs to a scope, which
decides the scoped channels a change is published on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from rendersync.addressing.scopes import NamedScope
from rendersync.core.exceptions import ScopeArgumentError, UnknownScopeError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class ScopeDefinition:
    name: str
    params: tuple[str, ...] = ()
    predicate: Callable[..., bool] | None = None

    def bind(self, *args: Any, **kwargs: Any) -> NamedScope:
        """Bind arguments to the declared parameters, in declared order."""
        if len(args) > len(self.params):
            raise ScopeArgumentError(
                f"Scope {self.name!r} takes {len(self.params)} argument(s), got {len(args)}.",
                detail={"scope": self.name, "params": list(self.params)},
            )

        values = dict(zip(self.params, args, strict=False))
        for key, value in kwargs.items():
            if key not in self.params:
                raise ScopeArgumentError(
                    f"Scope {self.name!r} has no parameter {key!r}.",
                    detail={"scope": self.name, "params": list(self.params)},
                )
            if key in values:
                raise ScopeArgumentError(
                    f"Scope {self.name!r} got multiple values for {key!r}.",
                    detail={"scope": self.name},
                )
            values[key] = value

        missing = [p for p in self.params if p not in values]
        if missing:
            raise ScopeArgumentError(
                f"Scope {self.name!r} is missing argument(s): {', '.join(missing)}.",
                detail={"scope": self.name, "missing": missing},
            )

        return NamedScope(self.name, tuple((p, values[p]) for p in self.params))


class NamedScopeRegistry:
    """Named scopes declared for one model type."""

    def __init__(self, model_name: str = "") -> None:
        self._model_name = model_name
        self._definitions: dict[str, ScopeDefinition] = {}

    def define(
        self,
        name: str,
        params: tuple[str, ...] | list[str] = (),
        predicate: Callable[..., bool] | None = None,
    ) -> ScopeDefinition:
        """Declare a scope. Names must stay reachable as ``registry.<name>(...)``."""
        if not name or name.startswith("_") or hasattr(type(self), name):
            msg = f"{name!r} cannot be used as a scope name"
            raise ValueError(msg)
        definition = ScopeDefinition(name=name, params=tuple(params), predicate=predicate)
        self._definitions[name] = definition
        logger.debug(
            "sync_scope_defined",
            model=self._model_name,
            scope=name,
            params=list(definition.params),
        )
        return definition

    def get(self, name: str) -> ScopeDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownScopeError(
                f"No sync scope named {name!r}.",
                detail={"model": self._model_name, "scope": name},
            ) from None

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> NamedScope:
        return self.get(name).bind(*args, **kwargs)

    def contains(self, scope: NamedScope, record: Any) -> bool:
        """Whether ``record`` falls within ``scope``.

        Scopes declared without a predicate contain every record.
        """
        definition = self.get(scope.name)
        if definition.predicate is None:
            return True
        return bool(definition.predicate(record, **scope.param_dict))

    def names(self) -> list[str]:
        return list(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __getattr__(self, name: str) -> Callable[..., NamedScope]:
        definition = None if name.startswith("_") else self._definitions.get(name)
        if definition is None:
            raise AttributeError(name)
        return definition.bind
