"""Typed sync events published on partial channels.

Every event model has an ``event_type`` literal used as the wire type and
serialises to JSON for the SSE ``data:`` line.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class UpdateEvent(BaseModel):
    """A rendered partial changed; clients replace it in place."""

    event_type: Literal["update"] = "update"
    html: str


class DestroyEvent(BaseModel):
    """The record was destroyed; clients remove the partial."""

    event_type: Literal["destroy"] = "destroy"


class NewEvent(BaseModel):
    """A record was created; clients append the partial to the collection."""

    event_type: Literal["new"] = "new"
    html: str
    resource_id: int | str


AnySyncEvent = UpdateEvent | DestroyEvent | NewEvent
