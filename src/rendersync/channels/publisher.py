"""Event publisher: writes sync events to Redis pub/sub and the replay buffer.

Application code calls ``sync_update`` / ``sync_destroy`` / ``sync_new`` after
a record changes. The stream in ``rendersync.channels.stream`` subscribes and
forwards the events to connected clients.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog

from rendersync.addressing.resource import ResourceAddress
from rendersync.addressing.scopes import NamedScope
from rendersync.channels.events import DestroyEvent, NewEvent, UpdateEvent
from rendersync.channels.partials import PartialChannels
from rendersync.core.config import settings as default_settings
from rendersync.core.exceptions import ConfigurationError, UnaddressableSubjectError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from redis.asyncio import Redis

    from rendersync.addressing.registry import NamedScopeRegistry
    from rendersync.channels.events import AnySyncEvent
    from rendersync.channels.signer import ChannelSigner, SignedChannel
    from rendersync.core.config import Settings

logger = structlog.get_logger()

# Monotonic counter appended to timestamp to guarantee ordering within a ms.
_sequence: int = 0


def _generate_event_id() -> str:
    """Generate a monotonically increasing event ID.

    Format: ``<unix_millis>-<seq>``, compatible with the ``Last-Event-ID`` header.
    """
    global _sequence  # noqa: PLW0603
    now_ms = int(time.time() * 1000)
    _sequence += 1
    return f"{now_ms}-{_sequence}"


def event_id_key(event_id: str) -> tuple[int, int] | None:
    """Sort key of a ``<unix_millis>-<seq>`` event ID; ``None`` if malformed."""
    millis, sep, seq = event_id.partition("-")
    if not sep or not millis.isdigit() or not seq.isdigit():
        return None
    return int(millis), int(seq)


def parse_wire(wire: str) -> tuple[str, str, str] | None:
    """Split ``<event_id>\\n<event_type>\\n<json>``; ``None`` if malformed."""
    parts = wire.split("\n", 2)
    if len(parts) != 3:
        return None
    event_id, event_type, payload = parts
    return event_id, event_type, payload


class EventPublisher:
    """Publishes sync events to Redis pub/sub with replay buffer support."""

    def __init__(
        self,
        redis: Redis,
        signer: ChannelSigner | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or default_settings
        self._redis = redis
        self._signer = signer
        self._replay_window = settings.replay_window_seconds
        self._enabled = settings.enabled

    async def publish(self, channel: SignedChannel, event: AnySyncEvent) -> str | None:
        """Publish an event to the given channel.

        1. Serialises the event with an ``event_id``.
        2. Stores it in the replay sorted set (score = timestamp).
        3. Publishes to Redis pub/sub so live subscribers receive it.

        Returns the generated ``event_id``, or ``None`` when publishing is disabled.
        """
        if not self._enabled:
            logger.debug("sync_publish_skipped", channel=channel.name, event_type=event.event_type)
            return None

        event_id = _generate_event_id()
        payload = event.model_dump_json()

        # The wire format stored in both replay and pub/sub is:
        #   <event_id>\n<event_type>\n<json_payload>
        wire = f"{event_id}\n{event.event_type}\n{payload}"

        pipe = self._redis.pipeline(transaction=False)

        pipe.zadd(channel.replay_key, {wire: time.time()})

        cutoff = time.time() - self._replay_window
        pipe.zremrangebyscore(channel.replay_key, "-inf", cutoff)

        # Auto-expire the replay key if the channel goes quiet
        pipe.expire(channel.replay_key, self._replay_window * 2)

        pipe.publish(channel.pubsub_key, wire)

        await pipe.execute()

        logger.debug(
            "sync_event_published",
            channel=channel.name,
            event_type=event.event_type,
            event_id=event_id,
        )

        return event_id

    async def get_replay_events(
        self,
        channel: SignedChannel,
        last_event_id: str | None = None,
    ) -> list[tuple[str, str, str]]:
        """Retrieve events from the replay buffer for reconnection.

        If ``last_event_id`` is provided, returns only events *after* that ID,
        even when the event itself has already been trimmed from the buffer.
        Without it, or when it cannot be parsed, returns every event within
        the replay window.

        Returns ``(event_id, event_type, json_payload)`` tuples, oldest first.
        """
        cutoff = time.time() - self._replay_window
        await self._redis.zremrangebyscore(channel.replay_key, "-inf", cutoff)

        raw_entries: list[bytes | str] = await self._redis.zrangebyscore(
            channel.replay_key, "-inf", "+inf"
        )

        after = event_id_key(last_event_id) if last_event_id is not None else None

        events: list[tuple[str, str, str]] = []
        for entry in raw_entries:
            wire = entry.decode() if isinstance(entry, bytes) else entry
            parsed = parse_wire(wire)
            if parsed is None:
                continue

            if after is not None:
                key = event_id_key(parsed[0])
                if key is None or key <= after:
                    continue

            events.append(parsed)

        # Redis orders equal scores lexicographically, not by sequence
        events.sort(key=lambda event: event_id_key(event[0]) or (0, 0))
        return events

    def channels_for(self, address: ResourceAddress, partial: str) -> PartialChannels:
        if self._signer is None:
            raise ConfigurationError("EventPublisher needs a ChannelSigner to address partials.")
        return PartialChannels(address=address, partial=partial, signer=self._signer)

    async def sync_update(self, address: ResourceAddress, partial: str, html: str) -> str | None:
        channel = self.channels_for(address, partial).update_channel
        return await self.publish(channel, UpdateEvent(html=html))

    async def sync_destroy(self, address: ResourceAddress, partial: str) -> str | None:
        channel = self.channels_for(address, partial).destroy_channel
        return await self.publish(channel, DestroyEvent())

    async def sync_new(self, address: ResourceAddress, partial: str, html: str) -> str | None:
        if address.id is None:
            raise UnaddressableSubjectError(
                f"Unpersisted {address.name} cannot be announced as new.",
                detail={"type_name": address.name},
            )
        channel = self.channels_for(address, partial).new_channel
        return await self.publish(channel, NewEvent(html=html, resource_id=address.id))

    async def sync_scoped(
        self,
        record: Any,
        partial: str,
        html: str,
        scope_lists: Iterable[Any],
        registry: NamedScopeRegistry,
    ) -> list[str]:
        """Publish an update on every scoped address whose named scopes contain ``record``.

        Each element of ``scope_lists`` is a scope value as accepted by
        ``ResourceAddress``. Returns the names of the channels published to.
        """
        published: list[str] = []
        for scopes in scope_lists:
            address = ResourceAddress(record, scopes)
            named = [s for s in address.scopes or () if isinstance(s, NamedScope)]
            if not all(registry.contains(scope, record) for scope in named):
                continue
            channel = self.channels_for(address, partial).update_channel
            await self.publish(channel, UpdateEvent(html=html))
            published.append(channel.name)
        return published
