"""Sync event stream: forwards one signed channel to a browser as SSE frames.

A client that reconnects with ``Last-Event-ID`` first receives the buffered
events it missed, then live events from Redis pub/sub. Idle periods are
filled with heartbeat comments so proxies keep the connection open.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

from rendersync.channels.publisher import EventPublisher, parse_wire
from rendersync.core.config import settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from redis.asyncio import Redis
    from redis.asyncio.client import PubSub

    from rendersync.channels.signer import SignedChannel

logger = structlog.get_logger()

HEARTBEAT = ": heartbeat\n\n"


def format_sse(event_id: str, event_type: str, data: str) -> str:
    """Format a single SSE frame.

    The ``event:`` line carries the sync action (``update``, ``destroy``,
    ``new``) so clients can attach one listener per action.
    """
    return f"id: {event_id}\nevent: {event_type}\ndata: {data}\n\n"


def decode_message(message: dict[str, Any] | None) -> tuple[str, str, str] | None:
    """Extract ``(event_id, event_type, payload)`` from a pub/sub message."""
    if message is None or message["type"] != "message":
        return None
    raw = message["data"]
    return parse_wire(raw.decode() if isinstance(raw, bytes) else raw)


async def _next_frame(pubsub: PubSub, heartbeat_interval: float) -> str | None:
    """Wait for the next live frame; a heartbeat if the channel stays quiet."""
    try:
        message = await asyncio.wait_for(
            pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0),
            timeout=heartbeat_interval,
        )
    except TimeoutError:
        return HEARTBEAT

    decoded = decode_message(message)
    return format_sse(*decoded) if decoded is not None else None


async def event_stream(
    redis: Redis,
    channel: SignedChannel,
    last_event_id: str | None = None,
    heartbeat_interval: float | None = None,
) -> AsyncGenerator[str, None]:
    """Yield SSE frames for ``channel`` until the consumer stops iterating."""
    if heartbeat_interval is None:
        heartbeat_interval = settings.heartbeat_interval_seconds

    if last_event_id is not None:
        missed = await EventPublisher(redis).get_replay_events(channel, last_event_id)
        logger.debug("sync_replay", channel=channel.name, count=len(missed))
        for event in missed:
            yield format_sse(*event)

    pubsub = redis.pubsub()
    await pubsub.subscribe(channel.pubsub_key)
    logger.info("sync_client_connected", channel=channel.name)

    try:
        while True:
            frame = await _next_frame(pubsub, heartbeat_interval)
            if frame is not None:
                yield frame
    finally:
        logger.info("sync_client_disconnected", channel=channel.name)
        await pubsub.unsubscribe(channel.pubsub_key)
        await pubsub.aclose()
