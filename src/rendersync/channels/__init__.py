"""Signed pub/sub channels and event delivery."""

from rendersync.channels.events import DestroyEvent, NewEvent, UpdateEvent
from rendersync.channels.partials import PartialChannels
from rendersync.channels.publisher import EventPublisher
from rendersync.channels.signer import Channel, ChannelSigner, SignedChannel

__all__ = [
    "Channel",
    "ChannelSigner",
    "DestroyEvent",
    "EventPublisher",
    "NewEvent",
    "PartialChannels",
    "SignedChannel",
    "UpdateEvent",
]
