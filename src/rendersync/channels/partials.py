"""Channels for rendered partials of a resource.

Patterns:
    {canonical_path}/{partial}/update
    {canonical_path}/{partial}/destroy
    {new_item_path}/{partial}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rendersync.addressing.resource import join_path

if TYPE_CHECKING:
    from rendersync.addressing.resource import ResourceAddress
    from rendersync.channels.signer import ChannelSigner, SignedChannel


@dataclass(frozen=True, slots=True)
class PartialChannels:
    """Signed update/destroy/new channels for one partial of one resource."""

    address: ResourceAddress
    partial: str
    signer: ChannelSigner

    @property
    def update_channel(self) -> SignedChannel:
        return self.signer.channel(
            join_path(*self.address.canonical_segments(), self.partial, "update")
        )

    @property
    def destroy_channel(self) -> SignedChannel:
        return self.signer.channel(
            join_path(*self.address.canonical_segments(), self.partial, "destroy")
        )

    @property
    def new_channel(self) -> SignedChannel:
        return self.signer.channel(join_path(*self.address.new_item_segments(), self.partial))

    def for_action(self, action: str) -> SignedChannel:
        match action:
            case "update":
                return self.update_channel
            case "destroy":
                return self.destroy_channel
            case "new":
                return self.new_channel
        msg = f"Unknown partial action: {action!r}"
        raise ValueError(msg)
