"""Channel signing.

Clients subscribe to a channel by its signature rather than its name, so a
client can only listen on channels whose signature the server handed out.
Signatures are HMAC-SHA1 hex digests of the channel name keyed with the
process-wide secret: 40 lowercase hex characters, deterministic, and
unforgeable without the secret.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from rendersync.core.exceptions import ConfigurationError, InvalidSignatureError

if TYPE_CHECKING:
    from rendersync.core.config import Settings

logger = structlog.get_logger()


class ChannelSigner:
    """Signs channel names with a fixed secret."""

    __slots__ = ("_key", "prefix")

    def __init__(self, secret: str, prefix: str = "sync") -> None:
        if not secret:
            raise ConfigurationError("A signing secret is required.")
        self._key = secret.encode()
        self.prefix = prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> ChannelSigner:
        """Build the signer at startup; fails fast when no secret is configured."""
        if not settings.secret:
            raise ConfigurationError(
                "RENDERSYNC_SECRET must be set before channels can be signed.",
                detail={"setting": "secret"},
            )
        logger.info("channel_signer_configured", app=settings.app_name)
        return cls(settings.secret, prefix=settings.channel_prefix)

    def sign(self, channel_name: str) -> str:
        return hmac.new(self._key, channel_name.encode(), hashlib.sha1).hexdigest()

    def verify(self, channel_name: str, signature: str) -> bool:
        return hmac.compare_digest(self.sign(channel_name), signature)

    def authorize(self, channel_name: str, signature: str) -> SignedChannel:
        """Return the signed channel, or raise if ``signature`` was not issued for it."""
        if not self.verify(channel_name, signature):
            logger.warning("channel_signature_rejected", channel=channel_name)
            raise InvalidSignatureError(detail={"channel": channel_name})
        return self.channel(channel_name)

    def channel(self, name: str) -> SignedChannel:
        return SignedChannel(name=name, signature=self.sign(name), prefix=self.prefix)

    def __repr__(self) -> str:
        return f"ChannelSigner(prefix={self.prefix!r})"


@dataclass(frozen=True, slots=True)
class SignedChannel:
    """A channel name with its signature."""

    name: str
    signature: str
    prefix: str = "sync"

    @property
    def pubsub_key(self) -> str:
        """Redis pub/sub channel name. Only the signature is exposed."""
        return f"{self.prefix}:{self.signature}"

    @property
    def replay_key(self) -> str:
        """Redis sorted-set key for the replay buffer."""
        return f"{self.prefix}:replay:{self.signature}"

    def __str__(self) -> str:
        return self.signature


class Channel:
    """A channel name bound to a signer; ``signature`` is computed on demand."""

    __slots__ = ("name", "_signer")

    def __init__(self, name: str, signer: ChannelSigner) -> None:
        self.name = name
        self._signer = signer

    @property
    def signature(self) -> str:
        return self._signer.sign(self.name)

    def signed(self) -> SignedChannel:
        return self._signer.channel(self.name)

    def __repr__(self) -> str:
        return f"Channel({self.name!r})"
