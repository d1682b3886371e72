"""Models for push subscriptions, delivery options and outbound requests."""

import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec

from .keys import parse_vapid_key
from .transport import PushTransport
from .types import MAX_RECORD_SIZE, Urgency, ValidationError

DEFAULT_ENV_TTL = timedelta(days=1)


@dataclass(frozen=True)
class SubscriptionKeys:
    """Base64 encoded keys from the user agent."""
    auth: str
    p256dh: str


@dataclass(frozen=True)
class Subscription:
    """A PushSubscription from the user agent."""
    endpoint: str
    keys: SubscriptionKeys

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Subscription":
        """
        Creates a subscription from the ``PushSubscription.toJSON()`` shape.

        Missing fields become empty strings and are rejected when sending.
        """
        keys = data.get("keys") or {}
        return cls(
            endpoint=data.get("endpoint") or "",
            keys=SubscriptionKeys(
                auth=keys.get("auth") or "",
                p256dh=keys.get("p256dh") or "",
            ),
        )

    def is_complete(self) -> bool:
        """Whether the endpoint and both keys are present."""
        return bool(self.endpoint and self.keys.auth and self.keys.p256dh)


@dataclass
class PushConfig:
    """Required and optional aspects of sending a push message."""

    client: PushTransport
    """Transport that performs the POST."""

    vapid_key: ec.EllipticCurvePrivateKey
    """VAPID signing key."""

    subscriber: str
    """https: URL or mailto: address of the application server operator."""

    ttl: timedelta
    """How long the push service should retain the message (whole seconds)."""

    topic: Optional[str] = None
    """Collapses pending messages with the same topic."""

    urgency: Optional[Union[Urgency, str]] = None
    """Message priority."""

    record_size: int = MAX_RECORD_SIZE
    """Record size advertised in the encrypted record."""

    vapid_expiration: Optional[datetime] = None
    """Token expiry, defaults to now + 12 hours."""

    @classmethod
    def from_env(
        cls,
        client: PushTransport,
        prefix: str = "VAPID_",
        environ: Optional[Mapping[str, str]] = None,
    ) -> "PushConfig":
        """
        Creates configuration from environment variables.

        Reads ``<prefix>PRIVATE_KEY`` and ``<prefix>SUBSCRIBER`` (required),
        ``<prefix>TTL`` in seconds, ``<prefix>TOPIC``, ``<prefix>URGENCY``
        and ``<prefix>RECORD_SIZE``.

        Raises:
            ValidationError: If a required variable is missing or malformed
            KeyFormatError: If the private key variable is not a valid VAPID key
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            return env.get(prefix + name) or None

        private_key = get("PRIVATE_KEY")
        subscriber = get("SUBSCRIBER")
        if private_key is None or subscriber is None:
            raise ValidationError(
                f"{prefix}PRIVATE_KEY and {prefix}SUBSCRIBER must be set"
            )

        try:
            ttl_raw = get("TTL")
            ttl = timedelta(seconds=int(ttl_raw)) if ttl_raw else DEFAULT_ENV_TTL
            record_size_raw = get("RECORD_SIZE")
            record_size = int(record_size_raw) if record_size_raw else MAX_RECORD_SIZE
        except ValueError as e:
            raise ValidationError(f"Invalid numeric setting: {e}") from e

        return cls(
            client=client,
            vapid_key=parse_vapid_key(private_key),
            subscriber=subscriber,
            ttl=ttl,
            topic=get("TOPIC"),
            urgency=get("URGENCY"),
            record_size=record_size,
        )


@dataclass
class PushRequest:
    """A fully assembled request, ready for the transport."""
    url: str
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
