"""
Push message delivery.

``send`` validates its inputs, encrypts the message, signs the VAPID token
and posts the record to the subscription endpoint. All validation and
cryptography happen before the single network call, so a failed or
cancelled send never leaves partial state behind.
"""

import asyncio
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from .crypto import encrypt_record
from .keys import RandomSource
from .models import PushConfig, PushRequest, Subscription
from .types import (
    DEFAULT_VAPID_EXPIRATION_HOURS,
    MIN_OVERHEAD,
    InvalidSubscription,
    InvalidUrgency,
    MessageTooLong,
    Urgency,
    ValidationError,
)
from .vapid import audience, build_auth_header

logger = logging.getLogger(__name__)

CONTENT_ENCODING = "aes128gcm"
CONTENT_TYPE = "application/octet-stream"


def is_valid_urgency(value: object) -> bool:
    """Whether a value is one of the four defined urgency levels."""
    if isinstance(value, Urgency):
        return True
    return any(value == u.value for u in Urgency)


def _coerce_urgency(value: Union[Urgency, str]) -> Urgency:
    if not is_valid_urgency(value):
        raise InvalidUrgency(value)
    return value if isinstance(value, Urgency) else Urgency(value)


def _as_bytes(message: Union[bytes, str]) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


def prepare_request(
    message: Union[bytes, str],
    subscription: Subscription,
    config: PushConfig,
    rand: RandomSource = os.urandom,
    now: Optional[datetime] = None,
) -> PushRequest:
    """
    Validate, encrypt and sign a push message without sending it.

    Checks run in order: subscription completeness, message length,
    urgency, then encryption and token signing.

    Args:
        message: Payload, ``str`` is UTF-8 encoded
        subscription: Target subscription
        config: Delivery options
        rand: Random source for the salt and ephemeral key
        now: Clock used for the default token expiry

    Returns:
        The assembled PushRequest

    Raises:
        ValidationError: If any input is rejected
        EncodingError: If a subscription key is not valid base64
        KeyFormatError: If the subscription public key is not on P-256
        CryptoError: If encryption or signing fails
    """
    payload = _as_bytes(message)

    if not subscription.is_complete():
        raise InvalidSubscription("Invalid subscription, missing endpoint or keys")

    if len(payload) > config.record_size - MIN_OVERHEAD:
        raise MessageTooLong(len(payload), config.record_size)

    urgency = None
    if config.urgency:
        urgency = _coerce_urgency(config.urgency)

    ttl_seconds = int(config.ttl.total_seconds())
    if ttl_seconds < 0:
        raise ValidationError(f"TTL must not be negative, got {ttl_seconds}")

    record = encrypt_record(
        payload,
        subscription.keys.auth,
        subscription.keys.p256dh,
        record_size=config.record_size,
        rand=rand,
    )

    expiration = config.vapid_expiration
    if expiration is None:
        now = now or datetime.now(timezone.utc)
        expiration = now + timedelta(hours=DEFAULT_VAPID_EXPIRATION_HOURS)

    auth_header = build_auth_header(
        subscription.endpoint,
        config.subscriber,
        config.vapid_key,
        expiration,
    )

    headers = {
        "Content-Encoding": CONTENT_ENCODING,
        "Content-Type": CONTENT_TYPE,
        "TTL": str(ttl_seconds),
    }
    if config.topic:
        headers["Topic"] = config.topic
    if urgency is not None:
        headers["Urgency"] = urgency.value
    headers["Authorization"] = auth_header

    return PushRequest(url=subscription.endpoint, body=record, headers=headers)


async def send(
    message: Union[bytes, str],
    subscription: Subscription,
    config: PushConfig,
    rand: RandomSource = os.urandom,
    timeout: Optional[float] = None,
) -> Any:
    """
    Send a push message to a subscription.

    Makes exactly one transport call. The response is returned as the
    transport produced it, without interpreting its status.

    Args:
        message: Payload, ``str`` is UTF-8 encoded
        subscription: Target subscription
        config: Delivery options, including the transport
        rand: Random source for the salt and ephemeral key
        timeout: Optional deadline in seconds for the network call

    Returns:
        The transport's response

    Raises:
        ValidationError, EncodingError, KeyFormatError, CryptoError: Before
            any network I/O, see ``prepare_request``
        asyncio.TimeoutError: If ``timeout`` elapses
        Exception: Whatever the transport raises, unchanged
    """
    request = prepare_request(message, subscription, config, rand=rand)

    logger.debug(
        "Sending %d byte push record to %s (ttl=%s, urgency=%s)",
        len(request.body),
        audience(request.url),
        request.headers["TTL"],
        request.headers.get("Urgency", "-"),
    )

    call = config.client.post(request.url, request.body, request.headers)
    if timeout is not None:
        return await asyncio.wait_for(call, timeout)
    return await call
