"""
Voluntary Application Server Identification (RFC 8292).

Builds the ``Authorization`` header that identifies the application server
to the push service. The header carries an ES256 JWT scoped to the push
service origin plus the VAPID public key used to verify it.

Signatures use RFC 6979 deterministic nonces, so the same key, endpoint,
subscriber and expiration always produce the same header.
"""

import json
from datetime import datetime, timezone
from urllib.parse import urlsplit

from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm
from jwt.api_jws import PyJWS
from jwt.exceptions import PyJWTError
from jwt.utils import der_to_raw_signature

from .keys import vapid_public_key
from .types import (
    SUBSCRIBER_PREFIXES,
    CryptoError,
    InvalidEndpoint,
    InvalidSubscriber,
)


class DeterministicES256(ECAlgorithm):
    """ES256 signing with RFC 6979 nonces instead of random ones."""

    def __init__(self) -> None:
        super().__init__(ECAlgorithm.SHA256)

    def sign(self, msg: bytes, key: ec.EllipticCurvePrivateKey) -> bytes:
        der_sig = key.sign(msg, ec.ECDSA(self.hash_alg(), deterministic_signing=True))
        return der_to_raw_signature(der_sig, key.curve)


_jws = PyJWS()
_jws.unregister_algorithm("ES256")
_jws.register_algorithm("ES256", DeterministicES256())


def audience(endpoint: str) -> str:
    """
    Origin of a push endpoint, used as the JWT ``aud`` claim.

    Args:
        endpoint: Subscription endpoint URL

    Returns:
        ``scheme://host[:port]`` without path, query or credentials

    Raises:
        InvalidEndpoint: If the endpoint lacks a scheme or host
    """
    try:
        parts = urlsplit(endpoint)
    except ValueError as e:
        raise InvalidEndpoint(endpoint) from e

    host = parts.netloc.rpartition("@")[2]
    if not parts.scheme or not host:
        raise InvalidEndpoint(endpoint)

    return f"{parts.scheme}://{host}"


def build_auth_header(
    endpoint: str,
    subscriber: str,
    vapid_key: ec.EllipticCurvePrivateKey,
    expiration: datetime,
) -> str:
    """
    Build the VAPID ``Authorization`` header for a push endpoint.

    Args:
        endpoint: Subscription endpoint URL
        subscriber: Contact for the application server, ``https:`` or ``mailto:``
        vapid_key: VAPID signing key
        expiration: Token expiry, encoded as unix seconds. A naive
            datetime is taken as UTC

    Returns:
        ``"vapid t=<jwt>, k=<public key>"``

    Raises:
        InvalidEndpoint: If the endpoint lacks a scheme or host
        InvalidSubscriber: If the subscriber has neither accepted prefix
        CryptoError: If signing fails
    """
    aud = audience(endpoint)

    # Google and Firefox accept an empty subscriber, Apple does not
    if not subscriber.startswith(SUBSCRIBER_PREFIXES):
        raise InvalidSubscriber(subscriber)

    if expiration.tzinfo is None:
        expiration = expiration.replace(tzinfo=timezone.utc)

    claims = {
        "aud": aud,
        "exp": int(expiration.timestamp()),
        "sub": subscriber,
    }
    payload = json.dumps(claims, separators=(",", ":")).encode("utf-8")

    try:
        token = _jws.encode(payload, vapid_key, algorithm="ES256")
    except (PyJWTError, ValueError, TypeError) as e:
        raise CryptoError(f"Failed to sign VAPID token: {e}") from e

    return f"vapid t={token}, k={vapid_public_key(vapid_key)}"
