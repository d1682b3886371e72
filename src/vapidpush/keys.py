"""Key generation and management for vapidpush."""

import os
from typing import Callable, Tuple

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .encoding import b64_decode, b64url_encode
from .types import (
    PRIVATE_KEY_SIZE,
    PUBLIC_KEY_SIZE,
    CryptoError,
    EncodingError,
    InvalidPublicKey,
    KeyFormatError,
)

RandomSource = Callable[[int], bytes]

# Order of the P-256 base point
P256_ORDER = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551

_MAX_SCALAR_ATTEMPTS = 64


def read_random(rand: RandomSource, size: int) -> bytes:
    """Read exactly ``size`` bytes from a random source."""
    try:
        data = rand(size)
    except Exception as e:
        raise CryptoError(f"Random source failed: {e}") from e
    if len(data) != size:
        raise CryptoError(f"Random source returned {len(data)} bytes, expected {size}")
    return data


def _random_scalar(rand: RandomSource) -> int:
    """Draw a uniformly random P-256 private scalar by rejection sampling."""
    for _ in range(_MAX_SCALAR_ATTEMPTS):
        scalar = int.from_bytes(read_random(rand, PRIVATE_KEY_SIZE), "big")
        if 0 < scalar < P256_ORDER:
            return scalar
    raise CryptoError("Random source did not yield a valid P-256 scalar")


def private_key_from_scalar(scalar: int) -> ec.EllipticCurvePrivateKey:
    """Create a P-256 private key from its scalar."""
    if not 0 < scalar < P256_ORDER:
        raise KeyFormatError("Scalar is not a valid P-256 private key")
    return ec.derive_private_key(scalar, ec.SECP256R1())


def private_key_to_bytes(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Raw 32-byte big-endian scalar of a P-256 private key."""
    return private_key.private_numbers().private_value.to_bytes(PRIVATE_KEY_SIZE, "big")


def generate_vapid_key(rand: RandomSource = os.urandom) -> str:
    """
    Generate a new VAPID signing key.

    Store the result in your configuration and load it with
    ``parse_vapid_key`` at startup.

    Args:
        rand: Random source, defaults to ``os.urandom``

    Returns:
        Raw private scalar as unpadded base64url (43 characters)
    """
    private_key = private_key_from_scalar(_random_scalar(rand))
    return b64url_encode(private_key_to_bytes(private_key))


def parse_vapid_key(value: str) -> ec.EllipticCurvePrivateKey:
    """
    Parse a VAPID signing key produced by ``generate_vapid_key``.

    Any base64 variant is accepted.

    Args:
        value: Encoded 32-byte private scalar

    Returns:
        The P-256 private key

    Raises:
        KeyFormatError: If the value does not hold a valid P-256 scalar
    """
    try:
        raw = b64_decode(value)
    except EncodingError as e:
        raise KeyFormatError(f"Invalid VAPID key encoding: {e}") from e

    if len(raw) != PRIVATE_KEY_SIZE:
        raise KeyFormatError(
            f"VAPID key must be {PRIVATE_KEY_SIZE} bytes, got {len(raw)}"
        )

    return private_key_from_scalar(int.from_bytes(raw, "big"))


def vapid_public_key(private_key: ec.EllipticCurvePrivateKey) -> str:
    """
    Public half of a VAPID key as unpadded base64url.

    This is the ``applicationServerKey`` passed to ``PushManager.subscribe``.
    """
    return b64url_encode(public_key_to_bytes(private_key.public_key()))


def generate_ephemeral_keypair(
    rand: RandomSource = os.urandom,
) -> Tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey]:
    """
    Generate a single-use P-256 key pair for one message.

    Returns:
        Tuple of (private_key, public_key)
    """
    private_key = private_key_from_scalar(_random_scalar(rand))
    return private_key, private_key.public_key()


def public_key_to_bytes(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """Convert a P-256 public key to its 65-byte uncompressed point."""
    return public_key.public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)


def public_key_from_bytes(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Create a P-256 public key from an uncompressed point.

    Raises:
        InvalidPublicKey: If the bytes are not an uncompressed point on the curve
    """
    if len(data) != PUBLIC_KEY_SIZE or data[0] != 0x04:
        raise InvalidPublicKey(
            f"Public key must be a {PUBLIC_KEY_SIZE}-byte uncompressed point, "
            f"got {len(data)} bytes"
        )
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), data)
    except ValueError as e:
        raise InvalidPublicKey(f"Public key is not on P-256: {e}") from e


def ecdh(private_key: ec.EllipticCurvePrivateKey, public_key: ec.EllipticCurvePublicKey) -> bytes:
    """
    Perform P-256 ECDH key agreement.

    Returns:
        32-byte shared secret
    """
    return private_key.exchange(ec.ECDH(), public_key)
