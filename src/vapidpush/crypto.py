"""Message encryption for Web Push (RFC 8291)."""

import os
from typing import Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .encoding import b64_decode
from .keys import (
    RandomSource,
    read_random,
    ecdh,
    generate_ephemeral_keypair,
    public_key_from_bytes,
    public_key_to_bytes,
)
from .record import EncryptedRecord, decode_record, encode_record
from .types import (
    AUTH_SECRET_SIZE,
    CONTENT_ENCRYPTION_KEY_INFO,
    CONTENT_ENCRYPTION_KEY_SIZE,
    IKM_SIZE,
    MAX_RECORD_SIZE,
    MAX_RECORD_SIZE_FIELD,
    MIN_OVERHEAD,
    NONCE_INFO,
    NONCE_SIZE,
    PADDING_DELIMITER,
    SALT_SIZE,
    WEBPUSH_INFO,
    CryptoError,
    DecryptionError,
    EncodingError,
    InvalidAuthSecret,
    InvalidPublicKey,
    InvalidRecord,
    InvalidSubscription,
    MessageTooLong,
    ValidationError,
)


def hkdf_expand(length: int, secret: bytes, salt: bytes, info: bytes) -> bytes:
    """HKDF-SHA256 (extract then expand) producing ``length`` bytes."""
    hkdf = HKDF(algorithm=SHA256(), length=length, salt=salt, info=info)
    return hkdf.derive(secret)


def _derive_content_keys(
    shared_secret: bytes,
    auth_secret: bytes,
    ua_public_bytes: bytes,
    as_public_bytes: bytes,
    salt: bytes,
) -> Tuple[bytes, bytes]:
    """Derive the content encryption key and nonce for one record."""
    key_info = WEBPUSH_INFO + ua_public_bytes + as_public_bytes
    ikm = hkdf_expand(IKM_SIZE, shared_secret, auth_secret, key_info)

    content_encryption_key = hkdf_expand(
        CONTENT_ENCRYPTION_KEY_SIZE, ikm, salt, CONTENT_ENCRYPTION_KEY_INFO
    )
    nonce = hkdf_expand(NONCE_SIZE, ikm, salt, NONCE_INFO)
    return content_encryption_key, nonce


def _decode_auth_secret(value: str) -> bytes:
    try:
        auth_secret = b64_decode(value)
    except EncodingError as e:
        raise InvalidAuthSecret(f"Invalid auth in keys: {e}") from e
    if len(auth_secret) != AUTH_SECRET_SIZE:
        raise InvalidAuthSecret(
            f"Auth secret must be {AUTH_SECRET_SIZE} bytes, got {len(auth_secret)}"
        )
    return auth_secret


def _decode_public_key(value: str) -> bytes:
    try:
        return b64_decode(value)
    except EncodingError as e:
        raise InvalidPublicKey(f"Invalid public key: {e}") from e


def encrypt_record(
    message: bytes,
    auth_secret: str,
    client_public_key: str,
    record_size: int = MAX_RECORD_SIZE,
    rand: RandomSource = os.urandom,
) -> bytes:
    """
    Encrypt a message into a single aes128gcm record for a subscription.

    A fresh salt and ephemeral P-256 key are drawn from ``rand`` for every
    call. The record is not padded up to ``record_size``; that value is only
    advertised in the header.

    Args:
        message: Plaintext, at most ``record_size - 103`` bytes
        auth_secret: Subscription ``auth`` value, any base64 variant
        client_public_key: Subscription ``p256dh`` value, any base64 variant
        record_size: Record size advertised in the header
        rand: Random source, defaults to ``os.urandom``

    Returns:
        Encoded record: 86-byte header followed by ciphertext and tag

    Raises:
        InvalidSubscription: If either key is empty
        MessageTooLong: If the message does not fit the record size
        InvalidAuthSecret: If the auth secret cannot be decoded
        InvalidPublicKey: If the public key cannot be decoded or is not on P-256
        CryptoError: If the random source or the cipher fails
    """
    if not auth_secret or not client_public_key:
        raise InvalidSubscription("Invalid subscription, missing keys")

    if len(message) > record_size - MIN_OVERHEAD:
        raise MessageTooLong(len(message), record_size)
    if record_size > MAX_RECORD_SIZE_FIELD:
        raise ValidationError(f"Record size {record_size} does not fit in 32 bits")

    auth_secret_bytes = _decode_auth_secret(auth_secret)
    ua_public_bytes = _decode_public_key(client_public_key)
    ua_public_key = public_key_from_bytes(ua_public_bytes)

    salt = read_random(rand, SALT_SIZE)

    # New key for this message
    as_private_key, as_public_key = generate_ephemeral_keypair(rand)
    as_public_bytes = public_key_to_bytes(as_public_key)

    try:
        shared_secret = ecdh(as_private_key, ua_public_key)
        content_encryption_key, nonce = _derive_content_keys(
            shared_secret, auth_secret_bytes, ua_public_bytes, as_public_bytes, salt
        )
        # Single record, so the delimiter is the only padding
        plaintext = bytes(message) + bytes([PADDING_DELIMITER])
        ciphertext = AESGCM(content_encryption_key).encrypt(nonce, plaintext, None)
    except Exception as e:
        raise CryptoError(f"Encryption failed: {e}") from e

    return encode_record(
        EncryptedRecord(
            salt=salt,
            record_size=record_size,
            key_id=as_public_bytes,
            ciphertext=ciphertext,
        )
    )


def decrypt_record(
    data: bytes,
    auth_secret: Union[bytes, str],
    ua_private_key: ec.EllipticCurvePrivateKey,
) -> bytes:
    """
    Decrypt a record as the user agent holding the subscription keys.

    Args:
        data: Encoded record from ``encrypt_record``
        auth_secret: Subscription auth secret, raw or base64
        ua_private_key: Private half of the subscription ``p256dh`` key

    Returns:
        The original message

    Raises:
        InvalidRecord: If the header or padding is malformed
        InvalidPublicKey: If the record's key id is not a P-256 point
        CryptoError: If key agreement with ``ua_private_key`` fails
        DecryptionError: If the record fails authentication
    """
    if isinstance(auth_secret, str):
        auth_secret = _decode_auth_secret(auth_secret)

    record = decode_record(data)
    as_public_key = public_key_from_bytes(record.key_id)
    ua_public_bytes = public_key_to_bytes(ua_private_key.public_key())

    try:
        shared_secret = ecdh(ua_private_key, as_public_key)
        content_encryption_key, nonce = _derive_content_keys(
            shared_secret, auth_secret, ua_public_bytes, record.key_id, record.salt
        )
    except Exception as e:
        raise CryptoError(f"Key agreement failed: {e}") from e

    try:
        plaintext = AESGCM(content_encryption_key).decrypt(nonce, record.ciphertext, None)
    except InvalidTag as e:
        raise DecryptionError("Record failed authentication") from e

    unpadded = plaintext.rstrip(b"\x00")
    if not unpadded or unpadded[-1] != PADDING_DELIMITER:
        raise InvalidRecord("Missing last-record padding delimiter")

    return unpadded[:-1]
