"""Record encoding and decoding for the aes128gcm content coding (RFC 8188)."""

from dataclasses import dataclass

from .types import (
    HEADER_SIZE,
    MAX_RECORD_SIZE_FIELD,
    PUBLIC_KEY_SIZE,
    RECORD_SIZE_FIELD_SIZE,
    SALT_SIZE,
    TAG_SIZE,
    InvalidRecord,
)

_KEY_ID_OFFSET = SALT_SIZE + RECORD_SIZE_FIELD_SIZE + 1


@dataclass
class EncryptedRecord:
    """A single aes128gcm record."""
    salt: bytes  # 16 bytes
    record_size: int  # advertised maximum, not the actual length
    key_id: bytes  # sender's ephemeral public key, 65 bytes for Web Push
    ciphertext: bytes  # variable (message + delimiter + 16-byte tag)


def encode_record(record: EncryptedRecord) -> bytes:
    """
    Encode a record to bytes.

    Format (86-byte header for Web Push + ciphertext):
        [0-15]   salt (16 bytes)
        [16-19]  record size (uint32, big-endian)
        [20]     key id length (65)
        [21-85]  key id: ephemeral public key (65 bytes)
        [86+]    ciphertext (variable, includes 16-byte tag)

    Args:
        record: EncryptedRecord to encode

    Returns:
        Encoded bytes
    """
    if len(record.salt) != SALT_SIZE:
        raise InvalidRecord(f"Salt must be {SALT_SIZE} bytes, got {len(record.salt)}")
    if not 0 <= record.record_size <= MAX_RECORD_SIZE_FIELD:
        raise InvalidRecord(f"Record size {record.record_size} does not fit in 32 bits")
    if len(record.key_id) > 0xFF:
        raise InvalidRecord(f"Key id of {len(record.key_id)} bytes is too long")

    return (
        record.salt
        + record.record_size.to_bytes(RECORD_SIZE_FIELD_SIZE, "big")
        + bytes([len(record.key_id)])
        + record.key_id
        + record.ciphertext
    )


def decode_record(data: bytes) -> EncryptedRecord:
    """
    Decode bytes into a record.

    Args:
        data: Encoded record bytes

    Returns:
        Decoded EncryptedRecord

    Raises:
        InvalidRecord: If data is too short for its header or ciphertext
    """
    if len(data) < _KEY_ID_OFFSET:
        raise InvalidRecord(f"Data too short: {len(data)} bytes")

    salt = data[:SALT_SIZE]
    record_size = int.from_bytes(data[SALT_SIZE:SALT_SIZE + RECORD_SIZE_FIELD_SIZE], "big")
    key_id_length = data[SALT_SIZE + RECORD_SIZE_FIELD_SIZE]

    offset = _KEY_ID_OFFSET + key_id_length
    if len(data) < offset + TAG_SIZE + 1:
        raise InvalidRecord(
            f"Data too short: {len(data)} bytes for a key id of {key_id_length} bytes"
        )

    return EncryptedRecord(
        salt=salt,
        record_size=record_size,
        key_id=data[_KEY_ID_OFFSET:offset],
        ciphertext=data[offset:],
    )


def is_web_push_record(data: bytes) -> bool:
    """
    Check if data looks like a Web Push aes128gcm record.

    Args:
        data: Bytes to check

    Returns:
        True if the header carries a 65-byte uncompressed key id
    """
    if len(data) < HEADER_SIZE + TAG_SIZE + 1:
        return False

    return data[_KEY_ID_OFFSET - 1] == PUBLIC_KEY_SIZE and data[_KEY_ID_OFFSET] == 0x04
