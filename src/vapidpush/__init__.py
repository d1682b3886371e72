"""
vapidpush - Web Push delivery for application servers

Python implementation of Web Push message encryption (RFC 8291, aes128gcm)
with VAPID sender authentication (RFC 8292).
"""

from .encoding import B64Variant, detect_variant, b64_decode, b64url_encode
from .keys import (
    generate_vapid_key,
    parse_vapid_key,
    vapid_public_key,
    generate_ephemeral_keypair,
)
from .vapid import audience, build_auth_header
from .record import EncryptedRecord, encode_record, decode_record, is_web_push_record
from .crypto import encrypt_record, decrypt_record
from .models import Subscription, SubscriptionKeys, PushConfig, PushRequest
from .transport import PushTransport, HttpxTransport
from .client import is_valid_urgency, prepare_request, send
from .types import (
    Urgency,
    MAX_RECORD_SIZE,
    HEADER_SIZE,
    MIN_OVERHEAD,
    WebPushError,
    ValidationError,
    InvalidSubscription,
    MessageTooLong,
    InvalidUrgency,
    InvalidEndpoint,
    InvalidSubscriber,
    EncodingError,
    InvalidAuthSecret,
    KeyFormatError,
    InvalidPublicKey,
    CryptoError,
    DecryptionError,
    InvalidRecord,
)

__version__ = "0.1.0"

__all__ = [
    # Encoding
    "B64Variant",
    "detect_variant",
    "b64_decode",
    "b64url_encode",
    # Keys
    "generate_vapid_key",
    "parse_vapid_key",
    "vapid_public_key",
    "generate_ephemeral_keypair",
    # VAPID
    "audience",
    "build_auth_header",
    # Record
    "EncryptedRecord",
    "encode_record",
    "decode_record",
    "is_web_push_record",
    # Crypto
    "encrypt_record",
    "decrypt_record",
    # Models
    "Subscription",
    "SubscriptionKeys",
    "PushConfig",
    "PushRequest",
    # Transport
    "PushTransport",
    "HttpxTransport",
    # Client
    "is_valid_urgency",
    "prepare_request",
    "send",
    # Types
    "Urgency",
    # Errors
    "WebPushError",
    "ValidationError",
    "InvalidSubscription",
    "MessageTooLong",
    "InvalidUrgency",
    "InvalidEndpoint",
    "InvalidSubscriber",
    "EncodingError",
    "InvalidAuthSecret",
    "KeyFormatError",
    "InvalidPublicKey",
    "CryptoError",
    "DecryptionError",
    "InvalidRecord",
    # Constants
    "MAX_RECORD_SIZE",
    "HEADER_SIZE",
    "MIN_OVERHEAD",
]
