"""Type definitions for vapidpush."""

from enum import Enum


class Urgency(Enum):
    """Message urgency, RFC 8030 section 5.3. Directly impacts battery life."""
    VERY_LOW = "very-low"  # on power and Wi-Fi
    LOW = "low"  # on either power or Wi-Fi
    NORMAL = "normal"  # on neither power nor Wi-Fi
    HIGH = "high"  # any state, including low battery


# Record constants
MAX_RECORD_SIZE = 4096  # push services are not required to accept more
MAX_RECORD_SIZE_FIELD = 0xFFFFFFFF  # record size is a uint32
SALT_SIZE = 16
RECORD_SIZE_FIELD_SIZE = 4
PUBLIC_KEY_SIZE = 65  # uncompressed P-256 point
HEADER_SIZE = SALT_SIZE + RECORD_SIZE_FIELD_SIZE + 1 + PUBLIC_KEY_SIZE  # 86
TAG_SIZE = 16
PADDING_DELIMITER = 0x02  # marks the last (and only) record
MIN_OVERHEAD = HEADER_SIZE + 1 + TAG_SIZE  # 103

# Key derivation constants
AUTH_SECRET_SIZE = 16
IKM_SIZE = 32
CONTENT_ENCRYPTION_KEY_SIZE = 16
NONCE_SIZE = 12
WEBPUSH_INFO = b"WebPush: info\x00"
CONTENT_ENCRYPTION_KEY_INFO = b"Content-Encoding: aes128gcm\x00"
NONCE_INFO = b"Content-Encoding: nonce\x00"

# VAPID constants
PRIVATE_KEY_SIZE = 32
DEFAULT_VAPID_EXPIRATION_HOURS = 12
SUBSCRIBER_PREFIXES = ("https:", "mailto:")


# Exception types
class WebPushError(Exception):
    """Base exception for vapidpush errors."""
    pass


class ValidationError(WebPushError):
    """Input rejected before any cryptographic work or network I/O."""
    pass


class InvalidSubscription(ValidationError):
    """Subscription is missing its endpoint or keys."""
    pass


class MessageTooLong(ValidationError):
    """Message does not fit in a single record."""

    def __init__(self, length: int, record_size: int) -> None:
        self.length = length
        self.record_size = record_size
        super().__init__(
            f"Message length of {length} is too long for record size of {record_size}"
        )


class InvalidUrgency(ValidationError):
    """Urgency is not one of the four defined levels."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid urgency: {value!r}")


class InvalidEndpoint(ValidationError):
    """Endpoint is not an absolute URL with a scheme and host."""

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        super().__init__(f"Invalid endpoint: {endpoint!r}")


class InvalidSubscriber(ValidationError):
    """Subscriber is neither an https: URL nor a mailto: address."""

    def __init__(self, subscriber: str) -> None:
        self.subscriber = subscriber
        super().__init__(f"Invalid subscriber: {subscriber!r}")


class EncodingError(WebPushError):
    """Malformed base64 input."""
    pass


class InvalidAuthSecret(EncodingError):
    """Subscription auth secret could not be decoded."""
    pass


class KeyFormatError(WebPushError):
    """Key bytes are not a valid P-256 key."""
    pass


class InvalidPublicKey(KeyFormatError):
    """Subscription public key could not be decoded or is not on the curve."""
    pass


class CryptoError(WebPushError):
    """Random source, key agreement or cipher failure."""
    pass


class DecryptionError(CryptoError):
    """Record failed authentication."""
    pass


class InvalidRecord(CryptoError):
    """Record header or padding is malformed."""
    pass
