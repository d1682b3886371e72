"""
Permissive base64 handling.

User agents and tooling emit the same bytes in different base64 flavours:
URL-safe or standard alphabet, with or without padding. Values received from
a subscription are decoded with whichever of the four variants the string
itself indicates. Everything this package emits is unpadded base64url.
"""

import base64
import binascii
from enum import Enum

from .types import EncodingError


class B64Variant(Enum):
    """The four base64 flavours accepted on input."""
    URL = "url"
    RAW_URL = "raw_url"
    STD = "std"
    RAW_STD = "raw_std"


_URL_ONLY = frozenset("-_")
_STD_ONLY = frozenset("+/")


def detect_variant(value: str) -> B64Variant:
    """
    Classify a base64 string into one of the four variants.

    The first character unique to either alphabet decides; with neither
    present the URL alphabet is assumed. Padding is present iff the last
    character is ``=``.

    Args:
        value: Encoded string

    Returns:
        The variant to decode with
    """
    padded = value.endswith("=")
    is_url = True
    for ch in value:
        if ch in _URL_ONLY:
            break
        if ch in _STD_ONLY:
            is_url = False
            break

    if is_url:
        return B64Variant.URL if padded else B64Variant.RAW_URL
    return B64Variant.STD if padded else B64Variant.RAW_STD


def b64_decode(value: str) -> bytes:
    """
    Decode a base64 string in any of the four supported variants.

    Args:
        value: Encoded string

    Returns:
        Decoded bytes

    Raises:
        EncodingError: If the string is not valid in its detected variant
    """
    variant = detect_variant(value)

    if variant in (B64Variant.URL, B64Variant.RAW_URL):
        if any(ch in _STD_ONLY for ch in value):
            raise EncodingError(f"Mixed base64 alphabets in {value!r}")
        altchars = b"-_"
    else:
        altchars = None

    if variant in (B64Variant.RAW_URL, B64Variant.RAW_STD):
        if len(value) % 4 == 1:
            raise EncodingError(f"Invalid base64 length {len(value)}")
        value = value + "=" * (-len(value) % 4)

    try:
        return base64.b64decode(value, altchars=altchars, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 ({variant.value}): {e}") from e


def b64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")
