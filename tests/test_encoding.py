"""Tests for permissive base64 decoding."""

import base64

import pytest
from vapidpush.encoding import B64Variant, b64_decode, b64url_encode, detect_variant
from vapidpush.types import EncodingError

RAW = bytes([0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 3, 239])


class TestDetectVariant:
    """Test variant classification."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("ab-c", B64Variant.RAW_URL),
            ("ab_c==", B64Variant.URL),
            ("ab+c", B64Variant.RAW_STD),
            ("ab/c==", B64Variant.STD),
            ("abcd", B64Variant.RAW_URL),
            ("ab==", B64Variant.URL),
            ("", B64Variant.RAW_URL),
            ("a-b+", B64Variant.RAW_URL),
            ("a+b-", B64Variant.RAW_STD),
        ],
    )
    def test_classification(self, value: str, expected: B64Variant) -> None:
        """First alphabet-specific character and trailing padding decide."""
        assert detect_variant(value) == expected


class TestB64Decode:
    """Test decoding of all four variants."""

    @pytest.mark.parametrize(
        "label,encoded",
        [
            ("url", base64.urlsafe_b64encode(RAW).decode()),
            ("raw_url", base64.urlsafe_b64encode(RAW).decode().rstrip("=")),
            ("std", base64.b64encode(RAW).decode()),
            ("raw_std", base64.b64encode(RAW).decode().rstrip("=")),
        ],
    )
    def test_decodes_every_variant(self, label: str, encoded: str) -> None:
        """Each variant decodes back to the original bytes."""
        assert b64_decode(encoded) == RAW

    def test_variants_differ_for_sample(self) -> None:
        """The sample exercises both alphabet-specific characters."""
        assert base64.urlsafe_b64encode(RAW) != base64.b64encode(RAW)

    def test_encode_is_unpadded_url(self) -> None:
        """Emitted values use the unpadded URL alphabet."""
        encoded = b64url_encode(RAW)
        assert "=" not in encoded
        assert "+" not in encoded and "/" not in encoded
        assert b64_decode(encoded) == RAW

    @pytest.mark.parametrize(
        "value",
        [
            "{}",
            "abcde",
            "ab=c",
            "a-b+",
            "ab c",
            "ééé",
        ],
    )
    def test_rejects_invalid_input(self, value: str) -> None:
        """Bad symbols, lengths and mixed alphabets raise EncodingError."""
        with pytest.raises(EncodingError):
            b64_decode(value)

    def test_empty_string_decodes_to_empty(self) -> None:
        """An empty string is valid in every variant."""
        assert b64_decode("") == b""
