"""Tests for subscription and configuration models."""

from datetime import timedelta

import pytest
from vapidpush.keys import vapid_public_key
from vapidpush.models import DEFAULT_ENV_TTL, PushConfig, Subscription
from vapidpush.types import MAX_RECORD_SIZE, KeyFormatError, ValidationError
from .fakes import RecordingTransport
from .test_vectors import (
    HTTPS_SUBSCRIBER,
    SUBSCRIPTION_AUTH,
    SUBSCRIPTION_ENDPOINT,
    SUBSCRIPTION_P256DH,
    VAPID_PRIVATE_KEY,
    VAPID_PUBLIC_KEY,
)


class TestSubscription:
    """Test subscription parsing."""

    def test_from_dict(self) -> None:
        """The PushSubscription JSON shape maps onto the model."""
        subscription = Subscription.from_dict({
            "endpoint": SUBSCRIPTION_ENDPOINT,
            "expirationTime": None,
            "keys": {"auth": SUBSCRIPTION_AUTH, "p256dh": SUBSCRIPTION_P256DH},
        })

        assert subscription.endpoint == SUBSCRIPTION_ENDPOINT
        assert subscription.keys.auth == SUBSCRIPTION_AUTH
        assert subscription.keys.p256dh == SUBSCRIPTION_P256DH
        assert subscription.is_complete()

    def test_from_dict_missing_fields(self) -> None:
        """Missing fields yield an incomplete subscription."""
        assert not Subscription.from_dict({}).is_complete()
        assert not Subscription.from_dict({"endpoint": SUBSCRIPTION_ENDPOINT}).is_complete()
        assert not Subscription.from_dict(
            {"endpoint": SUBSCRIPTION_ENDPOINT, "keys": {"auth": SUBSCRIPTION_AUTH}}
        ).is_complete()


class TestPushConfigFromEnv:
    """Test configuration from environment variables."""

    def test_required_only(self) -> None:
        """Defaults fill in optional settings."""
        config = PushConfig.from_env(
            RecordingTransport(),
            environ={"VAPID_PRIVATE_KEY": VAPID_PRIVATE_KEY, "VAPID_SUBSCRIBER": HTTPS_SUBSCRIBER},
        )

        assert vapid_public_key(config.vapid_key) == VAPID_PUBLIC_KEY
        assert config.subscriber == HTTPS_SUBSCRIBER
        assert config.ttl == DEFAULT_ENV_TTL
        assert config.topic is None
        assert config.urgency is None
        assert config.record_size == MAX_RECORD_SIZE
        assert config.vapid_expiration is None

    def test_all_settings(self) -> None:
        """Every recognised variable is read, with a custom prefix."""
        config = PushConfig.from_env(
            RecordingTransport(),
            prefix="PUSH_",
            environ={
                "PUSH_PRIVATE_KEY": VAPID_PRIVATE_KEY,
                "PUSH_SUBSCRIBER": "mailto:ops@app.server",
                "PUSH_TTL": "60",
                "PUSH_TOPIC": "news",
                "PUSH_URGENCY": "high",
                "PUSH_RECORD_SIZE": "2048",
            },
        )

        assert config.ttl == timedelta(seconds=60)
        assert config.topic == "news"
        assert config.urgency == "high"
        assert config.record_size == 2048

    def test_missing_required(self) -> None:
        """The key and subscriber are required."""
        with pytest.raises(ValidationError):
            PushConfig.from_env(RecordingTransport(), environ={"VAPID_PRIVATE_KEY": VAPID_PRIVATE_KEY})

    def test_malformed_number(self) -> None:
        """Non-numeric TTL is rejected."""
        with pytest.raises(ValidationError):
            PushConfig.from_env(
                RecordingTransport(),
                environ={
                    "VAPID_PRIVATE_KEY": VAPID_PRIVATE_KEY,
                    "VAPID_SUBSCRIBER": HTTPS_SUBSCRIBER,
                    "VAPID_TTL": "soon",
                },
            )

    def test_malformed_key(self) -> None:
        """An invalid key is reported as a key format error."""
        with pytest.raises(KeyFormatError):
            PushConfig.from_env(
                RecordingTransport(),
                environ={"VAPID_PRIVATE_KEY": "{}", "VAPID_SUBSCRIBER": HTTPS_SUBSCRIBER},
            )
