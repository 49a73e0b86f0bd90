"""Email channel registry.

Uses the in-memory recording adapter unless ``SMTP_HOST`` is set, in which
case mail goes out through the configured SMTP relay.
"""

import os

from notifications.notification.notification import NotificationChannel

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str = NotificationChannel.EMAIL.value):
    """Return the configured adapter for ``channel_type`` (one instance per type)."""
    if channel_type not in _channel_instances:
        if channel_type != NotificationChannel.EMAIL.value:
            raise ValueError(f"Unknown channel type: {channel_type}")

        if os.environ.get("SMTP_HOST"):
            from notifications.channel.smtp_email import SmtpEmailAdapter

            _channel_instances[channel_type] = SmtpEmailAdapter.from_env()
        else:
            from notifications.channel.fake_email import FakeEmailAdapter

            _channel_instances[channel_type] = FakeEmailAdapter()

    return _channel_instances[channel_type]


def reset_channels():
    """Drop the cached adapters (used between tests)."""
    _channel_instances.clear()
