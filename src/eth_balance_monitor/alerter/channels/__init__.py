"""Alert channel implementations."""

from eth_balance_monitor.alerter.channels.wecom import (
    WECOM_WEBHOOK_URL,
    NotificationError,
    WeComChannel,
)

__all__ = [
    "NotificationError",
    "WECOM_WEBHOOK_URL",
    "WeComChannel",
]
