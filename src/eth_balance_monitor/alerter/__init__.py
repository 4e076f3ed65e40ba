"""Alerting layer - message composition and webhook delivery."""

from eth_balance_monitor.alerter.channels.wecom import NotificationError, WeComChannel
from eth_balance_monitor.alerter.dispatcher import (
    AlertChannel,
    AlertDispatcher,
    DispatchResult,
)
from eth_balance_monitor.alerter.formatter import AlertComposer
from eth_balance_monitor.alerter.models import AlertMessage

__all__ = [
    "AlertChannel",
    "AlertComposer",
    "AlertDispatcher",
    "AlertMessage",
    "DispatchResult",
    "NotificationError",
    "WeComChannel",
]
