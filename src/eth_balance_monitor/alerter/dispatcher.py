"""Alert dispatcher for delivery to every configured webhook."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from eth_balance_monitor.alerter.channels.wecom import NotificationError

logger = logging.getLogger(__name__)


class AlertChannel(Protocol):
    """Protocol for alert delivery channels."""

    name: str

    def send(self, message: str) -> int:
        """Send a message. Returns the HTTP status code, raises NotificationError."""
        ...


@dataclass
class DispatchResult:
    """Result of dispatching an alert to all channels."""

    success_count: int
    failure_count: int
    channel_results: dict[str, bool] = field(default_factory=dict)

    @property
    def all_succeeded(self) -> bool:
        """Return True if all channels succeeded."""
        return self.failure_count == 0 and self.success_count > 0


class AlertDispatcher:
    """Dispatcher for sending one alert to several channels.

    Channels are attempted one after another in configuration order. A
    failing channel is logged and does not stop delivery to the rest.
    """

    def __init__(self, channels: list[AlertChannel]) -> None:
        """Initialize the dispatcher.

        Args:
            channels: Channels to deliver to, in order.
        """
        self.channels = channels

    def _send_to_channel(self, channel: AlertChannel, message: str) -> bool:
        """Send to a single channel, logging failures."""
        try:
            channel.send(message)
        except NotificationError as e:
            logger.error(f"Error sending to {channel.name}: {e}")
            return False
        return True

    def dispatch(self, message: str) -> DispatchResult:
        """Dispatch a message to all channels.

        Args:
            message: Markdown content to send.

        Returns:
            DispatchResult with per-channel status.
        """
        if not self.channels:
            logger.warning("No channels configured for dispatch")
            return DispatchResult(success_count=0, failure_count=0)

        outcomes = [(ch.name, self._send_to_channel(ch, message)) for ch in self.channels]

        channel_results = dict(outcomes)
        success_count = sum(1 for _, success in outcomes if success)
        failure_count = len(outcomes) - success_count

        logger.info(f"Dispatch complete: {success_count}/{len(outcomes)} succeeded")

        return DispatchResult(
            success_count=success_count,
            failure_count=failure_count,
            channel_results=channel_results,
        )
