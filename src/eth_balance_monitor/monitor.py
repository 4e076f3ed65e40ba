"""Balance monitor run: fetch every balance, compose one alert, notify.

A run is linear. Addresses are queried one at a time in configuration order
and the first fetch failure aborts the run before anything is sent. Webhook
delivery happens only when at least one balance is below the threshold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from eth_balance_monitor.alerter.channels.wecom import WeComChannel
from eth_balance_monitor.alerter.dispatcher import AlertChannel, AlertDispatcher, DispatchResult
from eth_balance_monitor.alerter.formatter import AlertComposer
from eth_balance_monitor.balances.chain import ChainClient
from eth_balance_monitor.balances.models import BalanceReading
from eth_balance_monitor.balances.units import to_display_units
from eth_balance_monitor.config import RuntimeSettings

if TYPE_CHECKING:
    from eth_balance_monitor.alerter.models import AlertMessage
    from eth_balance_monitor.config import MonitorConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonitorReport:
    """Outcome of one monitor run.

    Attributes:
        readings: Balances in configuration order.
        message: The composed alert.
        dispatch: Delivery result, or None if nothing was sent.
    """

    readings: tuple[BalanceReading, ...]
    message: AlertMessage
    dispatch: DispatchResult | None = None

    @property
    def alerted(self) -> bool:
        """Return True if the run produced at least one alert line."""
        return self.message.has_alerts


def build_channels(config: MonitorConfig, settings: RuntimeSettings) -> list[AlertChannel]:
    """Create one webhook channel per configured key."""
    return [
        WeComChannel(
            key.get_secret_value(),
            name=f"wecom[{index}]",
            base_url=settings.webhook_url,
            timeout=settings.webhook_timeout,
        )
        for index, key in enumerate(config.webhook_keys, start=1)
    ]


class BalanceMonitor:
    """Checks configured balances against the alert threshold.

    Example:
        ```python
        config = load_config("monitor.yaml")
        report = BalanceMonitor(config).run()
        ```
    """

    def __init__(
        self,
        config: MonitorConfig,
        settings: RuntimeSettings | None = None,
        *,
        client: ChainClient | None = None,
        dispatcher: AlertDispatcher | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            config: Monitor configuration.
            settings: Runtime settings (defaults are used when omitted).
            client: Chain client; created from ``config.rpc_url`` when omitted.
            dispatcher: Alert dispatcher; built from the webhook keys when omitted.
            stream: Destination for per-address diagnostic lines.
        """
        self.config = config
        self.settings = settings or RuntimeSettings()
        self.stream = stream
        self._client = client
        self._dispatcher = dispatcher

    @property
    def client(self) -> ChainClient:
        """Return the chain client, creating it on first use."""
        if self._client is None:
            self._client = ChainClient(self.config.rpc_url, timeout=self.settings.rpc_timeout)
        return self._client

    @property
    def dispatcher(self) -> AlertDispatcher:
        """Return the alert dispatcher, creating it on first use."""
        if self._dispatcher is None:
            self._dispatcher = AlertDispatcher(build_channels(self.config, self.settings))
        return self._dispatcher

    def check_balances(self) -> tuple[tuple[BalanceReading, ...], AlertMessage]:
        """Fetch every configured balance and compose the alert.

        Returns:
            The readings and the composed message.

        Raises:
            ChainClientError: On the first address whose balance cannot be
                fetched. Later addresses are not queried.
        """
        composer = AlertComposer(
            self.config.alert_title,
            self.config.balance_alert,
            stream=self.stream,
        )
        readings: list[BalanceReading] = []

        for entry in self.config.addresses:
            raw_balance = self.client.get_balance(entry.address)
            reading = BalanceReading(
                tag=entry.tag,
                address=entry.address,
                raw_balance=raw_balance,
                balance=to_display_units(raw_balance),
            )
            readings.append(reading)
            if composer.add(reading):
                logger.debug("%s is below threshold %s", entry.tag, self.config.balance_alert)

        return tuple(readings), composer.build()

    def notify(self, message: AlertMessage) -> DispatchResult | None:
        """Send the alert to every webhook key if it has alert lines.

        Returns:
            The dispatch result, or None if nothing was sent.
        """
        if not message.has_alerts:
            logger.info("All balances at or above threshold, no alert sent")
            return None

        if self.settings.dry_run:
            logger.info("Dry run, skipping alert delivery:\n%s", message.content)
            return None

        return self.dispatcher.dispatch(message.content)

    def run(self) -> MonitorReport:
        """Run one full check.

        Raises:
            ChainClientError: If any balance fetch fails.
        """
        readings, message = self.check_balances()
        result = self.notify(message)
        return MonitorReport(readings=readings, message=message, dispatch=result)
