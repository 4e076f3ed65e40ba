"""Alert message composition.

Readings are fed to :class:`AlertComposer` in configuration order. Every
reading produces a diagnostic line on stdout; readings strictly below the
threshold also produce an alert line in the markdown message.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from eth_balance_monitor.alerter.models import AlertMessage

if TYPE_CHECKING:
    from eth_balance_monitor.balances.models import BalanceReading

BALANCE_PRECISION = 4


def format_balance(balance: float) -> str:
    """Format a balance with 4 decimal places."""
    return f"{balance:.{BALANCE_PRECISION}f}"


def format_diagnostic(reading: BalanceReading) -> str:
    """Format the per-address line printed for every reading."""
    return f"{reading.tag}, {reading.address}: {format_balance(reading.balance)}"


def format_alert_line(reading: BalanceReading) -> str:
    """Format the markdown line for an address below the threshold."""
    return f"{reading.tag} *{format_balance(reading.balance)}*"


class AlertComposer:
    """Builds one alert message from a sequence of balance readings."""

    def __init__(
        self,
        title: str,
        threshold: float,
        *,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize the composer.

        Args:
            title: Alert header text.
            threshold: Balances strictly below this value are alerted.
            stream: Where diagnostic lines go (defaults to stdout).
        """
        self.title = title
        self.threshold = threshold
        self.stream = stream
        self._lines: list[str] = []

    def add(self, reading: BalanceReading) -> bool:
        """Record a reading.

        Returns:
            True if the reading produced an alert line.
        """
        print(format_diagnostic(reading), file=self.stream or sys.stdout)

        if not reading.is_below(self.threshold):
            return False
        self._lines.append(format_alert_line(reading))
        return True

    def build(self) -> AlertMessage:
        """Return the message composed so far."""
        return AlertMessage(title=self.title, lines=tuple(self._lines))
