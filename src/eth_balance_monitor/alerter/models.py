"""Data models for the alerter module."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AlertMessage:
    """A markdown alert ready for delivery.

    Attributes:
        title: Header text.
        lines: One line per address below the threshold, in config order.
    """

    title: str
    lines: tuple[str, ...] = ()

    @property
    def header(self) -> str:
        """Return the markdown header line."""
        return f"### {self.title}\n"

    @property
    def has_alerts(self) -> bool:
        """Return True if at least one address is below the threshold."""
        return len(self.lines) > 0

    @property
    def content(self) -> str:
        """Return the full markdown message."""
        return self.header + "".join(f"{line}\n" for line in self.lines)
