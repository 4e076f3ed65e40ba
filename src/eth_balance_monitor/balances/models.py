"""Data models for the balances module."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BalanceReading:
    """A balance observed for one watched address during a run.

    Attributes:
        tag: Label from the address entry.
        address: Address as configured.
        raw_balance: Balance in wei.
        balance: Balance in ether.
    """

    tag: str
    address: str
    raw_balance: int
    balance: float

    def is_below(self, threshold: float) -> bool:
        """Return True if the balance is strictly below the threshold."""
        return self.balance < threshold
