"""Balance polling - RPC queries and unit conversion."""

from eth_balance_monitor.balances.chain import (
    ChainClient,
    ChainClientError,
    QueryError,
    RPCConnectionError,
    fetch_balance,
)
from eth_balance_monitor.balances.models import BalanceReading
from eth_balance_monitor.balances.units import (
    WEI_PER_ETHER,
    to_display_units,
    to_smallest_units,
)

__all__ = [
    # Chain client
    "ChainClient",
    "ChainClientError",
    "QueryError",
    "RPCConnectionError",
    "fetch_balance",
    # Models
    "BalanceReading",
    # Units
    "WEI_PER_ETHER",
    "to_display_units",
    "to_smallest_units",
]
