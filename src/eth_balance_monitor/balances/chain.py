"""Ethereum JSON-RPC client for native balance queries.

This module provides a small synchronous client around web3's HTTP and IPC
providers. Failures are split into two kinds so callers can report them
separately:

- :class:`RPCConnectionError` when the endpoint is malformed or unreachable
- :class:`QueryError` when the address is invalid or the node rejects the call

No retries are attempted; the first failure is raised to the caller.
"""

from __future__ import annotations

import logging

from web3 import Web3
from web3.exceptions import ProviderConnectionError, Web3Exception
from web3.providers import HTTPProvider, IPCProvider
from web3.providers.base import BaseProvider

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30.0
IPC_SUFFIX = ".ipc"
LATEST_BLOCK = "latest"


class ChainClientError(Exception):
    """Base exception for chain client errors."""


class RPCConnectionError(ChainClientError):
    """Raised when the RPC endpoint is malformed or cannot be reached."""


class QueryError(ChainClientError):
    """Raised when a balance query fails."""


class ChainClient:
    """Ethereum client for reading account balances.

    Example:
        ```python
        client = ChainClient("https://eth.llamarpc.com")
        wei = client.get_balance("0x00000000219ab540356cbb839cbe05303d7705fa")
        ```
    """

    def __init__(self, rpc_url: str, *, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        """Initialize the client.

        Args:
            rpc_url: HTTP(S) JSON-RPC endpoint URL or path to a node's ``.ipc`` socket.
            timeout: Request timeout in seconds.

        Raises:
            RPCConnectionError: If the endpoint is neither an HTTP(S) URL nor an
                IPC socket path.
        """
        self._rpc_url = rpc_url
        self._timeout = timeout
        self._w3 = Web3(_create_provider(rpc_url, timeout))

    def get_balance(self, address: str) -> int:
        """Get the wei balance of an address at the latest block.

        Args:
            address: Hex address, lowercase or EIP-55 checksummed.

        Returns:
            Balance in wei.

        Raises:
            QueryError: If the address is invalid or the RPC call fails.
            RPCConnectionError: If the endpoint cannot be reached.
        """
        if not Web3.is_address(address):
            raise QueryError(f"Error {address} get balance: invalid address")

        checksum_address = Web3.to_checksum_address(address)
        logger.debug("Querying balance of %s", checksum_address)
        try:
            balance = self._w3.eth.get_balance(checksum_address, LATEST_BLOCK)
        except (OSError, ProviderConnectionError) as e:
            # requests' transport errors are IOError subclasses
            raise RPCConnectionError(f"Error connect Ethrpc: {e}") from e
        except (Web3Exception, ValueError) as e:
            raise QueryError(f"Error {address} get balance: {e}") from e

        if not isinstance(balance, int):
            raise QueryError(f"Error {address} get balance: unexpected result {balance!r}")
        return balance


def fetch_balance(
    address: str,
    rpc_url: str,
    *,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> int:
    """Fetch one address balance in wei from the given endpoint."""
    return ChainClient(rpc_url, timeout=timeout).get_balance(address)


def _create_provider(rpc_url: str, timeout: float) -> BaseProvider:
    """Pick the web3 provider for an endpoint."""
    if rpc_url.startswith(("http://", "https://")):
        return HTTPProvider(
            rpc_url,
            request_kwargs={"timeout": timeout},
            exception_retry_configuration=None,
        )
    if rpc_url.endswith(IPC_SUFFIX):
        return IPCProvider(rpc_url, timeout=timeout)
    raise RPCConnectionError(f"Error connect Ethrpc: unsupported endpoint {rpc_url!r}")
