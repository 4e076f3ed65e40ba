"""Tests for the Ethereum balance client."""

from unittest.mock import MagicMock, patch

import pytest
from web3 import HTTPProvider, IPCProvider, Web3
from web3.exceptions import Web3Exception

from eth_balance_monitor.balances.chain import (
    DEFAULT_REQUEST_TIMEOUT,
    ChainClient,
    ChainClientError,
    QueryError,
    RPCConnectionError,
    fetch_balance,
)

RPC_URL = "https://eth.example.org"
VALID_ADDRESS = "0x" + "ab" * 20
VALID_ADDRESS_2 = "0x00000000219ab540356cbb839cbe05303d7705fa"


@pytest.fixture
def mock_w3() -> MagicMock:
    """Create a mock Web3 instance."""
    w3 = MagicMock()
    w3.eth = MagicMock()
    w3.eth.get_balance = MagicMock(return_value=1_000_000_000_000_000_000)
    return w3


@pytest.fixture
def client(mock_w3: MagicMock) -> ChainClient:
    """Create a client whose Web3 instance is mocked."""
    chain_client = ChainClient(RPC_URL)
    chain_client._w3 = mock_w3
    return chain_client


class TestChainClientInit:
    """Tests for ChainClient construction."""

    def test_init(self) -> None:
        """Test initialization."""
        client = ChainClient(RPC_URL)

        assert client._rpc_url == RPC_URL
        assert client._timeout == DEFAULT_REQUEST_TIMEOUT

    def test_init_custom_timeout(self) -> None:
        """Test initialization with a custom timeout."""
        client = ChainClient(RPC_URL, timeout=5.0)

        assert client._timeout == 5.0

    def test_ipc_endpoint(self) -> None:
        """Test that a .ipc path selects the IPC provider."""
        client = ChainClient("/tmp/geth.ipc", timeout=5.0)

        assert isinstance(client._w3.provider, IPCProvider)

    def test_http_endpoint(self) -> None:
        """Test that an HTTP URL selects the HTTP provider."""
        client = ChainClient(RPC_URL)

        assert isinstance(client._w3.provider, HTTPProvider)

    @pytest.mark.parametrize("url", ["ws://eth.example.org", "eth.example.org", ""])
    def test_malformed_endpoint_raises(self, url: str) -> None:
        """Test that unsupported endpoints are rejected as connection errors."""
        with pytest.raises(RPCConnectionError, match="Error connect Ethrpc"):
            ChainClient(url)

    def test_errors_share_base_class(self) -> None:
        """Test the exception hierarchy."""
        assert issubclass(RPCConnectionError, ChainClientError)
        assert issubclass(QueryError, ChainClientError)


class TestGetBalance:
    """Tests for ChainClient.get_balance."""

    def test_returns_wei(self, client: ChainClient, mock_w3: MagicMock) -> None:
        """Test a successful balance query."""
        balance = client.get_balance(VALID_ADDRESS)

        assert balance == 1_000_000_000_000_000_000
        mock_w3.eth.get_balance.assert_called_once_with(
            Web3.to_checksum_address(VALID_ADDRESS), "latest"
        )

    def test_checksummed_input(self, client: ChainClient, mock_w3: MagicMock) -> None:
        """Test that checksummed addresses are accepted."""
        checksummed = Web3.to_checksum_address(VALID_ADDRESS_2)

        client.get_balance(checksummed)

        mock_w3.eth.get_balance.assert_called_once_with(checksummed, "latest")

    @pytest.mark.parametrize("address", ["0x1234", "not-an-address", "0x" + "zz" * 20])
    def test_invalid_address(
        self, client: ChainClient, mock_w3: MagicMock, address: str
    ) -> None:
        """Test that malformed addresses fail before any RPC call."""
        with pytest.raises(QueryError, match="invalid address"):
            client.get_balance(address)

        mock_w3.eth.get_balance.assert_not_called()

    def test_rpc_error(self, client: ChainClient, mock_w3: MagicMock) -> None:
        """Test that web3 errors become query errors."""
        mock_w3.eth.get_balance.side_effect = Web3Exception("execution reverted")

        with pytest.raises(QueryError, match=f"Error {VALID_ADDRESS} get balance"):
            client.get_balance(VALID_ADDRESS)

    def test_rpc_value_error(self, client: ChainClient, mock_w3: MagicMock) -> None:
        """Test that RPC error payloads raised as ValueError become query errors."""
        mock_w3.eth.get_balance.side_effect = ValueError({"code": -32000, "message": "bad"})

        with pytest.raises(QueryError):
            client.get_balance(VALID_ADDRESS)

    def test_unreachable_endpoint(self, client: ChainClient, mock_w3: MagicMock) -> None:
        """Test that transport failures become connection errors."""
        mock_w3.eth.get_balance.side_effect = ConnectionError("connection refused")

        with pytest.raises(RPCConnectionError, match="connection refused"):
            client.get_balance(VALID_ADDRESS)

    def test_timeout(self, client: ChainClient, mock_w3: MagicMock) -> None:
        """Test that timeouts become connection errors."""
        mock_w3.eth.get_balance.side_effect = TimeoutError("timed out")

        with pytest.raises(RPCConnectionError):
            client.get_balance(VALID_ADDRESS)

    def test_unexpected_result(self, client: ChainClient, mock_w3: MagicMock) -> None:
        """Test that a non-integer result is rejected."""
        mock_w3.eth.get_balance.return_value = "0x10"

        with pytest.raises(QueryError, match="unexpected result"):
            client.get_balance(VALID_ADDRESS)

    def test_large_balance(self, client: ChainClient, mock_w3: MagicMock) -> None:
        """Test that balances beyond 64 bits are returned intact."""
        mock_w3.eth.get_balance.return_value = 2**200 + 7

        assert client.get_balance(VALID_ADDRESS) == 2**200 + 7


class TestFetchBalance:
    """Tests for the fetch_balance helper."""

    def test_fetch_balance(self) -> None:
        """Test fetching through a one-off client."""
        with patch.object(ChainClient, "get_balance", return_value=42) as mock_get:
            balance = fetch_balance(VALID_ADDRESS, RPC_URL)

        assert balance == 42
        mock_get.assert_called_once_with(VALID_ADDRESS)

    def test_fetch_balance_bad_endpoint(self) -> None:
        """Test that a malformed endpoint fails before querying."""
        with pytest.raises(RPCConnectionError):
            fetch_balance(VALID_ADDRESS, "ftp://eth.example.org")
