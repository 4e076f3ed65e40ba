"""Configuration loading with Pydantic models and Pydantic Settings.

Two sources feed a run:

- The monitor configuration file passed with ``-c`` (YAML, JSON or TOML),
  describing the RPC endpoint, alert threshold, webhook keys and the
  addresses to watch. It is parsed into an immutable :class:`MonitorConfig`.
- Process-level knobs (log level, webhook base URL, timeouts, dry run) read
  from environment variables or a ``.env`` file into :class:`RuntimeSettings`.

Both are built once at startup and passed explicitly to the code that needs
them.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from eth_balance_monitor.alerter.channels.wecom import WECOM_WEBHOOK_URL

ADDRESS_DELIMITER = ":"


class ConfigError(Exception):
    """Raised when the monitor configuration cannot be loaded."""


class AddressEntry(BaseModel):
    """A watched address and the tag shown in alerts."""

    model_config = ConfigDict(frozen=True)

    tag: str
    address: str

    @classmethod
    def parse(cls, raw: str) -> AddressEntry:
        """Parse a ``tag:address`` entry.

        Raises:
            ValueError: If the entry does not split into exactly two
                non-empty fields.
        """
        parts = raw.split(ADDRESS_DELIMITER)
        if len(parts) != 2:
            raise ValueError(f"address entry {raw!r} must have the form 'tag:address'")
        tag, address = (part.strip() for part in parts)
        if not tag or not address:
            raise ValueError(f"address entry {raw!r} has an empty tag or address")
        return cls(tag=tag, address=address)

    def __str__(self) -> str:
        return f"{self.tag}{ADDRESS_DELIMITER}{self.address}"


class MonitorConfig(BaseModel):
    """Monitor configuration loaded from the ``-c`` file.

    Keys are matched case-insensitively, so ``EthRpc`` and ``ethrpc`` are
    the same setting.

    Example:
        ```yaml
        EthRpc: https://mainnet.infura.io/v3/<project>
        BalanceAlert: 0.5
        AlertTitle: Hot wallet balance low
        QywxBot:
          - 693a91f6-7xxx-4bc4-97a0-0ec2sifa5aaa
        EthAddress:
          - deployer:0x00000000219ab540356cbb839cbe05303d7705fa
        ```
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    rpc_url: str = Field(alias="ethrpc", description="Ethereum JSON-RPC endpoint")
    balance_alert: float = Field(
        alias="balancealert",
        description="Alert when a balance is strictly below this value (display units)",
    )
    alert_title: str = Field(alias="alerttitle", description="Header text for alerts")
    webhook_keys: tuple[SecretStr, ...] = Field(
        default=(),
        alias="qywxbot",
        description="WeCom group robot webhook keys",
    )
    addresses: tuple[AddressEntry, ...] = Field(
        default=(),
        alias="ethaddress",
        description="Watched addresses as 'tag:address' entries",
    )

    @field_validator("addresses", mode="before")
    @classmethod
    def parse_addresses(cls, v: Any) -> Any:
        """Split ``tag:address`` strings into entries."""
        if not isinstance(v, list | tuple):
            return v
        entries = []
        for item in v:
            if isinstance(item, AddressEntry):
                entries.append(item)
            elif isinstance(item, str):
                entries.append(AddressEntry.parse(item))
            else:
                raise ValueError(f"address entry {item!r} must have the form 'tag:address'")
        return tuple(entries)

    def redacted_summary(self) -> dict[str, str]:
        """Get a summary of the configuration with secrets redacted.

        Returns:
            Dictionary of settings with webhook keys and URL credentials masked.
        """
        return {
            "rpc_url": _redact_url(self.rpc_url),
            "balance_alert": str(self.balance_alert),
            "alert_title": self.alert_title,
            "webhook_keys": f"({len(self.webhook_keys)} set)",
            "addresses": ", ".join(str(entry) for entry in self.addresses) or "(none)",
        }


class RuntimeSettings(BaseSettings):
    """Process settings read from the environment.

    Loads configuration from environment variables with support for
    .env files via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    webhook_url: str = Field(
        default=WECOM_WEBHOOK_URL,
        alias="WECOM_WEBHOOK_URL",
        description="Base URL of the chat webhook endpoint",
    )
    rpc_timeout: float = Field(
        default=30.0,
        alias="RPC_TIMEOUT",
        description="RPC request timeout in seconds",
        gt=0,
    )
    webhook_timeout: float = Field(
        default=10.0,
        alias="WEBHOOK_TIMEOUT",
        description="Webhook request timeout in seconds",
        gt=0,
    )
    dry_run: bool = Field(
        default=False,
        alias="DRY_RUN",
        description="Compose alerts without sending them",
    )

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: str) -> str:
        """Validate webhook URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("WECOM_WEBHOOK_URL must be an HTTP(S) URL")
        return v

    def get_logging_level(self) -> int:
        """Get the numeric logging level."""
        level: int = getattr(logging, self.log_level)
        return level


def _redact_url(url: str) -> str:
    """Redact password from URL if present."""
    if "@" in url and "://" in url:
        # URL has credentials - redact the password
        protocol_end = url.index("://") + 3
        at_pos = url.index("@")
        creds_part = url[protocol_end:at_pos]
        if ":" in creds_part:
            username = creds_part.split(":")[0]
            return f"{url[:protocol_end]}{username}:***@{url[at_pos + 1 :]}"
    return url


def describe_validation_error(error: ValidationError) -> str:
    """Render a pydantic validation error one field per line."""
    lines = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "(root)"
        lines.append(f"  {field}: {item['msg']}")
    return "\n".join(lines)


def _read_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".toml":
        return tomllib.loads(text)
    # JSON documents parse as YAML too
    return yaml.safe_load(text)


def load_config(path: str | Path | None) -> MonitorConfig:
    """Load the monitor configuration file.

    Args:
        path: Path to a YAML, JSON or TOML document.

    Returns:
        The validated, immutable configuration.

    Raises:
        ConfigError: If the path is empty, the file cannot be read or parsed,
            or a field has the wrong type.
    """
    if not path:
        raise ConfigError("Error loading config file: no path given")

    config_path = Path(path)
    try:
        data = _read_document(config_path)
    except OSError as e:
        raise ConfigError(f"Error loading config file {config_path}: {e}") from e
    except (yaml.YAMLError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error parsing config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Error parsing config file {config_path}: expected a mapping of settings"
        )

    normalized = {str(key).lower(): value for key, value in data.items()}
    try:
        return MonitorConfig.model_validate(normalized)
    except ValidationError as e:
        raise ConfigError(
            f"Error unmarshaling config file {config_path}:\n{describe_validation_error(e)}"
        ) from e


def load_settings() -> RuntimeSettings:
    """Load runtime settings from the environment.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    try:
        return RuntimeSettings()
    except ValidationError as e:
        raise ConfigError(f"Invalid runtime settings:\n{describe_validation_error(e)}") from e
