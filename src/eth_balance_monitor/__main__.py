"""CLI entry point for Eth Balance Monitor.

This module provides the main entry point for running one balance check
from the command line, typically from cron or a systemd timer.

Usage:
    python -m eth_balance_monitor -c <configPath> [options]
"""

from __future__ import annotations

import argparse
import logging
import logging.config
import sys
from typing import NoReturn

from eth_balance_monitor import __version__
from eth_balance_monitor.balances.chain import ChainClientError
from eth_balance_monitor.config import (
    ConfigError,
    MonitorConfig,
    RuntimeSettings,
    load_config,
    load_settings,
)
from eth_balance_monitor.monitor import BalanceMonitor

# Application info
APP_NAME = "Eth Balance Monitor"
APP_VERSION = __version__

# Exit codes
EXIT_SUCCESS = 0
EXIT_USAGE_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_FETCH_ERROR = 3


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="eth-balance-monitor",
        description="Alert a WeCom group when Ethereum balances drop below a threshold.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m eth_balance_monitor -c monitor.yaml            Check balances and alert
  python -m eth_balance_monitor -c monitor.yaml --dry-run  Check without sending alerts
  python -m eth_balance_monitor -c monitor.yaml --log-level DEBUG  Enable debug logging
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    parser.add_argument(
        "-c",
        dest="config_path",
        metavar="configPath",
        default=None,
        help="config file path.",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level (default: from settings)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Check balances but don't send alerts",
    )

    return parser


def configure_logging(level: str) -> None:
    """Configure logging for the application.

    Logs go to stderr so stdout only carries the per-address balance lines.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if level == "DEBUG" else "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        # Quieter logging for noisy libraries
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
            "web3": {"level": "WARNING"},
            "urllib3": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)


def log_config_summary(config: MonitorConfig, settings: RuntimeSettings) -> None:
    """Log a summary of the configuration with secrets redacted."""
    logger = logging.getLogger(__name__)
    summary = config.redacted_summary()
    logger.info("%s v%s", APP_NAME, APP_VERSION)
    logger.info("  RPC: %s", summary["rpc_url"])
    logger.info("  Threshold: %s", summary["balance_alert"])
    logger.info("  Webhook keys: %s", summary["webhook_keys"])
    logger.info("  Addresses: %s", summary["addresses"])
    logger.info("  Dry Run: %s", settings.dry_run)


def load_configuration(config_path: str) -> tuple[MonitorConfig, RuntimeSettings] | None:
    """Load runtime settings and the monitor configuration file.

    Returns:
        The configuration and settings if valid, None if invalid.
    """
    try:
        settings = load_settings()
        config = load_config(config_path)
    except ConfigError as e:
        print(e, file=sys.stderr)
        return None
    return config, settings


def run_monitor(config: MonitorConfig, settings: RuntimeSettings) -> int:
    """Run one balance check.

    Args:
        config: Monitor configuration.
        settings: Runtime settings.

    Returns:
        Exit code.
    """
    logger = logging.getLogger(__name__)
    log_config_summary(config, settings)

    try:
        report = BalanceMonitor(config, settings).run()
    except ChainClientError as e:
        print(e, file=sys.stderr)
        return EXIT_FETCH_ERROR

    logger.info(
        "Checked %d address(es), %d below threshold",
        len(report.readings),
        len(report.message.lines),
    )
    if report.dispatch is not None and not report.dispatch.all_succeeded:
        logger.warning(
            "Alert delivered to %d/%d webhook(s)",
            report.dispatch.success_count,
            report.dispatch.success_count + report.dispatch.failure_count,
        )
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.config_path:
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_USAGE_ERROR)

    loaded = load_configuration(args.config_path)
    if loaded is None:
        sys.exit(EXIT_CONFIG_ERROR)
    config, settings = loaded

    # Determine effective log level
    log_level = args.log_level or settings.log_level
    configure_logging(log_level)

    if args.dry_run:
        settings = settings.model_copy(update={"dry_run": True})

    sys.exit(run_monitor(config, settings))


if __name__ == "__main__":
    main()
