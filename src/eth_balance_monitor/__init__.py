"""Eth Balance Monitor - threshold alerts for on-chain account balances."""

__version__ = "0.1.0"
