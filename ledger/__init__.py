"""Hyperliquid account timeline and PnL ledger."""

__version__ = "1.0.0"
