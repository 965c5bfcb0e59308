"""PnL result models for API responses."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AssetPnl(BaseModel):
    """
    PnL breakdown for a single coin.
    """
    coin: str
    realized_pnl: Decimal = Decimal(0)
    funding_pnl: Decimal = Decimal(0)
    fees: Decimal = Decimal(0)
    net_pnl: Decimal = Field(default=Decimal(0), description="realized + funding - fees")
    trade_count: int = 0


class PnlSummary(BaseModel):
    """
    Aggregated PnL for a wallet over the span of its timeline.
    """
    wallet: str
    period_start: datetime
    period_end: datetime
    realized_pnl: Decimal = Field(description="Sum of closed PnL over all fills")
    unrealized_pnl: Decimal = Field(description="Exchange-reported unrealized PnL of open positions")
    total_pnl: Decimal = Field(description="realized + unrealized")
    funding_pnl: Decimal = Field(description="Net funding received (negative if paid)")
    trading_fees: Decimal = Field(description="Total fees paid")
    net_pnl: Decimal = Field(description="total + funding - fees")
    by_asset: dict[str, AssetPnl] = Field(default_factory=dict)


class DailyPnl(BaseModel):
    """Net PnL for one UTC calendar day, with the running total."""
    date: str = Field(description="UTC date as YYYY-MM-DD")
    pnl: Decimal
    cumulative_pnl: Decimal
