"""PnL service for aggregating a timeline into PnL metrics."""

from datetime import datetime, timezone
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, localcontext
from typing import Any

from ledger.models import (
    AssetPnl,
    DailyPnl,
    FillEvent,
    FundingEvent,
    LiquidationEvent,
    PnlSummary,
    Timeline,
    TimelineEvent,
)
from .normalizer import parse_decimal

# Addition and subtraction are exact under this context: no rounding, no overflow
EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


def _asset_entry(by_asset: dict[str, AssetPnl], coin: str) -> AssetPnl:
    """Get the coin's breakdown, creating it on first reference."""
    if coin not in by_asset:
        by_asset[coin] = AssetPnl(coin=coin)
    return by_asset[coin]


def daily_contribution(event: TimelineEvent) -> Decimal:
    """Net PnL an event adds to its day."""
    with localcontext(EXACT_CONTEXT):
        if isinstance(event, FillEvent):
            realized = event.realized_pnl if event.realized_pnl is not None else Decimal(0)
            return realized - event.fee
        if isinstance(event, FundingEvent):
            return event.amount
        if isinstance(event, LiquidationEvent):
            return -event.loss
    # Deposits and withdrawals move capital, not PnL
    return Decimal(0)


class PnLCalculator:
    """Calculator for PnL metrics over a timeline."""

    def calculate_summary(
        self,
        wallet: str,
        timeline: Timeline,
        unrealized_pnl: Decimal,
    ) -> PnlSummary:
        """
        Calculate the PnL summary for a timeline.

        Realized PnL and fees come from fills, funding PnL from funding
        payments. Unrealized PnL is taken as given.

        Args:
            wallet: Wallet address
            timeline: Timeline to aggregate
            unrealized_pnl: Current unrealized PnL of open positions

        Returns:
            PnlSummary with totals and per-asset breakdowns
        """
        realized_pnl = Decimal(0)
        funding_pnl = Decimal(0)
        trading_fees = Decimal(0)
        by_asset: dict[str, AssetPnl] = {}

        with localcontext(EXACT_CONTEXT):
            for event in timeline.events:
                if isinstance(event, FillEvent):
                    asset = _asset_entry(by_asset, event.coin)
                    trading_fees += event.fee
                    asset.fees += event.fee
                    asset.trade_count += 1
                    if event.realized_pnl is not None:
                        realized_pnl += event.realized_pnl
                        asset.realized_pnl += event.realized_pnl
                elif isinstance(event, FundingEvent):
                    asset = _asset_entry(by_asset, event.coin)
                    funding_pnl += event.amount
                    asset.funding_pnl += event.amount

            for asset in by_asset.values():
                asset.net_pnl = asset.realized_pnl + asset.funding_pnl - asset.fees

            total_pnl = realized_pnl + unrealized_pnl
            net_pnl = total_pnl + funding_pnl - trading_fees

        if timeline.is_empty:
            period_start = period_end = datetime.now(timezone.utc)
        else:
            period_start, period_end = timeline.from_timestamp, timeline.to_timestamp

        return PnlSummary(
            wallet=wallet,
            period_start=period_start,
            period_end=period_end,
            realized_pnl=realized_pnl,
            unrealized_pnl=unrealized_pnl,
            total_pnl=total_pnl,
            funding_pnl=funding_pnl,
            trading_fees=trading_fees,
            net_pnl=net_pnl,
            by_asset=by_asset,
        )

    def calculate_daily(self, timeline: Timeline) -> list[DailyPnl]:
        """
        Calculate net PnL per UTC day with a running cumulative total.

        Returns:
            One DailyPnl per date that has events, ascending by date
        """
        if timeline.is_empty:
            return []

        daily: dict[str, Decimal] = {}
        result: list[DailyPnl] = []

        with localcontext(EXACT_CONTEXT):
            for event in timeline.events:
                date = event.timestamp.astimezone(timezone.utc).strftime("%Y-%m-%d")
                daily[date] = daily.get(date, Decimal(0)) + daily_contribution(event)

            cumulative = Decimal(0)
            for date in sorted(daily):
                cumulative += daily[date]
                result.append(DailyPnl(
                    date=date,
                    pnl=daily[date],
                    cumulative_pnl=cumulative,
                ))

        return result

    def calculate_unrealized_from_state(self, user_state: Any) -> Decimal:
        """
        Sum the exchange-reported unrealized PnL of all open positions.

        Positions without a parsable ``unrealizedPnl`` contribute zero, and a
        snapshot of unexpected shape yields zero.
        """
        if not isinstance(user_state, dict):
            return Decimal(0)

        positions = user_state.get("assetPositions")
        if not isinstance(positions, list):
            return Decimal(0)

        total = Decimal(0)
        with localcontext(EXACT_CONTEXT):
            for asset_pos in positions:
                if not isinstance(asset_pos, dict):
                    continue
                pos = asset_pos.get("position")
                if not isinstance(pos, dict):
                    continue
                pnl = parse_decimal(pos.get("unrealizedPnl"))
                if pnl is not None:
                    total += pnl

        return total
