"""API routes for the PnL ledger service."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ledger.datasources import DataSource
from ledger.errors import ValidationError
from ledger.models import DailyPnl, PnlSummary, Timeline
from ledger.services import IngestionService, PnLCalculator, TimelineService
from .dependencies import get_datasource

router = APIRouter(prefix="/v1")

WALLET_EXAMPLE = "0x0e09b56ef137f417e424f1265425e93bfff77e17"


def _require_wallet(wallet: str) -> str:
    wallet = wallet.strip()
    if not wallet:
        raise ValidationError("wallet must not be empty")
    return wallet


@router.get("/timeline", response_model=Timeline)
async def get_timeline(
    wallet: str = Query(
        ...,
        description="Wallet address",
        example=WALLET_EXAMPLE
    ),
    since: Optional[int] = Query(
        None,
        description="Start time in milliseconds",
        example=1766449358096
    ),
    datasource: DataSource = Depends(get_datasource),
) -> Timeline:
    """
    Get the chronological event timeline for a wallet.

    Returns fills and funding payments sorted by time.
    """
    wallet = _require_wallet(wallet)
    fills, funding = await IngestionService(datasource).fetch_history(wallet, since)
    return TimelineService().build_timeline(wallet, fills, funding)


@router.get("/pnl", response_model=PnlSummary)
async def get_pnl_summary(
    wallet: str = Query(
        ...,
        description="Wallet address",
        example=WALLET_EXAMPLE
    ),
    since: Optional[int] = Query(
        None,
        description="Start time in milliseconds",
        example=1766449358096
    ),
    datasource: DataSource = Depends(get_datasource),
) -> PnlSummary:
    """
    Get PnL summary for a wallet.

    Returns: realized, unrealized, total, funding, fees, net and per-asset breakdown
    """
    wallet = _require_wallet(wallet)
    ingestion = IngestionService(datasource)
    (fills, funding), user_state = await asyncio.gather(
        ingestion.fetch_history(wallet, since),
        ingestion.fetch_user_state(wallet),
    )

    timeline = TimelineService().build_timeline(wallet, fills, funding)
    calculator = PnLCalculator()
    unrealized_pnl = calculator.calculate_unrealized_from_state(user_state)
    return calculator.calculate_summary(wallet, timeline, unrealized_pnl)


@router.get("/pnl/daily", response_model=list[DailyPnl])
async def get_daily_pnl(
    wallet: str = Query(
        ...,
        description="Wallet address",
        example=WALLET_EXAMPLE
    ),
    since: Optional[int] = Query(
        None,
        description="Start time in milliseconds",
        example=1766449358096
    ),
    datasource: DataSource = Depends(get_datasource),
) -> list[DailyPnl]:
    """
    Get daily PnL with running cumulative totals.

    Returns: date, pnl, cumulative_pnl per UTC day with activity
    """
    wallet = _require_wallet(wallet)
    fills, funding = await IngestionService(datasource).fetch_history(wallet, since)
    timeline = TimelineService().build_timeline(wallet, fills, funding)
    return PnLCalculator().calculate_daily(timeline)


@router.get("/fills", response_model=list[dict])
async def get_fills(
    wallet: str = Query(
        ...,
        description="Wallet address",
        example=WALLET_EXAMPLE
    ),
    since: Optional[int] = Query(
        None,
        description="Start time in milliseconds"
    ),
    datasource: DataSource = Depends(get_datasource),
) -> list[dict]:
    """Get raw fills for a wallet, as returned by the exchange."""
    wallet = _require_wallet(wallet)
    return await IngestionService(datasource).fetch_all_fills(wallet, since)


@router.get("/funding", response_model=list[dict])
async def get_funding(
    wallet: str = Query(
        ...,
        description="Wallet address",
        example=WALLET_EXAMPLE
    ),
    since: Optional[int] = Query(
        None,
        description="Start time in milliseconds"
    ),
    datasource: DataSource = Depends(get_datasource),
) -> list[dict]:
    """Get raw funding payments for a wallet, as returned by the exchange."""
    wallet = _require_wallet(wallet)
    return await IngestionService(datasource).fetch_all_funding(wallet, since)


@router.get("/mids", response_model=dict)
async def get_all_mids(
    datasource: DataSource = Depends(get_datasource),
) -> dict:
    """Get current mid prices for all coins."""
    return await IngestionService(datasource).fetch_all_mids()
