"""Ingestion service for fetching raw account data."""

import asyncio
import logging
from typing import Optional

from ledger.datasources import DataSource

logger = logging.getLogger(__name__)


class IngestionService:
    """Service for retrieving raw records from the data source."""

    def __init__(self, datasource: DataSource):
        self.datasource = datasource

    async def fetch_all_fills(self, wallet: str, since: Optional[int] = None) -> list[dict]:
        """Fetch every fill for a wallet since the given time."""
        logger.info(f"Fetching fills for wallet: {wallet}")
        fills = await self.datasource.get_fills(wallet, since)
        logger.info(f"Fetched {len(fills)} fills")
        return fills

    async def fetch_all_funding(self, wallet: str, since: Optional[int] = None) -> list[dict]:
        """Fetch every funding payment for a wallet since the given time."""
        logger.info(f"Fetching funding for wallet: {wallet}")
        funding = await self.datasource.get_funding(wallet, since)
        logger.info(f"Fetched {len(funding)} funding payments")
        return funding

    async def fetch_history(
        self,
        wallet: str,
        since: Optional[int] = None,
    ) -> tuple[list[dict], list[dict]]:
        """
        Fetch fills and funding payments concurrently.

        The two record types paginate independently, so their fetches can
        run side by side.

        Returns:
            Tuple of (fills, funding)
        """
        fills, funding = await asyncio.gather(
            self.fetch_all_fills(wallet, since),
            self.fetch_all_funding(wallet, since),
        )
        return fills, funding

    async def fetch_user_state(self, wallet: str) -> dict:
        """Fetch current positions and balances."""
        return await self.datasource.get_user_state(wallet)

    async def fetch_all_mids(self) -> dict:
        """Fetch current mid prices for all coins."""
        return await self.datasource.get_all_mids()
