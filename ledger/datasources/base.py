"""Abstract base class for data sources."""

from abc import ABC, abstractmethod
from typing import Optional


class DataSource(ABC):
    """
    Abstract interface for account history data sources.

    Records are returned raw, exactly as the upstream API sends them;
    normalization happens in the timeline service.
    """

    @abstractmethod
    async def get_fills(
        self,
        wallet: str,
        start_time_ms: Optional[int] = None,
    ) -> list[dict]:
        """
        Retrieve all fills for a wallet.

        Args:
            wallet: Wallet address (0x...)
            start_time_ms: Start time in milliseconds (inclusive), None for all history

        Returns:
            List of raw fill records sorted by time ascending

        Note:
            Implementation should handle pagination internally.
        """
        pass

    @abstractmethod
    async def get_funding(
        self,
        wallet: str,
        start_time_ms: Optional[int] = None,
    ) -> list[dict]:
        """
        Retrieve all funding payments for a wallet.

        Same contract as get_fills.
        """
        pass

    @abstractmethod
    async def get_user_state(self, wallet: str) -> dict:
        """
        Retrieve the wallet's perpetuals account summary with open positions.

        Returns:
            Dict with assetPositions, marginSummary, withdrawable, etc.
        """
        pass

    @abstractmethod
    async def get_all_mids(self) -> dict:
        """
        Retrieve current mid prices for all coins.

        Returns:
            Dict mapping coin to mid price string
        """
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).

        Override this if the data source holds resources that need cleanup.
        """
        pass
