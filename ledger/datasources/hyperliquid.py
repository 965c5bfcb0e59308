"""Hyperliquid public API data source implementation."""

import asyncio
import logging
from typing import Any, Optional

import httpx

from ledger.errors import ExternalApiError
from .base import DataSource

logger = logging.getLogger(__name__)

# API constants
MAINNET_API_URL = "https://api.hyperliquid.xyz"
MAX_ITEMS_PER_REQUEST = 500
REQUEST_TIMEOUT = 30.0
MAX_RETRIES = 3
RETRY_DELAY = 2.0
RATE_LIMIT_DELAY = 0.5


class HyperliquidDataSource(DataSource):
    """
    Data source implementation using the Hyperliquid ``/info`` endpoint.

    Fills and funding payments are paginated by time: each page starts one
    millisecond after the last record of the previous page.
    """

    def __init__(
        self,
        api_url: str = MAINNET_API_URL,
        page_size: int = MAX_ITEMS_PER_REQUEST,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Hyperliquid data source.

        Args:
            api_url: Base URL for the Hyperliquid API
            page_size: Records per page; a shorter page ends pagination
            timeout: Per-request timeout in seconds
            max_retries: Retries for timeouts and rate limiting
            retry_delay: Delay between timeout retries in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url
        self.page_size = page_size
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _make_request(self, payload: dict, retry_count: int = 0) -> Any:
        """
        POST a payload to /info with timeout handling and retries.

        Args:
            payload: Request payload
            retry_count: Current retry attempt

        Returns:
            Response JSON data

        Raises:
            ExternalApiError: On non-success status, transport failure or
                exhausted retries
        """
        client = await self._get_client()
        request_type = payload.get("type")

        try:
            response = await client.post("/info", json=payload)
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            if retry_count < self.max_retries:
                logger.warning(
                    f"Request {request_type} timed out (attempt {retry_count + 1}/{self.max_retries}). "
                    f"Retrying in {self.retry_delay}s..."
                )
                await asyncio.sleep(self.retry_delay)
                return await self._make_request(payload, retry_count + 1)
            logger.error(f"Request {request_type} failed after {self.max_retries} retries: {e}")
            raise ExternalApiError(f"Hyperliquid request timed out: {request_type}") from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429 and retry_count < self.max_retries:
                logger.warning(
                    f"Rate limited (429) on {request_type} (attempt {retry_count + 1}/{self.max_retries}). "
                    f"Retrying in {RATE_LIMIT_DELAY}s..."
                )
                await asyncio.sleep(RATE_LIMIT_DELAY)
                return await self._make_request(payload, retry_count + 1)

            logger.error(f"HTTP error {status} for {request_type}: {e.response.text}")
            raise ExternalApiError(
                f"Hyperliquid request failed with status {status}: {e.response.text}"
            ) from e

        except httpx.HTTPError as e:
            logger.error(f"Transport error for {request_type}: {e}")
            raise ExternalApiError(f"Hyperliquid request failed: {e}") from e

        except ValueError as e:
            logger.error(f"Invalid JSON in {request_type} response: {e}")
            raise ExternalApiError(f"Hyperliquid returned invalid JSON for {request_type}") from e

    async def _fetch_paginated(
        self,
        request_type: str,
        wallet: str,
        start_time_ms: Optional[int],
    ) -> list[dict]:
        """
        Fetch every record of a time-paginated request type.

        Each page returns at most ``page_size`` records ordered by time. A
        shorter page is the last one; otherwise the next page starts at the
        last record's time + 1.
        """
        all_items: list[dict] = []
        current_start = start_time_ms or 0

        while True:
            payload = {
                "type": request_type,
                "user": wallet,
                "startTime": current_start,
            }

            data = await self._make_request(payload)
            items = data if isinstance(data, list) else []

            if not items:
                break

            all_items.extend(items)

            if len(items) < self.page_size:
                break

            last = items[-1]
            last_time = last.get("time") if isinstance(last, dict) else None
            if not isinstance(last_time, int) or isinstance(last_time, bool):
                logger.warning(f"{request_type} page ended without a timestamp, stopping pagination")
                break
            if last_time < current_start:
                # No progress, break to avoid infinite loop
                break
            current_start = last_time + 1

        return all_items

    async def get_fills(
        self,
        wallet: str,
        start_time_ms: Optional[int] = None,
    ) -> list[dict]:
        """Retrieve fills using the userFillsByTime endpoint."""
        return await self._fetch_paginated("userFillsByTime", wallet, start_time_ms)

    async def get_funding(
        self,
        wallet: str,
        start_time_ms: Optional[int] = None,
    ) -> list[dict]:
        """Retrieve funding payments using the userFunding endpoint."""
        return await self._fetch_paginated("userFunding", wallet, start_time_ms)

    async def get_user_state(self, wallet: str) -> dict:
        """Retrieve positions and margin via the clearinghouseState endpoint."""
        payload = {
            "type": "clearinghouseState",
            "user": wallet,
        }

        data = await self._make_request(payload)
        return data if data else {}

    async def get_all_mids(self) -> dict:
        """Retrieve mid prices via the allMids endpoint."""
        data = await self._make_request({"type": "allMids"})
        return data if data else {}

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
