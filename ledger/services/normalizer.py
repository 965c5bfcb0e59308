"""Normalization of raw Hyperliquid records into timeline events.

Raw records arrive as loosely structured JSON dicts. A record that is missing
a field the PnL arithmetic depends on is dropped (``None`` is returned);
optional fields fall back to a default instead.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ledger.models import FillEvent, FundingEvent

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a decimal string, returning None unless it is a finite number."""
    if not isinstance(value, str):
        return None
    try:
        result = Decimal(value)
    except InvalidOperation:
        return None
    if not result.is_finite():
        return None
    return result


def parse_timestamp_ms(value: Any) -> Optional[datetime]:
    """Convert integer epoch milliseconds to a UTC datetime."""
    # bool is an int subclass but never a valid timestamp
    if not isinstance(value, int) or isinstance(value, bool):
        return None
    try:
        return EPOCH + timedelta(milliseconds=value)
    except OverflowError:
        return None


def _field(record: dict, key: str) -> Any:
    """Read a field from the record, falling back to its nested ``delta``."""
    if key in record:
        return record[key]
    delta = record.get("delta")
    if isinstance(delta, dict):
        return delta.get(key)
    return None


def parse_fill(record: Any) -> Optional[FillEvent]:
    """
    Convert a raw fill record into a FillEvent.

    Required: time, coin, side, sz, px. Fee defaults to zero; closedPnl and
    hash become None when absent or malformed.
    """
    if not isinstance(record, dict):
        return None

    timestamp = parse_timestamp_ms(record.get("time"))
    coin = record.get("coin")
    side = record.get("side")
    size = parse_decimal(record.get("sz"))
    price = parse_decimal(record.get("px"))

    if (
        timestamp is None
        or not isinstance(coin, str) or not coin
        or not isinstance(side, str)
        or size is None
        or price is None
    ):
        logger.debug(f"Dropping malformed fill record: {record}")
        return None

    fee = parse_decimal(record.get("fee"))
    tx_hash = record.get("hash")

    return FillEvent(
        timestamp=timestamp,
        coin=coin,
        side=side,
        size=size,
        price=price,
        fee=fee if fee is not None else Decimal(0),
        realized_pnl=parse_decimal(record.get("closedPnl")),
        tx_hash=tx_hash if isinstance(tx_hash, str) else None,
    )


def parse_funding(record: Any) -> Optional[FundingEvent]:
    """
    Convert a raw funding record into a FundingEvent.

    Accepts both the flat shape and the ``userFunding`` shape where coin,
    usdc and fundingRate sit under ``delta``.
    """
    if not isinstance(record, dict):
        return None

    timestamp = parse_timestamp_ms(record.get("time"))
    coin = _field(record, "coin")
    amount = parse_decimal(_field(record, "usdc"))

    if timestamp is None or not isinstance(coin, str) or not coin or amount is None:
        logger.debug(f"Dropping malformed funding record: {record}")
        return None

    funding_rate = parse_decimal(_field(record, "fundingRate"))

    return FundingEvent(
        timestamp=timestamp,
        coin=coin,
        amount=amount,
        funding_rate=funding_rate if funding_rate is not None else Decimal(0),
    )
