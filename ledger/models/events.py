"""Timeline event models.

Each event is an immutable fact taken from the account's history. The
``event_type`` field discriminates the variants so a serialized timeline can
be read back into the right model.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BaseEvent(BaseModel):
    """Common fields for every timeline event."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(description="Event time (UTC, millisecond resolution)")


class FillEvent(BaseEvent):
    """A trade fill."""
    event_type: Literal["fill"] = "fill"
    coin: str
    side: str = Field(description="Side token as sent by the exchange")
    size: Decimal
    price: Decimal
    fee: Decimal = Decimal(0)
    realized_pnl: Optional[Decimal] = Field(default=None, description="Closed PnL, if any")
    tx_hash: Optional[str] = None


class FundingEvent(BaseEvent):
    """A funding payment (positive = received, negative = paid)."""
    event_type: Literal["funding"] = "funding"
    coin: str
    amount: Decimal
    funding_rate: Decimal = Decimal(0)


class LiquidationEvent(BaseEvent):
    event_type: Literal["liquidation"] = "liquidation"
    coin: str
    size: Decimal
    price: Decimal
    loss: Decimal


class DepositEvent(BaseEvent):
    event_type: Literal["deposit"] = "deposit"
    amount: Decimal
    token: str


class WithdrawalEvent(BaseEvent):
    event_type: Literal["withdrawal"] = "withdrawal"
    amount: Decimal
    token: str


TimelineEvent = Annotated[
    Union[FillEvent, FundingEvent, LiquidationEvent, DepositEvent, WithdrawalEvent],
    Field(discriminator="event_type"),
]
