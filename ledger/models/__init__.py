from .events import (
    BaseEvent,
    FillEvent,
    FundingEvent,
    LiquidationEvent,
    DepositEvent,
    WithdrawalEvent,
    TimelineEvent,
)
from .timeline import Timeline
from .pnl import AssetPnl, PnlSummary, DailyPnl

__all__ = [
    "BaseEvent",
    "FillEvent",
    "FundingEvent",
    "LiquidationEvent",
    "DepositEvent",
    "WithdrawalEvent",
    "TimelineEvent",
    "Timeline",
    "AssetPnl",
    "PnlSummary",
    "DailyPnl",
]
