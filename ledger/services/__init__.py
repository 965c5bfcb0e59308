from .ingestion_service import IngestionService
from .timeline_service import TimelineService
from .pnl_service import PnLCalculator

__all__ = [
    "IngestionService",
    "TimelineService",
    "PnLCalculator",
]
