"""Timeline model for an account's reconstructed history."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .events import TimelineEvent


class Timeline(BaseModel):
    """
    Chronological sequence of events for a wallet.

    Events are ordered by timestamp ascending; events sharing a timestamp
    keep the order they were produced in.
    """
    model_config = ConfigDict(frozen=True)

    wallet: str
    events: tuple[TimelineEvent, ...] = Field(default_factory=tuple)
    from_timestamp: Optional[datetime] = Field(default=None, description="First event time")
    to_timestamp: Optional[datetime] = Field(default=None, description="Last event time")

    @property
    def is_empty(self) -> bool:
        return not self.events
