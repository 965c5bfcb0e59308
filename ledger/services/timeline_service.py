"""Timeline service for reconstructing an account's event history."""

import logging

from ledger.models import Timeline, TimelineEvent
from .normalizer import parse_fill, parse_funding

logger = logging.getLogger(__name__)


class TimelineService:
    """Service for merging raw fills and funding payments into a timeline."""

    def build_timeline(
        self,
        wallet: str,
        fills: list[dict],
        funding: list[dict],
    ) -> Timeline:
        """
        Build a timeline from raw fill and funding records.

        Malformed records are skipped. Events are stable-sorted by timestamp,
        so fills precede funding payments that share a timestamp and each
        list keeps its input order.

        Args:
            wallet: Wallet address
            fills: Raw fill records
            funding: Raw funding records

        Returns:
            Timeline with events sorted ascending by timestamp
        """
        events: list[TimelineEvent] = []

        for record in fills:
            event = parse_fill(record)
            if event is not None:
                events.append(event)

        for record in funding:
            event = parse_funding(record)
            if event is not None:
                events.append(event)

        dropped = len(fills) + len(funding) - len(events)
        if dropped:
            logger.debug(f"Skipped {dropped} malformed records for wallet {wallet}")

        events.sort(key=lambda e: e.timestamp)

        return Timeline(
            wallet=wallet,
            events=events,
            from_timestamp=events[0].timestamp if events else None,
            to_timestamp=events[-1].timestamp if events else None,
        )
