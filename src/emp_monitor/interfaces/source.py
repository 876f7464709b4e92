"""EventSource protocol - returns the full known event history per category."""

from __future__ import annotations

from typing import Protocol

from emp_monitor.models.events import (
    DisputeRaised,
    DisputeSettled,
    LiquidationSubmitted,
    SponsorCreated,
)


class EventSource(Protocol):
    """Supplies ordered event histories for the monitored contract.

    Every call returns the complete history seen so far, oldest first.
    Implementations raise SourceUnavailable when the chain cannot be read.
    """

    async def get_all_sponsor_events(self) -> list[SponsorCreated]:
        ...

    async def get_all_liquidation_events(self) -> list[LiquidationSubmitted]:
        ...

    async def get_all_dispute_events(self) -> list[DisputeRaised]:
        ...

    async def get_all_dispute_settlement_events(self) -> list[DisputeSettled]:
        ...
