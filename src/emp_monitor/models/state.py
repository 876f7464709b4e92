"""Per-category watermark state owned by a ContractMonitor."""

from __future__ import annotations

from dataclasses import dataclass, replace

from emp_monitor.models.events import EventCategory

_FIELDS = {
    EventCategory.SPONSOR: "last_sponsor_block",
    EventCategory.LIQUIDATION: "last_liquidation_block",
    EventCategory.DISPUTE: "last_dispute_block",
    EventCategory.DISPUTE_SETTLEMENT: "last_dispute_settlement_block",
}


@dataclass(frozen=True)
class MonitorState:
    """Highest block number processed for each event category.

    Immutable: ``advance`` returns a new state, so a pass that aborts
    half-way never leaves a partially updated watermark behind.
    """

    last_sponsor_block: int = 0
    last_liquidation_block: int = 0
    last_dispute_block: int = 0
    last_dispute_settlement_block: int = 0

    def watermark(self, category: EventCategory) -> int:
        return getattr(self, _FIELDS[category])

    def advance(self, category: EventCategory, block_number: int) -> MonitorState:
        return replace(self, **{_FIELDS[category]: block_number})

    def as_dict(self) -> dict[str, int]:
        return {c.value: self.watermark(c) for c in EventCategory}
