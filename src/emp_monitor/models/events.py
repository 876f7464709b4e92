"""Contract event models decoded from the ExpiringMultiParty event log."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class EventCategory(str, Enum):
    """The four event categories the contract monitor tracks."""

    SPONSOR = "sponsor"
    LIQUIDATION = "liquidation"
    DISPUTE = "dispute"
    DISPUTE_SETTLEMENT = "dispute_settlement"


@dataclass(frozen=True)
class SponsorCreated:
    """A sponsor opened a position (NewSponsor joined with PositionCreated)."""

    sponsor: str
    token_amount: int  # wei
    collateral_amount: int  # wei
    transaction_hash: str
    block_number: int


@dataclass(frozen=True)
class LiquidationSubmitted:
    """A liquidator submitted a liquidation against a sponsor (LiquidationCreated)."""

    sponsor: str
    liquidator: str
    liquidation_id: int
    locked_collateral: int  # wei
    liquidated_collateral: int  # wei
    tokens_outstanding: int  # wei
    transaction_hash: str
    block_number: int
    liquidation_time: int | None = None  # as emitted, informational only


@dataclass(frozen=True)
class DisputeRaised:
    """A disputer challenged a liquidation (LiquidationDisputed)."""

    disputer: str
    liquidator: str
    dispute_bond_amount: int  # wei
    transaction_hash: str
    block_number: int
    sponsor: str | None = None
    liquidation_id: int | None = None


@dataclass(frozen=True)
class DisputeSettled:
    """A dispute was resolved one way or the other (DisputeSettled)."""

    liquidator: str
    disputer: str
    dispute_succeeded: bool
    transaction_hash: str
    block_number: int
    sponsor: str | None = None
    liquidation_id: int | None = None


ContractEvent = Union[SponsorCreated, LiquidationSubmitted, DisputeRaised, DisputeSettled]

EVENT_CATEGORIES: dict[type, EventCategory] = {
    SponsorCreated: EventCategory.SPONSOR,
    LiquidationSubmitted: EventCategory.LIQUIDATION,
    DisputeRaised: EventCategory.DISPUTE,
    DisputeSettled: EventCategory.DISPUTE_SETTLEMENT,
}


def category_of(event: ContractEvent) -> EventCategory:
    """Return the category tag for a decoded event."""
    try:
        return EVENT_CATEGORIES[type(event)]
    except KeyError:
        raise TypeError(f"not a contract event: {type(event).__name__}") from None
