"""Alert rendering - one pure function per contract event category.

Each formatter returns an ``Alert`` whose ``mrkdwn`` body is what operators
read in Slack, and whose ``context`` carries the raw event fields for
structured log handlers. Number formatting lives in ``fixedpoint``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from emp_monitor.alerts.links import EtherscanLinkRenderer
from emp_monitor.fixedpoint import format_decimal
from emp_monitor.interfaces.links import LinkRenderer
from emp_monitor.models.alerts import Alert, AlertLevel, LiquidationFigures
from emp_monitor.models.config import ContractMetadata, MonitoredAddresses
from emp_monitor.models.events import (
    ContractEvent,
    DisputeRaised,
    DisputeSettled,
    EventCategory,
    LiquidationSubmitted,
    SponsorCreated,
    category_of,
)

AT = "ContractMonitor"

SPONSOR_TITLE = "New Sponsor Alert 🐣!"
LIQUIDATION_TITLE = "Liquidation Alert 🧙‍♂️!"
DISPUTE_TITLE = "Dispute Alert 👻!"
DISPUTE_SETTLEMENT_TITLE = "Dispute Settlement Alert 👮‍♂️!"
PRICE_WARNING_TITLE = "Could not get historical price for liquidation"

MONITORED_BOT = " (Monitored liquidator or disputer bot)"
MONITORED_LIQUIDATOR = " (Monitored liquidator bot)"
MONITORED_DISPUTER = " (Monitored dispute bot)"


@dataclass(frozen=True)
class AlertContext:
    """Static inputs shared by every formatter."""

    metadata: ContractMetadata
    monitored: MonitoredAddresses = field(default_factory=MonitoredAddresses)
    links: LinkRenderer = field(default_factory=EtherscanLinkRenderer)

    def link(self, value: str) -> str:
        return self.links.render(value, self.metadata.network_id)


def _context(event: ContractEvent, **extra) -> dict:
    ctx = {"at": AT, "category": category_of(event).value, **asdict(event)}
    ctx.update(extra)
    return ctx


def format_sponsor_alert(event: SponsorCreated, ctx: AlertContext) -> Alert:
    meta = ctx.metadata
    is_bot = ctx.monitored.is_liquidator(event.sponsor) or ctx.monitored.is_disputer(event.sponsor)
    mrkdwn = (
        ctx.link(event.sponsor)
        + (MONITORED_BOT if is_bot else "")
        + f" created {format_decimal(event.token_amount)} {meta.synthetic_symbol}"
        + f" backed by {format_decimal(event.collateral_amount)} {meta.collateral_symbol}"
        + f". tx: {ctx.link(event.transaction_hash)}"
    )
    return Alert(
        level=AlertLevel.INFO,
        message=SPONSOR_TITLE,
        category=EventCategory.SPONSOR,
        mrkdwn=mrkdwn,
        context=_context(event),
    )


def format_liquidation_alert(
    event: LiquidationSubmitted,
    ctx: AlertContext,
    figures: LiquidationFigures,
) -> Alert:
    """Render a liquidation, annotated with collateralization and dispute price.

    Derived figures that could not be computed render as ``[Invalid]``.
    """
    meta = ctx.metadata
    requirement_percent = (
        figures.collateral_requirement * 100
        if figures.collateral_requirement is not None
        else None
    )
    mrkdwn = (
        ctx.link(event.liquidator)
        + (MONITORED_LIQUIDATOR if ctx.monitored.is_liquidator(event.liquidator) else "")
        + f" initiated liquidation for {format_decimal(event.locked_collateral)}"
        + f" (liquidated collateral = {format_decimal(event.liquidated_collateral)})"
        + f" {meta.collateral_symbol} of sponsor {ctx.link(event.sponsor)}"
        + f" collateral backing {format_decimal(event.tokens_outstanding)} {meta.synthetic_symbol} tokens."
        + " Sponsor collateralization ('liquidatedCollateral / tokensOutstanding') was "
        + f"{format_decimal(figures.collateralization_percent)}%,"
        + f" using {format_decimal(figures.price)} as the estimated price at liquidation time."
        + f" With a collateralization requirement of {format_decimal(requirement_percent)}%,"
        + f" this liquidation would be disputable at a price below {format_decimal(figures.disputable_price)}"
        + f". tx: {ctx.link(event.transaction_hash)}"
    )
    return Alert(
        level=AlertLevel.INFO,
        message=LIQUIDATION_TITLE,
        category=EventCategory.LIQUIDATION,
        mrkdwn=mrkdwn,
        context=_context(
            event,
            price=figures.price,
            collateral_requirement=figures.collateral_requirement,
            collateralization_percent=figures.collateralization_percent,
            disputable_price=figures.disputable_price,
        ),
    )


def format_liquidation_warning(event: LiquidationSubmitted, figures: LiquidationFigures) -> Alert:
    """Companion warning for a liquidation whose derived figures degraded."""
    return Alert(
        level=AlertLevel.WARNING,
        message=PRICE_WARNING_TITLE,
        category=EventCategory.LIQUIDATION,
        context={
            "at": AT,
            "category": EventCategory.LIQUIDATION.value,
            "transaction_hash": event.transaction_hash,
            "liquidation_time": figures.liquidation_time,
            "price": figures.price,
            "issues": list(figures.issues),
        },
    )


def format_dispute_alert(event: DisputeRaised, ctx: AlertContext) -> Alert:
    meta = ctx.metadata
    mrkdwn = (
        ctx.link(event.disputer)
        + (MONITORED_DISPUTER if ctx.monitored.is_disputer(event.disputer) else "")
        + f" initiated dispute against liquidator {ctx.link(event.liquidator)}"
        + (MONITORED_LIQUIDATOR if ctx.monitored.is_liquidator(event.liquidator) else "")
        + f" with a dispute bond of {format_decimal(event.dispute_bond_amount)} {meta.collateral_symbol}"
        + f". tx: {ctx.link(event.transaction_hash)}"
    )
    return Alert(
        level=AlertLevel.INFO,
        message=DISPUTE_TITLE,
        category=EventCategory.DISPUTE,
        mrkdwn=mrkdwn,
        context=_context(event),
    )


def format_dispute_settlement_alert(event: DisputeSettled, ctx: AlertContext) -> Alert:
    mrkdwn = (
        f"Dispute between liquidator {ctx.link(event.liquidator)}"
        + (MONITORED_LIQUIDATOR if ctx.monitored.is_liquidator(event.liquidator) else "")
        + f" and disputer {ctx.link(event.disputer)}"
        + (MONITORED_DISPUTER if ctx.monitored.is_disputer(event.disputer) else "")
        + f" has been resolved as {'success' if event.dispute_succeeded else 'failed'}"
        + f". tx: {ctx.link(event.transaction_hash)}"
    )
    return Alert(
        level=AlertLevel.INFO,
        message=DISPUTE_SETTLEMENT_TITLE,
        category=EventCategory.DISPUTE_SETTLEMENT,
        mrkdwn=mrkdwn,
        context=_context(event),
    )


def format_alert(
    event: ContractEvent,
    ctx: AlertContext,
    figures: LiquidationFigures | None = None,
) -> Alert:
    """Dispatch to the formatter for ``event``'s category."""
    if isinstance(event, SponsorCreated):
        return format_sponsor_alert(event, ctx)
    if isinstance(event, LiquidationSubmitted):
        return format_liquidation_alert(event, ctx, figures or LiquidationFigures())
    if isinstance(event, DisputeRaised):
        return format_dispute_alert(event, ctx)
    if isinstance(event, DisputeSettled):
        return format_dispute_settlement_alert(event, ctx)
    raise TypeError(f"no formatter for {type(event).__name__}")
