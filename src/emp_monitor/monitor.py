"""Contract monitor - turns newly observed EMP events into alerts.

Watches four event categories: new sponsors, liquidations, disputes and
dispute settlements. Each check pulls the full history for its category,
diffs it against that category's watermark, renders alerts for the new
events and only then advances the watermark.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from emp_monitor.alerts.formatter import (
    AT,
    AlertContext,
    format_dispute_alert,
    format_dispute_settlement_alert,
    format_liquidation_alert,
    format_liquidation_warning,
    format_sponsor_alert,
)
from emp_monitor.alerts.links import EtherscanLinkRenderer
from emp_monitor.errors import PriceUnavailable, SourceUnavailable
from emp_monitor.fixedpoint import collateralization_ratio_percent, disputable_price_threshold
from emp_monitor.interfaces.links import LinkRenderer
from emp_monitor.interfaces.price import PriceFeed
from emp_monitor.interfaces.reader import ContractReader
from emp_monitor.interfaces.sink import AlertSink
from emp_monitor.interfaces.source import EventSource
from emp_monitor.models.alerts import Alert, AlertLevel, LiquidationFigures
from emp_monitor.models.config import ContractMetadata, MonitoredAddresses
from emp_monitor.models.events import ContractEvent, EventCategory, LiquidationSubmitted
from emp_monitor.models.state import MonitorState
from emp_monitor.watermark import WatermarkPolicy, select_new

log = logging.getLogger(__name__)

_CHECK_MESSAGES = {
    EventCategory.SPONSOR: "Checking for new sponsor events",
    EventCategory.LIQUIDATION: "Checking for new liquidation events",
    EventCategory.DISPUTE: "Checking for new dispute events",
    EventCategory.DISPUTE_SETTLEMENT: "Checking for new dispute settlement events",
}


class ContractMonitor:
    """Emits alerts for new ExpiringMultiParty contract events.

    Not safe for overlapping calls: the caller must run at most one check
    per instance at a time.
    """

    def __init__(
        self,
        source: EventSource,
        reader: ContractReader,
        price_feed: PriceFeed,
        sink: AlertSink,
        metadata: ContractMetadata,
        monitored: MonitoredAddresses | None = None,
        links: LinkRenderer | None = None,
        state: MonitorState | None = None,
        watermark_policy: WatermarkPolicy = WatermarkPolicy.MAX,
    ) -> None:
        self._source = source
        self._reader = reader
        self._price_feed = price_feed
        self._sink = sink
        self._ctx = AlertContext(
            metadata=metadata,
            monitored=monitored or MonitoredAddresses(),
            links=links or EtherscanLinkRenderer(),
        )
        self._state = state or MonitorState()
        self._policy = watermark_policy

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def alert_context(self) -> AlertContext:
        return self._ctx

    # ── Checks ────────────────────────────────────────────

    async def check_new_sponsors(self) -> list[Alert]:
        new_events, mark = await self._diff(
            EventCategory.SPONSOR, self._source.get_all_sponsor_events,
        )
        alerts = [format_sponsor_alert(e, self._ctx) for e in new_events]
        return await self._finish(EventCategory.SPONSOR, alerts, mark)

    async def check_new_liquidations(self) -> list[Alert]:
        new_events, mark = await self._diff(
            EventCategory.LIQUIDATION, self._source.get_all_liquidation_events,
        )

        # Aux reads are independent per event; resolve them all before emitting anything
        figures = await asyncio.gather(*(self._resolve_liquidation(e) for e in new_events))

        alerts: list[Alert] = []
        for event, fig in zip(new_events, figures):
            if fig.degraded:
                alerts.append(format_liquidation_warning(event, fig))
            alerts.append(format_liquidation_alert(event, self._ctx, fig))
        return await self._finish(EventCategory.LIQUIDATION, alerts, mark)

    async def check_new_disputes(self) -> list[Alert]:
        new_events, mark = await self._diff(
            EventCategory.DISPUTE, self._source.get_all_dispute_events,
        )
        alerts = [format_dispute_alert(e, self._ctx) for e in new_events]
        return await self._finish(EventCategory.DISPUTE, alerts, mark)

    async def check_new_dispute_settlements(self) -> list[Alert]:
        new_events, mark = await self._diff(
            EventCategory.DISPUTE_SETTLEMENT, self._source.get_all_dispute_settlement_events,
        )
        alerts = [format_dispute_settlement_alert(e, self._ctx) for e in new_events]
        return await self._finish(EventCategory.DISPUTE_SETTLEMENT, alerts, mark)

    async def check_all(self) -> list[Alert]:
        """Run all four checks in order.

        An unavailable source only skips its own category. Once every check
        has run, the first SourceUnavailable is re-raised; alerts from the
        other categories have been emitted by then.
        """
        alerts: list[Alert] = []
        failures: list[SourceUnavailable] = []
        for check in (
            self.check_new_sponsors,
            self.check_new_liquidations,
            self.check_new_disputes,
            self.check_new_dispute_settlements,
        ):
            try:
                alerts += await check()
            except SourceUnavailable as exc:
                log.warning("%s skipped: %s", check.__name__, exc)
                failures.append(exc)
        if failures:
            raise failures[0]
        return alerts

    # ── Pass steps ────────────────────────────────────────

    async def _diff(
        self,
        category: EventCategory,
        fetch: Callable[[], Awaitable[Sequence[ContractEvent]]],
    ) -> tuple[list, int]:
        watermark = self._state.watermark(category)
        await self._emit(Alert(
            level=AlertLevel.DEBUG,
            message=_CHECK_MESSAGES[category],
            category=category,
            context={"at": AT, "category": category.value, "last_seen_block": watermark},
        ))

        # SourceUnavailable propagates; the watermark has not been touched yet
        events = await fetch()
        new_events, mark = select_new(events, watermark, self._policy)
        if new_events:
            log.debug(
                "%d new %s events (watermark %d -> %d)",
                len(new_events), category.value, watermark, mark,
            )
        return new_events, mark

    async def _finish(self, category: EventCategory, alerts: list[Alert], mark: int) -> list[Alert]:
        for alert in alerts:
            await self._emit(alert)
        self._state = self._state.advance(category, mark)
        return [a for a in alerts if a.level == AlertLevel.INFO]

    async def _emit(self, alert: Alert) -> None:
        try:
            await self._sink.emit(alert)
        except Exception as exc:
            log.warning("Failed to emit %s alert %r: %s", alert.category.value, alert.message, exc)

    # ── Liquidation auxiliary data ────────────────────────

    async def _resolve_liquidation(self, event: LiquidationSubmitted) -> LiquidationFigures:
        """Read liquidation time, collateral requirement and price for one event.

        Every read failure is recorded as an issue; none of them raise.
        """
        issues: list[str] = []

        async def _timestamp() -> int | None:
            try:
                value = await self._reader.get_liquidation_timestamp(event.sponsor, event.liquidation_id)
            except SourceUnavailable as exc:
                issues.append(f"liquidation time unavailable: {exc}")
                return None
            if value is None:
                issues.append("liquidation time unavailable: no value returned")
            return value

        async def _requirement() -> int | None:
            try:
                value = await self._reader.get_collateral_requirement()
            except SourceUnavailable as exc:
                issues.append(f"collateral requirement unavailable: {exc}")
                return None
            if value is None:
                issues.append("collateral requirement unavailable: no value returned")
            return value

        liquidation_time, requirement = await asyncio.gather(_timestamp(), _requirement())

        price: int | None = None
        if liquidation_time is not None:
            try:
                price = await self._price_feed.get_historical_price(liquidation_time)
            except PriceUnavailable as exc:
                issues.append(f"price unavailable: {exc}")
            else:
                if price is None:
                    issues.append(f"no historical price at {liquidation_time}")
        return self._compute_figures(event, liquidation_time, price, requirement, issues)

    @staticmethod
    def _compute_figures(
        event: LiquidationSubmitted,
        liquidation_time: int | None,
        price: int | None,
        requirement: int | None,
        issues: list[str],
    ) -> LiquidationFigures:
        collateralization: int | None = None
        disputable: int | None = None
        if price is not None and requirement is not None:
            try:
                collateralization = collateralization_ratio_percent(
                    event.liquidated_collateral, event.tokens_outstanding, price,
                )
                disputable = disputable_price_threshold(
                    requirement, event.liquidated_collateral, event.tokens_outstanding,
                )
            except ArithmeticError as exc:
                log.warning(
                    "Bad liquidation data in tx %s: %s", event.transaction_hash, exc,
                )
                issues.append(f"arithmetic fault: {exc}")
                collateralization = disputable = None
        return LiquidationFigures(
            liquidation_time=liquidation_time,
            price=price,
            collateral_requirement=requirement,
            collateralization_percent=collateralization,
            disputable_price=disputable,
            issues=tuple(issues),
        )
