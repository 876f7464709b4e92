"""Alert records handed to the logging sink."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from emp_monitor.models.events import EventCategory


class AlertLevel(str, Enum):
    """Severity of an alert record."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    AlertLevel.DEBUG: logging.DEBUG,
    AlertLevel.INFO: logging.INFO,
    AlertLevel.WARNING: logging.WARNING,
}


@dataclass(frozen=True)
class Alert:
    """A rendered alert: headline, mrkdwn body and structured context."""

    level: AlertLevel
    message: str
    category: EventCategory
    mrkdwn: str = ""
    context: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LiquidationFigures:
    """Auxiliary reads and derived metrics for one liquidation.

    Any field may be None when the underlying read failed or the
    computation was not possible; ``issues`` says why.
    """

    liquidation_time: int | None = None
    price: int | None = None  # wei
    collateral_requirement: int | None = None  # wei, 1.2e18 == 120%
    collateralization_percent: int | None = None  # wei, 200e18 == 200%
    disputable_price: int | None = None  # wei
    issues: tuple[str, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.issues)
