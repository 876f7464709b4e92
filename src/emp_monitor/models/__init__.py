"""Data models for the emp_monitor package."""

from emp_monitor.models.events import (
    ContractEvent,
    DisputeRaised,
    DisputeSettled,
    EventCategory,
    LiquidationSubmitted,
    SponsorCreated,
    category_of,
)
from emp_monitor.models.alerts import Alert, AlertLevel, LiquidationFigures
from emp_monitor.models.config import (
    ContractMetadata,
    MonitorConfig,
    MonitoredAddresses,
    PriceFeedConfig,
)
from emp_monitor.models.state import MonitorState

__all__ = [
    "ContractEvent", "DisputeRaised", "DisputeSettled", "EventCategory",
    "LiquidationSubmitted", "SponsorCreated", "category_of",
    "Alert", "AlertLevel", "LiquidationFigures",
    "ContractMetadata", "MonitorConfig", "MonitoredAddresses", "PriceFeedConfig",
    "MonitorState",
]
