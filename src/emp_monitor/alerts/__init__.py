"""Alert rendering: etherscan links and per-category message formatters."""

from emp_monitor.alerts.formatter import (
    AlertContext,
    format_alert,
    format_dispute_alert,
    format_dispute_settlement_alert,
    format_liquidation_alert,
    format_liquidation_warning,
    format_sponsor_alert,
)
from emp_monitor.alerts.links import EtherscanLinkRenderer, etherscan_link

__all__ = [
    "AlertContext",
    "format_alert",
    "format_dispute_alert",
    "format_dispute_settlement_alert",
    "format_liquidation_alert",
    "format_liquidation_warning",
    "format_sponsor_alert",
    "EtherscanLinkRenderer",
    "etherscan_link",
]
