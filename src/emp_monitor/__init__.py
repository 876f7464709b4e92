"""emp_monitor - alerts and risk metrics for ExpiringMultiParty contract events."""

__version__ = "0.1.0"
