"""Protocol interfaces for the monitor's external collaborators."""

from emp_monitor.interfaces.source import EventSource
from emp_monitor.interfaces.reader import ContractReader
from emp_monitor.interfaces.price import PriceFeed
from emp_monitor.interfaces.sink import AlertSink
from emp_monitor.interfaces.links import LinkRenderer

__all__ = [
    "EventSource",
    "ContractReader",
    "PriceFeed",
    "AlertSink",
    "LinkRenderer",
]
