"""AlertSink protocol - where rendered alerts are delivered."""

from __future__ import annotations

from typing import Protocol

from emp_monitor.models.alerts import Alert


class AlertSink(Protocol):
    """Fire-and-forget alert delivery."""

    async def emit(self, alert: Alert) -> None:
        ...
