"""Logging alert sink - writes alerts to the ``emp_monitor.alerts`` logger.

Delivery to Slack, PagerDuty etc. is a matter of attaching handlers to that
logger; the structured context travels on each record as ``record.alert``.
"""

from __future__ import annotations

import logging

from emp_monitor.errors import EmitFailure
from emp_monitor.models.alerts import Alert

ALERT_LOGGER = "emp_monitor.alerts"


class LoggingAlertSink:
    """AlertSink backed by stdlib logging."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(ALERT_LOGGER)

    async def emit(self, alert: Alert) -> None:
        extra = {
            "alert": {
                "level": alert.level.value,
                "message": alert.message,
                "mrkdwn": alert.mrkdwn,
                **alert.context,
            }
        }
        try:
            if alert.mrkdwn:
                self._logger.log(alert.level.logging_level, "%s\n%s", alert.message, alert.mrkdwn, extra=extra)
            else:
                self._logger.log(alert.level.logging_level, "%s", alert.message, extra=extra)
        except Exception as exc:
            raise EmitFailure(f"could not log alert {alert.message!r}: {exc}") from exc
