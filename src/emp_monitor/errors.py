"""Exception types raised by monitor collaborators."""

from __future__ import annotations


class MonitorError(Exception):
    """Base class for errors the monitor knows how to contain."""


class SourceUnavailable(MonitorError):
    """The event source or contract reader could not answer.

    Aborts the current pass for one category; the watermark is left
    untouched so the next pass retries.
    """


class PriceUnavailable(MonitorError):
    """The price feed has no price for the requested time."""


class EmitFailure(MonitorError):
    """A sink could not deliver an alert."""
