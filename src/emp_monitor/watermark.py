"""Watermark diffing: pick out events newer than the last processed block."""

from __future__ import annotations

from enum import Enum
from typing import Sequence, TypeVar

from emp_monitor.models.events import ContractEvent

E = TypeVar("E", bound=ContractEvent)


class WatermarkPolicy(str, Enum):
    """How the next watermark is derived from a fetched history."""

    MAX = "max"  # highest block seen, never regresses
    LAST = "last"  # block of the list's tail element


def select_new(
    events: Sequence[E],
    watermark: int,
    policy: WatermarkPolicy = WatermarkPolicy.MAX,
) -> tuple[list[E], int]:
    """Split a full history into (new events, next watermark).

    New events are those with ``block_number > watermark``, in input order.
    The next watermark is taken from the whole history, not only the new
    subset; an empty history leaves it unchanged.
    """
    new_events = [e for e in events if e.block_number > watermark]
    if not events:
        return new_events, watermark

    if policy == WatermarkPolicy.LAST:
        return new_events, events[-1].block_number
    return new_events, max(watermark, max(e.block_number for e in events))
