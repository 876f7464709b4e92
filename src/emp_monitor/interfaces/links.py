"""LinkRenderer protocol - turns addresses and tx hashes into display strings."""

from __future__ import annotations

from typing import Protocol


class LinkRenderer(Protocol):
    """Pure renderer; no failure modes."""

    def render(self, value: str, network_id: int) -> str:
        ...
