"""ContractReader protocol - point reads against the monitored contract."""

from __future__ import annotations

from typing import Protocol


class ContractReader(Protocol):
    """Read-only view calls. Both methods raise SourceUnavailable on failure
    and may return None when the contract has no answer."""

    async def get_liquidation_timestamp(self, sponsor: str, liquidation_id: int) -> int | None:
        """Unix time at which the given liquidation was created."""
        ...

    async def get_collateral_requirement(self) -> int | None:
        """Collateral requirement ratio as a 1e18-scaled fraction (1.2e18 == 120%)."""
        ...
