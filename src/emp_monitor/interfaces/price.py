"""PriceFeed protocol - historical prices for the contract's price identifier."""

from __future__ import annotations

from typing import Protocol


class PriceFeed(Protocol):
    """Historical price oracle."""

    async def update(self) -> None:
        """Refresh any cached price history."""
        ...

    async def get_historical_price(self, timestamp: int) -> int | None:
        """Price at ``timestamp`` scaled by 1e18, or None if unknown.

        May also raise PriceUnavailable; callers treat both the same.
        """
        ...
