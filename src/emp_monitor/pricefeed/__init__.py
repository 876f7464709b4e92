"""Historical price feeds."""

from emp_monitor.pricefeed.cryptowatch import Candle, CryptoWatchPriceFeed

__all__ = ["Candle", "CryptoWatchPriceFeed"]
