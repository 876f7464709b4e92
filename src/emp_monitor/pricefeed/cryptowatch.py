"""CryptoWatch historical price feed - OHLC candles over the Cryptowatch REST API."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from decimal import Decimal

import httpx

from emp_monitor.errors import PriceUnavailable
from emp_monitor.fixedpoint import FIXED_POINT_SCALE, to_wei

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candle:
    """One OHLC period. Prices are wei-scaled."""

    open_time: int
    close_time: int
    open: int
    close: int


class CryptoWatchPriceFeed:
    """PriceFeed over Cryptowatch 1-minute (by default) OHLC candles.

    ``update()`` downloads candles covering the last ``lookback`` seconds;
    ``get_historical_price`` answers from that cache only.
    """

    def __init__(
        self,
        exchange: str,
        pair: str,
        lookback: int = 7200,
        ohlc_period: int = 60,
        invert_price: bool = False,
        api_key: str = "",
        base_url: str = "https://api.cryptowat.ch",
        timeout: int = 10,
        retries: int = 3,
    ) -> None:
        self._exchange = exchange
        self._pair = pair
        self._lookback = lookback
        self._period = ohlc_period
        self._invert = invert_price
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retries = max(1, retries)
        self._candles: list[Candle] = []
        self._last_update: int | None = None

    @property
    def last_update_time(self) -> int | None:
        return self._last_update

    @property
    def candles(self) -> list[Candle]:
        return list(self._candles)

    def _ohlc_url(self) -> str:
        return f"{self._base_url}/markets/{self._exchange}/{self._pair}/ohlc"

    async def update(self) -> None:
        """Refresh the candle cache. Raises PriceUnavailable if the API can't be read."""
        now = int(time.time())
        params = {"after": now - self._lookback, "periods": self._period}
        headers = {"X-CW-API-Key": self._api_key} if self._api_key else {}

        for attempt in range(1, self._retries + 1):
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(self._ohlc_url(), params=params, headers=headers)
                    resp.raise_for_status()
                break

            except (httpx.TimeoutException, httpx.HTTPStatusError) as exc:
                retryable = isinstance(exc, httpx.TimeoutException) or (
                    isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500
                )
                if retryable and attempt < self._retries:
                    log.warning(
                        "Cryptowatch request failed for %s/%s (attempt %d/%d): %s",
                        self._exchange, self._pair, attempt, self._retries, exc,
                    )
                    continue
                if isinstance(exc, httpx.HTTPStatusError):
                    raise PriceUnavailable(f"cryptowatch HTTP {exc.response.status_code}") from exc
                raise PriceUnavailable(f"cryptowatch timeout after {self._retries} attempts") from exc

            except httpx.HTTPError as exc:
                raise PriceUnavailable(f"cryptowatch request error: {exc}") from exc

        self._candles = self._parse_candles(resp.text)
        self._last_update = now
        log.debug(
            "Cryptowatch %s/%s: %d candles cached", self._exchange, self._pair, len(self._candles),
        )

    def _parse_candles(self, body: str) -> list[Candle]:
        # Decimal parsing keeps prices exact all the way to wei
        try:
            data = json.loads(body, parse_float=Decimal)
            rows = data["result"][str(self._period)]
            candles = []
            for row in rows:
                # [closeTime, open, high, low, close, volume, quoteVolume]
                close_time = int(row[0])
                candles.append(Candle(
                    open_time=close_time - self._period,
                    close_time=close_time,
                    open=self._to_price(row[1]),
                    close=self._to_price(row[4]),
                ))
        except (ValueError, KeyError, TypeError, IndexError, ArithmeticError) as exc:
            raise PriceUnavailable(f"malformed cryptowatch response: {exc!r}") from exc

        candles.sort(key=lambda c: c.open_time)
        return candles

    def _to_price(self, value: Decimal | int) -> int:
        price = to_wei(Decimal(value))
        if self._invert and price:
            return FIXED_POINT_SCALE * FIXED_POINT_SCALE // price
        return price

    async def get_historical_price(self, timestamp: int) -> int | None:
        """Open price of the candle containing ``timestamp``.

        Times after the newest candle get its close price; times before the
        oldest candle, or an empty cache, get None.
        """
        if not self._candles:
            return None
        for candle in self._candles:
            if candle.open_time <= timestamp < candle.close_time:
                return candle.open
        latest = self._candles[-1]
        if timestamp >= latest.close_time:
            return latest.close
        log.debug("No candle for %d (cache starts at %d)", timestamp, self._candles[0].open_time)
        return None
