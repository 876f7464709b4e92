"""Tier 2 fixtures: a local HTTP server standing in for the Cryptowatch API."""

from __future__ import annotations

import json

import pytest
from aiohttp import web

from emp_monitor.pricefeed.cryptowatch import CryptoWatchPriceFeed

CW_PORT = 9311
PERIOD = 60

# [closeTime, open, high, low, close, volume, quoteVolume]
CANDLES = [
    [1_000_060, 0.031, 0.0315, 0.0305, 0.0312, 120.5, 3.75],
    [1_000_120, 0.0312, 0.032, 0.031, 0.0318, 98.25, 3.1],
    [1_000_180, 0.0318, 0.0325, 0.0316, 0.0321, 110.0, 3.5],
]


class CryptowatchStub:
    """Scriptable OHLC endpoint. ``statuses`` are served first, then the candles."""

    def __init__(self) -> None:
        self.candles = list(CANDLES)
        self.statuses: list[int] = []
        self.body: str | None = None
        self.requests: list[web.Request] = []

    async def handle_ohlc(self, request: web.Request) -> web.Response:
        self.requests.append(request)
        if self.statuses:
            return web.Response(status=self.statuses.pop(0))
        if self.body is not None:
            return web.Response(text=self.body, content_type="application/json")
        payload = {"result": {str(PERIOD): self.candles}, "allowance": {"cost": 0.015}}
        return web.Response(text=json.dumps(payload), content_type="application/json")


@pytest.fixture
async def cryptowatch():
    """Local server at http://127.0.0.1:9311 serving /markets/{exchange}/{pair}/ohlc."""
    stub = CryptowatchStub()
    app = web.Application()
    app.router.add_get("/markets/{exchange}/{pair}/ohlc", stub.handle_ohlc)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", CW_PORT)
    await site.start()
    yield f"http://127.0.0.1:{CW_PORT}", stub
    await runner.cleanup()


def make_feed(base_url: str, **overrides) -> CryptoWatchPriceFeed:
    """CryptoWatchPriceFeed pointed at the local stub."""
    kwargs = dict(
        exchange="coinbase-pro",
        pair="ethbtc",
        ohlc_period=PERIOD,
        base_url=base_url,
        timeout=2,
        retries=3,
    )
    kwargs.update(overrides)
    return CryptoWatchPriceFeed(**kwargs)
