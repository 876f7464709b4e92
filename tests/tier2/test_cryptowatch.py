"""CryptoWatchPriceFeed against a local Cryptowatch stand-in."""

from __future__ import annotations

import pytest

from emp_monitor.errors import PriceUnavailable
from emp_monitor.fixedpoint import FIXED_POINT_SCALE, to_wei

from tests.tier2.conftest import CANDLES, make_feed


# ── Happy path ────────────────────────────────────────────────────


@pytest.mark.http
async def test_update_caches_candles(cryptowatch):
    base_url, stub = cryptowatch
    feed = make_feed(base_url)

    await feed.update()

    candles = feed.candles
    assert len(candles) == 3
    assert candles[0].open_time == 1_000_000
    assert candles[0].close_time == 1_000_060
    assert candles[0].open == to_wei("0.031")
    assert feed.last_update_time is not None

    [request] = stub.requests
    assert request.match_info["exchange"] == "coinbase-pro"
    assert request.match_info["pair"] == "ethbtc"
    assert request.query["periods"] == "60"
    assert "after" in request.query
    assert "X-CW-API-Key" not in request.headers


@pytest.mark.http
async def test_api_key_header_sent(cryptowatch):
    base_url, stub = cryptowatch
    await make_feed(base_url, api_key="cw-secret").update()
    assert stub.requests[0].headers["X-CW-API-Key"] == "cw-secret"


@pytest.mark.http
async def test_historical_price_lookup(cryptowatch):
    base_url, _ = cryptowatch
    feed = make_feed(base_url)
    await feed.update()

    # Inside a candle: its open price
    assert await feed.get_historical_price(1_000_000) == to_wei("0.031")
    assert await feed.get_historical_price(1_000_119) == to_wei("0.0312")
    # At or after the newest close: newest close price
    assert await feed.get_historical_price(1_000_180) == to_wei("0.0321")
    assert await feed.get_historical_price(2_000_000) == to_wei("0.0321")
    # Before the cache window
    assert await feed.get_historical_price(999_999) is None


@pytest.mark.http
async def test_inverted_prices(cryptowatch):
    base_url, stub = cryptowatch
    stub.candles = [[1_000_060, 0.04, 0.04, 0.04, 0.05, 1, 1]]
    feed = make_feed(base_url, invert_price=True)
    await feed.update()

    assert await feed.get_historical_price(1_000_000) == 25 * FIXED_POINT_SCALE
    assert await feed.get_historical_price(1_000_060) == 20 * FIXED_POINT_SCALE


async def test_empty_cache_has_no_price():
    feed = make_feed("http://127.0.0.1:1")
    assert await feed.get_historical_price(1_000_000) is None
    assert feed.last_update_time is None


# ── Errors ────────────────────────────────────────────────────────


@pytest.mark.http
async def test_server_error_is_retried(cryptowatch):
    base_url, stub = cryptowatch
    stub.statuses = [503]
    feed = make_feed(base_url)

    await feed.update()

    assert len(stub.requests) == 2
    assert len(feed.candles) == 3


@pytest.mark.http
async def test_server_error_exhausts_retries(cryptowatch):
    base_url, stub = cryptowatch
    stub.statuses = [500, 500, 500]
    feed = make_feed(base_url, retries=3)

    with pytest.raises(PriceUnavailable, match="HTTP 500"):
        await feed.update()
    assert len(stub.requests) == 3


@pytest.mark.http
async def test_client_error_is_not_retried(cryptowatch):
    base_url, stub = cryptowatch
    stub.statuses = [404]

    with pytest.raises(PriceUnavailable, match="HTTP 404"):
        await make_feed(base_url).update()
    assert len(stub.requests) == 1


@pytest.mark.http
async def test_malformed_body(cryptowatch):
    base_url, stub = cryptowatch
    stub.body = '{"error": "Instrument not found"}'
    with pytest.raises(PriceUnavailable, match="malformed"):
        await make_feed(base_url).update()


@pytest.mark.http
@pytest.mark.parametrize(
    "row",
    [
        [1_000_060, 0.03],  # truncated candle
        [1_000_060, None, 0.03, 0.03, 0.03, 1, 1],  # null open
        [1_000_060, "n/a", 0.03, 0.03, 0.03, 1, 1],  # non-numeric open
        [None, 0.03, 0.03, 0.03, 0.03, 1, 1],  # null close time
    ],
)
async def test_malformed_candle_row(cryptowatch, row):
    base_url, stub = cryptowatch
    stub.candles = [CANDLES[0], row]
    feed = make_feed(base_url)

    with pytest.raises(PriceUnavailable, match="malformed"):
        await feed.update()
    assert feed.candles == []


@pytest.mark.http
async def test_failed_update_keeps_previous_cache(cryptowatch):
    base_url, stub = cryptowatch
    feed = make_feed(base_url, retries=1)
    await feed.update()

    stub.statuses = [500]
    with pytest.raises(PriceUnavailable):
        await feed.update()
    assert len(feed.candles) == 3
    assert await feed.get_historical_price(1_000_000) == to_wei("0.031")


async def test_unreachable_server():
    feed = make_feed("http://127.0.0.1:1", retries=1)
    with pytest.raises(PriceUnavailable):
        await feed.update()
