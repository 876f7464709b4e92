"""Shared fixtures for emp_monitor tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from emp_monitor.daemon import MonitorDaemon
from emp_monitor.models.config import ContractMetadata, MonitorConfig, MonitoredAddresses
from emp_monitor.monitor import ContractMonitor

from tests.mocks import (
    MockContractReader,
    MockEventSource,
    MockPriceFeed,
    MockSink,
    PlainLinkRenderer,
)

EMP_ADDRESS = "0x3f2D9eDd9702909Cf1F8C4237B7c4c5931F9C944"
BOT_LIQUIDATOR = "0x4444444444444444444444444444444444444444"
BOT_DISPUTER = "0x5555555555555555555555555555555555555555"

ETHERSCAN_BASE = "https://etherscan.io"


def etherscan_anchor(kind: str, id: str, label: str | None = None) -> str:
    """Build an HTML anchor to etherscan for the report."""
    url = f"{ETHERSCAN_BASE}/{kind}/{id}"
    return f'<a href="{url}" target="_blank">{label or id}</a>'


def pytest_configure(config):
    """Add contract info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "Ethereum mainnet (mocked)"
    meta["EMP Contract"] = EMP_ADDRESS
    meta["Monitored Liquidator"] = BOT_LIQUIDATOR
    meta["Monitored Disputer"] = BOT_DISPUTER


def pytest_html_results_summary(prefix, summary, postfix):
    """Inject clickable Etherscan links into the report summary."""
    prefix.append(
        '<div style="margin:8px 0;padding:10px;background:#f8f9fa;border:1px solid #dee2e6;'
        'border-radius:4px;font-family:monospace;font-size:13px;">'
        "<strong>Etherscan Links</strong><br/>"
        f'EMP Contract: {etherscan_anchor("address", EMP_ADDRESS)}<br/>'
        f'Liquidator Bot: {etherscan_anchor("address", BOT_LIQUIDATOR)}<br/>'
        f'Disputer Bot: {etherscan_anchor("address", BOT_DISPUTER)}'
        "</div>"
    )


def make_test_config(**overrides) -> MonitorConfig:
    """Build a MonitorConfig suitable for testing."""
    defaults = dict(
        poll_interval=1,
        error_backoff=1,
        rpc_url="http://127.0.0.1:8545",
        emp_address=EMP_ADDRESS,
        network_id=1,
        collateral_symbol="DAI",
        synthetic_symbol="ETHBTC",
        price_identifier="ETH/BTC",
        monitored_liquidators=[BOT_LIQUIDATOR],
        monitored_disputers=[BOT_DISPUTER],
    )
    defaults.update(overrides)
    return MonitorConfig(**defaults)


@pytest.fixture
def metadata() -> ContractMetadata:
    return ContractMetadata(
        collateral_symbol="DAI",
        synthetic_symbol="ETHBTC",
        price_identifier="ETH/BTC",
        network_id=1,
    )


@pytest.fixture
def monitored() -> MonitoredAddresses:
    return MonitoredAddresses.of(liquidators=[BOT_LIQUIDATOR], disputers=[BOT_DISPUTER])


@pytest.fixture
def source():
    return MockEventSource()


@pytest.fixture
def reader():
    return MockContractReader()


@pytest.fixture
def price_feed():
    return MockPriceFeed()


@pytest.fixture
def sink():
    return MockSink()


@pytest.fixture
def monitor(source, reader, price_feed, sink, metadata, monitored):
    """ContractMonitor wired to mocks, with plain (unlinked) addresses."""
    return ContractMonitor(
        source=source,
        reader=reader,
        price_feed=price_feed,
        sink=sink,
        metadata=metadata,
        monitored=monitored,
        links=PlainLinkRenderer(),
    )


@pytest.fixture
def test_config() -> MonitorConfig:
    return make_test_config(poll_interval=0, error_backoff=0)


@pytest.fixture
def daemon(test_config, source, reader, price_feed, sink, metadata, monitored):
    """Fully wired MonitorDaemon with mocked components."""
    d = MonitorDaemon(test_config)
    d.source = source
    d.reader = reader
    d.price_feed = price_feed
    d.sink = sink
    d.monitor = ContractMonitor(
        source=source,
        reader=reader,
        price_feed=price_feed,
        sink=sink,
        metadata=metadata,
        monitored=monitored,
        links=PlainLinkRenderer(),
    )
    return d
