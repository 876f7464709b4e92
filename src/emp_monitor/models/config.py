"""Configuration models for the monitor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class ContractMetadata:
    """Static facts about the monitored contract, used to decorate alerts."""

    collateral_symbol: str
    synthetic_symbol: str
    price_identifier: str
    network_id: int = 1


def _normalize(addresses: Iterable[str]) -> frozenset[str]:
    return frozenset(a.lower() for a in addresses)


@dataclass(frozen=True)
class MonitoredAddresses:
    """Liquidator and disputer bots whose activity is annotated in alerts.

    Membership only changes alert wording, never whether an alert fires.
    """

    liquidators: frozenset[str] = frozenset()
    disputers: frozenset[str] = frozenset()

    @classmethod
    def of(cls, liquidators: Iterable[str] = (), disputers: Iterable[str] = ()) -> MonitoredAddresses:
        return cls(liquidators=_normalize(liquidators), disputers=_normalize(disputers))

    def is_liquidator(self, address: str) -> bool:
        return address.lower() in self.liquidators

    def is_disputer(self, address: str) -> bool:
        return address.lower() in self.disputers


@dataclass
class PriceFeedConfig:
    """CryptoWatch historical price feed configuration."""

    exchange: str = "coinbase-pro"
    pair: str = "ethbtc"
    lookback: int = 7200  # seconds of history to keep
    ohlc_period: int = 60  # seconds per candle
    invert_price: bool = False
    api_key: str = ""
    base_url: str = "https://api.cryptowat.ch"
    timeout: int = 10  # seconds
    retries: int = 3


@dataclass
class MonitorConfig:
    """Complete process configuration."""

    # Monitor loop
    poll_interval: int = 60  # seconds
    error_backoff: int = 30  # seconds
    log_level: str = "info"
    watermark_policy: str = "max"

    # Ethereum
    rpc_url: str = "http://127.0.0.1:8545"
    emp_address: str = ""
    network_id: int = 1
    start_block: int = 0
    max_block_range: int = 10_000

    # Contract metadata
    collateral_symbol: str = "DAI"
    synthetic_symbol: str = "SYNTH"
    price_identifier: str = ""

    # Bots
    monitored_liquidators: list[str] = field(default_factory=list)
    monitored_disputers: list[str] = field(default_factory=list)

    # Price feed
    price_feed: PriceFeedConfig = field(default_factory=PriceFeedConfig)

    def metadata(self) -> ContractMetadata:
        return ContractMetadata(
            collateral_symbol=self.collateral_symbol,
            synthetic_symbol=self.synthetic_symbol,
            price_identifier=self.price_identifier,
            network_id=self.network_id,
        )

    def monitored(self) -> MonitoredAddresses:
        return MonitoredAddresses.of(self.monitored_liquidators, self.monitored_disputers)
