"""Config loading from TOML and environment."""

from __future__ import annotations

import pytest

from emp_monitor.config import load_config
from emp_monitor.models.config import MonitorConfig

from tests.conftest import BOT_DISPUTER, BOT_LIQUIDATOR, EMP_ADDRESS

PREFIX = "EMP_MONITOR_TEST_"

CONFIG_TOML = f"""
[monitor]
poll_interval = 15
error_backoff = 5
log_level = "debug"
watermark_policy = "last"

[ethereum]
rpc_url = "https://node.example:8545"
emp_address = "{EMP_ADDRESS}"
network_id = 42
start_block = 1200
max_block_range = 500

[contract]
collateral_symbol = "WETH"
synthetic_symbol = "yUSD"
price_identifier = "USDETH"

[bots]
monitored_liquidators = ["{BOT_LIQUIDATOR}"]
monitored_disputers = "{BOT_DISPUTER}, 0x6666666666666666666666666666666666666666"

[price_feed]
exchange = "kraken"
pair = "ethusd"
invert_price = true
lookback = 3600
"""


def test_defaults_without_file():
    cfg = load_config(None, env_prefix=PREFIX)
    assert cfg == MonitorConfig()
    assert cfg.watermark_policy == "max"
    assert cfg.price_feed.exchange == "coinbase-pro"


def test_missing_file_uses_defaults(tmp_path):
    cfg = load_config(tmp_path / "absent.toml", env_prefix=PREFIX)
    assert cfg.poll_interval == 60


def test_toml_sections(tmp_path):
    path = tmp_path / "monitor.toml"
    path.write_text(CONFIG_TOML)
    cfg = load_config(path, env_prefix=PREFIX)

    assert cfg.poll_interval == 15
    assert cfg.error_backoff == 5
    assert cfg.log_level == "debug"
    assert cfg.watermark_policy == "last"
    assert cfg.rpc_url == "https://node.example:8545"
    assert cfg.emp_address == EMP_ADDRESS
    assert cfg.network_id == 42
    assert cfg.start_block == 1200
    assert cfg.max_block_range == 500
    assert cfg.metadata().synthetic_symbol == "yUSD"
    assert cfg.metadata().network_id == 42
    assert cfg.monitored_liquidators == [BOT_LIQUIDATOR]
    assert len(cfg.monitored_disputers) == 2
    assert cfg.price_feed.exchange == "kraken"
    assert cfg.price_feed.invert_price is True
    assert cfg.price_feed.lookback == 3600
    assert cfg.price_feed.ohlc_period == 60


def test_monitored_addresses_are_normalized(tmp_path):
    path = tmp_path / "monitor.toml"
    path.write_text('[bots]\nmonitored_liquidators = ["0xABCDEF0000000000000000000000000000000001"]\n')
    monitored = load_config(path, env_prefix=PREFIX).monitored()
    assert monitored.is_liquidator("0xabcdef0000000000000000000000000000000001")
    assert not monitored.is_disputer("0xabcdef0000000000000000000000000000000001")


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "monitor.toml"
    path.write_text(CONFIG_TOML)
    monkeypatch.setenv(f"{PREFIX}RPC_URL", "http://override:8545")
    monkeypatch.setenv(f"{PREFIX}NETWORK_ID", "5")
    monkeypatch.setenv(f"{PREFIX}CRYPTOWATCH_API_KEY", "cw-key")
    monkeypatch.setenv(f"{PREFIX}MONITORED_LIQUIDATORS", "0xa, 0xb,")

    cfg = load_config(path, env_prefix=PREFIX)

    assert cfg.rpc_url == "http://override:8545"
    assert cfg.network_id == 5
    assert cfg.price_feed.api_key == "cw-key"
    assert cfg.monitored_liquidators == ["0xa", "0xb"]
    assert cfg.emp_address == EMP_ADDRESS  # not overridden


def test_env_contract_address(monkeypatch):
    monkeypatch.setenv(f"{PREFIX}EMP_ADDRESS", EMP_ADDRESS)
    monkeypatch.setenv(f"{PREFIX}MONITORED_DISPUTERS", BOT_DISPUTER)
    cfg = load_config(None, env_prefix=PREFIX)
    assert cfg.emp_address == EMP_ADDRESS
    assert cfg.monitored_disputers == [BOT_DISPUTER]


def test_invalid_watermark_policy(tmp_path):
    path = tmp_path / "monitor.toml"
    path.write_text('[monitor]\nwatermark_policy = "newest"\n')
    with pytest.raises(ValueError):
        load_config(path, env_prefix=PREFIX)
