"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from emp_monitor.models.config import MonitorConfig, PriceFeedConfig
from emp_monitor.watermark import WatermarkPolicy


def _address_list(value: str | list) -> list[str]:
    if isinstance(value, str):
        return [a.strip() for a in value.split(",") if a.strip()]
    return [str(a) for a in value]


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "EMP_MONITOR_",
) -> MonitorConfig:
    """Load monitor configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (EMP_MONITOR_RPC_URL, etc.)
        2. TOML config file
        3. Defaults from MonitorConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = MonitorConfig()

    # ── Monitor section ────────────────────────────────────
    monitor = raw.get("monitor", {})
    if v := monitor.get("poll_interval"):
        cfg.poll_interval = int(v)
    if v := monitor.get("error_backoff"):
        cfg.error_backoff = int(v)
    if v := monitor.get("log_level"):
        cfg.log_level = str(v)
    if v := monitor.get("watermark_policy"):
        cfg.watermark_policy = str(v)

    # ── Ethereum section ───────────────────────────────────
    eth = raw.get("ethereum", {})
    if v := eth.get("rpc_url"):
        cfg.rpc_url = str(v)
    if v := eth.get("emp_address"):
        cfg.emp_address = str(v)
    if v := eth.get("network_id"):
        cfg.network_id = int(v)
    if v := eth.get("start_block"):
        cfg.start_block = int(v)
    if v := eth.get("max_block_range"):
        cfg.max_block_range = int(v)

    # ── Contract section ───────────────────────────────────
    contract = raw.get("contract", {})
    if v := contract.get("collateral_symbol"):
        cfg.collateral_symbol = str(v)
    if v := contract.get("synthetic_symbol"):
        cfg.synthetic_symbol = str(v)
    if v := contract.get("price_identifier"):
        cfg.price_identifier = str(v)

    # ── Bots section ───────────────────────────────────────
    bots = raw.get("bots", {})
    if v := bots.get("monitored_liquidators"):
        cfg.monitored_liquidators = _address_list(v)
    if v := bots.get("monitored_disputers"):
        cfg.monitored_disputers = _address_list(v)

    # ── Price feed section ─────────────────────────────────
    pf = raw.get("price_feed", {})
    defaults = PriceFeedConfig()
    cfg.price_feed = PriceFeedConfig(
        exchange=pf.get("exchange", defaults.exchange),
        pair=pf.get("pair", defaults.pair),
        lookback=int(pf.get("lookback", defaults.lookback)),
        ohlc_period=int(pf.get("ohlc_period", defaults.ohlc_period)),
        invert_price=bool(pf.get("invert_price", defaults.invert_price)),
        api_key=pf.get("api_key", defaults.api_key),
        base_url=pf.get("base_url", defaults.base_url),
        timeout=int(pf.get("timeout", defaults.timeout)),
        retries=int(pf.get("retries", defaults.retries)),
    )

    # ── Environment variable overrides (highest priority) ──
    if rpc := os.environ.get(f"{env_prefix}RPC_URL"):
        cfg.rpc_url = rpc
    if addr := os.environ.get(f"{env_prefix}EMP_ADDRESS"):
        cfg.emp_address = addr
    if net := os.environ.get(f"{env_prefix}NETWORK_ID"):
        cfg.network_id = int(net)
    if key := os.environ.get(f"{env_prefix}CRYPTOWATCH_API_KEY"):
        cfg.price_feed.api_key = key
    if liqs := os.environ.get(f"{env_prefix}MONITORED_LIQUIDATORS"):
        cfg.monitored_liquidators = _address_list(liqs)
    if disp := os.environ.get(f"{env_prefix}MONITORED_DISPUTERS"):
        cfg.monitored_disputers = _address_list(disp)

    # Fail early on a typo rather than at first poll
    WatermarkPolicy(cfg.watermark_policy)

    return cfg
