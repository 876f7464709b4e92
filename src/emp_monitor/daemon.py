"""Monitor daemon - wires the collaborators together and drives the checks."""

from __future__ import annotations

import asyncio
import logging
import signal

from emp_monitor.errors import MonitorError
from emp_monitor.ethereum.client import Web3EventClient, make_web3
from emp_monitor.ethereum.reader import Web3ContractReader
from emp_monitor.models.config import MonitorConfig
from emp_monitor.monitor import ContractMonitor
from emp_monitor.pricefeed.cryptowatch import CryptoWatchPriceFeed
from emp_monitor.sink import LoggingAlertSink
from emp_monitor.watermark import WatermarkPolicy

log = logging.getLogger(__name__)


class MonitorDaemon:
    """Polls one ExpiringMultiParty contract and logs alerts for new events.

    Each iteration refreshes the price feed, then runs the four checks in
    turn. A failing check only skips that category until the next
    iteration.
    """

    def __init__(self, cfg: MonitorConfig) -> None:
        self._cfg = cfg
        self._running = False

        w3 = make_web3(cfg.rpc_url)
        self.source = Web3EventClient(
            w3, cfg.emp_address, start_block=cfg.start_block, max_block_range=cfg.max_block_range,
        )
        self.reader = Web3ContractReader(w3, cfg.emp_address)
        pf = cfg.price_feed
        self.price_feed = CryptoWatchPriceFeed(
            exchange=pf.exchange,
            pair=pf.pair,
            lookback=pf.lookback,
            ohlc_period=pf.ohlc_period,
            invert_price=pf.invert_price,
            api_key=pf.api_key,
            base_url=pf.base_url,
            timeout=pf.timeout,
            retries=pf.retries,
        )
        self.sink = LoggingAlertSink()
        self.monitor = ContractMonitor(
            source=self.source,
            reader=self.reader,
            price_feed=self.price_feed,
            sink=self.sink,
            metadata=cfg.metadata(),
            monitored=cfg.monitored(),
            watermark_policy=WatermarkPolicy(cfg.watermark_policy),
        )

    async def run_once(self) -> int:
        """One iteration: update prices, then every check. Returns alerts emitted."""
        try:
            await self.price_feed.update()
        except MonitorError as exc:
            # Liquidation alerts degrade to [Invalid] figures without prices
            log.warning("Price feed update failed: %s", exc)

        emitted = 0
        for check in (
            self.monitor.check_new_sponsors,
            self.monitor.check_new_liquidations,
            self.monitor.check_new_disputes,
            self.monitor.check_new_dispute_settlements,
        ):
            try:
                emitted += len(await check())
            except MonitorError as exc:
                log.warning("%s skipped: %s", check.__name__, exc)
        return emitted

    async def start(self) -> None:
        log.info("Starting emp_monitor daemon")
        log.info("  Contract: %s", self._cfg.emp_address)
        log.info("  RPC: %s", self._cfg.rpc_url)
        log.info("  Network: %d", self._cfg.network_id)
        log.info("  Price feed: %s %s", self._cfg.price_feed.exchange, self._cfg.price_feed.pair)
        self._running = True
        await self._main_loop()
        log.info("Daemon shut down cleanly")

    async def stop(self) -> None:
        """Signal the daemon to stop gracefully."""
        log.info("Stop requested")
        self._running = False

    async def _main_loop(self) -> None:
        while self._running:
            try:
                await self.run_once()
                log.debug("Watermarks: %s", self.monitor.state.as_dict())
                await asyncio.sleep(self._cfg.poll_interval)
            except asyncio.CancelledError:
                log.info("Main loop cancelled")
                break
            except Exception as exc:
                log.error("Main loop error: %s", exc, exc_info=True)
                await asyncio.sleep(self._cfg.error_backoff)


async def run_daemon(cfg: MonitorConfig) -> None:
    """Entry point for running the daemon."""
    daemon = MonitorDaemon(cfg)

    loop = asyncio.get_running_loop()

    def _signal_handler():
        asyncio.ensure_future(daemon.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await daemon.start()
