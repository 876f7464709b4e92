"""ExpiringMultiParty event client - reads contract event logs over web3.

Keeps an incremental per-event log cache: each call only asks the node for
blocks it has not fetched yet, then returns the whole cached history.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from web3 import Web3

from emp_monitor.errors import SourceUnavailable
from emp_monitor.ethereum.abi import EMP_ABI
from emp_monitor.models.events import (
    DisputeRaised,
    DisputeSettled,
    LiquidationSubmitted,
    SponsorCreated,
)

log = logging.getLogger(__name__)

_EVENT_NAMES = (
    "NewSponsor",
    "PositionCreated",
    "LiquidationCreated",
    "LiquidationDisputed",
    "DisputeSettled",
)


def make_web3(rpc_url: str, timeout: int = 30) -> Web3:
    """HTTP web3 connection to an Ethereum node."""
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


def _hex(value: Any) -> str:
    """0x-prefixed hex string for a tx hash given as HexBytes, bytes or str."""
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return Web3.to_hex(value)


def _log_key(entry: Mapping) -> tuple[int, int]:
    return entry["blockNumber"], entry.get("logIndex", 0)


def to_sponsor_event(new_sponsor: Mapping, position_created: Mapping | None) -> SponsorCreated:
    """Join a NewSponsor log with the PositionCreated log of the same tx."""
    created_args = position_created["args"] if position_created is not None else {}
    return SponsorCreated(
        sponsor=new_sponsor["args"]["sponsor"],
        token_amount=int(created_args.get("tokenAmount", 0)),
        collateral_amount=int(created_args.get("collateralAmount", 0)),
        transaction_hash=_hex(new_sponsor["transactionHash"]),
        block_number=new_sponsor["blockNumber"],
    )


def to_liquidation_event(entry: Mapping) -> LiquidationSubmitted:
    args = entry["args"]
    return LiquidationSubmitted(
        sponsor=args["sponsor"],
        liquidator=args["liquidator"],
        liquidation_id=int(args["liquidationId"]),
        locked_collateral=int(args["lockedCollateral"]),
        liquidated_collateral=int(args["liquidatedCollateral"]),
        tokens_outstanding=int(args["tokensOutstanding"]),
        transaction_hash=_hex(entry["transactionHash"]),
        block_number=entry["blockNumber"],
        liquidation_time=int(args["liquidationTime"]),
    )


def to_dispute_event(entry: Mapping) -> DisputeRaised:
    args = entry["args"]
    return DisputeRaised(
        disputer=args["disputer"],
        liquidator=args["liquidator"],
        dispute_bond_amount=int(args["disputeBondAmount"]),
        transaction_hash=_hex(entry["transactionHash"]),
        block_number=entry["blockNumber"],
        sponsor=args["sponsor"],
        liquidation_id=int(args["liquidationId"]),
    )


def to_dispute_settlement_event(entry: Mapping) -> DisputeSettled:
    args = entry["args"]
    return DisputeSettled(
        liquidator=args["liquidator"],
        disputer=args["disputer"],
        dispute_succeeded=bool(args["disputeSucceeded"]),
        transaction_hash=_hex(entry["transactionHash"]),
        block_number=entry["blockNumber"],
        sponsor=args["sponsor"],
        liquidation_id=int(args["liquidationId"]),
    )


class Web3EventClient:
    """EventSource over an ExpiringMultiParty contract's event logs."""

    def __init__(
        self,
        w3: Web3,
        emp_address: str,
        start_block: int = 0,
        max_block_range: int = 10_000,
    ) -> None:
        self._w3 = w3
        self._contract = w3.eth.contract(
            address=Web3.to_checksum_address(emp_address), abi=EMP_ABI,
        )
        self._max_block_range = max(1, max_block_range)
        self._logs: dict[str, list] = {name: [] for name in _EVENT_NAMES}
        self._next_block: dict[str, int] = {name: start_block for name in _EVENT_NAMES}

    @property
    def contract(self):
        return self._contract

    async def get_all_sponsor_events(self) -> list[SponsorCreated]:
        sponsors = await self._fetch("NewSponsor")
        created = await self._fetch("PositionCreated")
        by_tx = {_hex(e["transactionHash"]): e for e in created}
        return [to_sponsor_event(e, by_tx.get(_hex(e["transactionHash"]))) for e in sponsors]

    async def get_all_liquidation_events(self) -> list[LiquidationSubmitted]:
        return [to_liquidation_event(e) for e in await self._fetch("LiquidationCreated")]

    async def get_all_dispute_events(self) -> list[DisputeRaised]:
        return [to_dispute_event(e) for e in await self._fetch("LiquidationDisputed")]

    async def get_all_dispute_settlement_events(self) -> list[DisputeSettled]:
        return [to_dispute_settlement_event(e) for e in await self._fetch("DisputeSettled")]

    async def _fetch(self, event_name: str) -> list:
        try:
            return await asyncio.to_thread(self._fetch_sync, event_name)
        except Exception as exc:
            log.error("Fetching %s logs failed: %s", event_name, exc)
            raise SourceUnavailable(f"{event_name} logs: {exc}") from exc

    def _fetch_sync(self, event_name: str) -> list:
        latest = self._w3.eth.block_number
        start = self._next_block[event_name]
        event = getattr(self._contract.events, event_name)

        fetched: list = []
        while start <= latest:
            end = min(start + self._max_block_range - 1, latest)
            fetched.extend(event.get_logs(from_block=start, to_block=end))
            start = end + 1

        # Commit only after every chunk succeeded
        if fetched:
            log.debug("Fetched %d %s logs up to block %d", len(fetched), event_name, latest)
            self._logs[event_name].extend(fetched)
            self._logs[event_name].sort(key=_log_key)
        self._next_block[event_name] = max(self._next_block[event_name], latest + 1)
        return list(self._logs[event_name])
