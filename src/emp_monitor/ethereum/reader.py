"""Read-only view calls against the ExpiringMultiParty contract."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from web3 import Web3

from emp_monitor.errors import SourceUnavailable
from emp_monitor.ethereum.abi import EMP_ABI, LIQUIDATION_TIME_INDEX

log = logging.getLogger(__name__)


def _raw_value(value: Any) -> int:
    """Unwrap a FixedPoint.Unsigned struct (returned as nested tuples) to its int."""
    while isinstance(value, (tuple, list)):
        value = value[0]
    return int(value)


class Web3ContractReader:
    """ContractReader backed by web3 ``call()``s."""

    def __init__(self, w3: Web3, emp_address: str) -> None:
        self._contract = w3.eth.contract(
            address=Web3.to_checksum_address(emp_address), abi=EMP_ABI,
        )

    async def get_liquidation_timestamp(self, sponsor: str, liquidation_id: int) -> int:
        fn = self._contract.functions.liquidations(Web3.to_checksum_address(sponsor), liquidation_id)
        try:
            result = await asyncio.to_thread(fn.call)
        except Exception as exc:
            log.warning("liquidations(%s, %d) failed: %s", sponsor[:10], liquidation_id, exc)
            raise SourceUnavailable(f"liquidations({sponsor}, {liquidation_id}): {exc}") from exc
        return int(result[LIQUIDATION_TIME_INDEX])

    async def get_collateral_requirement(self) -> int:
        try:
            result = await asyncio.to_thread(self._contract.functions.collateralRequirement().call)
        except Exception as exc:
            log.warning("collateralRequirement() failed: %s", exc)
            raise SourceUnavailable(f"collateralRequirement(): {exc}") from exc
        return _raw_value(result)
