"""Minimal ExpiringMultiParty ABI: the events and views the monitor reads."""

from __future__ import annotations


def _event(name: str, inputs: list[tuple[str, str, bool]]) -> dict:
    return {
        "anonymous": False,
        "name": name,
        "type": "event",
        "inputs": [
            {"indexed": indexed, "internalType": typ, "name": arg, "type": typ}
            for arg, typ, indexed in inputs
        ],
    }


_FIXED_POINT = {
    "components": [{"internalType": "uint256", "name": "rawValue", "type": "uint256"}],
    "internalType": "struct FixedPoint.Unsigned",
    "type": "tuple",
}


def _fixed(name: str) -> dict:
    return {**_FIXED_POINT, "name": name}


EMP_ABI: list[dict] = [
    _event("NewSponsor", [("sponsor", "address", True)]),
    _event("PositionCreated", [
        ("sponsor", "address", True),
        ("collateralAmount", "uint256", True),
        ("tokenAmount", "uint256", True),
    ]),
    _event("LiquidationCreated", [
        ("sponsor", "address", True),
        ("liquidator", "address", True),
        ("liquidationId", "uint256", True),
        ("tokensOutstanding", "uint256", False),
        ("lockedCollateral", "uint256", False),
        ("liquidatedCollateral", "uint256", False),
        ("liquidationTime", "uint256", False),
    ]),
    _event("LiquidationDisputed", [
        ("sponsor", "address", True),
        ("liquidator", "address", True),
        ("disputer", "address", True),
        ("liquidationId", "uint256", False),
        ("disputeBondAmount", "uint256", False),
    ]),
    _event("DisputeSettled", [
        ("caller", "address", True),
        ("sponsor", "address", True),
        ("liquidator", "address", True),
        ("disputer", "address", False),
        ("liquidationId", "uint256", False),
        ("disputeSucceeded", "bool", False),
    ]),
    {
        "name": "liquidations",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"internalType": "address", "name": "", "type": "address"},
            {"internalType": "uint256", "name": "", "type": "uint256"},
        ],
        "outputs": [
            {"internalType": "address", "name": "sponsor", "type": "address"},
            {"internalType": "address", "name": "liquidator", "type": "address"},
            {"internalType": "uint8", "name": "state", "type": "uint8"},
            {"internalType": "uint256", "name": "liquidationTime", "type": "uint256"},
            _fixed("tokensOutstanding"),
            _fixed("lockedCollateral"),
            _fixed("liquidatedCollateral"),
            _fixed("rawUnitCollateral"),
            {"internalType": "address", "name": "disputer", "type": "address"},
            _fixed("settlementPrice"),
            _fixed("finalFee"),
        ],
    },
    {
        "name": "collateralRequirement",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [_fixed("rawValue")],
    },
]

# Index of liquidationTime in the liquidations(address,uint256) output tuple
LIQUIDATION_TIME_INDEX = 3
