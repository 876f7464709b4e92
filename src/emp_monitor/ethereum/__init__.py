"""Ethereum adapters: ExpiringMultiParty event client and contract reader."""

from emp_monitor.ethereum.client import Web3EventClient, make_web3
from emp_monitor.ethereum.reader import Web3ContractReader

__all__ = ["Web3EventClient", "Web3ContractReader", "make_web3"]
