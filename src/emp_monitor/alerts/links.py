"""Etherscan link rendering for Slack-style mrkdwn."""

from __future__ import annotations

ETHERSCAN_URLS = {
    1: "https://etherscan.io/",
    3: "https://ropsten.etherscan.io/",
    4: "https://rinkeby.etherscan.io/",
    5: "https://goerli.etherscan.io/",
    42: "https://kovan.etherscan.io/",
}

TX_HASH_LENGTH = 66
ADDRESS_LENGTH = 42


def etherscan_base_url(network_id: int) -> str:
    return ETHERSCAN_URLS.get(network_id, ETHERSCAN_URLS[1])


def short_hex(value: str, connector: str = "..") -> str:
    """0x1234abcd...ef -> 0x1234..cdef"""
    return f"{value[:6]}{connector}{value[-4:]}"


def etherscan_link(value: str, network_id: int = 1) -> str:
    """Render a tx hash or address as ``<url|0x1234..abcd>``.

    Anything that is not 0x-prefixed hex of a known length is returned
    unchanged.
    """
    if not value.startswith("0x"):
        return value
    base = etherscan_base_url(network_id)
    if len(value) == TX_HASH_LENGTH:
        return f"<{base}tx/{value}|{short_hex(value)}>"
    if len(value) == ADDRESS_LENGTH:
        return f"<{base}address/{value}|{short_hex(value)}>"
    return value


class EtherscanLinkRenderer:
    """Default LinkRenderer."""

    def render(self, value: str, network_id: int) -> str:
        return etherscan_link(value, network_id)
