"""Supported network presets."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


class ConfigurationError(ValueError):
    """Raised when the run configuration is missing or invalid."""


@dataclass(frozen=True)
class NetworkPreset:
    key: str
    name: str
    rpc_url: str
    chain_id: int


BASE_SEPOLIA = NetworkPreset(
    key="baseSepolia",
    name="Base Sepolia Testnet",
    rpc_url="https://sepolia.base.org",
    chain_id=84532,
)

ETHEREUM = NetworkPreset(
    key="ethereum",
    name="Ethereum Mainnet",
    rpc_url="https://ethereum-rpc.publicnode.com",
    chain_id=1,
)

NETWORKS: Mapping[str, NetworkPreset] = MappingProxyType(
    {preset.key: preset for preset in (BASE_SEPOLIA, ETHEREUM)}
)


def resolve_network(key: Optional[str]) -> NetworkPreset:
    if not key:
        raise ConfigurationError(
            f"Network is required; choose one of: {', '.join(NETWORKS)}"
        )
    try:
        return NETWORKS[key]
    except KeyError:
        raise ConfigurationError(f"Network {key} not supported") from None
