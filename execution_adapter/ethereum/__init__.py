from .client import (
    GAS_PRICE_BUFFER_PERCENT,
    TRANSFER_GAS_LIMIT,
    LedgerClient,
    QueryError,
    TransferError,
    Web3LedgerClient,
    build_gas_estimate,
)
from .models import GasEstimate, TransactionReference
from .networks import NETWORKS, ConfigurationError, NetworkPreset, resolve_network
from .simulator import SimulatedLedger, SimulatedTransfer

__all__ = [
    "ConfigurationError",
    "GAS_PRICE_BUFFER_PERCENT",
    "GasEstimate",
    "LedgerClient",
    "NETWORKS",
    "NetworkPreset",
    "QueryError",
    "SimulatedLedger",
    "SimulatedTransfer",
    "TRANSFER_GAS_LIMIT",
    "TransactionReference",
    "TransferError",
    "Web3LedgerClient",
    "build_gas_estimate",
    "resolve_network",
]
