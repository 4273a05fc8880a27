"""Ethereum adapter models for fee estimates and confirmed transfers."""

from dataclasses import dataclass
from decimal import Decimal

from eth_utils import from_wei


@dataclass(frozen=True)
class GasEstimate:
    gas_limit: int
    gas_price: int
    gas_cost: int

    @property
    def gas_cost_native(self) -> Decimal:
        return Decimal(from_wei(self.gas_cost, "ether"))


@dataclass(frozen=True)
class TransactionReference:
    tx_hash: str
    block_number: int
    gas_used: int
    gas_cost: int

    @property
    def gas_cost_native(self) -> Decimal:
        return Decimal(from_wei(self.gas_cost, "ether"))
