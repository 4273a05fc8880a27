"""Simulate ledger behaviour in memory without network calls."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import hashlib

from eth_utils import from_wei, to_wei

from wallet_core.generator import AccountGenerator
from wallet_core.models import Account

from .client import QueryError, TransferError, build_gas_estimate
from .models import GasEstimate, TransactionReference

_DEFAULT_GAS_PRICE_WEI = 1_000_000_000


@dataclass(frozen=True)
class SimulatedTransfer:
    source: str
    destination: str
    value_wei: int
    gas_limit: int
    gas_price: int


class SimulatedLedger:
    """In-memory ledger implementing the ledger client surface.

    Balances are tracked in wei. A transfer debits ``value + gas_limit * gas_price``
    from the source and credits ``value`` to the destination. Destinations listed in
    ``failing_destinations`` reject transfers with ``TransferError``.
    """

    def __init__(
        self,
        generator: Optional[AccountGenerator] = None,
        base_gas_price: Optional[int] = _DEFAULT_GAS_PRICE_WEI,
        balances: Optional[Dict[str, int]] = None,
        failing_destinations: Iterable[str] = (),
        on_balance_query: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._generator = generator or AccountGenerator()
        self.base_gas_price = base_gas_price
        self._balances: Dict[str, int] = dict(balances or {})
        self.failing_destinations = set(failing_destinations)
        self._on_balance_query = on_balance_query
        self.transfers: List[SimulatedTransfer] = []
        self.generated: List[Account] = []
        self.balance_queries = 0
        self.fee_queries = 0

    def fund(self, address: str, amount: Decimal) -> None:
        self._balances[address] = self._balances.get(address, 0) + to_wei(amount, "ether")

    def balance_wei(self, address: str) -> int:
        return self._balances.get(address, 0)

    def generate_account(self) -> Account:
        account = self._generator.generate()
        self.generated.append(account)
        return account

    def get_balance(self, address: str) -> Decimal:
        self.balance_queries += 1
        if self._on_balance_query is not None:
            self._on_balance_query(address)
        return Decimal(from_wei(self.balance_wei(address), "ether"))

    def estimate_fee(self) -> GasEstimate:
        self.fee_queries += 1
        if self.base_gas_price is None:
            raise QueryError("Gas price unavailable.")
        return build_gas_estimate(self.base_gas_price)

    def submit_transfer(
        self,
        source: Account,
        to_address: str,
        amount: Decimal,
        gas_limit: int,
        gas_price: int,
    ) -> TransactionReference:
        value_wei = to_wei(amount, "ether")
        gas_cost = gas_limit * gas_price
        if to_address in self.failing_destinations:
            raise TransferError(f"Transfer to {to_address} rejected by network.")
        if value_wei <= 0:
            raise TransferError("Transfer value must be positive.")
        if self.balance_wei(source.address) < value_wei + gas_cost:
            raise TransferError("insufficient funds for gas * price + value")

        self._balances[source.address] = self.balance_wei(source.address) - value_wei - gas_cost
        self._balances[to_address] = self.balance_wei(to_address) + value_wei
        self.transfers.append(
            SimulatedTransfer(
                source=source.address,
                destination=to_address,
                value_wei=value_wei,
                gas_limit=gas_limit,
                gas_price=gas_price,
            )
        )
        return TransactionReference(
            tx_hash=_fake_hash(source.address, to_address, len(self.transfers)),
            block_number=len(self.transfers),
            gas_used=gas_limit,
            gas_cost=gas_cost,
        )

    def transfers_from(self, address: str) -> Tuple[SimulatedTransfer, ...]:
        return tuple(item for item in self.transfers if item.source == address)


def _fake_hash(source: str, destination: str, sequence: int) -> str:
    digest = hashlib.sha256(f"{source}:{destination}:{sequence}".encode("ascii")).hexdigest()
    return "0x" + digest
