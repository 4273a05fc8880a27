"""Ledger client: balances, fee quotes and signed native transfers over JSON-RPC."""

from decimal import Decimal
from typing import Optional, Protocol
import logging

from web3 import Web3

from wallet_core.generator import AccountGenerator
from wallet_core.models import Account

from .models import GasEstimate, TransactionReference
from .networks import NetworkPreset

logger = logging.getLogger(__name__)

TRANSFER_GAS_LIMIT = 21_000
GAS_PRICE_BUFFER_PERCENT = 110


class QueryError(RuntimeError):
    """Raised when a balance or fee query fails."""


class TransferError(RuntimeError):
    """Raised when a transfer cannot be signed, broadcast or confirmed."""


class LedgerClient(Protocol):
    def generate_account(self) -> Account:
        ...

    def get_balance(self, address: str) -> Decimal:
        ...

    def estimate_fee(self) -> GasEstimate:
        ...

    def submit_transfer(
        self,
        source: Account,
        to_address: str,
        amount: Decimal,
        gas_limit: int,
        gas_price: int,
    ) -> TransactionReference:
        ...


def build_gas_estimate(
    base_gas_price: int,
    gas_limit: int = TRANSFER_GAS_LIMIT,
    buffer_percent: int = GAS_PRICE_BUFFER_PERCENT,
) -> GasEstimate:
    if buffer_percent < 110:
        raise ValueError("Gas price buffer must be at least 10%.")
    if base_gas_price < 0:
        raise ValueError("Gas price must be non-negative.")
    gas_price = base_gas_price * buffer_percent // 100
    return GasEstimate(
        gas_limit=gas_limit,
        gas_price=gas_price,
        gas_cost=gas_price * gas_limit,
    )


class Web3LedgerClient:
    """Ledger client for one network preset, backed by a web3 HTTP provider."""

    def __init__(
        self,
        network: NetworkPreset,
        web3: Optional[Web3] = None,
        generator: Optional[AccountGenerator] = None,
        receipt_timeout: float = 120,
    ) -> None:
        self._network = network
        self._web3 = web3 or Web3(Web3.HTTPProvider(network.rpc_url))
        self._generator = generator or AccountGenerator()
        self._receipt_timeout = receipt_timeout

    @property
    def network(self) -> NetworkPreset:
        return self._network

    def generate_account(self) -> Account:
        return self._generator.generate()

    def get_balance(self, address: str) -> Decimal:
        try:
            balance_wei = self._web3.eth.get_balance(Web3.to_checksum_address(address))
        except Exception as exc:
            raise QueryError(f"Balance query for {address} failed: {exc}") from exc
        return Decimal(Web3.from_wei(balance_wei, "ether"))

    def estimate_fee(self) -> GasEstimate:
        try:
            base_gas_price = self._web3.eth.gas_price
        except Exception as exc:
            raise QueryError(f"Gas price query failed: {exc}") from exc
        return build_gas_estimate(int(base_gas_price))

    def submit_transfer(
        self,
        source: Account,
        to_address: str,
        amount: Decimal,
        gas_limit: int,
        gas_price: int,
    ) -> TransactionReference:
        try:
            transaction = {
                "to": Web3.to_checksum_address(to_address),
                "value": Web3.to_wei(amount, "ether"),
                "gas": gas_limit,
                "gasPrice": gas_price,
                "nonce": self._web3.eth.get_transaction_count(source.address),
                "chainId": self._network.chain_id,
            }
            signed = self._web3.eth.account.sign_transaction(transaction, source.private_key)
            tx_hash = self._web3.eth.send_raw_transaction(signed.raw_transaction)
            logger.debug("Broadcast %s from %s", Web3.to_hex(tx_hash), source.address)
            receipt = self._web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout
            )
        except Exception as exc:
            raise TransferError(str(exc)) from exc

        if receipt["status"] != 1:
            raise TransferError(f"Transaction {Web3.to_hex(tx_hash)} reverted.")

        gas_used = int(receipt["gasUsed"])
        effective_price = int(receipt.get("effectiveGasPrice", gas_price))
        return TransactionReference(
            tx_hash=Web3.to_hex(receipt["transactionHash"]),
            block_number=int(receipt["blockNumber"]),
            gas_used=gas_used,
            gas_cost=gas_used * effective_price,
        )
