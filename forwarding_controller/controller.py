"""Seed funding confirmation and the chained forwarding loop."""

from decimal import Decimal
from typing import Callable, List, Optional, Tuple
import logging
import time

from eth_utils import from_wei

from execution_adapter.ethereum.client import LedgerClient, TransferError
from execution_adapter.ethereum.networks import NetworkPreset
from wallet_core.models import Account

from .modes import HopOutcome, HopStatus, SeedState
from .policy import TransferPolicy

DEPOSIT_PROMPT = "Has ETH been deposited? (yes/no): "
_AFFIRMATIVE = {"y", "yes"}


class ForwardingController:
    """Funds a seed account, then forwards its balance through fresh accounts.

    Hops run strictly in sequence: each hop spends what the previous one
    delivered. A hop that cannot or does not transfer still advances the chain,
    so funds stay at the last account that received them.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        prompt: Callable[[str], str] = input,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
        policy: Optional[TransferPolicy] = None,
        network: Optional[NetworkPreset] = None,
    ) -> None:
        self._ledger = ledger
        self._prompt = prompt
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)
        self._policy = policy or TransferPolicy()
        self._network = network
        self._seed_state = SeedState.AWAITING_DEPOSIT
        self._outcomes: Tuple[HopOutcome, ...] = ()

    @property
    def seed_state(self) -> SeedState:
        return self._seed_state

    @property
    def outcomes(self) -> Tuple[HopOutcome, ...]:
        return self._outcomes

    def prepare_seed(self) -> Account:
        log = self._logger
        log.info("")
        log.info("=== Seed Address Preparation (%s) ===", self._network_name())
        log.info("Creating new seed address...")

        seed = self._ledger.generate_account()
        log.info("")
        log.info("Seed Address Created:")
        log.info("Address: %s", seed.address)
        log.info("Public Key: %s", seed.public_key)
        log.info("Private Key: %s", seed.private_key)
        log.info("")
        log.info("IMPORTANT: Please manually transfer ETH to this address for funding.")
        if self._network is not None:
            log.info("Network: %s", self._network.name)
            log.info("RPC URL: %s", self._network.rpc_url)

        self._seed_state = SeedState.AWAITING_DEPOSIT
        while self._seed_state != SeedState.FUNDED:
            self._sleep(self._policy.seed_poll_delay)
            balance = self._ledger.get_balance(seed.address)
            log.info("")
            log.info("Current balance: %s ETH", format_native(balance))

            answer = self._prompt(DEPOSIT_PROMPT)
            if not is_affirmative(answer):
                continue

            self._seed_state = SeedState.CONFIRMING
            confirmed = self._ledger.get_balance(seed.address)
            if confirmed > 0:
                self._seed_state = SeedState.FUNDED
                log.info("Confirmed! Balance: %s ETH", format_native(confirmed))
            else:
                self._seed_state = SeedState.AWAITING_DEPOSIT
                log.warning("No ETH detected. Please try again.")

        return seed

    def forward(self, seed: Account, count: int = 5) -> Tuple[Account, ...]:
        if count < 0:
            raise ValueError("Address count must be non-negative.")

        self._logger.info("")
        self._logger.info("=== Creating %d Addresses with ETH Transfers ===", count)

        current = seed
        chain: List[Account] = []
        outcomes: List[HopOutcome] = []
        for index in range(1, count + 1):
            self._logger.info("")
            self._logger.info("--- Step %d/%d ---", index, count)
            next_account = self._ledger.generate_account()
            self._logger.info("Created new address: %s", next_account.address)
            self._logger.info("Private Key: %s", next_account.private_key)

            outcomes.append(self._run_hop(index, current, next_account))
            self._outcomes = tuple(outcomes)

            chain.append(next_account)
            current = next_account
            self._sleep(self._policy.hop_delay)

        return tuple(chain)

    def _run_hop(self, index: int, source: Account, destination: Account) -> HopOutcome:
        log = self._logger
        balance = self._ledger.get_balance(source.address)
        log.info("Current balance from %s: %s ETH", source.address, format_native(balance))

        if balance <= 0:
            log.warning("No balance available for transfer")
            return HopOutcome(index, source, destination, HopStatus.NO_BALANCE, balance)

        estimate = self._ledger.estimate_fee()
        log.info("Gas cost: %s ETH", format_native(estimate.gas_cost_native))

        max_transferable = self._policy.max_transferable(balance, estimate.gas_cost)
        if max_transferable <= 0:
            log.warning("Insufficient balance for transfer (balance too low to cover gas fees)")
            log.info(
                "Balance: %s ETH, Gas needed: %s ETH",
                format_native(balance),
                format_native(estimate.gas_cost_native),
            )
            return HopOutcome(
                index,
                source,
                destination,
                HopStatus.INSUFFICIENT_FOR_GAS,
                balance,
                gas_estimate=estimate,
            )

        safe_amount_wei = self._policy.safe_amount(max_transferable)
        if safe_amount_wei == 0:
            log.warning("Insufficient balance for transfer (after safety buffer)")
            log.info(
                "Balance: %s ETH, Gas needed: %s ETH",
                format_native(balance),
                format_native(estimate.gas_cost_native),
            )
            return HopOutcome(
                index,
                source,
                destination,
                HopStatus.INSUFFICIENT_AFTER_MARGIN,
                balance,
                gas_estimate=estimate,
            )

        amount = Decimal(from_wei(safe_amount_wei, "ether"))
        log.info("Transferring %s ETH to %s...", format_native(amount), destination.address)
        try:
            reference = self._ledger.submit_transfer(
                source,
                destination.address,
                amount,
                estimate.gas_limit,
                estimate.gas_price,
            )
        except TransferError as exc:
            log.error("Transfer failed: %s", exc)
            log.info("Transfer amount: %s ETH", format_native(amount))
            log.info("Gas cost: %s ETH", format_native(estimate.gas_cost_native))
            log.info("Balance: %s ETH", format_native(balance))
            return HopOutcome(
                index,
                source,
                destination,
                HopStatus.FAILED,
                balance,
                amount=amount,
                gas_estimate=estimate,
                reason=str(exc),
            )

        log.info("Transfer completed! Hash: %s", reference.tx_hash)
        log.info("Gas used: %s ETH", format_native(reference.gas_cost_native))
        return HopOutcome(
            index,
            source,
            destination,
            HopStatus.TRANSFERRED,
            balance,
            amount=amount,
            gas_estimate=estimate,
            transaction=reference,
        )

    def _network_name(self) -> str:
        return self._network.name if self._network is not None else "unknown network"


def format_native(value: Decimal) -> str:
    return format(Decimal(value).normalize(), "f")


def is_affirmative(answer: str) -> bool:
    return answer.strip().lower() in _AFFIRMATIVE
