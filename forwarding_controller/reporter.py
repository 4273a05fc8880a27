"""End-of-session summary of the forwarding chain."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence, Tuple
import logging

from execution_adapter.ethereum.client import LedgerClient
from execution_adapter.ethereum.networks import NetworkPreset
from wallet_core.models import Account

from .controller import format_native


@dataclass(frozen=True)
class AccountReport:
    index: int
    account: Account
    balance: Decimal


class SessionReporter:
    """Read-only: re-queries every balance and never touches the chain itself."""

    def __init__(
        self,
        ledger: LedgerClient,
        logger: Optional[logging.Logger] = None,
        network: Optional[NetworkPreset] = None,
    ) -> None:
        self._ledger = ledger
        self._logger = logger or logging.getLogger(__name__)
        self._network = network

    def report(self, chain: Sequence[Account]) -> Tuple[AccountReport, ...]:
        log = self._logger
        log.info("")
        log.info("=== FINAL RESULT ===")
        if not chain:
            log.info("No addresses were created.")
            if self._network is not None:
                log.info("Network: %s", self._network.name)
            return ()

        last = chain[-1]
        log.info("Last Address: %s", last.address)
        log.info("Private Key: %s", last.private_key)
        log.info("Balance: %s ETH", format_native(self._ledger.get_balance(last.address)))
        if self._network is not None:
            log.info("Network: %s", self._network.name)

        log.info("")
        log.info("=== ALL ADDRESSES INFO ===")
        reports = []
        for index, account in enumerate(chain, start=1):
            balance = self._ledger.get_balance(account.address)
            log.info("")
            log.info("Address %d:", index)
            log.info("  Address: %s", account.address)
            log.info("  Private Key: %s", account.private_key)
            log.info("  Balance: %s ETH", format_native(balance))
            reports.append(AccountReport(index=index, account=account, balance=balance))
        return tuple(reports)
