"""Seed confirmation states and per-hop outcomes."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from execution_adapter.ethereum.models import GasEstimate, TransactionReference
from wallet_core.models import Account


class SeedState(Enum):
    AWAITING_DEPOSIT = "AWAITING_DEPOSIT"
    CONFIRMING = "CONFIRMING"
    FUNDED = "FUNDED"


class HopStatus(Enum):
    TRANSFERRED = "TRANSFERRED"
    NO_BALANCE = "NO_BALANCE"
    INSUFFICIENT_FOR_GAS = "INSUFFICIENT_FOR_GAS"
    INSUFFICIENT_AFTER_MARGIN = "INSUFFICIENT_AFTER_MARGIN"
    FAILED = "FAILED"


@dataclass(frozen=True)
class HopOutcome:
    index: int
    source: Account
    destination: Account
    status: HopStatus
    balance: Decimal
    amount: Decimal = Decimal(0)
    gas_estimate: Optional[GasEstimate] = None
    transaction: Optional[TransactionReference] = None
    reason: str = ""
