from .controller import DEPOSIT_PROMPT, ForwardingController, format_native, is_affirmative
from .modes import HopOutcome, HopStatus, SeedState
from .policy import SAFETY_MARGIN_WEI, TransferPolicy, safe_transfer_amount
from .reporter import AccountReport, SessionReporter

__all__ = [
    "AccountReport",
    "DEPOSIT_PROMPT",
    "ForwardingController",
    "HopOutcome",
    "HopStatus",
    "SAFETY_MARGIN_WEI",
    "SeedState",
    "SessionReporter",
    "TransferPolicy",
    "format_native",
    "is_affirmative",
    "safe_transfer_amount",
]
