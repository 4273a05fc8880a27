"""Transfer safety policy for forwarding hops."""

from dataclasses import dataclass
from decimal import Decimal

from eth_utils import to_wei

SAFETY_MARGIN_WEI = to_wei(Decimal("0.000001"), "ether")


@dataclass(frozen=True)
class TransferPolicy:
    safety_margin_wei: int = SAFETY_MARGIN_WEI
    seed_poll_delay: float = 5
    hop_delay: float = 2

    def __post_init__(self) -> None:
        if self.safety_margin_wei <= 0:
            raise ValueError("Safety margin must be positive.")

    def max_transferable(self, balance: Decimal, gas_cost: int) -> int:
        return to_wei(balance, "ether") - gas_cost

    def safe_amount(self, max_transferable: int) -> int:
        return safe_transfer_amount(max_transferable, self.safety_margin_wei)


def safe_transfer_amount(max_transferable: int, margin: int) -> int:
    if max_transferable > margin:
        return max_transferable - margin
    return 0
