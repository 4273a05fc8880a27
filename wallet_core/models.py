"""Domain models for the wallet core."""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Account:
    """Generated EVM account. Key material is kept in cleartext for the session log."""

    address: str
    private_key: str
    public_key: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "address": self.address,
            "private_key": self.private_key,
            "public_key": self.public_key,
        }
