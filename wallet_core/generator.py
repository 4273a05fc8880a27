"""Fresh account generation backed by eth-account."""

from typing import Callable, Optional
import secrets

from eth_account import Account as EthAccount
from eth_keys import keys
from eth_utils import to_hex

from .models import Account


class GenerationError(RuntimeError):
    """Raised when a new account cannot be generated."""


class AccountGenerator:
    """Creates random secp256k1 accounts from injected entropy."""

    def __init__(self, entropy_provider: Optional[Callable[[int], bytes]] = None) -> None:
        self._entropy_provider = entropy_provider or secrets.token_bytes

    def generate(self) -> Account:
        try:
            private_key = self._entropy_provider(32)
            local_account = EthAccount.from_key(private_key)
            public_key = keys.PrivateKey(local_account.key).public_key
        except Exception as exc:
            raise GenerationError(f"Account generation failed: {exc}") from exc
        return Account(
            address=local_account.address,
            private_key=to_hex(local_account.key),
            public_key=public_key.to_hex(),
        )
