from .generator import AccountGenerator, GenerationError
from .models import Account

__all__ = [
    "Account",
    "AccountGenerator",
    "GenerationError",
]
