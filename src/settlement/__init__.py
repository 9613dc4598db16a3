"""Settlement — buy/sell по bonding curve, cooldown, treasury.

- Settlement: оркестрация buy/sell/withdraw под одним lock
- RateLimiter: per-account cooldown для sell
- Treasury: пул валюты + ADMIN drain
- UndoJournal/atomic: транзакционная граница с auto-rollback
"""

from .clock import Clock, ManualClock, SystemClock
from .config import DEFAULT_COOLDOWN_SECONDS, SettlementConfig
from .engine import BuyReceipt, SellReceipt, Settlement
from .journal import UndoJournal, atomic
from .rate_limiter import RateLimitDecision, RateLimiter
from .treasury import Treasury, WithdrawalReceipt

__all__ = [
    "Clock",
    "ManualClock",
    "SystemClock",
    "DEFAULT_COOLDOWN_SECONDS",
    "SettlementConfig",
    "BuyReceipt",
    "SellReceipt",
    "Settlement",
    "UndoJournal",
    "atomic",
    "RateLimitDecision",
    "RateLimiter",
    "Treasury",
    "WithdrawalReceipt",
]
