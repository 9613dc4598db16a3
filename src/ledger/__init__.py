"""Ledger — внешние коллабораторы settlement core.

- Ledger: supply и балансы (mint/burn/balance_of)
- AccessControl: членство в ролях (has_role/grant_role)
- PayoutChannel: исходящие переводы валюты (могут отказать)
"""

from .access_control import AccessControl, InMemoryAccessControl
from .ledger import InMemoryLedger, Ledger, LedgerInvariantViolation, validate_account
from .payouts import PayoutChannel, RecordingPayoutChannel

__all__ = [
    "AccessControl",
    "InMemoryAccessControl",
    "InMemoryLedger",
    "Ledger",
    "LedgerInvariantViolation",
    "PayoutChannel",
    "RecordingPayoutChannel",
    "validate_account",
]
