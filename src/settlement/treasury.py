"""Treasury — пул валюты settlement core.

TreasuryBalance:
- растёт на cost каждого buy
- падает на revenue каждого sell
- обнуляется привилегированным withdraw (full drain, только ADMIN)

Partial withdrawal, лимитов и multi-party approval нет.
"""

from dataclasses import dataclass

from loguru import logger

from src.core.domain.roles import Role
from src.core.errors import InsufficientTreasury
from src.core.math.checked_arithmetic import checked_add, validate_non_negative_int
from src.ledger.access_control import AccessControl
from src.ledger.payouts import PayoutChannel
from src.settlement.journal import UndoJournal


@dataclass(frozen=True)
class WithdrawalReceipt:
    """Результат withdraw."""

    recipient: str
    amount: int
    treasury_balance_before: int

    # Детали
    details: str


class Treasury:
    """Баланс treasury + привилегированный drain.

    Не потокобезопасен сам по себе: drain вызывается Settlement внутри
    общей критической секции.
    """

    def __init__(self, balance: int = 0):
        validate_non_negative_int(balance, "balance")
        self._balance = balance

    @property
    def balance(self) -> int:
        return self._balance

    def credit(self, amount: int) -> None:
        validate_non_negative_int(amount, "amount")
        self._balance = checked_add(self._balance, amount)

    def debit(self, amount: int) -> None:
        """
        Raises:
            InsufficientTreasury: если balance < amount
        """
        validate_non_negative_int(amount, "amount")
        if amount > self._balance:
            raise InsufficientTreasury(self._balance, amount)
        self._balance -= amount

    def drain(
        self,
        caller: str,
        access_control: AccessControl,
        payouts: PayoutChannel,
        journal: UndoJournal,
    ) -> WithdrawalReceipt:
        """Перевод всего баланса caller-у и обнуление treasury.

        Порядок:
        1. Проверка ADMIN → Unauthorized
        2. Debit всего баланса (staged в journal)
        3. Payout caller-у → TransferFailed откатывает debit

        Returns:
            WithdrawalReceipt с выведенной суммой (может быть 0)
        """
        # 1. Авторизация до любых изменений
        access_control.require_role(caller, Role.ADMIN)

        # 2. Debit
        amount = self._balance
        self.debit(amount)
        journal.on_rollback(f"treasury debit {amount}", lambda: self.credit(amount))

        # 3. Payout
        payouts.transfer(caller, amount)

        logger.info(f"[WITHDRAW] {caller} drained treasury: amount={amount}")
        return WithdrawalReceipt(
            recipient=caller,
            amount=amount,
            treasury_balance_before=amount,
            details=f"Treasury drained by {caller}: {amount} base units",
        )
