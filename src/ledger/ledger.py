"""Ledger — хранилище supply и балансов аккаунтов.

Внешний коллаборатор settlement core. Core требует только:
- total_supply()
- balance_of(account)
- mint(account, quantity)
- burn(account, quantity)

Инварианты:
- Supply >= 0, balance >= 0
- Σ balance[account] == Supply после каждой операции
"""

from abc import ABC, abstractmethod
from typing import Dict, Mapping

from src.core.errors import InsufficientBalance
from src.core.math.checked_arithmetic import (
    checked_add,
    checked_sub,
    validate_non_negative_int,
    validate_positive_int,
)


def validate_account(account: str, name: str = "account") -> None:
    """Идентификатор аккаунта: непустая строка."""
    if not isinstance(account, str) or not account:
        raise ValueError(f"{name} must be a non-empty string, got {account!r}")


class LedgerInvariantViolation(Exception):
    """Нарушен инвариант сохранения supply/балансов (ошибка реализации ledger)."""

    pass


class Ledger(ABC):
    """Интерфейс balance ledger, который потребляет Settlement."""

    @abstractmethod
    def total_supply(self) -> int:
        ...

    @abstractmethod
    def balance_of(self, account: str) -> int:
        ...

    @abstractmethod
    def mint(self, account: str, quantity: int) -> None:
        ...

    @abstractmethod
    def burn(self, account: str, quantity: int) -> None:
        ...

    @abstractmethod
    def balances(self) -> Dict[str, int]:
        ...


class InMemoryLedger(Ledger):
    """Ledger в памяти процесса: account → balance.

    Не потокобезопасен сам по себе: сериализацию обеспечивает Settlement.
    Нулевые балансы удаляются из таблицы.
    """

    def __init__(self, balances: Mapping[str, int] | None = None):
        """
        Args:
            balances: начальные балансы (например, при восстановлении из снапшота)
        """
        self._balances: Dict[str, int] = {}
        self._supply = 0

        for account, balance in (balances or {}).items():
            validate_non_negative_int(balance, f"balance[{account}]")
            if balance:
                self._balances[account] = balance
                self._supply = checked_add(self._supply, balance)

    def total_supply(self) -> int:
        return self._supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def balances(self) -> Dict[str, int]:
        """Копия таблицы ненулевых балансов."""
        return dict(self._balances)

    def mint(self, account: str, quantity: int) -> None:
        """Выпуск quantity единиц на account (supply растёт на quantity)."""
        validate_account(account)
        validate_positive_int(quantity, "quantity")

        new_supply = checked_add(self._supply, quantity)
        self._balances[account] = checked_add(self.balance_of(account), quantity)
        self._supply = new_supply

    def burn(self, account: str, quantity: int) -> None:
        """Сжигание quantity единиц с account (supply падает на quantity).

        Raises:
            InsufficientBalance: если balance_of(account) < quantity
        """
        validate_account(account)
        validate_positive_int(quantity, "quantity")

        balance = self.balance_of(account)
        if balance < quantity:
            raise InsufficientBalance(account, balance, quantity)

        remaining = balance - quantity
        self._supply = checked_sub(self._supply, quantity)
        if remaining:
            self._balances[account] = remaining
        else:
            del self._balances[account]

    def check_invariants(self) -> None:
        """Проверка сохранения: Σ balances == supply, все балансы > 0.

        Raises:
            LedgerInvariantViolation: при нарушении инварианта
        """
        for account, balance in self._balances.items():
            if balance <= 0:
                raise LedgerInvariantViolation(f"non-positive balance stored for {account!r}: {balance}")

        balances_sum = sum(self._balances.values())
        if balances_sum != self._supply:
            raise LedgerInvariantViolation(
                f"conservation violated: sum(balances)={balances_sum} != supply={self._supply}"
            )
