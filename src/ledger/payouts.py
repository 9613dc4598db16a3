"""Payout Channel — исходящие переводы валюты.

Refund (buy), payout (sell) и withdrawal (treasury) идут через канал,
который может отказать. Отказ → TransferFailed, и Settlement откатывает
все staged изменения операции.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Set, Tuple

from src.core.errors import TransferFailed
from src.core.math.checked_arithmetic import checked_add, validate_non_negative_int


class PayoutChannel(ABC):
    """Канал доставки валюты получателю."""

    @abstractmethod
    def transfer(self, recipient: str, amount: int) -> None:
        """Доставка amount base units получателю.

        Raises:
            TransferFailed: если получатель не может принять валюту
        """
        ...


class RecordingPayoutChannel(PayoutChannel):
    """Канал в памяти процесса: копит доставленные суммы по получателям.

    Получателей можно пометить как отклоняющих переводы (reject), что
    моделирует аккаунт, не способный принять валюту.
    """

    def __init__(self):
        self._received: Dict[str, int] = {}
        self._rejecting: Set[str] = set()
        self._history: List[Tuple[str, int]] = []

    def reject(self, recipient: str) -> None:
        """Все следующие переводы recipient будут отклонены."""
        self._rejecting.add(recipient)

    def accept(self, recipient: str) -> None:
        """Снять отказ для recipient."""
        self._rejecting.discard(recipient)

    def transfer(self, recipient: str, amount: int) -> None:
        validate_non_negative_int(amount, "amount")

        if recipient in self._rejecting:
            raise TransferFailed(recipient, amount, "recipient rejects currency")

        self._received[recipient] = checked_add(self.received(recipient), amount)
        self._history.append((recipient, amount))

    def received(self, recipient: str) -> int:
        """Сколько всего доставлено recipient."""
        return self._received.get(recipient, 0)

    def history(self) -> List[Tuple[str, int]]:
        """Доставленные переводы в порядке исполнения."""
        return list(self._history)
