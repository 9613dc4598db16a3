"""Undo Journal — транзакционная граница операции settlement.

Каждая операция (buy/sell/withdraw) исполняется внутри atomic():
1. Берётся общий lock: операции не перемежаются, supply не устаревает
   между расчётом цены и mint/burn
2. Каждая мутация регистрирует обратное действие в journal
3. Любое исключение внутри блока → обратные действия в обратном порядке,
   затем исключение пробрасывается вызывающему без изменений
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Tuple

from loguru import logger


@dataclass
class UndoJournal:
    """Журнал обратных действий одной операции."""

    operation: str
    _entries: List[Tuple[str, Callable[[], None]]] = field(default_factory=list)

    def on_rollback(self, description: str, undo: Callable[[], None]) -> None:
        """Регистрация обратного действия для только что применённой мутации."""
        self._entries.append((description, undo))

    def rollback(self) -> None:
        """Применение обратных действий в обратном порядке."""
        while self._entries:
            description, undo = self._entries.pop()
            logger.debug(f"[ROLLBACK] {self.operation}: undo {description}")
            undo()

    def __len__(self) -> int:
        return len(self._entries)


@contextmanager
def atomic(lock: threading.RLock, operation: str) -> Iterator[UndoJournal]:
    """Критическая секция + auto-rollback.

    Usage:
        with atomic(self._lock, "sell") as journal:
            ledger.burn(account, qty)
            journal.on_rollback("burn", lambda: ledger.mint(account, qty))
    """
    with lock:
        journal = UndoJournal(operation)
        try:
            yield journal
        except BaseException as e:
            if len(journal):
                logger.warning(
                    f"[ROLLBACK] {operation}: {type(e).__name__}, "
                    f"reverting {len(journal)} staged effect(s)"
                )
            journal.rollback()
            raise
