"""Rate Limiter — per-account cooldown (timelock) для sell.

Хранит LastActionTimestamp[account]:
- Отсутствие записи (или 0) = "никогда не действовал" → cooldown не применяется
- Запись создаётся при первом действии (buy или sell) и перезаписывается
  при каждом следующем; записи не удаляются

Gate: если last > 0 и now < last + cooldown → RateLimited.
Cooldown защищает от быстрого выхода сразу после входа (sandwich).
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from src.core.errors import RateLimited
from src.core.math.checked_arithmetic import validate_non_negative_int, validate_positive_int


@dataclass(frozen=True)
class RateLimitDecision:
    """Результат проверки cooldown."""

    allowed: bool
    last_action_ts: Optional[int]
    retry_at: Optional[int]

    # Детали
    details: str


class RateLimiter:
    """Store последних rate-limited действий + cooldown gate.

    Не потокобезопасен сам по себе: сериализацию обеспечивает Settlement.
    """

    def __init__(
        self,
        cooldown_seconds: int,
        last_action_ts: Mapping[str, int] | None = None,
    ):
        """
        Args:
            cooldown_seconds: минимальный интервал между действиями аккаунта
            last_action_ts: начальные timestamps (при восстановлении из снапшота)
        """
        validate_non_negative_int(cooldown_seconds, "cooldown_seconds")
        self.cooldown_seconds = cooldown_seconds

        self._last: Dict[str, int] = {}
        for account, ts in (last_action_ts or {}).items():
            validate_non_negative_int(ts, f"last_action_ts[{account}]")
            self._last[account] = ts

    def last_action(self, account: str) -> Optional[int]:
        """Timestamp последнего действия или None, если аккаунт не действовал."""
        ts = self._last.get(account, 0)
        return ts or None

    def evaluate(self, account: str, now: int) -> RateLimitDecision:
        """Проверка cooldown без exception."""
        last = self.last_action(account)

        # 1. Первое действие аккаунта освобождено от cooldown
        if last is None:
            return RateLimitDecision(
                allowed=True,
                last_action_ts=None,
                retry_at=None,
                details=f"{account}: first action, cooldown exempt",
            )

        # 2. Cooldown ещё не истёк
        retry_at = last + self.cooldown_seconds
        if now < retry_at:
            return RateLimitDecision(
                allowed=False,
                last_action_ts=last,
                retry_at=retry_at,
                details=f"{account}: cooldown active, {retry_at - now}s remaining",
            )

        return RateLimitDecision(
            allowed=True,
            last_action_ts=last,
            retry_at=retry_at,
            details=f"{account}: cooldown elapsed ({now - last}s since last action)",
        )

    def check(self, account: str, now: int) -> None:
        """Gate: Raises RateLimited, если cooldown аккаунта не истёк."""
        decision = self.evaluate(account, now)
        if not decision.allowed:
            raise RateLimited(account, decision.last_action_ts, now, decision.retry_at)

    def record(self, account: str, now: int) -> Optional[int]:
        """Запись действия аккаунта в момент now.

        0 зарезервирован как "никогда не действовал": запись в момент 0
        потеряла бы cooldown, поэтому now должен быть > 0.

        Returns:
            Предыдущее значение (None, если записи не было) для rollback

        Raises:
            ValueError: если now <= 0
        """
        validate_positive_int(now, "now")
        previous = self._last.get(account)
        self._last[account] = now
        return previous

    def restore(self, account: str, previous: Optional[int]) -> None:
        """Откат record(): вернуть предыдущее значение или удалить запись."""
        if previous is None:
            self._last.pop(account, None)
        else:
            self._last[account] = previous

    def snapshot(self) -> Dict[str, int]:
        """Копия таблицы timestamps."""
        return dict(self._last)
