"""Settlement Config — неизменяемые параметры движка."""

from dataclasses import dataclass
from typing import Final

from src.core.math.checked_arithmetic import validate_non_negative_int, validate_positive_int
from src.core.math.price_curve import DEFAULT_PRICE_INCREMENT

# Cooldown между rate-limited действиями аккаунта по умолчанию (секунды)
DEFAULT_COOLDOWN_SECONDS: Final[int] = 60


@dataclass(frozen=True)
class SettlementConfig:
    """Конфигурация settlement core.

    - price_increment: шаг цены curve (base units за единицу supply)
    - cooldown_seconds: минимальный интервал между продажами аккаунта
    - rate_limit_buys: гейтить buy тем же cooldown. По умолчанию False:
      гейтится только sell (выход из позиции, прибыльная нога sandwich),
      buy лишь запускает cooldown. Включение меняет поведение buy.
    """

    price_increment: int = DEFAULT_PRICE_INCREMENT
    cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS
    rate_limit_buys: bool = False

    def __post_init__(self) -> None:
        validate_positive_int(self.price_increment, "price_increment")
        validate_non_negative_int(self.cooldown_seconds, "cooldown_seconds")
