"""
Price Curve: линейный bonding curve

Детерминированное ценообразование без side effects. Цена i-й единицы
(считая с 1) равна increment * i, т.е. marginal price растёт линейно
с supply.

ФОРМУЛЫ:
    cost_to_buy(n, q)      = increment × Σ_{i=1..q} (n + i)
                           = increment × (q·n + q(q+1)/2)

    revenue_for_sell(n, q) = increment × Σ_{i=0..q-1} (n − i)
                           = increment × (q·n − q(q−1)/2)

    spot_price(n)          = increment × (n + 1)

Round-trip symmetry:
    revenue_for_sell(n, q) == cost_to_buy(n − q, q)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Closed form бит-в-бит совпадает с наивным циклом по единицам
2. Никаких float: только целые base units
3. Результат > UINT256_MAX → ArithmeticOverflow (без wrap-around)
4. q > n при продаже → ArithmeticUnderflow
"""

from dataclasses import dataclass
from typing import Final

from src.core.errors import ArithmeticUnderflow
from src.core.math.checked_arithmetic import (
    check_uint_range,
    checked_add,
    checked_mul,
    checked_sub,
    validate_non_negative_int,
    validate_positive_int,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Шаг цены по умолчанию: 0.01 валютной единицы (1e18 base units) за токен
DEFAULT_PRICE_INCREMENT: Final[int] = 10**16


# =============================================================================
# HELPERS
# =============================================================================


def _triangular(k: int) -> int:
    """Сумма 1 + 2 + ... + k (k >= 0) с проверкой диапазона."""
    # Произведение k(k+1) всегда чётное, деление точное
    return check_uint_range(k * (k + 1) // 2, "triangular")


# =============================================================================
# PRICE CURVE
# =============================================================================


@dataclass(frozen=True)
class PriceCurve:
    """
    Линейный bonding curve с фиксированным шагом цены.

    Immutable: increment задаётся при создании и не меняется.
    Состояния нет, supply передаётся явно в каждый вызов.
    """

    increment: int = DEFAULT_PRICE_INCREMENT

    def __post_init__(self) -> None:
        validate_positive_int(self.increment, "increment")

    def cost_to_buy(self, current_supply: int, quantity: int) -> int:
        """
        Стоимость покупки quantity единиц при текущем supply.

        Args:
            current_supply: Текущий supply (до mint)
            quantity: Количество покупаемых единиц

        Returns:
            Стоимость в base units

        Raises:
            ArithmeticOverflow: если результат > UINT256_MAX
            ValueError: если аргументы не неотрицательные int

        Examples:
            >>> curve = PriceCurve(increment=10**16)
            >>> curve.cost_to_buy(0, 1)
            10000000000000000
            >>> curve.cost_to_buy(0, 10)
            550000000000000000
        """
        validate_non_negative_int(current_supply, "current_supply")
        validate_non_negative_int(quantity, "quantity")

        steps = checked_add(checked_mul(quantity, current_supply), _triangular(quantity))
        return checked_mul(self.increment, steps)

    def revenue_for_sell(self, current_supply: int, quantity: int) -> int:
        """
        Выручка от продажи quantity единиц при текущем supply.

        Args:
            current_supply: Текущий supply (до burn)
            quantity: Количество продаваемых единиц (<= current_supply)

        Returns:
            Выручка в base units

        Raises:
            ArithmeticUnderflow: если quantity > current_supply
            ArithmeticOverflow: если результат > UINT256_MAX
        """
        validate_non_negative_int(current_supply, "current_supply")
        validate_non_negative_int(quantity, "quantity")

        if quantity > current_supply:
            raise ArithmeticUnderflow(
                f"Cannot price sell of {quantity} units against supply {current_supply}"
            )

        if quantity == 0:
            return 0

        steps = checked_sub(checked_mul(quantity, current_supply), _triangular(quantity - 1))
        return checked_mul(self.increment, steps)

    def spot_price(self, current_supply: int) -> int:
        """Цена следующей единицы: increment × (supply + 1)."""
        validate_non_negative_int(current_supply, "current_supply")
        return checked_mul(self.increment, checked_add(current_supply, 1))
