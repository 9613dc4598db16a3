"""
CurrencyUnits: конверсия денежных сумм

Единственный допустимый способ преобразований между:
- decimal-суммой в валютных единицах (например, "0.03")
- целой суммой в base units (1 unit = 10**18 base units)

Внутри settlement core все суммы хранятся только в base units (int).
ЗАПРЕЩЕНО передавать float: двоичное представление теряет точность.
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Final

# =============================================================================
# CONSTANTS
# =============================================================================

# Количество base units в одной валютной единице
WEI_PER_UNIT: Final[int] = 10**18

# Знаков после запятой в валютной единице
UNIT_DECIMALS: Final[int] = 18

# Точность Decimal-контекста: с запасом покрывает uint256 (78 цифр) + дробную часть
_DECIMAL_PRECISION: Final[int] = 100


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def to_base_units(amount: Decimal | str | int) -> int:
    """
    Конверсия: валютные единицы → base units

    Args:
        amount: Сумма в валютных единицах (Decimal, str или int)

    Returns:
        Сумма в base units

    Raises:
        ValueError: Если сумма отрицательная, не число, float или
            содержит больше UNIT_DECIMALS знаков после запятой

    Examples:
        >>> to_base_units("0.01")
        10000000000000000
        >>> to_base_units(2)
        2000000000000000000
    """
    if isinstance(amount, (float, bool)):
        raise ValueError(f"amount must be Decimal, str or int, got {type(amount).__name__}")

    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise ValueError(f"amount is not a number: {amount!r}")

    if not value.is_finite():
        raise ValueError(f"amount must be finite, got {amount!r}")

    if value < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")

    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        scaled = value.scaleb(UNIT_DECIMALS)
        is_integral = scaled == scaled.to_integral_value()

    if not is_integral:
        raise ValueError(
            f"amount {amount} has more than {UNIT_DECIMALS} decimal places"
        )

    return int(scaled)


def from_base_units(base_units: int) -> Decimal:
    """
    Конверсия: base units → валютные единицы

    Examples:
        >>> from_base_units(30000000000000000)
        Decimal('0.03')
    """
    if isinstance(base_units, bool) or not isinstance(base_units, int):
        raise ValueError(f"base_units must be int, got {type(base_units).__name__}")

    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return Decimal(base_units).scaleb(-UNIT_DECIMALS).normalize()
