"""
Checked Arithmetic: uint256 Safe Math Primitives

Модуль обеспечивает точную целочисленную арифметику для ценообразования:
- Сложение/вычитание/умножение с проверкой диапазона [0, UINT256_MAX]
- Переполнение никогда не "заворачивается", а отклоняется через exception
- Валидация входов (int, не bool, не отрицательные/положительные)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Никаких float: все суммы в целых base units
2. Выход за UINT256_MAX → ArithmeticOverflow
3. Отрицательный результат → ArithmeticUnderflow
4. Все операции детерминированы и воспроизводимы
"""

from typing import Final

from src.core.errors import ArithmeticOverflow, ArithmeticUnderflow

# =============================================================================
# ДИАПАЗОН
# =============================================================================

# Верхняя граница представимого значения (uint256)
UINT256_MAX: Final[int] = (1 << 256) - 1


# =============================================================================
# ВАЛИДАЦИЯ И ПРОВЕРКИ
# =============================================================================


def is_uint(value: object) -> bool:
    """
    Проверка, является ли значение целым в диапазоне [0, UINT256_MAX].

    bool отклоняется, хотя формально является подклассом int.

    Examples:
        >>> is_uint(5)
        True
        >>> is_uint(-1)
        False
        >>> is_uint(True)
        False
        >>> is_uint(1.0)
        False
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value <= UINT256_MAX


def validate_non_negative_int(value: int, name: str) -> None:
    """
    Валидация, что значение неотрицательное целое в диапазоне uint256.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ValueError: Если value не int, отрицательное или > UINT256_MAX
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")

    if value > UINT256_MAX:
        raise ValueError(f"{name} must be <= UINT256_MAX, got {value}")


def validate_positive_int(value: int, name: str) -> None:
    """
    Валидация, что значение положительное целое в диапазоне uint256.

    Raises:
        ValueError: Если value не int, <= 0 или > UINT256_MAX
    """
    validate_non_negative_int(value, name)

    if value == 0:
        raise ValueError(f"{name} must be positive, got {value}")


# =============================================================================
# CHECKED ОПЕРАЦИИ
# =============================================================================


def check_uint_range(value: int, op: str = "value") -> int:
    """Проверка, что результат операции лежит в [0, UINT256_MAX]."""
    if value < 0:
        raise ArithmeticUnderflow(f"{op} underflow: result {value} < 0")
    if value > UINT256_MAX:
        raise ArithmeticOverflow(f"{op} overflow: result exceeds UINT256_MAX")
    return value


def checked_add(a: int, b: int) -> int:
    """
    Сложение с проверкой переполнения.

    Examples:
        >>> checked_add(2, 3)
        5
        >>> checked_add(UINT256_MAX, 1)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ArithmeticOverflow: ...
    """
    return check_uint_range(a + b, "add")


def checked_sub(a: int, b: int) -> int:
    """
    Вычитание с проверкой ухода ниже нуля.

    Raises:
        ArithmeticUnderflow: если b > a
    """
    return check_uint_range(a - b, "sub")


def checked_mul(a: int, b: int) -> int:
    """
    Умножение с проверкой переполнения.

    Raises:
        ArithmeticOverflow: если a * b > UINT256_MAX
    """
    return check_uint_range(a * b, "mul")
