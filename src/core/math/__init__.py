"""
Core math modules

Точная целочисленная арифметика и ценообразование bonding curve.
"""

# Checked Arithmetic
from src.core.math.checked_arithmetic import (
    UINT256_MAX,
    check_uint_range,
    checked_add,
    checked_mul,
    checked_sub,
    is_uint,
    validate_non_negative_int,
    validate_positive_int,
)

# Price Curve
from src.core.math.price_curve import (
    DEFAULT_PRICE_INCREMENT,
    PriceCurve,
)

__all__ = [
    # Checked Arithmetic — Constants
    "UINT256_MAX",
    # Checked Arithmetic — Operations
    "check_uint_range",
    "checked_add",
    "checked_mul",
    "checked_sub",
    # Checked Arithmetic — Validation
    "is_uint",
    "validate_non_negative_int",
    "validate_positive_int",
    # Price Curve
    "DEFAULT_PRICE_INCREMENT",
    "PriceCurve",
]
