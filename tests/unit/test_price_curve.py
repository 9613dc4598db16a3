"""
Тесты для Price Curve и Checked Arithmetic

Проверяемые инварианты:
1. Closed form бит-в-бит совпадает с наивным циклом
2. Конкретные сценарии при increment = 0.01 unit
3. Монотонность cost_to_buy по supply и quantity
4. Round-trip symmetry: revenue_for_sell(n, q) == cost_to_buy(n − q, q)
5. ArithmeticOverflow/ArithmeticUnderflow вместо wrap-around
"""

import pytest

from src.core.domain.units import to_base_units
from src.core.errors import ArithmeticOverflow, ArithmeticUnderflow, CurveArithmeticError
from src.core.math.checked_arithmetic import (
    UINT256_MAX,
    checked_add,
    checked_mul,
    checked_sub,
    is_uint,
    validate_non_negative_int,
    validate_positive_int,
)
from src.core.math.price_curve import DEFAULT_PRICE_INCREMENT, PriceCurve


INC = 10**16  # 0.01 unit


def naive_cost(increment: int, supply: int, quantity: int) -> int:
    """Эталон: цикл по единицам, как в исходной формулировке."""
    total = 0
    for i in range(1, quantity + 1):
        total += increment * (supply + i)
    return total


def naive_revenue(increment: int, supply: int, quantity: int) -> int:
    total = 0
    for i in range(quantity):
        total += increment * (supply - i)
    return total


@pytest.fixture
def curve():
    """Curve с шагом 0.01 unit."""
    return PriceCurve(increment=INC)


# =============================================================================
# ТЕСТЫ: Checked Arithmetic
# =============================================================================


class TestCheckedArithmetic:
    """Тесты checked_add/sub/mul и валидаторов."""

    def test_in_range_operations(self):
        assert checked_add(2, 3) == 5
        assert checked_sub(5, 3) == 2
        assert checked_mul(4, 5) == 20
        assert checked_add(UINT256_MAX, 0) == UINT256_MAX

    def test_add_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            checked_add(UINT256_MAX, 1)

    def test_mul_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            checked_mul(2**200, 2**100)

    def test_sub_underflow(self):
        with pytest.raises(ArithmeticUnderflow):
            checked_sub(1, 2)

    def test_arithmetic_errors_share_base(self):
        """Overflow/Underflow ловятся общим CurveArithmeticError."""
        with pytest.raises(CurveArithmeticError):
            checked_sub(0, 1)
        with pytest.raises(CurveArithmeticError):
            checked_add(UINT256_MAX, UINT256_MAX)

    def test_is_uint(self):
        assert is_uint(0) is True
        assert is_uint(UINT256_MAX) is True
        assert is_uint(UINT256_MAX + 1) is False
        assert is_uint(-1) is False
        assert is_uint(True) is False
        assert is_uint(1.0) is False

    def test_validators_reject_bad_input(self):
        with pytest.raises(ValueError, match="integer"):
            validate_non_negative_int(1.5, "x")
        with pytest.raises(ValueError, match="integer"):
            validate_non_negative_int(False, "x")
        with pytest.raises(ValueError, match="non-negative"):
            validate_non_negative_int(-1, "x")
        with pytest.raises(ValueError, match="positive"):
            validate_positive_int(0, "x")

        validate_non_negative_int(0, "x")
        validate_positive_int(1, "x")


# =============================================================================
# ТЕСТЫ: Конкретные сценарии
# =============================================================================


class TestConcreteScenarios:
    """Сценарии при increment = 0.01 unit."""

    def test_costs_from_zero_supply(self, curve):
        assert curve.cost_to_buy(0, 1) == to_base_units("0.01")
        assert curve.cost_to_buy(0, 2) == to_base_units("0.03")
        assert curve.cost_to_buy(0, 10) == to_base_units("0.55")

    def test_revenues_at_supply_two(self, curve):
        assert curve.revenue_for_sell(2, 1) == to_base_units("0.02")
        assert curve.revenue_for_sell(2, 2) == to_base_units("0.03")

    def test_default_increment_is_one_cent(self):
        assert DEFAULT_PRICE_INCREMENT == to_base_units("0.01")
        assert PriceCurve().increment == DEFAULT_PRICE_INCREMENT

    def test_spot_price(self, curve):
        assert curve.spot_price(0) == INC
        assert curve.spot_price(9) == 10 * INC


# =============================================================================
# ТЕСТЫ: Closed form == naive loop
# =============================================================================


class TestClosedFormMatchesLoop:
    """Closed form совпадает с циклом по единицам бит-в-бит."""

    @pytest.mark.parametrize("increment", [1, 7, INC, 3 * 10**17 + 1])
    def test_cost_matches_loop(self, increment):
        curve = PriceCurve(increment=increment)
        for supply in (0, 1, 2, 5, 17, 1000):
            for quantity in (0, 1, 2, 3, 10, 33):
                assert curve.cost_to_buy(supply, quantity) == naive_cost(
                    increment, supply, quantity
                )

    @pytest.mark.parametrize("increment", [1, 7, INC, 3 * 10**17 + 1])
    def test_revenue_matches_loop(self, increment):
        curve = PriceCurve(increment=increment)
        for supply in (0, 1, 2, 5, 17, 1000):
            for quantity in range(0, min(supply, 40) + 1):
                assert curve.revenue_for_sell(supply, quantity) == naive_revenue(
                    increment, supply, quantity
                )

    def test_results_are_int(self, curve):
        assert type(curve.cost_to_buy(3, 4)) is int
        assert type(curve.revenue_for_sell(4, 3)) is int


# =============================================================================
# ТЕСТЫ: Монотонность и симметрия
# =============================================================================


class TestCurveProperties:
    """Монотонность и round-trip symmetry."""

    def test_cost_strictly_increasing_in_supply(self, curve):
        for quantity in (1, 2, 7):
            costs = [curve.cost_to_buy(n, quantity) for n in range(50)]
            assert all(a < b for a, b in zip(costs, costs[1:]))

    def test_cost_strictly_increasing_in_quantity(self, curve):
        for supply in (0, 3, 100):
            costs = [curve.cost_to_buy(supply, q) for q in range(50)]
            assert all(a < b for a, b in zip(costs, costs[1:]))

    def test_round_trip_symmetry(self, curve):
        for supply in range(0, 40):
            for quantity in range(0, supply + 1):
                assert curve.revenue_for_sell(supply, quantity) == curve.cost_to_buy(
                    supply - quantity, quantity
                )

    def test_split_purchase_equals_single_purchase(self, curve):
        """Цена path-dependent, но сумма последовательных покупок = одной покупке."""
        split = curve.cost_to_buy(0, 3) + curve.cost_to_buy(3, 4)
        assert split == curve.cost_to_buy(0, 7)


# =============================================================================
# ТЕСТЫ: Границы диапазона
# =============================================================================


class TestCurveBounds:
    """Overflow/Underflow отклоняются, а не заворачиваются."""

    def test_sell_more_than_supply_underflows(self, curve):
        with pytest.raises(ArithmeticUnderflow):
            curve.revenue_for_sell(2, 3)
        with pytest.raises(ArithmeticUnderflow):
            curve.revenue_for_sell(0, 1)

    def test_sell_entire_supply(self, curve):
        assert curve.revenue_for_sell(5, 5) == curve.cost_to_buy(0, 5)

    def test_cost_overflow(self, curve):
        with pytest.raises(ArithmeticOverflow):
            curve.cost_to_buy(0, 2**128)

    def test_cost_overflow_from_supply(self, curve):
        with pytest.raises(ArithmeticOverflow):
            curve.cost_to_buy(2**250, 2**10)

    def test_cost_just_in_range_with_unit_increment(self):
        """При increment = 1 допустим любой результат <= UINT256_MAX."""
        curve = PriceCurve(increment=1)
        assert curve.cost_to_buy(UINT256_MAX - 1, 1) == UINT256_MAX
        with pytest.raises(ArithmeticOverflow):
            curve.cost_to_buy(UINT256_MAX, 1)

    def test_invalid_arguments(self, curve):
        with pytest.raises(ValueError):
            curve.cost_to_buy(-1, 1)
        with pytest.raises(ValueError):
            curve.cost_to_buy(0, 1.0)
        with pytest.raises(ValueError):
            PriceCurve(increment=0)

    def test_curve_is_immutable(self, curve):
        with pytest.raises(AttributeError):
            curve.increment = 1
