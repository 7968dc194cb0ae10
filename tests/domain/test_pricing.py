"""Tests for the pricing engine: subtotal, discount, rounding."""

from dataclasses import dataclass
from decimal import Decimal

import pytest

from tillctl.domain.errors import ValidationError
from tillctl.domain.pricing import (
    apply_discount,
    compute_subtotal,
    price_cart,
    round_currency,
    to_decimal,
    validate_discount_rate,
)


@dataclass
class _Line:
    unit_price: Decimal
    quantity: int


class TestSubtotal:
    def test_sum_of_lines(self) -> None:
        lines = [_Line(Decimal("27.00"), 3), _Line(Decimal("18.00"), 2)]
        assert compute_subtotal(lines) == Decimal("117.00")

    def test_empty_is_zero(self) -> None:
        assert compute_subtotal([]) == Decimal("0")


class TestApplyDiscount:
    def test_ten_percent(self) -> None:
        breakdown = apply_discount(Decimal("81.00"), 10)
        assert breakdown.discount_amount == Decimal("8.10")
        assert breakdown.final_total == Decimal("72.90")

    def test_zero_percent_is_identity(self) -> None:
        breakdown = apply_discount(Decimal("81.00"), 0)
        assert breakdown.discount_amount == Decimal("0.00")
        assert breakdown.final_total == Decimal("81.00")

    def test_hundred_percent_is_free(self) -> None:
        breakdown = apply_discount(Decimal("81.00"), 100)
        assert breakdown.final_total == Decimal("0.00")

    def test_rounds_half_up(self) -> None:
        # 0.125 -> 0.13 with half-up (banker's rounding would give 0.12)
        assert round_currency(Decimal("0.125")) == Decimal("0.13")
        breakdown = apply_discount(Decimal("1.25"), 10)
        assert breakdown.discount_amount == Decimal("0.13")
        assert breakdown.final_total == Decimal("1.12")

    def test_float_rate_uses_decimal_text(self) -> None:
        breakdown = apply_discount(Decimal("10.00"), 12.5)
        assert breakdown.discount_amount == Decimal("1.25")

    @pytest.mark.parametrize("rate", [-1, 100.01, "abc", "NaN", "Infinity"])
    def test_invalid_rate(self, rate: object) -> None:
        with pytest.raises(ValidationError):
            apply_discount(Decimal("10.00"), rate)  # type: ignore[arg-type]

    def test_final_total_invariant(self) -> None:
        for rate in ("0", "7.5", "33.333", "50", "99.99"):
            subtotal = Decimal("123.45")
            breakdown = apply_discount(subtotal, rate)
            assert breakdown.final_total == subtotal - breakdown.discount_amount


class TestPriceCart:
    def test_summary(self) -> None:
        summary = price_cart([_Line(Decimal("27.00"), 3)], 10)
        assert summary.subtotal == Decimal("81.00")
        assert summary.discount_rate == Decimal("10")
        assert summary.discount_amount == Decimal("8.10")
        assert summary.final_total == Decimal("72.90")
        assert summary.item_count == 3

    def test_to_dict_uses_strings(self) -> None:
        data = price_cart([_Line(Decimal("27.00"), 3)], 10).to_dict()
        assert data["final_total"] == "72.90"
        assert data["item_count"] == 3


class TestConversions:
    def test_to_decimal_from_string(self) -> None:
        assert to_decimal(" 72.90 ") == Decimal("72.90")

    def test_validate_rate_bounds_inclusive(self) -> None:
        assert validate_discount_rate(0) == Decimal("0")
        assert validate_discount_rate("100") == Decimal("100")
