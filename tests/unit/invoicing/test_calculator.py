"""Unit tests for the invoice calculator"""

import pytest
from decimal import Decimal
from src.app.invoicing.calculator import (
    compute_discount,
    compute_grand_total,
    compute_item_total,
    compute_subtotal,
    compute_tax,
    percent_to_rate,
)
from src.domain.invoice import DiscountConfig, TaxConfig
from src.domain.line_item import LineItem


class TestItemTotals:
    """Test item total and subtotal derivation"""

    def test_item_total(self):
        assert compute_item_total(Decimal("3"), Decimal("150")) == Decimal("450")

    @pytest.mark.parametrize(
        "quantity, unit_price",
        [
            (Decimal("-2"), Decimal("100")),
            (Decimal("NaN"), Decimal("100")),
            (Decimal("2"), Decimal("Infinity")),
            (None, Decimal("100")),
        ],
    )
    def test_invalid_inputs_clamped_to_zero(self, quantity, unit_price):
        """Test non-finite or negative inputs never produce NaN or negatives"""
        assert compute_item_total(quantity, unit_price) == Decimal("0")

    def test_subtotal_recomputes_stale_totals(self):
        """Scenario A: subtotal of {2 x 100} and {3 x 150} is 650"""
        # Arrange
        items = [
            LineItem(quantity=Decimal("2"), unit_price=Decimal("100"), total=Decimal("999")),
            LineItem(quantity=Decimal("3"), unit_price=Decimal("150")),
        ]

        # Act
        subtotal = compute_subtotal(items)

        # Assert
        assert subtotal == Decimal("650")
        assert compute_tax(subtotal, TaxConfig(enabled=False, rate=Decimal("0.07"))) == Decimal("0")
        assert compute_grand_total(subtotal, Decimal("0"), Decimal("0")) == Decimal("650")

    def test_subtotal_of_no_items(self):
        assert compute_subtotal([]) == Decimal("0")


class TestTaxAndDiscount:
    """Test tax, discount and grand total"""

    def test_enabled_tax(self):
        """Scenario B: 7% of 1000 is 70, total 1070"""
        tax_amount = compute_tax(Decimal("1000"), TaxConfig(enabled=True, rate=Decimal("0.07")))

        assert tax_amount == Decimal("70")
        assert compute_grand_total(Decimal("1000"), tax_amount, Decimal("0")) == Decimal("1070")

    def test_tax_rate_clamped_to_one(self):
        tax = TaxConfig(enabled=True, rate=Decimal("7"))

        assert compute_tax(Decimal("1000"), tax) == Decimal("1000")

    def test_missing_tax_is_zero(self):
        assert compute_tax(Decimal("1000"), None) == Decimal("0")

    def test_discount_rate_is_a_percentage(self):
        """Test discount rate 10 means 10%, unlike the fractional tax rate"""
        discount = DiscountConfig(rate=Decimal("10"))

        assert compute_discount(Decimal("1000"), discount) == Decimal("100")
        assert compute_discount(Decimal("1000"), None) == Decimal("0")

    def test_discount_rate_clamped_to_hundred(self):
        assert compute_discount(Decimal("1000"), DiscountConfig(rate=Decimal("150"))) == Decimal("1000")

    def test_grand_total_subtracts_discount_and_adds_tax(self):
        assert compute_grand_total(Decimal("1000"), Decimal("63"), Decimal("100")) == Decimal("963")

    @pytest.mark.parametrize(
        "percent, expected",
        [(Decimal("7"), Decimal("0.07")), (Decimal("150"), Decimal("1")), (Decimal("-5"), Decimal("0"))],
    )
    def test_percent_to_rate(self, percent, expected):
        assert percent_to_rate(percent) == expected
