"""Tests for the holding value model.

Covers:
- Validation of symbol, name, quantity and price
- Stock commission and mutual fund redemption fee arithmetic
- Average-cost book value reduction on sells
- Identity by (symbol, name)
"""
from __future__ import annotations

import pytest

from portfolio.errors import InsufficientQuantityError, ValidationError
from portfolio.holding import FeeSchedule, Holding, HoldingKind


class TestValidation:
    """Tests for input validation on create."""

    @pytest.mark.parametrize("symbol", ["", "ibm", "IB M", "IBM!", "Ibm"])
    def test_rejects_bad_symbol(self, symbol):
        """Symbols must be uppercase letters and digits only."""
        with pytest.raises(ValidationError):
            Holding.create("stock", symbol, "Name", 1, 1.0)

    def test_accepts_alphanumeric_symbol(self):
        h = Holding.create("stock", "BRK2", "Berkshire", 1, 1.0)
        assert h.symbol == "BRK2"

    def test_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            Holding.create("stock", "IBM", "   ", 1, 1.0)

    @pytest.mark.parametrize("name", ["Intl\nBusiness", "Intl\rBusiness", "Intl\u2028Business", "Intl\x85Business", "Intl\x0bBusiness", "Intl\x1eBusiness"])
    def test_rejects_line_breaks_in_name(self, name):
        """Any character that splits a line would break the saved record."""
        with pytest.raises(ValidationError):
            Holding.create("stock", "IBM", name, 1, 1.0)

    def test_trims_name(self):
        h = Holding.create("stock", "IBM", "  International Business Machines  ", 1, 1.0)
        assert h.name == "International Business Machines"

    @pytest.mark.parametrize("quantity", [0, -5, 1.5, True])
    def test_rejects_bad_quantity(self, quantity):
        with pytest.raises(ValidationError):
            Holding.create("stock", "IBM", "IBM", quantity, 1.0)

    @pytest.mark.parametrize("price", [0, -1.0, float("nan"), float("inf")])
    def test_rejects_bad_price(self, price):
        with pytest.raises(ValidationError):
            Holding.create("stock", "IBM", "IBM", 1, price)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            Holding.create("stock", "ibm", "IBM", 1, 1.0)


class TestKindLabels:
    """Tests for variant selection from type labels."""

    @pytest.mark.parametrize("label", ["stock", "STOCK", "Stock"])
    def test_stock_is_case_insensitive(self, label):
        assert HoldingKind.from_label(label) is HoldingKind.STOCK

    @pytest.mark.parametrize("label", ["mutualfund", "fund", "", "bond"])
    def test_anything_else_is_mutual_fund(self, label):
        assert HoldingKind.from_label(label) is HoldingKind.MUTUAL_FUND


class TestInitialBookValue:
    """Initial gain equals minus the buy fee."""

    def test_stock_includes_commission(self):
        h = Holding.create("stock", "IBM", "International Business Machines", 100, 50.00)
        assert h.book_value == pytest.approx(5009.99)
        assert h.gain() == pytest.approx(-9.99)

    def test_mutual_fund_has_no_buy_fee(self):
        h = Holding.create("mutualfund", "ABCFX", "Growth Fund", 200, 10.00)
        assert h.book_value == 2000.00
        assert h.gain() == 0

    def test_custom_fee_schedule(self):
        fees = FeeSchedule(commission=5.0, redemption_fee=10.0)
        h = Holding.create("stock", "IBM", "IBM", 10, 1.0, fees)
        assert h.book_value == pytest.approx(15.0)


class TestBuy:
    """Tests for additional purchases."""

    def test_stock_buy_adds_commission(self):
        h = Holding.create("stock", "IBM", "IBM", 10, 10.0)
        h.buy(5, 20.0)
        assert h.quantity == 15
        assert h.book_value == pytest.approx(100 + 9.99 + 100 + 9.99)

    def test_fund_buy_has_no_fee(self):
        h = Holding.create("mutualfund", "ABCFX", "Growth Fund", 10, 10.0)
        h.buy(5, 20.0)
        assert h.quantity == 15
        assert h.book_value == pytest.approx(200.0)

    def test_invalid_buy_leaves_state_unchanged(self):
        h = Holding.create("stock", "IBM", "IBM", 10, 10.0)
        with pytest.raises(ValidationError):
            h.buy(5, -1.0)
        assert h.quantity == 10
        assert h.book_value == pytest.approx(109.99)


class TestSell:
    """Tests for sell proceeds and average-cost book value."""

    def test_stock_partial_sell(self):
        """Scenario: 100 IBM at 50, sell 50 at 60."""
        h = Holding.create("stock", "IBM", "International Business Machines", 100, 50.00)

        proceeds = h.sell(50, 60.00)

        assert proceeds == pytest.approx(2990.01)
        assert h.book_value == pytest.approx(2504.995)
        assert h.quantity == 50

    def test_fund_full_sell(self):
        h = Holding.create("mutualfund", "ABCFX", "Growth Fund", 200, 10.00)

        proceeds = h.sell(200, 12.00)

        assert proceeds == pytest.approx(2355.00)
        assert h.quantity == 0
        assert h.book_value == pytest.approx(0.0)

    def test_fee_can_exceed_sale_value(self):
        h = Holding.create("mutualfund", "ABCFX", "Growth Fund", 10, 1.0)
        assert h.sell(1, 1.0) == pytest.approx(-44.0)

    def test_oversell_raises(self):
        h = Holding.create("stock", "IBM", "IBM", 10, 10.0)
        with pytest.raises(InsufficientQuantityError) as exc:
            h.sell(11, 10.0)
        assert exc.value.held == 10
        assert h.quantity == 10

    def test_sell_rejects_zero_quantity(self):
        h = Holding.create("stock", "IBM", "IBM", 10, 10.0)
        with pytest.raises(ValidationError):
            h.sell(0, 10.0)


class TestPriceAndGain:
    """Tests for price updates and gain."""

    def test_update_price_changes_gain(self):
        h = Holding.create("mutualfund", "ABCFX", "Growth Fund", 100, 10.0)
        h.update_price(12.5)
        assert h.price == 12.5
        assert h.gain() == pytest.approx(250.0)

    def test_update_price_rejects_non_positive(self):
        h = Holding.create("mutualfund", "ABCFX", "Growth Fund", 100, 10.0)
        with pytest.raises(ValidationError):
            h.update_price(0)
        assert h.price == 10.0


class TestIdentity:
    """Holdings compare by (symbol, name)."""

    def test_equal_when_symbol_and_name_match(self):
        a = Holding.create("stock", "IBM", "IBM Corp", 10, 10.0)
        b = Holding.create("stock", "IBM", "IBM Corp", 99, 42.0)
        assert a == b
        assert hash(a) == hash(b)

    def test_different_name_is_different(self):
        a = Holding.create("stock", "IBM", "IBM Corp", 10, 10.0)
        b = Holding.create("stock", "IBM", "Intl Business", 10, 10.0)
        assert a != b

    def test_snapshot_is_frozen_and_shares_identity(self):
        h = Holding.create("stock", "IBM", "IBM Corp", 10, 10.0)
        snap = h.snapshot()
        with pytest.raises(AttributeError):
            snap.quantity = 1
        assert snap == h.snapshot()

    def test_snapshot_display_string(self):
        h = Holding.create("stock", "IBM", "International Business Machines", 100, 50.00)
        assert str(h.snapshot()) == (
            "Stock [Symbol: IBM, Name: International Business Machines, "
            "Quantity: 100, Price: 50.00, Book Value: 5009.99]"
        )

    def test_fund_display_string(self):
        h = Holding.create("mutualfund", "ABCFX", "Growth Fund", 200, 10.00)
        assert str(h).startswith("Mutual Fund [Symbol: ABCFX")
