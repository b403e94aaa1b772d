"""
Unit tests for the row parser
"""

import pytest
from datetime import date
from decimal import Decimal
from ingestion.transformers.row_parser import RowParser
from core.exceptions import ValidationError
from conftest import WIDGET_ROW, make_row


class TestRowParser:
    """Test parsing and validation of untyped source rows"""

    def test_parse_valid_row(self):
        """Test a valid row becomes a fully typed entity bundle"""
        bundle = RowParser().parse(1, WIDGET_ROW)

        assert bundle.row == 1

        assert bundle.customer.customer_id == "C1"
        assert bundle.customer.customer_name == "Alice"
        assert bundle.customer.email == "a@x.com"
        assert bundle.customer.address == "1 Main St"
        assert bundle.customer.region == "West"

        assert bundle.product.product_id == "P1"
        assert bundle.product.category == "Tools"
        assert bundle.product.unit_price == Decimal("9.99")

        assert bundle.order.order_id == "O1"
        assert bundle.order.customer_id == "C1"
        assert bundle.order.order_date == date(2024, 1, 5)
        assert bundle.order.payment_method == "card"
        assert bundle.order.shipping_cost == Decimal("2.50")
        assert bundle.order.discount == Decimal("1.00")

        assert bundle.order_item.quantity_sold == 3
        assert bundle.order_item.unit_price_at_sale == Decimal("9.99")
        assert bundle.order_item.discount_applied == Decimal("1.00")

    @pytest.mark.parametrize("value", ["2024/01/05", "2024-1-5", "05-01-2024", "2024-01-05T00:00:00", ""])
    def test_rejects_date_not_matching_pattern(self, value):
        """Test dates must be exactly YYYY-MM-DD"""
        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(4, make_row(date_of_sale=value))

        assert exc_info.value.row == 4
        assert exc_info.value.field == "date_of_sale"

    def test_rejects_impossible_calendar_date(self):
        """Test a well-formed but impossible date is rejected"""
        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(1, make_row(date_of_sale="2024-02-30"))

        assert exc_info.value.field == "date_of_sale"

    @pytest.mark.parametrize("value", ["abc", "3.0", "", " 3", "1e2"])
    def test_rejects_non_integer_quantity(self, value):
        """Test quantity must be an integer"""
        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(2, make_row(quantity_sold=value))

        assert exc_info.value.field == "quantity_sold"
        assert exc_info.value.row == 2

    @pytest.mark.parametrize("value", ["99999999999999999999", "2147483648", "-2147483649"])
    def test_rejects_quantity_outside_column_range(self, value):
        """Test quantities that do not fit the INTEGER column are rejected"""
        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(3, make_row(quantity_sold=value))

        assert exc_info.value.field == "quantity_sold"
        assert "out of range" in exc_info.value.cause

    def test_accepts_quantity_at_column_bound(self):
        bundle = RowParser().parse(1, make_row(quantity_sold="2147483647"))

        assert bundle.order_item.quantity_sold == 2147483647

    @pytest.mark.parametrize("field", ["unit_price", "discount", "shipping_cost"])
    @pytest.mark.parametrize("value", ["-1.00", "NaN", "inf", "ten", ""])
    def test_rejects_invalid_amounts(self, field, value):
        """Test money fields must be non-negative decimal numbers"""
        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(1, make_row(**{field: value}))

        assert exc_info.value.field == field

    def test_accepts_amount_forms(self):
        """Test integer and exponent forms parse as decimals"""
        bundle = RowParser().parse(1, make_row(unit_price="10", discount="0", shipping_cost="2.5e1"))

        assert bundle.product.unit_price == Decimal("10")
        assert bundle.order.discount == Decimal("0")
        assert bundle.order.shipping_cost == Decimal("25")

    def test_rejects_wrong_field_count(self):
        """Test rows must carry exactly 15 fields"""
        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(7, WIDGET_ROW[:14])

        assert exc_info.value.field == "row"
        assert "expected 15 fields, got 14" in exc_info.value.cause

    def test_rejects_blank_key(self):
        """Test ids cannot be blank"""
        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(1, make_row(customer_id="  "))

        assert exc_info.value.field == "customer_id"

    def test_reports_first_failing_column(self):
        """Test the earliest bad column is the one reported"""
        row = make_row(date_of_sale="bad", quantity_sold="abc", unit_price="-1")

        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(1, row)

        assert exc_info.value.field == "date_of_sale"

    def test_error_message_names_row_and_field(self):
        """Test the error carries structured context for logging"""
        with pytest.raises(ValidationError) as exc_info:
            RowParser().parse(12, make_row(quantity_sold="abc"))

        error = exc_info.value
        assert error.context["row"] == 12
        assert error.context["field"] == "quantity_sold"
        assert "Row 12" in str(error)
