"""Tests for the keyword fallback parser."""

import pytest
from datetime import date

from finance_dashboard.models.transaction import TransactionType
from finance_dashboard.services.categories import CATEGORIES
from finance_dashboard.services.fallback_parser import extract_amount, parse


TODAY = date(2024, 3, 10)


class TestExtractAmount:
    """Test amount extraction."""

    def test_currency_glyphs(self):
        """Currency symbols before the number are accepted."""
        assert extract_amount("$12.50") == 12.5
        assert extract_amount("€20") == 20.0
        assert extract_amount("₹450 chai") == 450.0

    def test_first_number_only(self):
        """Only the first number counts."""
        assert extract_amount("3 coffees for 12") == 3.0

    def test_no_number(self):
        """No digits means zero."""
        assert extract_amount("coffee with friends") == 0.0

    def test_fraction_needs_two_digits(self):
        """A one-digit fraction is not part of the amount."""
        assert extract_amount("4.5 tip") == 4.0


class TestParse:
    """Test full fallback parsing."""

    def test_lunch(self):
        """Food purchase should be an expense in Food & Dining."""
        result = parse("Lunch at McDonald's $12.50", today=TODAY)
        assert result.category == "Food & Dining"
        assert result.type == TransactionType.expense
        assert result.amount == 12.5

    def test_salary(self):
        """Salary should be income in the Salary category."""
        result = parse("Salary deposit $3000", today=TODAY)
        assert result.type == TransactionType.income
        assert result.amount == 3000.0
        assert result.category == "Salary"

    def test_gas(self):
        """Gas station should be Gas & Fuel."""
        result = parse("Gas station $45", today=TODAY)
        assert result.category == "Gas & Fuel"
        assert result.amount == 45.0
        assert result.type == TransactionType.expense

    def test_date_is_today(self):
        """Dates in the text are ignored."""
        result = parse("Dinner on 2023-01-01 $30", today=TODAY)
        assert result.date == "2024-03-10"

    def test_description_truncated(self):
        """Description is a hard cut at 100 characters."""
        text = "a" * 150
        result = parse(text, today=TODAY)
        assert result.description == "a" * 100
        assert result.raw_input == text

    def test_provenance(self):
        """Fallback results are not marked as model parsed."""
        assert parse("Coffee $4", today=TODAY).ai_parsed is False

    def test_deterministic(self):
        """Same input gives the same output."""
        assert parse("Netflix $15", today=TODAY) == parse("Netflix $15", today=TODAY)

    @pytest.mark.parametrize("text", ["", "   ", "!!!", "12", "ünïcödé 🍕", "x" * 1000])
    def test_always_in_taxonomy(self, text):
        """Any input yields a taxonomy category."""
        assert parse(text, today=TODAY).category in CATEGORIES
