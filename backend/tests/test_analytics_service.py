"""Tests for analytics windows and aggregations."""

import pytest
from datetime import date, datetime, time

from finance_dashboard.models.transaction import TransactionType
from finance_dashboard.services.analytics_service import (
    DateWindow,
    bucket_key,
    day_of,
    get_categories,
    get_summary,
    get_trends,
    percent_change,
    previous_month_bounds,
    resolve_window,
)

from conftest import make_transaction


NOW = datetime(2024, 3, 15, 12, 0)
income = TransactionType.income
expense = TransactionType.expense


class TestResolveWindow:
    """Test the shared date-window rule."""

    def test_week(self):
        window = resolve_window("week", now=NOW)
        assert window.start == datetime(2024, 3, 8, 12, 0)
        assert window.end is None

    def test_month(self):
        assert resolve_window("month", now=NOW).start == datetime(2024, 3, 1)

    def test_year(self):
        assert resolve_window("year", now=NOW).start == datetime(2024, 1, 1)

    def test_all(self):
        window = resolve_window("all", now=NOW)
        assert window.start is None and window.end is None

    def test_explicit_dates_cover_whole_days(self):
        """Explicit bounds are inclusive of the entire end day."""
        window = resolve_window("month", date(2024, 1, 1), date(2024, 1, 31), now=NOW)
        assert window.explicit
        assert window.start == datetime(2024, 1, 1)
        assert window.end == datetime.combine(date(2024, 1, 31), time.max)

    def test_single_bound_uses_period(self):
        """One explicit date alone does not override the period."""
        window = resolve_window("year", start_date=date(2020, 1, 1), now=NOW)
        assert not window.explicit
        assert window.start == datetime(2024, 1, 1)


class TestHelpers:
    """Test small calculation helpers."""

    def test_previous_month_bounds(self):
        start, end = previous_month_bounds(NOW)
        assert start == datetime(2024, 2, 1)
        assert end.date() == date(2024, 2, 29)
        assert end.time() == time.max

    def test_previous_month_bounds_january(self):
        """January compares against December of the prior year."""
        start, end = previous_month_bounds(datetime(2024, 1, 10))
        assert start == datetime(2023, 12, 1)
        assert end.date() == date(2023, 12, 31)

    def test_percent_change(self):
        assert percent_change(150, 100) == 50.0
        assert percent_change(1, 3) == -66.7
        assert percent_change(0, 100) == -100.0

    def test_percent_change_without_baseline(self):
        """No previous total means no change figure."""
        assert percent_change(100, 0) is None

    def test_bucket_keys(self):
        moment = datetime(2024, 3, 5, 18, 30)
        assert bucket_key(moment, "day") == "2024-03-05"
        assert bucket_key(moment, "week") == "2024-W10"
        assert bucket_key(moment, "month") == "2024-03"

    def test_iso_week_year_boundary(self):
        """ISO weeks can belong to the previous year."""
        assert bucket_key(datetime(2023, 1, 1), "week") == "2022-W52"

    def test_day_of(self):
        """SQL day values may arrive as strings or dates."""
        assert day_of("2024-03-05") == date(2024, 3, 5)
        assert day_of(date(2024, 3, 5)) == date(2024, 3, 5)
        assert day_of(datetime(2024, 3, 5, 23, 59)) == date(2024, 3, 5)


class TestGetSummary:
    """Test summary totals and month-over-month change."""

    @pytest.fixture
    def history(self, db_session, user):
        make_transaction(db_session, user, "1000.00", income, "Salary", datetime(2024, 3, 5))
        make_transaction(db_session, user, "200.00", expense, "Groceries", datetime(2024, 3, 10))
        make_transaction(db_session, user, "50.00", expense, "Food & Dining", datetime(2024, 3, 12))
        make_transaction(db_session, user, "125.00", expense, "Shopping", datetime(2024, 2, 29, 23, 0))

    def test_month_totals(self, db_session, user, history):
        summary = get_summary(db_session, user.id, resolve_window("month", now=NOW), now=NOW)
        assert summary.total_income == 1000.0
        assert summary.total_expenses == 250.0
        assert summary.net_income == 750.0
        assert summary.income_count == 1
        assert summary.expense_count == 2
        assert summary.average_expense == 125.0

    def test_month_change(self, db_session, user, history):
        """Expense change compares with the full previous month."""
        summary = get_summary(db_session, user.id, resolve_window("month", now=NOW), now=NOW)
        assert summary.expense_change == 100.0

    def test_change_absent_without_baseline(self, db_session, user, history):
        """No income last month means no income change."""
        summary = get_summary(db_session, user.id, resolve_window("month", now=NOW), now=NOW)
        assert summary.income_change is None

    def test_no_change_for_other_periods(self, db_session, user, history):
        summary = get_summary(db_session, user.id, resolve_window("year", now=NOW), now=NOW)
        assert summary.total_expenses == 375.0
        assert summary.income_change is None
        assert summary.expense_change is None

    def test_no_change_for_explicit_dates(self, db_session, user, history):
        window = resolve_window("month", date(2024, 3, 1), date(2024, 3, 31), now=NOW)
        summary = get_summary(db_session, user.id, window, now=NOW)
        assert summary.total_expenses == 250.0
        assert summary.expense_change is None

    def test_empty(self, db_session, user):
        """No transactions gives zeros and no change figures."""
        summary = get_summary(db_session, user.id, resolve_window("month", now=NOW), now=NOW)
        assert summary.total_income == 0.0
        assert summary.net_income == 0.0
        assert summary.income_change is None
        assert summary.expense_change is None

    def test_owner_scoped(self, db_session, user, other_user, history):
        """Another user's records are never counted."""
        make_transaction(db_session, other_user, "999.00", expense, "Travel", datetime(2024, 3, 6))
        summary = get_summary(db_session, user.id, resolve_window("month", now=NOW), now=NOW)
        assert summary.total_expenses == 250.0


class TestGetCategories:
    """Test per-category totals."""

    @pytest.fixture
    def history(self, db_session, user):
        make_transaction(db_session, user, "50.00", expense, "Groceries", datetime(2024, 3, 2))
        make_transaction(db_session, user, "30.00", expense, "Groceries", datetime(2024, 3, 3))
        make_transaction(db_session, user, "100.00", expense, "Food & Dining", datetime(2024, 3, 4))
        make_transaction(db_session, user, "20.00", expense, "Takeout Club", datetime(2024, 3, 5))
        make_transaction(db_session, user, "500.00", income, "Salary", datetime(2024, 3, 1))

    def test_expense_breakdown(self, db_session, user, history):
        """Largest first, custom labels kept as stored."""
        result = get_categories(db_session, user.id, resolve_window("all", now=NOW))
        assert [(c.category, c.total) for c in result] == [
            ("Food & Dining", 100.0),
            ("Groceries", 80.0),
            ("Takeout Club", 20.0),
        ]

    def test_income_breakdown(self, db_session, user, history):
        result = get_categories(db_session, user.id, resolve_window("all", now=NOW), "income")
        assert [c.category for c in result] == ["Salary"]

    def test_both_types(self, db_session, user, history):
        result = get_categories(db_session, user.id, resolve_window("all", now=NOW), "both")
        assert result[0].category == "Salary"
        assert len(result) == 4

    def test_window_applies(self, db_session, user, history):
        window = DateWindow(period="custom", start=datetime(2024, 3, 4), explicit=True)
        result = get_categories(db_session, user.id, window)
        assert [c.category for c in result] == ["Food & Dining", "Takeout Club"]


class TestGetTrends:
    """Test bucketed income and expense series."""

    def test_expense_only_buckets_report_zero_income(self, db_session, user):
        make_transaction(db_session, user, "40.00", expense, "Groceries", datetime(2024, 1, 10))
        make_transaction(db_session, user, "10.50", expense, "Food & Dining", datetime(2024, 3, 2))

        trends = get_trends(db_session, user.id, resolve_window("year", now=NOW))
        assert [p.date for p in trends] == ["2024-01", "2024-03"]
        for point in trends:
            assert point.income == 0
            assert point.income_count == 0
        assert trends[1].expenses == 10.5
        assert trends[1].net == -10.5

    def test_daily_buckets_sorted(self, db_session, user):
        make_transaction(db_session, user, "100.00", income, "Salary", datetime(2024, 3, 3, 9, 0))
        make_transaction(db_session, user, "25.00", expense, "Groceries", datetime(2024, 3, 3, 18, 0))
        make_transaction(db_session, user, "5.25", expense, "Food & Dining", datetime(2024, 3, 1))

        trends = get_trends(db_session, user.id, resolve_window("month", now=NOW), "day")
        assert [p.date for p in trends] == ["2024-03-01", "2024-03-03"]
        assert trends[1].income == 100.0
        assert trends[1].expenses == 25.0
        assert trends[1].net == 75.0
        assert trends[1].expense_count == 1

    def test_weekly_buckets(self, db_session, user):
        make_transaction(db_session, user, "10.00", expense, "Groceries", datetime(2024, 3, 4))
        make_transaction(db_session, user, "15.00", expense, "Groceries", datetime(2024, 3, 10))
        make_transaction(db_session, user, "20.00", expense, "Groceries", datetime(2024, 3, 11))

        trends = get_trends(db_session, user.id, resolve_window("month", now=NOW), "week")
        assert [(p.date, p.expenses) for p in trends] == [("2024-W10", 25.0), ("2024-W11", 20.0)]

    def test_same_day_rows_collapse(self, db_session, user):
        """Many transactions on one day give one bucket with full counts."""
        for hour in range(6):
            make_transaction(db_session, user, "2.50", expense, "Food & Dining", datetime(2024, 3, 4, hour, 30))
        make_transaction(db_session, user, "100.00", income, "Gift", datetime(2024, 3, 4, 23, 59))

        trends = get_trends(db_session, user.id, resolve_window("month", now=NOW), "day")
        assert len(trends) == 1
        assert trends[0].date == "2024-03-04"
        assert trends[0].expenses == 15.0
        assert trends[0].expense_count == 6
        assert trends[0].income == 100.0
        assert trends[0].income_count == 1

    def test_empty(self, db_session, user):
        assert get_trends(db_session, user.id, resolve_window("all", now=NOW)) == []
