"""
Analytics aggregations over a user's transactions.

All three reads share one rule for turning a named period or an explicit
date range into a window. Explicit dates win and are inclusive on both ends.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple, Union

from sqlalchemy import desc, func
from sqlalchemy.orm import Query, Session

from finance_dashboard.models.transaction import Transaction, TransactionType
from finance_dashboard.schemas.analytics import (
    CategoryTotal,
    DateRange,
    Summary,
    TrendPoint,
)


@dataclass(frozen=True)
class DateWindow:
    period: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    explicit: bool = False

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start, end=self.end)


def start_of_month(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1)


def previous_month_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """First instant and last instant of the calendar month before `now`."""
    this_month = start_of_month(now)
    last_day = this_month - timedelta(days=1)
    return start_of_month(last_day), datetime.combine(last_day.date(), time.max)


def resolve_window(
    period: str = "month",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None
) -> DateWindow:
    now = now or datetime.utcnow()

    if start_date and end_date:
        return DateWindow(
            period=period,
            start=datetime.combine(start_date, time.min),
            end=datetime.combine(end_date, time.max),
            explicit=True,
        )

    if period == "week":
        return DateWindow(period=period, start=now - timedelta(days=7))
    if period == "month":
        return DateWindow(period=period, start=start_of_month(now))
    if period == "year":
        return DateWindow(period=period, start=datetime(now.year, 1, 1))
    return DateWindow(period=period)


def apply_window(query: Query, window: DateWindow) -> Query:
    if window.start is not None:
        query = query.filter(Transaction.date >= window.start)
    if window.end is not None:
        query = query.filter(Transaction.date <= window.end)
    return query


def percent_change(current: float, previous: float) -> Optional[float]:
    """Rounded to one decimal. None when there is nothing to compare against."""
    if not previous:
        return None
    return round((current - previous) / previous * 100, 1)


def totals_by_type(db: Session, owner_id: str, window: DateWindow) -> Dict[TransactionType, Dict[str, float]]:
    query = db.query(
        Transaction.type,
        func.sum(Transaction.amount),
        func.count(Transaction.id),
        func.avg(Transaction.amount),
    ).filter(Transaction.owner_id == owner_id)
    query = apply_window(query, window).group_by(Transaction.type)

    totals = {}
    for txn_type, total, count, average in query.all():
        totals[TransactionType(txn_type)] = {
            "total": float(total or 0),
            "count": int(count or 0),
            "average": float(average or 0),
        }
    return totals


def get_summary(
    db: Session,
    owner_id: str,
    window: DateWindow,
    now: Optional[datetime] = None
) -> Summary:
    now = now or datetime.utcnow()
    totals = totals_by_type(db, owner_id, window)
    income = totals.get(TransactionType.income, {})
    expense = totals.get(TransactionType.expense, {})

    summary = Summary(
        total_income=income.get("total", 0.0),
        total_expenses=expense.get("total", 0.0),
        income_count=income.get("count", 0),
        expense_count=expense.get("count", 0),
        average_income=income.get("average", 0.0),
        average_expense=expense.get("average", 0.0),
        period=window.period,
        date_range=window.date_range,
    )
    summary.net_income = summary.total_income - summary.total_expenses

    if window.period == "month" and not window.explicit:
        prev_start, prev_end = previous_month_bounds(now)
        previous = totals_by_type(db, owner_id, DateWindow(period="month", start=prev_start, end=prev_end))
        summary.income_change = percent_change(
            summary.total_income, previous.get(TransactionType.income, {}).get("total", 0.0)
        )
        summary.expense_change = percent_change(
            summary.total_expenses, previous.get(TransactionType.expense, {}).get("total", 0.0)
        )

    return summary


def get_categories(
    db: Session,
    owner_id: str,
    window: DateWindow,
    txn_type: str = "expense"
) -> List[CategoryTotal]:
    """Totals per literal stored category, largest first."""
    total = func.sum(Transaction.amount).label("total")
    query = db.query(Transaction.category, total).filter(Transaction.owner_id == owner_id)
    query = apply_window(query, window)
    if txn_type != "both":
        query = query.filter(Transaction.type == TransactionType(txn_type))

    rows = query.group_by(Transaction.category).order_by(desc("total"), Transaction.category).all()
    return [CategoryTotal(category=category, total=float(amount or 0)) for category, amount in rows]


def day_of(value: Union[str, date]) -> date:
    """func.date() comes back as a string on SQLite and a date elsewhere."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def daily_totals(query: Query) -> List[Tuple]:
    """Group a (day, ...) query in SQL so only one row per day and key is read."""
    return [(day_of(row[0]),) + tuple(row[1:]) for row in query.all()]


def bucket_key(moment: date, group_by: str) -> str:
    if group_by == "day":
        return moment.strftime("%Y-%m-%d")
    if group_by == "week":
        iso_year, iso_week, _ = moment.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    return moment.strftime("%Y-%m")


def get_trends(
    db: Session,
    owner_id: str,
    window: DateWindow,
    group_by: str = "month"
) -> List[TrendPoint]:
    day = func.date(Transaction.date)
    query = db.query(
        day,
        Transaction.type,
        func.sum(Transaction.amount),
        func.count(Transaction.id),
    ).filter(Transaction.owner_id == owner_id)
    query = apply_window(query, window).group_by(day, Transaction.type)

    buckets: Dict[str, TrendPoint] = {}
    for moment, txn_type, amount, count in daily_totals(query):
        key = bucket_key(moment, group_by)
        point = buckets.setdefault(key, TrendPoint(date=key))
        if TransactionType(txn_type) == TransactionType.income:
            point.income += float(amount)
            point.income_count += count
        else:
            point.expenses += float(amount)
            point.expense_count += count

    trends = sorted(buckets.values(), key=lambda p: p.date)
    for point in trends:
        point.income = round(point.income, 2)
        point.expenses = round(point.expenses, 2)
        point.net = round(point.income - point.expenses, 2)
    return trends
