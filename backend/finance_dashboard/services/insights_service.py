"""
Canned insight messages layered over the analytics aggregations.
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from finance_dashboard.models.transaction import Transaction, TransactionType
from finance_dashboard.schemas.analytics import (
    CategoryTrend,
    CategoryWeek,
    DayPattern,
    Insight,
    InsightsResponse,
    InsightsSummary,
    MonthPhase,
    MonthTotals,
    Patterns,
    PatternsResponse,
    TopCategory,
)
from finance_dashboard.services.analytics_service import (
    DateWindow,
    bucket_key,
    daily_totals,
    previous_month_bounds,
    start_of_month,
    totals_by_type,
)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
PATTERN_LOOKBACK_DAYS = 30


def _month_totals(totals: Dict[TransactionType, Dict[str, float]]) -> MonthTotals:
    income = totals.get(TransactionType.income, {}).get("total", 0.0)
    expenses = totals.get(TransactionType.expense, {}).get("total", 0.0)
    return MonthTotals(income=income, expenses=expenses, net=income - expenses)


def top_expense_categories(db: Session, owner_id: str, since: datetime, limit: int = 5) -> List[TopCategory]:
    total = func.sum(Transaction.amount).label("total")
    rows = db.query(Transaction.category, total, func.count(Transaction.id)).filter(
        Transaction.owner_id == owner_id,
        Transaction.type == TransactionType.expense,
        Transaction.date >= since,
    ).group_by(Transaction.category).order_by(desc("total"), Transaction.category).limit(limit).all()

    return [
        TopCategory(category=category, total=float(amount or 0), count=int(count))
        for category, amount, count in rows
    ]


def get_insights(db: Session, owner_id: str, now: Optional[datetime] = None) -> InsightsResponse:
    """Month-over-month comparison, top category and savings rate."""
    now = now or datetime.utcnow()
    month_start = start_of_month(now)
    prev_start, prev_end = previous_month_bounds(now)

    current = _month_totals(totals_by_type(db, owner_id, DateWindow(period="month", start=month_start)))
    last = _month_totals(totals_by_type(db, owner_id, DateWindow(period="month", start=prev_start, end=prev_end)))
    top_categories = top_expense_categories(db, owner_id, month_start)

    insights = []

    if last.expenses > 0:
        expense_change = (current.expenses - last.expenses) / last.expenses * 100
        if expense_change > 10:
            insights.append(Insight(
                type="warning",
                title="Increased Spending",
                message=f"Your expenses have increased by {expense_change:.1f}% compared to last month.",
                recommendation="Review your spending patterns and consider budgeting for the categories where you spend the most.",
            ))
        elif expense_change < -10:
            insights.append(Insight(
                type="positive",
                title="Great Savings",
                message=f"You've reduced your expenses by {abs(expense_change):.1f}% compared to last month!",
                recommendation="Keep up the good work! Consider investing the savings.",
            ))

    if top_categories:
        top = top_categories[0]
        insights.append(Insight(
            type="info",
            title="Top Spending Category",
            message=f"You've spent ${top.total:.2f} on {top.category} this month.",
            recommendation=f"This represents your largest expense category. Consider if there are ways to optimize spending on {top.category}.",
        ))

    if current.income > 0:
        savings_rate = (current.income - current.expenses) / current.income * 100
        if savings_rate > 20:
            insights.append(Insight(
                type="positive",
                title="Excellent Savings Rate",
                message=f"You're saving {savings_rate:.1f}% of your income this month!",
                recommendation="Consider investing your surplus or building an emergency fund.",
            ))
        elif savings_rate < 0:
            insights.append(Insight(
                type="warning",
                title="Spending More Than Earning",
                message="Your expenses exceed your income this month.",
                recommendation="Review your expenses and create a budget to get back on track.",
            ))

    return InsightsResponse(
        insights=insights,
        summary=InsightsSummary(current_month=current, last_month=last, top_categories=top_categories),
    )


def day_number(moment: date) -> int:
    """1 for Sunday through 7 for Saturday."""
    return (moment.weekday() + 1) % 7 + 1


def get_patterns(db: Session, owner_id: str, now: Optional[datetime] = None) -> PatternsResponse:
    """Day-of-week, week-of-month and per-category activity over the last 30 days."""
    now = now or datetime.utcnow()
    since = now - timedelta(days=PATTERN_LOOKBACK_DAYS)

    on_day = func.date(Transaction.date)
    query = db.query(
        on_day,
        Transaction.type,
        Transaction.category,
        func.sum(Transaction.amount),
        func.count(Transaction.id),
    ).filter(
        Transaction.owner_id == owner_id,
        Transaction.date >= since,
    ).group_by(on_day, Transaction.type, Transaction.category)

    days: Dict[int, DayPattern] = {}
    phases: Dict[int, MonthPhase] = {}
    categories: Dict[str, CategoryTrend] = {}

    for moment, txn_type, category, amount, count in daily_totals(query):
        amount = float(amount)

        trend = categories.setdefault(
            category, CategoryTrend(category=category, weeks=[], total_amount=0.0, total_count=0)
        )
        trend.total_amount += amount
        trend.total_count += count
        week_key = bucket_key(moment, "week")
        week = next((w for w in trend.weeks if w.week == week_key), None)
        if week is None:
            week = CategoryWeek(week=week_key, amount=0.0, count=0)
            trend.weeks.append(week)
        week.amount += amount
        week.count += count

        if TransactionType(txn_type) != TransactionType.expense:
            continue

        number = day_number(moment)
        day = days.setdefault(number, DayPattern(
            day=DAY_NAMES[number - 1], day_number=number, total_spent=0.0, transaction_count=0, average_amount=0.0
        ))
        day.total_spent += amount
        day.transaction_count += count

        phase_number = (moment.day + 6) // 7
        phase = phases.setdefault(phase_number, MonthPhase(week=phase_number, total_spent=0.0, transaction_count=0))
        phase.total_spent += amount
        phase.transaction_count += count

    day_patterns = [days[n] for n in sorted(days)]
    for day in day_patterns:
        day.average_amount = round(day.total_spent / day.transaction_count, 2)
    month_phases = [phases[n] for n in sorted(phases)]
    category_trends = sorted(categories.values(), key=lambda t: (-t.total_amount, t.category))
    for trend in category_trends:
        trend.weeks.sort(key=lambda w: w.week)

    return PatternsResponse(
        patterns=Patterns(
            day_of_week=day_patterns,
            month_phases=month_phases,
            category_trends=category_trends[:10],
        ),
        insights=pattern_insights(day_patterns, month_phases, category_trends),
    )


def pattern_insights(
    day_patterns: List[DayPattern],
    month_phases: List[MonthPhase],
    category_trends: List[CategoryTrend]
) -> List[Insight]:
    insights = []

    if day_patterns:
        peak = max(day_patterns, key=lambda d: d.total_spent)
        if peak.total_spent > 0:
            insights.append(Insight(
                type="info",
                title="Peak Spending Day",
                message=f"You spend the most on {peak.day}s (${peak.total_spent:.2f} total)",
                recommendation=f"Consider budgeting extra for {peak.day}s or planning major purchases for lower-spending days.",
            ))

    if category_trends:
        busiest = max(category_trends, key=lambda t: t.total_count)
        insights.append(Insight(
            type="info",
            title="Most Active Category",
            message=f"{busiest.category} is your most frequent spending category ({busiest.total_count} transactions)",
            recommendation=f"Look for optimization opportunities in {busiest.category} to maximize your savings.",
        ))

    if len(month_phases) > 1:
        amounts = [phase.total_spent for phase in month_phases]
        average = sum(amounts) / len(amounts)
        if any(abs(amount - average) > average * 0.3 for amount in amounts):
            insights.append(Insight(
                type="warning",
                title="Irregular Spending Pattern",
                message="Your weekly spending varies significantly throughout the month",
                recommendation="Consider creating a weekly budget to smooth out spending patterns.",
            ))

    return insights
