"""
Analytics schemas.
"""

from datetime import datetime
from typing import List, Optional

from finance_dashboard.schemas.base import CamelModel


class DateRange(CamelModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class Summary(CamelModel):
    total_income: float = 0.0
    total_expenses: float = 0.0
    net_income: float = 0.0
    income_count: int = 0
    expense_count: int = 0
    average_income: float = 0.0
    average_expense: float = 0.0
    income_change: Optional[float] = None
    expense_change: Optional[float] = None
    period: str
    date_range: DateRange


class CategoryTotal(CamelModel):
    category: str
    total: float


class CategoryBreakdown(CamelModel):
    categories: List[CategoryTotal]
    period: str
    type: str
    date_range: DateRange


class TrendPoint(CamelModel):
    date: str
    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0
    income_count: int = 0
    expense_count: int = 0


class Trends(CamelModel):
    trends: List[TrendPoint]
    period: str
    group_by: str
    date_range: DateRange


class Insight(CamelModel):
    type: str  # info, warning, positive
    title: str
    message: str
    recommendation: str


class MonthTotals(CamelModel):
    income: float
    expenses: float
    net: float


class TopCategory(CamelModel):
    category: str
    total: float
    count: int


class InsightsSummary(CamelModel):
    current_month: MonthTotals
    last_month: MonthTotals
    top_categories: List[TopCategory]


class InsightsResponse(CamelModel):
    insights: List[Insight]
    summary: InsightsSummary


class DayPattern(CamelModel):
    day: str
    day_number: int  # 1 = Sunday
    total_spent: float
    transaction_count: int
    average_amount: float


class MonthPhase(CamelModel):
    week: int
    total_spent: float
    transaction_count: int


class CategoryWeek(CamelModel):
    week: str
    amount: float
    count: int


class CategoryTrend(CamelModel):
    category: str
    weeks: List[CategoryWeek]
    total_amount: float
    total_count: int


class Patterns(CamelModel):
    day_of_week: List[DayPattern]
    month_phases: List[MonthPhase]
    category_trends: List[CategoryTrend]


class PatternsResponse(CamelModel):
    patterns: Patterns
    insights: List[Insight]
