"""
Analytics API endpoints.
"""

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from finance_dashboard.dependencies import get_current_user, get_db
from finance_dashboard.models.user import User
from finance_dashboard.schemas.analytics import (
    CategoryBreakdown,
    InsightsResponse,
    PatternsResponse,
    Summary,
    Trends,
)
from finance_dashboard.services import analytics_service, insights_service

router = APIRouter(prefix="/analytics", tags=["analytics"])

Period = Literal["week", "month", "year", "all"]


@router.get("/summary", response_model=Summary)
def get_summary(
    period: Period = "month",
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Totals, counts and averages by type for the window.
    Month-over-month change is only reported for period=month.
    """
    window = analytics_service.resolve_window(period, start_date, end_date)
    return analytics_service.get_summary(db, user.id, window)


@router.get("/categories", response_model=CategoryBreakdown)
def get_categories(
    period: Period = "month",
    type: Literal["income", "expense", "both"] = "expense",
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Totals per category, largest first"""
    window = analytics_service.resolve_window(period, start_date, end_date)
    return CategoryBreakdown(
        categories=analytics_service.get_categories(db, user.id, window, type),
        period=period,
        type=type,
        date_range=window.date_range
    )


@router.get("/trends", response_model=Trends)
def get_trends(
    period: Period = "year",
    group_by: Literal["day", "week", "month"] = Query("month", alias="groupBy"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Income, expenses and net per day, ISO week or month"""
    window = analytics_service.resolve_window(period, start_date, end_date)
    return Trends(
        trends=analytics_service.get_trends(db, user.id, window, group_by),
        period=period,
        group_by=group_by,
        date_range=window.date_range
    )


@router.get("/insights", response_model=InsightsResponse)
def get_insights(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return insights_service.get_insights(db, user.id)


@router.get("/patterns", response_model=PatternsResponse)
def get_patterns(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return insights_service.get_patterns(db, user.id)
