"""
Main API router.
"""

from fastapi import APIRouter
from finance_dashboard.api import analytics, auth, transactions

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(transactions.router)
api_router.include_router(analytics.router)
