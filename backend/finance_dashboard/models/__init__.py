"""
Database models package.
"""

from finance_dashboard.models.user import User, default_preferences
from finance_dashboard.models.transaction import Transaction, TransactionType, RecurringFrequency

__all__ = [
    "User",
    "default_preferences",
    "Transaction",
    "TransactionType",
    "RecurringFrequency",
]
