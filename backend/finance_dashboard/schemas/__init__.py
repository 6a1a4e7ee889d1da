"""
Pydantic schemas package.
"""

from finance_dashboard.schemas.transaction import (
    RecurringInfo,
    TransactionCreate,
    BulkTransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse,
    ParsedTransaction,
    ParseRequest,
    ParseResponse,
)
from finance_dashboard.schemas.analytics import (
    Summary,
    CategoryBreakdown,
    Trends,
    InsightsResponse,
    PatternsResponse,
)
from finance_dashboard.schemas.auth import (
    Preferences,
    UserSummary,
    UserProfile,
    ProfileUpdate,
)

__all__ = [
    "RecurringInfo",
    "TransactionCreate",
    "BulkTransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "TransactionListResponse",
    "ParsedTransaction",
    "ParseRequest",
    "ParseResponse",
    "Summary",
    "CategoryBreakdown",
    "Trends",
    "InsightsResponse",
    "PatternsResponse",
    "Preferences",
    "UserSummary",
    "UserProfile",
    "ProfileUpdate",
]
