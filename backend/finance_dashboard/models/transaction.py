"""
Transaction database model.
"""

import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Numeric, Text, Enum, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship
from finance_dashboard.database import Base


class TransactionType(str, enum.Enum):
    """Direction of a transaction. Amounts are always stored positive."""
    income = "income"
    expense = "expense"


class RecurringFrequency(str, enum.Enum):
    """Recurrence frequency. Metadata only, nothing expands it."""
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String(200), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # Always positive, direction lives in type
    type = Column(Enum(TransactionType), nullable=False)
    category = Column(String(50), nullable=False)
    custom_category = Column(Boolean, default=False, nullable=False)
    subcategory = Column(String(100), nullable=True)
    date = Column(DateTime, default=datetime.utcnow, nullable=False)
    tags = Column(JSON, default=list, nullable=False)
    location = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_frequency = Column(Enum(RecurringFrequency), nullable=True)
    recurring_interval = Column(Integer, default=1, nullable=False)
    recurring_end_date = Column(DateTime, nullable=True)
    ai_parsed = Column(Boolean, default=False, nullable=False)
    raw_input = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="transactions")

    # Indexes for common queries
    __table_args__ = (
        Index("idx_transaction_owner_date", "owner_id", "date"),
        Index("idx_transaction_owner_category", "owner_id", "category"),
        Index("idx_transaction_owner_type", "owner_id", "type"),
    )
