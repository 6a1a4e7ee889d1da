"""
User database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, JSON
from sqlalchemy.orm import relationship
from finance_dashboard.database import Base


def default_preferences() -> dict:
    return {
        "currency": "USD",
        "timezone": "UTC",
        "notifications": {"email": True, "push": False},
    }


class User(Base):
    """User created on first Google sign-in."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    google_id = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    picture = Column(String(1024), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, default=datetime.utcnow, nullable=False)
    preferences = Column(JSON, default=default_preferences, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="owner", cascade="all, delete-orphan")
