"""
Transaction schemas.
"""

from pydantic import Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, timezone
from decimal import Decimal

from finance_dashboard.models.transaction import TransactionType, RecurringFrequency
from finance_dashboard.schemas.base import CamelModel
from finance_dashboard.services.categories import TaxonomyCategory, is_taxonomy_category


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip().lower()
        if len(tag) > 30:
            raise ValueError("Each tag must be less than 30 characters")
        if tag:
            cleaned.append(tag)
    return cleaned


class RecurringInfo(CamelModel):
    frequency: Optional[RecurringFrequency] = None
    interval: int = Field(1, ge=1)
    end_date: Optional[datetime] = None

    @field_validator("end_date")
    @classmethod
    def naive_end_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)


class TransactionBase(CamelModel):
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=50)
    custom_category: bool = False
    subcategory: Optional[str] = Field(None, max_length=100)
    date: Optional[datetime] = None
    tags: List[str] = []
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=500)
    is_recurring: bool = False
    recurring_info: Optional[RecurringInfo] = None
    ai_parsed: bool = False
    raw_input: Optional[str] = None

    @field_validator("description", "category")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: List[str]) -> List[str]:
        return _clean_tags(value)

    @field_validator("date")
    @classmethod
    def naive_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)

    @model_validator(mode="after")
    def check_category(self):
        if not self.custom_category and not is_taxonomy_category(self.category):
            raise ValueError(
                f"Category '{self.category}' is not a known category; "
                "set customCategory to store a custom label"
            )
        return self


class TransactionCreate(TransactionBase):
    pass


class BulkTransactionCreate(CamelModel):
    transactions: List[TransactionCreate] = Field(..., min_length=1)


class TransactionUpdate(CamelModel):
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    custom_category: Optional[bool] = None
    subcategory: Optional[str] = Field(None, max_length=100)
    date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=500)
    is_recurring: Optional[bool] = None
    recurring_info: Optional[RecurringInfo] = None

    @field_validator("description", "category")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        # None is rejected by the route with a clearer message
        return _strip_required(value) if value is not None else None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(value)

    @field_validator("date")
    @classmethod
    def naive_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)


class TransactionResponse(CamelModel):
    id: str
    description: str
    amount: float
    type: TransactionType
    category: str
    custom_category: bool
    subcategory: Optional[str]
    date: datetime
    tags: List[str]
    location: Optional[str]
    notes: Optional[str]
    is_recurring: bool
    recurring_info: RecurringInfo
    ai_parsed: bool
    raw_input: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, transaction) -> "TransactionResponse":
        return cls(
            id=transaction.id,
            description=transaction.description,
            amount=float(transaction.amount),
            type=transaction.type,
            category=transaction.category,
            custom_category=transaction.custom_category,
            subcategory=transaction.subcategory,
            date=transaction.date,
            tags=transaction.tags or [],
            location=transaction.location,
            notes=transaction.notes,
            is_recurring=transaction.is_recurring,
            recurring_info=RecurringInfo(
                frequency=transaction.recurring_frequency,
                interval=transaction.recurring_interval or 1,
                end_date=transaction.recurring_end_date,
            ),
            ai_parsed=transaction.ai_parsed,
            raw_input=transaction.raw_input,
            created_at=transaction.created_at,
            updated_at=transaction.updated_at,
        )


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_transactions: int
    has_next_page: bool
    has_prev_page: bool
    limit: int


class TransactionListResponse(CamelModel):
    transactions: List[TransactionResponse]
    pagination: Pagination


class TransactionEnvelope(CamelModel):
    message: Optional[str] = None
    transaction: TransactionResponse


class BulkCreateResponse(CamelModel):
    message: str
    transactions: List[TransactionResponse]
    count: int


class DeleteResponse(CamelModel):
    message: str
    deleted_transaction: TransactionResponse


class CategoryUsage(CamelModel):
    category: str
    count: int


class CategoryUsageList(CamelModel):
    categories: List[CategoryUsage]


class ParseRequest(CamelModel):
    text: str = Field(..., min_length=1, max_length=500)

    @field_validator("text")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Text is required")
        return value


class ParsedTransaction(CamelModel):
    amount: float
    description: str
    category: TaxonomyCategory
    type: TransactionType
    date: str  # YYYY-MM-DD
    raw_input: str
    ai_parsed: bool = False


class ParseResponse(CamelModel):
    success: bool = True
    is_multiple: bool
    parsed_transactions: List[ParsedTransaction]
    original_text: str
    count: int
