"""
Transaction API endpoints.
"""

import logging
from datetime import date, datetime, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from finance_dashboard.ai.client import AIClient
from finance_dashboard.dependencies import get_ai_client, get_current_user, get_db
from finance_dashboard.models.transaction import Transaction, TransactionType
from finance_dashboard.models.user import User
from finance_dashboard.schemas.transaction import (
    BulkCreateResponse,
    BulkTransactionCreate,
    CategoryUsage,
    CategoryUsageList,
    DeleteResponse,
    Pagination,
    ParseRequest,
    ParseResponse,
    TransactionCreate,
    TransactionEnvelope,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from finance_dashboard.services.ai_service import parse_transaction_with_ai
from finance_dashboard.services.categories import CATEGORIES, is_taxonomy_category

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _like(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_transaction(data: TransactionCreate, owner: User) -> Transaction:
    recurring = data.recurring_info
    return Transaction(
        owner_id=owner.id,
        description=data.description,
        amount=data.amount,
        type=data.type,
        category=data.category,
        custom_category=not is_taxonomy_category(data.category),
        subcategory=data.subcategory,
        date=data.date or datetime.utcnow(),
        tags=data.tags,
        location=data.location,
        notes=data.notes,
        is_recurring=data.is_recurring,
        recurring_frequency=recurring.frequency if recurring else None,
        recurring_interval=recurring.interval if recurring else 1,
        recurring_end_date=recurring.end_date if recurring else None,
        ai_parsed=data.ai_parsed,
        raw_input=data.raw_input,
    )


def get_owned_transaction(db: Session, transaction_id: str, owner: User) -> Transaction:
    """Look up by id within the owner's records; anything else is a 404."""
    transaction = db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.owner_id == owner.id
    ).first()
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    category: Optional[str] = None,
    type: Optional[TransactionType] = None,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """List the user's transactions with filtering and pagination"""
    query = db.query(Transaction).filter(Transaction.owner_id == user.id)

    if category and category.strip():
        query = query.filter(Transaction.category.ilike(_like(category.strip()), escape="\\"))
    if type:
        query = query.filter(Transaction.type == type)
    if start_date:
        query = query.filter(Transaction.date >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.filter(Transaction.date <= datetime.combine(end_date, time.max))
    if search and search.strip():
        search_term = _like(search.strip())
        query = query.filter(
            or_(
                Transaction.description.ilike(search_term, escape="\\"),
                Transaction.category.ilike(search_term, escape="\\"),
                Transaction.notes.ilike(search_term, escape="\\")
            )
        )

    total = query.count()

    query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
    query = query.offset((page - 1) * limit).limit(limit)

    transactions = query.all()
    pages = (total + limit - 1) // limit

    return TransactionListResponse(
        transactions=[TransactionResponse.from_model(t) for t in transactions],
        pagination=Pagination(
            current_page=page,
            total_pages=pages,
            total_transactions=total,
            has_next_page=page < pages,
            has_prev_page=page > 1,
            limit=limit
        )
    )


@router.get("/categories/list", response_model=CategoryUsageList)
def list_used_categories(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Distinct categories the user has used, most used first"""
    count = func.count(Transaction.id).label("count")
    rows = db.query(Transaction.category, count).filter(
        Transaction.owner_id == user.id
    ).group_by(Transaction.category).order_by(count.desc(), Transaction.category).all()

    return CategoryUsageList(
        categories=[CategoryUsage(category=category, count=n) for category, n in rows]
    )


@router.get("/categories/taxonomy", response_model=list[str])
def list_taxonomy(user: User = Depends(get_current_user)):
    """The fixed category list, in display order"""
    return list(CATEGORIES)


@router.post("/parse", response_model=ParseResponse)
async def parse_transaction(
    request: ParseRequest,
    user: User = Depends(get_current_user),
    ai_client: Optional[AIClient] = Depends(get_ai_client)
):
    """Parse natural language into one or more unsaved transactions"""
    parsed = await parse_transaction_with_ai(ai_client, request.text)

    return ParseResponse(
        is_multiple=len(parsed) > 1,
        parsed_transactions=parsed,
        original_text=request.text,
        count=len(parsed)
    )


@router.post("/bulk", response_model=BulkCreateResponse, status_code=201)
def bulk_create_transactions(
    request: BulkTransactionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Create several transactions in one call"""
    transactions = [build_transaction(item, user) for item in request.transactions]
    db.add_all(transactions)
    db.commit()
    for transaction in transactions:
        db.refresh(transaction)

    logger.info(f"Created {len(transactions)} transactions for user {user.id}")
    return BulkCreateResponse(
        message=f"{len(transactions)} transactions created successfully",
        transactions=[TransactionResponse.from_model(t) for t in transactions],
        count=len(transactions)
    )


@router.post("", response_model=TransactionEnvelope, status_code=201)
def create_transaction(
    request: TransactionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Create a transaction"""
    transaction = build_transaction(request, user)
    db.add(transaction)
    db.commit()
    db.refresh(transaction)

    return TransactionEnvelope(
        message="Transaction created successfully",
        transaction=TransactionResponse.from_model(transaction)
    )


@router.get("/{transaction_id}", response_model=TransactionEnvelope)
def get_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Get a single transaction"""
    transaction = get_owned_transaction(db, transaction_id, user)
    return TransactionEnvelope(transaction=TransactionResponse.from_model(transaction))


@router.put("/{transaction_id}", response_model=TransactionEnvelope)
def update_transaction(
    transaction_id: str,
    update: TransactionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Update any subset of a transaction's fields"""
    transaction = get_owned_transaction(db, transaction_id, user)

    update_data = update.model_dump(exclude_unset=True)
    recurring = update_data.pop("recurring_info", None)
    custom_category = update_data.pop("custom_category", None)

    for field in ("description", "amount", "type", "category", "date", "tags", "is_recurring"):
        if field in update_data and update_data[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")

    if "category" in update_data:
        category = update_data["category"]
        if is_taxonomy_category(category):
            transaction.custom_category = False
        elif custom_category:
            transaction.custom_category = True
        else:
            raise HTTPException(
                status_code=400,
                detail=f"Category '{category}' is not a known category; set customCategory to store a custom label"
            )

    for field, value in update_data.items():
        setattr(transaction, field, value)

    if recurring is not None:
        transaction.recurring_frequency = recurring.get("frequency")
        transaction.recurring_interval = recurring.get("interval") or 1
        transaction.recurring_end_date = recurring.get("end_date")

    db.commit()
    db.refresh(transaction)

    return TransactionEnvelope(
        message="Transaction updated successfully",
        transaction=TransactionResponse.from_model(transaction)
    )


@router.delete("/{transaction_id}", response_model=DeleteResponse)
def delete_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Delete a transaction and return what was removed"""
    transaction = get_owned_transaction(db, transaction_id, user)
    deleted = TransactionResponse.from_model(transaction)

    db.delete(transaction)
    db.commit()

    return DeleteResponse(message="Transaction deleted successfully", deleted_transaction=deleted)
