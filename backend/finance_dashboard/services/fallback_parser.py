"""
Rule-based transaction parser used when the language model is unavailable.
"""

import re
from datetime import date
from typing import Optional

from finance_dashboard.models.transaction import TransactionType
from finance_dashboard.schemas.transaction import ParsedTransaction
from finance_dashboard.services.categories import classify_text, is_income_text

AMOUNT_PATTERN = re.compile(r"[$₹€£¥]?(\d+(?:\.\d{2})?)")
DESCRIPTION_LIMIT = 100


def extract_amount(text: str) -> float:
    """First number in the text, or 0. Later numbers are ignored."""
    match = AMOUNT_PATTERN.search(text)
    return float(match.group(1)) if match else 0.0


def parse(text: str, today: Optional[date] = None) -> ParsedTransaction:
    today = today or date.today()
    return ParsedTransaction(
        amount=extract_amount(text),
        description=text[:DESCRIPTION_LIMIT],
        category=classify_text(text),
        type=TransactionType.income if is_income_text(text) else TransactionType.expense,
        date=today.isoformat(),
        raw_input=text,
        ai_parsed=False,
    )
