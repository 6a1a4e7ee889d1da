"""
Natural-language transaction parsing backed by a language model.

Every failure on the model path degrades to the keyword parser, so callers
always get well-formed parsed transactions back.
"""

import json
import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

from finance_dashboard.ai.client import AIClient, strip_code_fences
from finance_dashboard.ai.prompts import (
    TRANSACTION_PARSING_SYSTEM,
    TRANSACTION_PARSING_USER,
    format_category_hints,
)
from finance_dashboard.models.transaction import TransactionType
from finance_dashboard.schemas.transaction import ParsedTransaction
from finance_dashboard.services import fallback_parser
from finance_dashboard.services.categories import OTHER, classify_text, normalize

logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
LEADING_AMOUNT_PATTERN = re.compile(r"^\s*[$₹€£¥]?\s*(\d+(?:\.\d+)?)")


def is_valid_date(value: Any) -> bool:
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def coerce_amount(value: Any) -> float:
    """Absolute amount; strings like "12.50 USD" keep their leading number."""
    try:
        amount = abs(float(value))
    except (TypeError, ValueError):
        match = LEADING_AMOUNT_PATTERN.match(value) if isinstance(value, str) else None
        if not match:
            return 0.0
        amount = float(match.group(1))
    # NaN and inf are not amounts
    if amount != amount or amount == float("inf"):
        return 0.0
    return amount


def resolve_category(raw_category: Any, original_text: str) -> str:
    """
    Normalize the model's category. When normalization gives up but the model
    did say something, the keyword classifier on the original text usually
    does better than a bare Other.
    """
    raw = raw_category if isinstance(raw_category, str) else None
    category = normalize(raw)
    if category == OTHER and raw and raw.strip() and raw.strip().lower() != OTHER.lower():
        logger.info(f'Category "{raw}" not in taxonomy, using keyword classification')
        category = classify_text(original_text)
    return category


def enhance_transaction(
    data: Dict[str, Any],
    original_text: str,
    today: Optional[date] = None
) -> ParsedTransaction:
    today = today or date.today()

    raw_type = data.get("type")
    description = data.get("description")
    if not isinstance(description, str) or not description.strip():
        description = original_text[:fallback_parser.DESCRIPTION_LIMIT]

    parsed = ParsedTransaction(
        amount=coerce_amount(data.get("amount")),
        description=description[:200],
        category=resolve_category(data.get("category"), original_text),
        type=raw_type if raw_type in ("income", "expense") else TransactionType.expense,
        date=data["date"] if is_valid_date(data.get("date")) else today.isoformat(),
        raw_input=original_text,
        ai_parsed=True,
    )
    logger.debug(f'Transaction parsed: "{original_text}" -> {parsed.category.value}')
    return parsed


async def parse_transaction_with_ai(
    client: Optional[AIClient],
    text: str,
    today: Optional[date] = None
) -> List[ParsedTransaction]:
    """
    Parse free text into one or more transactions.

    Returns a single-element list unless the model answered with an array.
    """
    today = today or date.today()

    if client is None or not client.is_configured:
        return [fallback_parser.parse(text, today=today)]

    system_prompt = TRANSACTION_PARSING_SYSTEM.format(
        category_hints=format_category_hints(),
        today=today.isoformat(),
    )
    user_prompt = TRANSACTION_PARSING_USER.format(text=text)

    try:
        raw = await client.complete(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=0.1,
            max_tokens=500,
        )
    except Exception as e:
        logger.warning(f"AI parsing failed, using keyword parsing: {e}")
        return [fallback_parser.parse(text, today=today)]

    try:
        payload = json.loads(strip_code_fences(raw))
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Failed to parse model response, using keyword parsing: {e}")
        return [fallback_parser.parse(text, today=today)]

    if isinstance(payload, dict):
        return [enhance_transaction(payload, text, today=today)]

    if isinstance(payload, list) and payload and all(isinstance(item, dict) for item in payload):
        return [enhance_transaction(item, text, today=today) for item in payload]

    logger.warning(f"Unexpected model response shape {type(payload).__name__}, using keyword parsing")
    return [fallback_parser.parse(text, today=today)]
