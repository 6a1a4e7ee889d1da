from finance_dashboard.ai.prompts.transaction_parsing import (
    TRANSACTION_PARSING_SYSTEM,
    TRANSACTION_PARSING_USER,
    format_category_hints,
)

__all__ = [
    "TRANSACTION_PARSING_SYSTEM",
    "TRANSACTION_PARSING_USER",
    "format_category_hints",
]
