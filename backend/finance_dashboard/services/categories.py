"""
Fixed category taxonomy and the keyword tables used to classify free text.

Everything here is ordered: when more than one category could match, the one
declared first wins.
"""

import enum
from typing import Dict, Optional, Tuple


class TaxonomyCategory(str, enum.Enum):
    food_dining = "Food & Dining"
    gas_fuel = "Gas & Fuel"
    groceries = "Groceries"
    shopping = "Shopping"
    entertainment = "Entertainment"
    bills_utilities = "Bills & Utilities"
    travel = "Travel"
    healthcare = "Healthcare"
    education = "Education"
    transportation = "Transportation"
    salary = "Salary"
    freelance = "Freelance"
    investment = "Investment"
    business = "Business"
    gift = "Gift"
    other = "Other"


CATEGORIES: Tuple[str, ...] = tuple(c.value for c in TaxonomyCategory)
OTHER = TaxonomyCategory.other.value

INCOME_KEYWORDS: Tuple[str, ...] = (
    "salary", "income", "received", "deposit", "bonus", "wage", "paycheck", "freelance",
)

# Keyword triggers per category, in taxonomy order. Other has none.
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Food & Dining", (
        "restaurant", "dining", "food", "lunch", "dinner", "breakfast", "cafe", "coffee",
        "pizza", "burger", "mcdonald", "kfc", "subway", "starbucks", "domino", "delivery",
    )),
    ("Gas & Fuel", (
        "gas", "fuel", "petrol", "diesel", "shell", "bp", "exxon", "chevron", "station",
    )),
    ("Groceries", (
        "grocery", "groceries", "supermarket", "walmart", "target", "costco", "kroger",
        "safeway", "market",
    )),
    ("Shopping", (
        "amazon", "shopping", "store", "retail", "clothing", "electronics", "mall", "online",
        "purchase",
    )),
    ("Entertainment", (
        "movie", "netflix", "spotify", "gaming", "steam", "entertainment", "subscription",
        "streaming", "concert", "theater",
    )),
    ("Bills & Utilities", (
        "electric", "electricity", "water", "internet", "phone", "utility", "bill", "cable",
        "mobile",
    )),
    ("Travel", (
        "hotel", "flight", "airplane", "airline", "vacation", "travel", "booking", "airbnb",
    )),
    ("Healthcare", (
        "doctor", "medical", "pharmacy", "hospital", "health", "medicine", "clinic", "dentist",
    )),
    ("Education", (
        "course", "education", "book", "tuition", "school", "university", "training",
    )),
    ("Transportation", (
        "uber", "lyft", "taxi", "bus", "train", "metro", "transport", "parking", "toll",
    )),
    ("Salary", (
        "salary", "paycheck", "payroll", "wage", "bonus",
    )),
    ("Freelance", (
        "freelance", "consulting", "gig", "contract work",
    )),
    ("Investment", (
        "dividend", "investment", "stock", "interest", "crypto",
    )),
    ("Business", (
        "business", "sales", "revenue", "invoice",
    )),
    ("Gift", (
        "gift", "present",
    )),
)

# Short hints embedded in the LLM prompt, one line per category.
CATEGORY_HINTS: Dict[str, str] = {
    "Food & Dining": "restaurants, fast food, cafes, food delivery, dining out",
    "Gas & Fuel": "gas stations, fuel, petrol, diesel",
    "Groceries": "supermarkets, grocery stores, food shopping",
    "Shopping": "retail, clothing, electronics, online shopping, Amazon",
    "Entertainment": "movies, games, subscriptions, streaming, concerts",
    "Bills & Utilities": "electricity, water, internet, phone, utilities",
    "Travel": "hotels, flights, vacation",
    "Healthcare": "medical, pharmacy, doctor, hospital",
    "Education": "courses, books, tuition, training",
    "Transportation": "taxi, uber, bus, train, public transport",
    "Salary": "salary, wages, paycheck",
    "Freelance": "freelance work, consulting, side income",
    "Investment": "dividends, returns, investment income",
    "Business": "business income, sales",
    "Gift": "gifts received, presents",
    "Other": "anything that doesn't fit above categories",
}


def is_taxonomy_category(candidate: Optional[str]) -> bool:
    return candidate in CATEGORIES


def normalize(candidate: Optional[str]) -> str:
    """
    Map an arbitrary label onto the taxonomy.

    Exact match, then case-insensitive match, then substring containment in
    either direction. Anything else (including blank input) becomes Other.
    """
    if candidate is None:
        return OTHER
    if candidate in CATEGORIES:
        return candidate

    lowered = candidate.strip().lower()
    if not lowered:
        return OTHER

    for category in CATEGORIES:
        if category.lower() == lowered:
            return category

    for category in CATEGORIES:
        label = category.lower()
        if lowered in label or label in lowered:
            return category

    return OTHER


def classify_text(text: str) -> str:
    """Return the first category whose keywords appear in the text."""
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return OTHER


def is_income_text(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in INCOME_KEYWORDS)
