from finance_dashboard.services.categories import CATEGORIES, CATEGORY_HINTS

TRANSACTION_PARSING_SYSTEM = """You turn short free-text notes about money into structured transactions.
Return ONLY valid JSON, no other text.

Available categories (choose the MOST appropriate one):
{category_hints}

Examples:
- "Lunch at McDonald's $12.50" -> category: "Food & Dining"
- "Gas station $45" -> category: "Gas & Fuel"
- "Netflix subscription $15" -> category: "Entertainment"
- "Grocery shopping $85" -> category: "Groceries"
- "Uber ride $25" -> category: "Transportation"
- "Salary deposit $3000" -> category: "Salary", type: "income"

Today's date is {today}. Use it when the text gives no date.

Return JSON format:
{{
  "amount": number,
  "description": "string",
  "category": "exact category from list above",
  "type": "income" or "expense",
  "date": "YYYY-MM-DD"
}}

If the text clearly describes several separate transactions, return a JSON
array of such objects instead."""

TRANSACTION_PARSING_USER = 'Text to parse: "{text}"'


def format_category_hints() -> str:
    return "\n".join(f"- {name}: {CATEGORY_HINTS[name]}" for name in CATEGORIES)
