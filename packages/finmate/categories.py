"""Expense category set and keyword-based normalization.

The allow-list is fixed. :func:`normalize_category` guarantees that whatever a
model (or a user) supplies ends up as one of :data:`ALLOWED_CATEGORIES`:
exact matches are kept, anything else goes through ordered keyword rules and
finally lands on ``"Other"``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from .models import Role

OTHER = "Other"

ALLOWED_CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Groceries",
    "Transport",
    "Shopping",
    "Entertainment",
    "Utilities",
    "Rent/EMI",
    "Healthcare",
    "Education",
    OTHER,
)

# Order matters: first match wins. Patterns run against the lower-cased value
# and match substrings, so "dinner bill" is Food & Dining, not Utilities.
_KEYWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(
            r"food|restaurant|dine|dining|cafe|coffee|lunch|dinner|breakfast|meal|snack"
            r"|pizza|burger|domino|swiggy|zomato"
        ),
        "Food & Dining",
    ),
    (re.compile(r"grocery|groceries|supermarket|vegetable|fruit|mart"), "Groceries"),
    (re.compile(r"taxi|uber|ola|bus|metro|train|transport|ride|fuel|petrol"), "Transport"),
    (re.compile(r"shopping|mall|clothes|apparel|purchase|buy"), "Shopping"),
    (re.compile(r"movie|netflix|spotify|entertainment|show|concert"), "Entertainment"),
    (re.compile(r"electric|water|bill|utility|internet|wifi|gas"), "Utilities"),
    (re.compile(r"rent|emi|loan|mortgage"), "Rent/EMI"),
    (re.compile(r"doctor|hospital|medicine|clinic|health|pharmacy"), "Healthcare"),
    (re.compile(r"tuition|course|study|education|school|college"), "Education"),
)

_ALLOWED_SET = frozenset(ALLOWED_CATEGORIES)


def normalize_category(raw: object) -> str:
    """Return a member of :data:`ALLOWED_CATEGORIES` for ``raw``.

    Idempotent: an already-canonical value is returned unchanged.
    """

    if raw is None:
        return OTHER
    value = str(raw).strip()
    if not value:
        return OTHER
    if value in _ALLOWED_SET:
        return value
    lower = value.lower()
    for pattern, category in _KEYWORD_RULES:
        if pattern.search(lower):
            return category
    return OTHER


def is_allowed_category(value: object) -> bool:
    return isinstance(value, str) and value in _ALLOWED_SET


# Most relevant categories first for each role.
_ROLE_CATEGORY_ORDER: Mapping[Role, tuple[str, ...]] = {
    Role.STUDENT: (
        "Education",
        "Food & Dining",
        "Transport",
        "Entertainment",
        "Shopping",
        "Rent/EMI",
        "Healthcare",
        "Groceries",
        "Utilities",
        OTHER,
    ),
    Role.PROFESSIONAL: (
        "Food & Dining",
        "Transport",
        "Rent/EMI",
        "Healthcare",
        "Shopping",
        "Entertainment",
        "Education",
        "Groceries",
        "Utilities",
        OTHER,
    ),
    Role.HOUSEWIFE: (
        "Groceries",
        "Healthcare",
        "Education",
        "Utilities",
        "Shopping",
        "Food & Dining",
        "Transport",
        "Rent/EMI",
        "Entertainment",
        OTHER,
    ),
}


def role_expense_categories(role: Role | str | None) -> tuple[str, ...]:
    """Categories ordered by relevance to ``role``; canonical order when unset."""

    return _ROLE_CATEGORY_ORDER.get(Role.coerce(role), ALLOWED_CATEGORIES)
