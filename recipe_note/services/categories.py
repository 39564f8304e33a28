# recipe_note/services/categories.py
"""Closed category registry shared by extraction, storage and display."""
from typing import NamedTuple


class Category(NamedTuple):
    label: str
    emoji: str


CATEGORIES: dict[str, Category] = {
    "sweets": Category("Sweets", "🍰"),
    "camp": Category("Camp", "🏕️"),
    "daily": Category("Everyday", "🍳"),
    "other": Category("Other", "📦"),
}

CATEGORY_ORDER = ("sweets", "camp", "daily", "other")

DEFAULT_CATEGORY = "other"


def normalize_category(value: object) -> str:
    if isinstance(value, str):
        candidate = value.strip().lower()
        if candidate in CATEGORIES:
            return candidate
    return DEFAULT_CATEGORY


def category_label(category_id: str) -> str:
    category = CATEGORIES.get(category_id)
    return f"{category.emoji} {category.label}" if category else category_id


def category_emoji(category_id: str) -> str:
    category = CATEGORIES.get(category_id)
    return category.emoji if category else "📝"
