"""Controlled proposal category system."""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Proposal categories the moderation model may assign."""

    RULES = "RULES"
    FACILITIES = "FACILITIES"
    CURRICULUM = "CURRICULUM"
    OTHER = "OTHER"


CATEGORY_VALUES: tuple[str, ...] = tuple(category.value for category in Category)

CATEGORY_LABELS: dict[Category, str] = {
    Category.RULES: "校則",
    Category.FACILITIES: "設備・環境",
    Category.CURRICULUM: "授業",
    Category.OTHER: "その他",
}

_CATEGORY_SYNONYMS: dict[str, Category] = {
    "校則": Category.RULES,
    "きまり": Category.RULES,
    "rules": Category.RULES,
    "rule": Category.RULES,
    "school rules": Category.RULES,
    "dress code": Category.RULES,
    "設備・環境": Category.FACILITIES,
    "設備": Category.FACILITIES,
    "環境": Category.FACILITIES,
    "facilities": Category.FACILITIES,
    "facility": Category.FACILITIES,
    "environment": Category.FACILITIES,
    "授業": Category.CURRICULUM,
    "curriculum": Category.CURRICULUM,
    "classes": Category.CURRICULUM,
    "class": Category.CURRICULUM,
    "lessons": Category.CURRICULUM,
    "その他": Category.OTHER,
    "other": Category.OTHER,
}


def normalize_category(raw_category: str | None) -> Category:
    """Normalize a model- or user-supplied label to the controlled category list."""

    cleaned = _clean_text(raw_category)
    if not cleaned:
        return Category.OTHER
    upper = cleaned.upper()
    if upper in CATEGORY_VALUES:
        return Category(upper)
    return _CATEGORY_SYNONYMS.get(cleaned.lower(), Category.OTHER)


def category_label(category: str) -> str:
    """Return the display label for a category value."""

    return CATEGORY_LABELS[normalize_category(category)]


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.strip().split())
