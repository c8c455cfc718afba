"""
Classification Package

Category taxonomy, DFC nature mapping and the keyword auto-classifier.
"""

from .classifier import DEFAULT_RULES, ClassificationRule, KeywordClassifier, set_category
from .taxonomy import (
    CATEGORY_NATURE,
    FINANCIAL_EXPENSE_CATEGORIES,
    FIXED_EXPENSE_CATEGORIES,
    INFLOW_CATEGORIES,
    NON_OPERATING_CATEGORIES,
    OUTFLOW_CATEGORIES,
    REVENUE_CATEGORIES,
    SALES_TAX_CATEGORIES,
    VARIABLE_COST_CATEGORIES,
    Category,
    Direction,
    Nature,
    categories_for,
    nature_of,
    parse_category,
)

__all__ = [
    "CATEGORY_NATURE",
    "DEFAULT_RULES",
    "FINANCIAL_EXPENSE_CATEGORIES",
    "FIXED_EXPENSE_CATEGORIES",
    "INFLOW_CATEGORIES",
    "NON_OPERATING_CATEGORIES",
    "OUTFLOW_CATEGORIES",
    "REVENUE_CATEGORIES",
    "SALES_TAX_CATEGORIES",
    "VARIABLE_COST_CATEGORIES",
    "Category",
    "ClassificationRule",
    "Direction",
    "KeywordClassifier",
    "Nature",
    "categories_for",
    "nature_of",
    "parse_category",
    "set_category",
]
