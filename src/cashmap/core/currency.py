#!/usr/bin/env python3
"""
Currency Parsing and Formatting Utilities

Bank exports mix two numeric conventions:
- Brazilian: "1.234,56" (dot groups thousands, comma marks decimals)
- International: "1,234.56" (comma groups thousands, dot marks decimals)

The rightmost separator decides which convention applies. Amounts are plain
floats (BRL); no sub-cent precision is promised.
"""

import math
import re

# Currency markers and whitespace stripped before parsing
_CURRENCY_NOISE = re.compile(r"(R\$|US\$|\$|\s|\")")

# Comma-only numbers grouped by thousands, e.g. "1,234" or "-12,345,678"
_COMMA_GROUPED = re.compile(r"^[-+]?\d{1,3}(,\d{3})+$")


def normalize_amount_text(raw: str) -> str:
    """
    Rewrite a localized amount string into a float-parsable form.

    Args:
        raw: Amount as exported, e.g. "R$ 1.234,56" or "-1,234.56"

    Returns:
        Normalized string with "." as the only decimal separator

    Examples:
        normalize_amount_text("1.234,56") -> "1234.56"
        normalize_amount_text("1,234.56") -> "1234.56"
        normalize_amount_text("1,234") -> "1234"
    """
    clean = _CURRENCY_NOISE.sub("", raw)
    last_comma = clean.rfind(",")
    last_dot = clean.rfind(".")

    if _COMMA_GROUPED.match(clean):
        # Ambiguous "1,234" reads as a thousands-grouped integer
        return clean.replace(",", "")
    if last_comma > last_dot:
        # Brazilian format: dots are thousands separators
        return clean.replace(".", "").replace(",", ".")
    # International format: commas are thousands separators
    return clean.replace(",", "")


def parse_amount(raw: str) -> float | None:
    """
    Parse a localized amount string into a signed float.

    Args:
        raw: Amount text from a statement cell

    Returns:
        Parsed value, or None when the text is not a finite number

    Examples:
        parse_amount("1.234,56") -> 1234.56
        parse_amount("-50,00") -> -50.0
        parse_amount("abc") -> None
    """
    if raw is None:
        return None

    normalized = normalize_amount_text(raw)
    if not normalized:
        return None

    try:
        value = float(normalized)
    except ValueError:
        return None

    if not math.isfinite(value):
        return None
    return value


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 instead of raising or producing inf/NaN."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def format_brl(value: float) -> str:
    """
    Format a value as Brazilian reais.

    Examples:
        format_brl(1234.5) -> "R$ 1.234,50"
        format_brl(-50) -> "-R$ 50,00"
    """
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}"
    # Swap separators: 1,234.50 -> 1.234,50
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {localized}"


def format_percent(ratio: float) -> str:
    """Format a 0..1 ratio as a percentage string with two decimals."""
    return f"{ratio * 100:.2f}%"
