#!/usr/bin/env python3
"""
Text normalization helpers for statement headers and descriptions.
"""

import unicodedata


def strip_accents(text: str) -> str:
    """
    Remove diacritics, keeping base letters.

    Example:
        strip_accents("Descrição") -> "Descricao"
    """
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold_header(text: str) -> str:
    """Lower-case, trim and strip diacritics from a header cell."""
    return strip_accents(text.strip().strip('"').lower())


def fold_keyword(text: str) -> str:
    """Upper-case and strip diacritics for keyword matching."""
    return strip_accents(text).upper()
