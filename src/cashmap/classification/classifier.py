#!/usr/bin/env python3
"""
Keyword Auto-Classifier

Ordered substring rules that map statement descriptions to categories.
The first rule with a keyword found in the upper-cased, accent-free
description wins. Only UNCATEGORIZED movements are ever touched, and a
description that matches nothing stays UNCATEGORIZED without error.

Manual category changes go through `set_category`, which always clears the
auto-classified flag.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.text import fold_keyword
from .taxonomy import Category

if TYPE_CHECKING:
    from ..core.models import Movement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    """Keywords that, when found in a description, select a category."""

    keywords: tuple[str, ...]
    category: Category

    def matches(self, folded_description: str) -> bool:
        return any(keyword in folded_description for keyword in self.keywords)


# Evaluated in order; earlier rules shadow later ones.
DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(("FOLHA", "SALARIO", "PAGAMENTO"), Category.EXP_PAYROLL),
    ClassificationRule(("POSTO", "GASOLINA", "COMBUSTIVEL"), Category.COST_FREIGHT),
    ClassificationRule(("ENERGIA", "LUZ", "AGUA", "INTERNET"), Category.EXP_UTILITIES),
    ClassificationRule(("ALUGUEL", "CONDOMINIO"), Category.EXP_OCCUPANCY),
    ClassificationRule(("IMPOSTO", "DAS", "DARF"), Category.COST_TAXES_SALES),
    ClassificationRule(("FORNECEDOR",), Category.COST_GOODS),
    ClassificationRule(("EMPRESTIMO", "FINANCIAMENTO"), Category.OUT_DEBT_AMORTIZATION),
    ClassificationRule(("TARIFA", "IOF", "CESTA"), Category.EXP_BANK_FEES),
    ClassificationRule(("RECEBIMENTO", "PIX RECEBIDO", "TED RECEBIDA"), Category.REV_SALES),
)


class KeywordClassifier:
    """
    Deterministic rule-list classifier.

    Rules are data, so callers can extend or reorder them without touching
    the matching logic.
    """

    def __init__(self, rules: Iterable[ClassificationRule] | None = None):
        self.rules: tuple[ClassificationRule, ...] = tuple(rules) if rules is not None else DEFAULT_RULES

    def classify(self, description: str) -> Category | None:
        """Return the category of the first matching rule, or None."""
        folded = fold_keyword(description)
        for rule in self.rules:
            if rule.matches(folded):
                return rule.category
        return None

    def apply(self, movements: Iterable["Movement"]) -> int:
        """
        Classify every UNCATEGORIZED movement in place.

        Already-classified movements are left untouched, which makes repeated
        runs idempotent.

        Returns:
            Number of movements that received a category
        """
        classified = 0
        pending = 0
        for movement in movements:
            if movement.category is not Category.UNCATEGORIZED:
                continue
            pending += 1
            category = self.classify(movement.description)
            if category is None:
                continue
            movement.category = category
            movement.auto_classified = True
            classified += 1

        logger.debug("Auto-classified %d of %d pending movements", classified, pending)
        return classified


def set_category(movement: "Movement", category: Category) -> None:
    """Manually assign a category; a manual choice is never marked automatic."""
    movement.category = category
    movement.auto_classified = False
