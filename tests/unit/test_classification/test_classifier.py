#!/usr/bin/env python3
"""Tests for the keyword auto-classifier."""

import pytest

from cashmap.classification.classifier import (
    DEFAULT_RULES,
    ClassificationRule,
    KeywordClassifier,
    set_category,
)
from cashmap.classification.taxonomy import Category, Direction


@pytest.mark.classification
class TestKeywordClassifier:
    """Test ordered keyword matching."""

    def setup_method(self):
        self.classifier = KeywordClassifier()

    @pytest.mark.parametrize(
        "description,category",
        [
            ("PAGAMENTO FOLHA MARCO", Category.EXP_PAYROLL),
            ("Salário funcionário", Category.EXP_PAYROLL),
            ("POSTO SHELL", Category.COST_FREIGHT),
            ("Combustível frota", Category.COST_FREIGHT),
            ("CONTA DE LUZ", Category.EXP_UTILITIES),
            ("Água e esgoto", Category.EXP_UTILITIES),
            ("ALUGUEL LOJA", Category.EXP_OCCUPANCY),
            ("DARF IRRF", Category.COST_TAXES_SALES),
            ("COMPRA FORNECEDOR XYZ", Category.COST_GOODS),
            ("PARCELA EMPRESTIMO", Category.OUT_DEBT_AMORTIZATION),
            ("TARIFA PACOTE", Category.EXP_BANK_FEES),
            ("IOF", Category.EXP_BANK_FEES),
            ("PIX RECEBIDO CLIENTE", Category.REV_SALES),
            ("TED RECEBIDA", Category.REV_SALES),
        ],
    )
    def test_default_rules(self, description, category):
        assert self.classifier.classify(description) is category

    def test_first_rule_wins(self):
        """Payroll is checked before bank fees."""
        assert self.classifier.classify("PAGAMENTO TARIFA") is Category.EXP_PAYROLL

    def test_substring_matching_inside_words(self):
        """Keywords match anywhere in the description, including inside words."""
        assert self.classifier.classify("VENDAS CARTAO") is Category.COST_TAXES_SALES

    def test_no_match(self):
        assert self.classifier.classify("TRANSF ENTRE CONTAS") is None

    def test_custom_rules(self):
        classifier = KeywordClassifier([ClassificationRule(("MERCADO",), Category.EXP_GENERAL_ADMIN)])
        assert classifier.classify("mercado local") is Category.EXP_GENERAL_ADMIN
        assert classifier.classify("ALUGUEL") is None

    def test_default_rule_order(self):
        assert DEFAULT_RULES[0].category is Category.EXP_PAYROLL
        assert DEFAULT_RULES[-1].category is Category.REV_SALES


@pytest.mark.classification
class TestApply:
    """Test in-place classification of movements."""

    def test_only_uncategorized_are_touched(self, movement_factory):
        manual = movement_factory(10.0, category=Category.EXP_TRAVEL, description="ALUGUEL CARRO")
        pending = movement_factory(10.0, description="ALUGUEL SALA")
        unmatched = movement_factory(10.0, description="DIVERSOS")

        count = KeywordClassifier().apply([manual, pending, unmatched])

        assert count == 1
        assert manual.category is Category.EXP_TRAVEL
        assert manual.auto_classified is False
        assert pending.category is Category.EXP_OCCUPANCY
        assert pending.auto_classified is True
        assert unmatched.category is Category.UNCATEGORIZED
        assert unmatched.auto_classified is False

    def test_idempotent(self, movement_factory):
        movements = [movement_factory(10.0, description=d) for d in ("FOLHA", "LUZ", "NADA")]
        classifier = KeywordClassifier()

        classifier.apply(movements)
        first = [(m.category, m.auto_classified) for m in movements]
        assert classifier.apply(movements) == 0
        assert [(m.category, m.auto_classified) for m in movements] == first


@pytest.mark.classification
class TestSetCategory:
    """Test manual override."""

    def test_manual_choice_clears_auto_flag(self, movement_factory):
        movement = movement_factory(10.0, Direction.IN, description="PIX RECEBIDO")
        KeywordClassifier().apply([movement])
        assert movement.auto_classified is True

        set_category(movement, Category.REV_FINANCIAL)

        assert movement.category is Category.REV_FINANCIAL
        assert movement.auto_classified is False

    def test_set_category_is_always_permitted(self, movement_factory):
        """Even a direction-mismatched category is accepted."""
        movement = movement_factory(10.0, Direction.IN)
        set_category(movement, Category.EXP_PAYROLL)
        assert movement.category is Category.EXP_PAYROLL
