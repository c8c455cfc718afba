#!/usr/bin/env python3
"""
Synthetic Test Data Generators

Generates synthetic statements and movements for unit and integration tests.
All names, amounts and dates are invented.
"""

from datetime import timedelta
from itertools import count

from cashmap.classification.taxonomy import Category, Direction
from cashmap.core.dates import FinancialDate
from cashmap.core.models import Movement

_ids = count(1)

SYNTHETIC_STATEMENT_ROWS = [
    ("01/03/2024", "PIX RECEBIDO CLIENTE A", "1.500,00", "C"),
    ("02/03/2024", "PAGAMENTO FOLHA MARCO", "800,00", "D"),
    ("03/03/2024", "ALUGUEL LOJA", "1.200,00", "D"),
    ("04/03/2024", "TARIFA PACOTE SERVICOS", "39,90", "D"),
    ("05/03/2024", "COMPRA FORNECEDOR XYZ", "650,50", "D"),
    ("06/03/2024", "TRANSF ENTRE CONTAS", "100,00", "C"),
]


def synthetic_statement(rows=None, delimiter: str = ";") -> str:
    """Render a statement with Portuguese headers and a direction column."""
    rows = SYNTHETIC_STATEMENT_ROWS if rows is None else rows
    header = delimiter.join(["Data", "Descrição", "Valor", "Tipo"])
    lines = [header] + [delimiter.join(row) for row in rows]
    return "\n".join(lines) + "\n"


def make_movement(
    magnitude: float,
    direction: Direction = Direction.OUT,
    category: Category = Category.UNCATEGORIZED,
    date: str = "2024-03-01",
    client_id: str = "c1",
    description: str = "MOVIMENTO TESTE",
    movement_id: str | None = None,
) -> Movement:
    """Build one movement; ids are unique within a test run."""
    return Movement(
        id=movement_id or f"mov-{next(_ids)}",
        client_id=client_id,
        date=FinancialDate.from_string(date),
        description=description,
        magnitude=magnitude,
        direction=direction,
        category=category,
    )


def synthetic_movements(client_id: str, days: int, start: FinancialDate) -> list[Movement]:
    """
    A small business month: daily sales, weekly suppliers, monthly fixed costs.

    Every movement is classified, so the set is ready for aggregation.
    """
    movements = []
    for offset in range(days):
        day = FinancialDate(start.date + timedelta(days=offset)).to_iso_string()
        movements.append(make_movement(1000.0, Direction.IN, Category.REV_SALES, day, client_id, "VENDAS CARTAO"))
        if offset % 7 == 0:
            movements.append(
                make_movement(2000.0, Direction.OUT, Category.COST_GOODS, day, client_id, "FORNECEDOR FARINHA")
            )
        if offset == 4:
            movements.append(make_movement(6000.0, Direction.OUT, Category.EXP_PAYROLL, day, client_id, "FOLHA"))
            movements.append(make_movement(2500.0, Direction.OUT, Category.EXP_OCCUPANCY, day, client_id, "ALUGUEL"))
        if offset == 10:
            movements.append(make_movement(1800.0, Direction.OUT, Category.COST_TAXES_SALES, day, client_id, "DAS"))
    return movements
