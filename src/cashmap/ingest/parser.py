#!/usr/bin/env python3
"""
Bank Statement Parser

Turns a raw delimited bank export into normalized Movement records.

Input handling:
- The delimiter (";" or ",") is detected from the header line; cells are
  read with the csv module, so quoted cells may contain the delimiter.
- Columns are located by keywords in the header (Portuguese or English,
  case- and accent-insensitive), so their order does not matter.
- Rows with a bad date, a non-numeric value or too few cells are skipped
  and counted; they never abort the import.

Whole-file problems (no data lines, missing required columns, nothing
usable) raise ParseError and nothing is returned.
"""

import csv
import logging
import re
import uuid
from dataclasses import dataclass
from typing import NamedTuple

from ..classification.taxonomy import Category, Direction
from ..core.currency import parse_amount
from ..core.dates import FinancialDate
from ..core.models import Movement
from ..core.text import fold_keyword, fold_header

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")

# Header keywords, matched as substrings of the folded header cell
DATE_TOKENS = ("data", "date")
DESCRIPTION_TOKENS = ("desc", "hist", "memo", "lancamento")
VALUE_TOKENS = ("valor", "value", "amount", "quantia")
DIRECTION_TOKENS = ("tipo", "type", "d/c", "c/d", "natureza", "operacao", "sentido")

# Direction synonyms: short codes must match exactly, words match as prefixes
CREDIT_CODES = frozenset({"C", "CR", "CRED", "+", "IN"})
DEBIT_CODES = frozenset({"D", "DB", "DEB", "-", "OUT"})
CREDIT_PREFIXES = ("CREDITO", "ENTRADA", "RECEB", "DEP")
DEBIT_PREFIXES = ("DEBITO", "SAIDA", "PAGAMENTO", "PAGTO", "RET")


class ParseError(ValueError):
    """Raised when a statement has no usable data at all."""


class ParsedStatement(NamedTuple):
    """Result of a successful parse: movements and the covered date range."""

    movements: list[Movement]
    date_from: FinancialDate
    date_to: FinancialDate


@dataclass(frozen=True)
class ColumnMap:
    """Positions of the recognized columns in a statement header."""

    date: int
    description: int
    value: int
    direction: int | None = None

    @property
    def required_width(self) -> int:
        """Minimum number of cells a row needs to carry every required column."""
        return max(self.date, self.description, self.value) + 1


def detect_delimiter(header_line: str) -> str:
    """Pick ";" or "," by frequency in the header line; ties favor ";"."""
    return ";" if header_line.count(";") >= header_line.count(",") else ","


def _find_column(header: list[str], tokens: tuple[str, ...], taken: set[int]) -> int | None:
    for index, cell in enumerate(header):
        if index in taken:
            continue
        if any(token in cell for token in tokens):
            return index
    return None


def map_columns(header_cells: list[str]) -> ColumnMap:
    """
    Locate date, description, value and (optional) direction columns.

    Raises:
        ParseError: If date, description or value cannot be found
    """
    header = [fold_header(cell) for cell in header_cells]
    taken: set[int] = set()

    date_index = _find_column(header, DATE_TOKENS, taken)
    if date_index is not None:
        taken.add(date_index)
    description_index = _find_column(header, DESCRIPTION_TOKENS, taken)
    if description_index is not None:
        taken.add(description_index)
    value_index = _find_column(header, VALUE_TOKENS, taken)
    if value_index is not None:
        taken.add(value_index)

    missing = [
        name
        for name, index in (("date", date_index), ("description", description_index), ("value", value_index))
        if index is None
    ]
    if missing:
        raise ParseError(f"missing required columns: {', '.join(missing)}")

    direction_index = _find_column(header, DIRECTION_TOKENS, taken)

    return ColumnMap(
        date=date_index,  # type: ignore[arg-type]
        description=description_index,  # type: ignore[arg-type]
        value=value_index,  # type: ignore[arg-type]
        direction=direction_index,
    )


def infer_direction(raw_type: str | None, value: float) -> Direction:
    """
    Decide IN/OUT from an explicit type cell, falling back to the value sign.

    Examples:
        infer_direction("C", 10.0) -> Direction.IN
        infer_direction("Débito", 10.0) -> Direction.OUT
        infer_direction(None, -5.0) -> Direction.OUT
    """
    if raw_type:
        code = fold_keyword(raw_type.strip().strip('"'))
        if code in CREDIT_CODES or code.startswith(CREDIT_PREFIXES):
            return Direction.IN
        if code in DEBIT_CODES or code.startswith(DEBIT_PREFIXES):
            return Direction.OUT
    return Direction.OUT if value < 0 else Direction.IN


def _new_movement_id(client_id: str, line_number: int) -> str:
    return f"stmt-{client_id}-{line_number}-{uuid.uuid4().hex[:8]}"


def parse_statement(raw_text: str, client_id: str) -> ParsedStatement:
    """
    Parse a delimited bank statement into movements.

    Args:
        raw_text: Full text of the export, header first
        client_id: Owner of the produced movements

    Returns:
        ParsedStatement(movements, date_from, date_to)

    Raises:
        ParseError: "empty file", "missing required columns: ..." or
            "no valid rows"

    Example:
        >>> text = "Data;Descrição;Valor\\n05/03/2024;PIX RECEBIDO;1.234,56"
        >>> parsed = parse_statement(text, "client-1")
        >>> parsed.movements[0].magnitude
        1234.56
    """
    lines = [line for line in _LINE_SPLIT.split(raw_text) if line.strip()]
    if len(lines) < 2:
        raise ParseError("empty file")

    delimiter = detect_delimiter(lines[0])
    rows = list(csv.reader(lines, delimiter=delimiter))
    columns = map_columns(rows[0])
    logger.debug("Statement delimiter %r, columns %s", delimiter, columns)

    movements: list[Movement] = []
    skipped = 0

    for line_number, cells in enumerate(rows[1:], start=2):
        movement = _parse_row(cells, columns, client_id, line_number)
        if movement is None:
            skipped += 1
            continue
        movements.append(movement)

    if not movements:
        raise ParseError("no valid rows")

    if skipped:
        logger.info("Parsed %d movements, skipped %d malformed rows", len(movements), skipped)
    else:
        logger.info("Parsed %d movements", len(movements))

    dates = [movement.date for movement in movements]
    return ParsedStatement(movements=movements, date_from=min(dates), date_to=max(dates))


def _parse_row(cells: list[str], columns: ColumnMap, client_id: str, line_number: int) -> Movement | None:
    """Parse the cells of one data line; None means the row is skipped."""
    if len(cells) < columns.required_width:
        logger.debug("Line %d: too few columns (%d)", line_number, len(cells))
        return None

    description = cells[columns.description].strip().strip('"').strip()
    raw_value = cells[columns.value].strip()
    if not description or not raw_value:
        logger.debug("Line %d: empty description or value", line_number)
        return None

    date = FinancialDate.from_statement(cells[columns.date])
    if date is None:
        logger.debug("Line %d: unrecognized date %r", line_number, cells[columns.date])
        return None

    value = parse_amount(raw_value)
    if value is None:
        logger.debug("Line %d: non-numeric value %r", line_number, raw_value)
        return None

    raw_type = None
    if columns.direction is not None and columns.direction < len(cells):
        raw_type = cells[columns.direction]

    return Movement(
        id=_new_movement_id(client_id, line_number),
        client_id=client_id,
        date=date,
        description=description,
        magnitude=abs(value),
        direction=infer_direction(raw_type, value),
        category=Category.UNCATEGORIZED,
        auto_classified=False,
    )
