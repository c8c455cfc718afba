"""
Statement Ingestion Package

Parses raw bank-statement exports into normalized movements.
"""

from .parser import ColumnMap, ParsedStatement, ParseError, detect_delimiter, infer_direction, parse_statement

__all__ = [
    "ColumnMap",
    "ParseError",
    "ParsedStatement",
    "detect_delimiter",
    "infer_direction",
    "parse_statement",
]
