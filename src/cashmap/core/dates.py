#!/usr/bin/env python3
"""
FinancialDate Primitive Type

Immutable calendar-day wrapper used for statement movements.
Understands the two date shapes found in bank exports:
day-first "DD/MM/YYYY" and ISO "YYYY-MM-DD".
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

_DAY_FIRST = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


@dataclass(frozen=True, order=True)
class FinancialDate:
    """Immutable financial date wrapper with consistent formatting."""

    date: date

    @classmethod
    def from_string(cls, date_str: str, date_format: str = "%Y-%m-%d") -> "FinancialDate":
        """
        Parse from string in specified format.

        Args:
            date_str: Date string to parse
            date_format: Date format (default: ISO format "%Y-%m-%d")

        Returns:
            FinancialDate object
        """
        return cls(date=datetime.strptime(date_str, date_format).date())

    @classmethod
    def from_statement(cls, raw: str) -> "FinancialDate | None":
        """
        Parse a statement date cell.

        Accepts "DD/MM/YYYY" (day-first) or "YYYY-MM-DD". Any other shape,
        or an impossible calendar day such as 31/02/2024, yields None.

        Examples:
            FinancialDate.from_statement("05/03/2024") -> 2024-03-05
            FinancialDate.from_statement("2024-03-05") -> 2024-03-05
            FinancialDate.from_statement("03-05-2024") -> None
        """
        text = raw.strip().strip('"')

        match = _DAY_FIRST.match(text)
        if match:
            day, month, year = (int(part) for part in match.groups())
        else:
            match = _ISO.match(text)
            if not match:
                return None
            year, month, day = (int(part) for part in match.groups())

        try:
            return cls(date=date(year, month, day))
        except ValueError:
            return None

    @classmethod
    def today(cls) -> "FinancialDate":
        """Get today's date."""
        return cls(date=date.today())

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def to_br_string(self) -> str:
        """Format as DD/MM/YYYY."""
        return self.date.strftime("%d/%m/%Y")

    def month_key(self) -> str:
        """Format as YYYY-MM for monthly grouping."""
        return self.date.strftime("%Y-%m")

    def days_until(self, other: "FinancialDate") -> int:
        """Number of days from this date to another (negative if earlier)."""
        return (other.date - self.date).days

    def __str__(self) -> str:
        """String representation."""
        return self.to_iso_string()


def inclusive_span_days(dates: Iterable[FinancialDate]) -> int:
    """
    Count the calendar days covered by a set of dates, both ends included.

    Returns at least 1, also for an empty input, so it is always safe to
    divide by.
    """
    dates = list(dates)
    if not dates:
        return 1
    return max(1, min(dates).days_until(max(dates)) + 1)
