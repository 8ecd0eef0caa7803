"""
Month-granularity date handling for work history.

Resume dates are "YYYY-MM" strings (or a "present" sentinel). Durations are
measured in 30.44-day months so that month lengths average out over a year.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

PRESENT = "present"

# Sentinels meaning "still ongoing", resolved to the current month at call time
PRESENT_SENTINELS = {"present", "now", "current", "ongoing", "至今", "今"}

DAYS_PER_MONTH = 30.44

# "2021-03", "2021.3", "2021/03", "2021年3月", or a bare year
DATE_PATTERN = re.compile(r"^\s*(\d{4})(?:\s*[-./年]\s*(\d{1,2}))?")


def is_present(value: Optional[str]) -> bool:
    """True if the value is one of the "still ongoing" sentinels."""
    return value is not None and str(value).strip().lower() in PRESENT_SENTINELS


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month. Ordering follows the calendar."""

    year: int
    month: int

    @classmethod
    def current(cls, today: Optional[date] = None) -> "YearMonth":
        today = today or date.today()
        return cls(today.year, today.month)

    @classmethod
    def parse(
        cls, value: Optional[str], today: Optional[date] = None, default_month: int = 1
    ) -> Optional["YearMonth"]:
        """
        Parse a resume date, returning None if it is empty or malformed.

        Present sentinels resolve to the current month.

        Examples:
            YearMonth.parse("2021-03")  # YearMonth(2021, 3)
            YearMonth.parse("2019")     # YearMonth(2019, 1)
            YearMonth.parse("至今")      # current month
            YearMonth.parse("soon")     # None
        """
        if value is None:
            return None

        text = str(value).strip()
        if not text:
            return None
        if is_present(text):
            return cls.current(today)

        match = DATE_PATTERN.match(text)
        if not match:
            return None

        month = int(match.group(2)) if match.group(2) else default_month
        if not 1 <= month <= 12:
            return None
        return cls(int(match.group(1)), month)

    def shift(self, months: int) -> "YearMonth":
        """Return the month `months` later (negative for earlier)."""
        index = self.year * 12 + (self.month - 1) + months
        return YearMonth(index // 12, index % 12 + 1)

    def to_date(self) -> date:
        return date(self.year, self.month, 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def months_between(start: YearMonth, end: YearMonth) -> float:
    """Fractional months from the first day of `start` to the first day of `end`."""
    return (end.to_date() - start.to_date()).days / DAYS_PER_MONTH


def whole_months_between(start: YearMonth, end: YearMonth) -> int:
    """Months from `start` to `end`, rounded to the nearest whole month."""
    return round(months_between(start, end))


def years_between(start: YearMonth, end: YearMonth) -> float:
    """Years from `start` to `end`, rounded to one decimal and never negative."""
    return max(0.0, round(months_between(start, end) / 12, 1))
