"""
Hijri to Gregorian conversion using the tabular (civil) Islamic calendar.

Official Algerian publications print both calendars side by side, so the
arithmetic calendar is accurate to within a day or two of the announced
dates, which is enough to cross-check a publication date.
"""

import math
from datetime import date
from typing import Optional

# Julian day number of 1 Muharram 1 AH (16 July 622, Julian calendar)
ISLAMIC_EPOCH_JDN = 1948440
# Julian day number of 0001-01-01 minus one, i.e. date.fromordinal offset
_ORDINAL_OFFSET = 1721425


def hijri_to_jdn(year: int, month: int, day: int) -> int:
    """Julian day number for a tabular Hijri date."""
    return (
        day
        + math.ceil(29.5 * (month - 1))
        + (year - 1) * 354
        + (3 + 11 * year) // 30
        + ISLAMIC_EPOCH_JDN - 1
    )


def hijri_to_gregorian(year: int, month: int, day: int) -> Optional[date]:
    """
    Convert a Hijri date to a Gregorian date.

    Args:
        year: Hijri year (1 or later)
        month: Hijri month, 1-12
        day: Day of month, 1-30

    Returns:
        Gregorian date, or None if the Hijri date is out of range
    """
    if year < 1 or not 1 <= month <= 12 or not 1 <= day <= 30:
        return None
    return date.fromordinal(hijri_to_jdn(year, month, day) - _ORDINAL_OFFSET)
