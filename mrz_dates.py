"""
MRZ date resolution (YYMMDD -> ISO YYYY-MM-DD)
"""
import re
from datetime import date
from typing import Optional


def resolve_mrz_date(yymmdd: str, today: Optional[date] = None) -> Optional[str]:
    """
    Convert a 6-digit MRZ date to ISO format

    Century rule: a two-digit year greater than the current year's last two
    digits belongs to the 1900s, otherwise to the 2000s. The same rule is used
    for birth and expiry dates, so people close to 100 years old and expiry
    dates far in the future resolve to the wrong century.

    Args:
        yymmdd: Six characters, expected to be digits
        today: Reference date, defaults to date.today()

    Returns:
        'YYYY-MM-DD', or None for wrong length, non-digits or an impossible
        calendar date (including Feb 29 outside leap years)
    """
    if not yymmdd or not re.fullmatch(r"[0-9]{6}", yymmdd):
        return None

    today = today or date.today()

    yy = int(yymmdd[0:2])
    month = int(yymmdd[2:4])
    day = int(yymmdd[4:6])

    century = 1900 if yy > today.year % 100 else 2000

    try:
        resolved = date(century + yy, month, day)
    except ValueError:
        return None

    return resolved.isoformat()
