import re
from datetime import date, timedelta
from typing import List

from .exceptions import ParseError

# The dining site publishes one week of menus ahead
SCRAPE_WINDOW_DAYS = 7

_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def dates_from(anchor: date, count: int) -> List[date]:
    """
    Consecutive calendar dates starting at ``anchor`` (inclusive).

    Parameters:
        anchor (date): First date of the window
        count (int): Number of dates to produce; zero or less gives []

    Returns:
        List[date]: Dates in ascending order
    """
    return [anchor + timedelta(days=offset) for offset in range(max(count, 0))]


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD string, raising ParseError for anything else."""
    candidate = (text or '').strip()
    if not _ISO_DATE.match(candidate):
        raise ParseError(f"Invalid date format: {text!r}. Use YYYY-MM-DD", context=text)
    try:
        return date.fromisoformat(candidate)
    except ValueError as e:
        raise ParseError(f"Invalid date: {text!r}: {e}", context=text) from e
