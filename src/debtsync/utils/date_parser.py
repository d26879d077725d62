"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from decimal import Decimal
from dateutil import parser as date_parser

# Day zero of the spreadsheet serial date system (1900 leap-year bug included)
EXCEL_EPOCH = date(1899, 12, 30)

_DOTTED_DATE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")
_ISO_DATE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}")
# Serials stored as text, e.g. "45432" from a CSV export
_SERIAL = re.compile(r"^\d{1,5}(\.0+)?$")

# Two defaults that differ in every field; a date that comes out the same
# under both was fully specified by the input
_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def parse_date(value: str | date | datetime | int | float | Decimal) -> date:
    """Parse an import cell into a date object.

    Handles various forms:
    - date and datetime objects
    - spreadsheet serial day numbers (45432, also as text)
    - "2024-05-20" and ISO timestamps
    - "20.05.2024" (day first)
    - anything else dateutil understands, read day first

    Args:
        value: Raw cell value

    Returns:
        Date object

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Could not parse date '{value}'")
    if isinstance(value, (int, float, Decimal)):
        return _from_serial(value)
    if value is None:
        raise ValueError("Empty date")

    date_str = str(value).strip()
    if not date_str:
        raise ValueError("Empty date")

    if _SERIAL.match(date_str):
        return _from_serial(Decimal(date_str))

    match = _DOTTED_DATE.match(date_str)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}")

    if _ISO_DATE.match(date_str):
        try:
            return date_parser.isoparse(date_str).date()
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}")

    try:
        first, second = (
            date_parser.parse(date_str, dayfirst=True, default=default) for default in _DEFAULTS
        )
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
    if first.date() != second.date():
        raise ValueError(f"Could not parse date '{date_str}': day, month and year are required")
    return first.date()


def _from_serial(serial: int | float | Decimal) -> date:
    """Convert a spreadsheet serial day number to a date."""
    try:
        days = round(float(serial))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{serial}': {e}")
    if days <= 0:
        raise ValueError(f"Could not parse date '{serial}': serial must be positive")
    try:
        return EXCEL_EPOCH + timedelta(days=days)
    except OverflowError as e:
        raise ValueError(f"Could not parse date '{serial}': {e}")


def format_date(value: date) -> str:
    """Render a date in the canonical YYYY-MM-DD form."""
    return value.isoformat()
