"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

# Scale of stored amounts
AMOUNT_PLACES = 2

_COMMA_GROUPED = re.compile(r"\d{1,3}(,\d{3})+(\.\d+)?")
_DOT_GROUPED = re.compile(r"\d{1,3}(\.\d{3})+,\d+")


def parse_amount(value: str | int | float | Decimal) -> Decimal:
    """Parse an amount cell into a Decimal.

    Handles various formats:
    - numbers as read from a spreadsheet (15000, 2500.5)
    - "123.45"
    - "₺123.45", "$123.45", "123.45 TL"
    - "1,234.56" and "1.234,56"
    - "1234,56" (decimal comma)
    - "(123.45)" (negative in parentheses)

    Floats go through their shortest string form, so 0.1 stays 0.1.

    Args:
        value: Raw amount value

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value cannot be parsed or is not finite
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount '{value}'")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        amount = _parse_amount_str(value)

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{value}': not a finite number")
    return amount


def _parse_amount_str(amount_str: str) -> Decimal:
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = str(amount_str).strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and codes
    amount_str = re.sub(r"[$€£¥₺]", "", amount_str)
    amount_str = re.sub(r"\s*(TL|TRY|USD|EUR)$", "", amount_str, flags=re.IGNORECASE)
    amount_str = amount_str.strip()

    sign = ""
    if amount_str[:1] in ("-", "+"):
        sign, amount_str = amount_str[0], amount_str[1:].strip()

    amount_str = sign + _strip_separators(amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")
    if is_negative:
        amount = -amount
    return amount


def _strip_separators(digits: str) -> str:
    """Rewrite grouped amounts with a dot as the only decimal point.

    The last separator is the decimal one when both appear ("1,234.56",
    "1.234,56"). A lone comma is decimal ("1234,5") unless it is followed by
    exactly three digits, which could be either and is rejected.
    """
    if "," in digits and "." in digits:
        if digits.rfind(",") > digits.rfind("."):
            if not _DOT_GROUPED.fullmatch(digits):
                raise ValueError(f"Could not parse amount '{digits}': mixed separators")
            return digits.replace(".", "").replace(",", ".")
        if not _COMMA_GROUPED.fullmatch(digits):
            raise ValueError(f"Could not parse amount '{digits}': mixed separators")
        return digits.replace(",", "")

    if "," in digits:
        if _COMMA_GROUPED.fullmatch(digits) and digits.count(",") > 1:
            return digits.replace(",", "")
        if re.fullmatch(r"\d+,\d{3}", digits):
            raise ValueError(
                f"Could not parse amount '{digits}': comma may be a decimal or thousands separator"
            )
        if re.fullmatch(r"\d+,\d+", digits):
            return digits.replace(",", ".")
        raise ValueError(f"Could not parse amount '{digits}'")

    return digits


def has_cent_precision(amount: Decimal) -> bool:
    """True when amount has no digits below the cent, as stored."""
    return amount.normalize().as_tuple().exponent >= -AMOUNT_PLACES


def format_amount(amount: Decimal) -> str:
    """Render an amount without trailing zeros or exponent (10000.00 -> "10000")."""
    normalized = amount.normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")
