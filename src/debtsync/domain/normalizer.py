"""Import row normalization and validation."""

from dataclasses import dataclass, asdict
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from debtsync.domain.entities import Company
from debtsync.domain.errors import RowErrorCode
from debtsync.utils.amount_parser import parse_amount, format_amount, has_cent_precision
from debtsync.utils.date_parser import parse_date, format_date

CURRENCY_SYNONYMS = {
    "TL": "TRY",
    "DOLAR": "USD",
    "EURO": "EUR",
}

DEBT_TYPE_CHEQUE = "Çek"
DEBT_TYPE_BOND = "Senet"
DEFAULT_DEBT_TYPE = "Cari"

# Accepted spellings for each field when rows arrive as mappings
FIELD_ALIASES = {
    "customer_name": ("customer_name", "customerName", "customer"),
    "due_date": ("due_date", "dueDate"),
    "amount": ("amount",),
    "currency": ("currency",),
    "debt_type": ("debt_type", "debtType"),
    "sales_rep_name": ("sales_rep_name", "salesRepName", "sales_rep"),
    "transaction_date": ("transaction_date", "transactionDate"),
}


@dataclass(frozen=True)
class ImportRow:
    """One decoded row of an import file, values as read from the cells."""

    customer_name: Any
    due_date: Any
    amount: Any
    currency: Any = None
    debt_type: Any = None
    sales_rep_name: Any = None
    transaction_date: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ImportRow":
        """Build a row from a dict using snake_case or camelCase keys."""
        values = {}
        for field_name, aliases in FIELD_ALIASES.items():
            values[field_name] = next(
                (data[alias] for alias in aliases if alias in data), None
            )
        return cls(**values)

    def as_dict(self) -> dict[str, Any]:
        """Return the raw cell values for display."""
        return {
            key: (value.isoformat() if isinstance(value, date) else value)
            for key, value in asdict(self).items()
        }


@dataclass(frozen=True)
class NormalizedRow:
    """Import row after canonicalization; every field is valid."""

    customer_name: str
    due_date: date
    amount: Decimal
    currency: str
    debt_type: str
    sales_rep_name: str
    transaction_date: Optional[date] = None

    def to_import_row(self) -> ImportRow:
        """Return the row in import form, e.g. to resubmit it for commit."""
        return ImportRow(
            customer_name=self.customer_name,
            due_date=format_date(self.due_date),
            amount=self.amount,
            currency=self.currency,
            debt_type=self.debt_type,
            sales_rep_name=self.sales_rep_name,
            transaction_date=(
                format_date(self.transaction_date) if self.transaction_date else None
            ),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "customer_name": self.customer_name,
            "due_date": format_date(self.due_date),
            "amount": format_amount(self.amount),
            "currency": self.currency,
            "debt_type": self.debt_type,
            "sales_rep_name": self.sales_rep_name,
            "transaction_date": (
                format_date(self.transaction_date) if self.transaction_date else None
            ),
        }


@dataclass(frozen=True)
class RowError:
    """Validation failure for a single row."""

    code: RowErrorCode
    message: str


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def map_currency(value: Any, company: Company) -> str:
    """Canonicalize a currency cell, falling back to the company's base currency."""
    code = _text(value).upper()
    code = CURRENCY_SYNONYMS.get(code, code)
    if code in company.currencies:
        return code
    return company.base_currency


def map_debt_type(value: Any) -> str:
    """Map free-text debt type to its canonical name."""
    text = _text(value).lower()
    if "çek" in text or "cek" in text:
        return DEBT_TYPE_CHEQUE
    if "senet" in text:
        return DEBT_TYPE_BOND
    return DEFAULT_DEBT_TYPE


def normalize_row(row: ImportRow, company: Company) -> NormalizedRow | RowError:
    """Validate and canonicalize one import row.

    Checks run in a fixed order and the first failure is reported: customer
    name, due date, amount, transaction date. The sales rep is checked later
    by the resolver.
    """
    customer_name = _text(row.customer_name)
    if not customer_name:
        return RowError(RowErrorCode.CUSTOMER_NAME_EMPTY, "Customer name is empty")

    try:
        due_date = parse_date(row.due_date)
    except ValueError:
        return RowError(RowErrorCode.INVALID_DATE, f"Invalid due date ({_text(row.due_date)})")

    try:
        amount = parse_amount(row.amount)
    except ValueError:
        return RowError(RowErrorCode.INVALID_AMOUNT, f"Invalid amount ({_text(row.amount)})")
    # Amounts are stored to the cent
    if amount <= 0 or not has_cent_precision(amount):
        return RowError(RowErrorCode.INVALID_AMOUNT, f"Invalid amount ({_text(row.amount)})")

    transaction_date = None
    if _text(row.transaction_date):
        try:
            transaction_date = parse_date(row.transaction_date)
        except ValueError:
            return RowError(
                RowErrorCode.INVALID_DATE,
                f"Invalid transaction date ({_text(row.transaction_date)})",
            )

    return NormalizedRow(
        customer_name=customer_name,
        due_date=due_date,
        amount=amount,
        currency=map_currency(row.currency, company),
        debt_type=map_debt_type(row.debt_type),
        sales_rep_name=_text(row.sales_rep_name),
        transaction_date=transaction_date,
    )
