"""Domain model entities for debtsync.

These are pure data classes representing business concepts, independent of
database schema. Services and the reconciliation engine only ever see these,
never ORM rows.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class DebtStatus(str, Enum):
    """Lifecycle status of a debt, derived from its amounts."""

    OPEN = "open"
    PARTIAL = "partial"
    PAID = "paid"


class UserRole(str, Enum):
    """Roles a company user can have."""

    COMPANY_ADMIN = "company_admin"
    ACCOUNTING = "accounting"
    MANAGER = "manager"
    SELLER = "seller"


def compute_debt_status(remaining_amount: Decimal, original_amount: Decimal) -> DebtStatus:
    """Derive a debt's status from its remaining and original amounts."""
    if remaining_amount <= 0:
        return DebtStatus.PAID
    if remaining_amount < original_amount:
        return DebtStatus.PARTIAL
    return DebtStatus.OPEN


@dataclass(frozen=True)
class Company:
    """Tenant with its receivables configuration."""

    id: int
    name: str
    base_currency: str
    currencies: tuple[str, ...]
    debt_types: tuple[str, ...]
    created_at: datetime


@dataclass(frozen=True)
class User:
    """Company user; sales reps are looked up by name."""

    id: int
    company_id: int
    name: str
    role: UserRole
    created_at: datetime


@dataclass(frozen=True)
class Customer:
    """Customer domain entity."""

    id: int
    company_id: int
    name: str
    assigned_user_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Debt:
    """Receivable owed by a customer."""

    id: int
    company_id: int
    customer_id: int
    debt_type: str
    currency: str
    original_amount: Decimal
    remaining_amount: Decimal
    due_date: date
    status: DebtStatus
    created_at: datetime
    customer_name: Optional[str] = field(default=None, compare=False)


@dataclass(frozen=True)
class Payment:
    """Money received from a customer. Never modified after creation."""

    id: int
    company_id: int
    customer_id: int
    amount: Decimal
    currency: str
    payment_date: date
    method: str
    reference: Optional[str]
    created_at: datetime
    debt_id: Optional[int] = None


@dataclass(frozen=True)
class Note:
    """Collection note attached to a debt."""

    id: int
    company_id: int
    debt_id: int
    content: str
    created_at: datetime


@dataclass(frozen=True)
class Promise:
    """Customer's promise to pay (part of) a debt on a date."""

    id: int
    company_id: int
    debt_id: int
    amount: Decimal
    promised_date: date
    created_at: datetime
