"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from debtsync.domain.entities import (
    Company,
    User,
    Customer,
    Debt,
    DebtStatus,
    Payment,
    Note,
    Promise,
)


class Database(ABC):
    """Abstract database interface for debtsync.

    Write operations raise ``StoreError`` when the underlying store rejects
    them; the store is left usable for the next operation.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Company operations
    @abstractmethod
    def create_company(
        self,
        name: str,
        base_currency: str,
        currencies: Sequence[str],
        debt_types: Sequence[str],
    ) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def get_company_by_name(self, name: str) -> Optional[Company]:
        """Get company by exact name."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, company_id: int, name: str, role: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def list_users(self, company_id: int) -> list[User]:
        """List users of a company."""
        pass

    # Customer operations
    @abstractmethod
    def create_customer(
        self, company_id: int, name: str, assigned_user_id: Optional[int] = None
    ) -> int:
        """Create a customer. Returns customer ID."""
        pass

    @abstractmethod
    def get_customer(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID."""
        pass

    @abstractmethod
    def list_customers(self, company_id: int) -> list[Customer]:
        """List customers of a company."""
        pass

    # Debt operations
    @abstractmethod
    def create_debt(
        self,
        company_id: int,
        customer_id: int,
        debt_type: str,
        currency: str,
        amount: Decimal,
        due_date: date,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Create an open debt with original and remaining set to amount. Returns debt ID."""
        pass

    @abstractmethod
    def get_debt(self, debt_id: int) -> Optional[Debt]:
        """Get debt by ID."""
        pass

    @abstractmethod
    def list_debts(
        self,
        company_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        status: Optional[DebtStatus] = None,
        currency: Optional[str] = None,
        outstanding_only: bool = False,
    ) -> list[Debt]:
        """List debts ordered by due date, then ID.

        Args:
            company_id: Optional company filter
            customer_id: Optional customer filter
            status: Optional status filter
            currency: Optional currency filter
            outstanding_only: If True, only debts with remaining amount > 0
        """
        pass

    @abstractmethod
    def replace_debt_amount(
        self, debt_id: int, amount: Decimal, currency: str, debt_type: str
    ) -> None:
        """Set original and remaining amount to amount, plus currency and type."""
        pass

    @abstractmethod
    def update_debt_balance(
        self, debt_id: int, remaining_amount: Decimal, status: DebtStatus
    ) -> None:
        """Update a debt's remaining amount and status."""
        pass

    @abstractmethod
    def delete_debts(self, debt_ids: Iterable[int]) -> int:
        """Delete debts with their notes, promises and payments in one batch.

        Returns the number of debts deleted.
        """
        pass

    # Payment operations
    @abstractmethod
    def create_payment(
        self,
        company_id: int,
        customer_id: int,
        amount: Decimal,
        currency: str,
        payment_date: date,
        method: str,
        reference: Optional[str] = None,
        debt_id: Optional[int] = None,
    ) -> int:
        """Create a payment. Returns payment ID."""
        pass

    @abstractmethod
    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID."""
        pass

    @abstractmethod
    def list_payments(self, customer_id: int) -> list[Payment]:
        """List payments of a customer, newest first."""
        pass

    # Note and promise operations
    @abstractmethod
    def create_note(self, company_id: int, debt_id: int, content: str) -> int:
        """Create a note on a debt. Returns note ID."""
        pass

    @abstractmethod
    def list_notes(self, debt_id: int) -> list[Note]:
        """List notes of a debt."""
        pass

    @abstractmethod
    def create_promise(
        self, company_id: int, debt_id: int, amount: Decimal, promised_date: date
    ) -> int:
        """Create a payment promise on a debt. Returns promise ID."""
        pass

    @abstractmethod
    def list_promises(self, debt_id: int) -> list[Promise]:
        """List promises of a debt."""
        pass
