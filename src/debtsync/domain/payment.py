"""Payment recording and FIFO allocation."""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from debtsync.database.base import Database
from debtsync.domain.entities import DebtStatus, Payment, compute_debt_status
from debtsync.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    company_not_found,
    customer_not_found,
)
from debtsync.utils.amount_parser import parse_amount, format_amount, has_cent_precision
from debtsync.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ("Nakit", "Havale/EFT", "Kredi Kartı", "Çek")


@dataclass(frozen=True)
class Allocation:
    """Part of a payment applied to one debt."""

    debt_id: int
    deducted: Decimal
    remaining_amount: Decimal
    status: DebtStatus


@dataclass
class PaymentResult:
    """Recorded payment and how it was spread over the customer's debts.

    ``unallocated`` is whatever exceeded the outstanding debts in the
    payment's currency. It is not stored anywhere as credit.
    """

    payment: Payment
    allocations: list[Allocation] = field(default_factory=list)
    unallocated: Decimal = Decimal("0")
    errors: list[str] = field(default_factory=list)

    @property
    def allocated(self) -> Decimal:
        return sum((a.deducted for a in self.allocations), Decimal("0"))

    def as_dict(self) -> dict[str, Any]:
        return {
            "payment_id": self.payment.id,
            "allocations": [
                {
                    "debt_id": a.debt_id,
                    "deducted": format_amount(a.deducted),
                    "remaining_amount": format_amount(a.remaining_amount),
                    "status": a.status.value,
                }
                for a in self.allocations
            ],
            "unallocated": format_amount(self.unallocated),
            "errors": list(self.errors),
        }


class PaymentService:
    """Service for recording customer payments."""

    def __init__(self, db: Database):
        """Initialize payment service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_payment(
        self,
        customer_id: int,
        amount: Decimal | str,
        currency: str,
        payment_date: date | str,
        method: str,
        reference: Optional[str] = None,
    ) -> PaymentResult:
        """Record a payment and allocate it to open debts, oldest due date first.

        The payment is stored before any allocation. Only debts in the
        payment's currency with a remaining amount are touched; each one takes
        as much as it still owes until the payment runs out.

        Args:
            customer_id: Paying customer
            amount: Payment amount, must be positive
            currency: Currency code
            payment_date: Date the money was received
            method: One of PAYMENT_METHODS
            reference: Optional bank or receipt reference

        Returns:
            PaymentResult with the payment, allocations and unallocated remainder

        Raises:
            ValidationError: If amount, currency, date or method is invalid
            NotFoundError: If the customer does not exist
        """
        try:
            amount = parse_amount(amount)
        except ValueError as e:
            raise ValidationError(str(e))
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")
        if not has_cent_precision(amount):
            raise ValidationError(f"Payment amount {amount} has more than two decimal places")

        try:
            payment_date = parse_date(payment_date)
        except ValueError as e:
            raise ValidationError(str(e))

        if method not in PAYMENT_METHODS:
            raise ValidationError(
                f"Unknown payment method '{method}' (expected one of: {', '.join(PAYMENT_METHODS)})"
            )

        customer = self.db.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(customer_not_found(customer_id))
        company = self.db.get_company(customer.company_id)
        if company is None:
            raise NotFoundError(company_not_found(customer.company_id))

        currency = (currency or "").strip().upper()
        if currency not in company.currencies:
            raise ValidationError(
                f"Currency '{currency}' is not enabled for company '{company.name}'"
            )

        payment_id = self.db.create_payment(
            company_id=company.id,
            customer_id=customer_id,
            amount=amount,
            currency=currency,
            payment_date=payment_date,
            method=method,
            reference=reference,
        )
        result = PaymentResult(payment=self.db.get_payment(payment_id))

        debts = self.db.list_debts(customer_id=customer_id, currency=currency, outstanding_only=True)
        left = amount
        for debt in debts:
            if left <= 0:
                break

            deduction = min(debt.remaining_amount, left)
            new_remaining = debt.remaining_amount - deduction
            status = compute_debt_status(new_remaining, debt.original_amount)
            try:
                self.db.update_debt_balance(debt.id, new_remaining, status)
            except DomainError as e:
                logger.warning("Allocating payment %s to debt %s failed: %s", payment_id, debt.id, e)
                result.errors.append(f"Debt {debt.id}: {e}")
                continue

            result.allocations.append(Allocation(debt.id, deduction, new_remaining, status))
            left -= deduction

        result.unallocated = left
        if left > 0:
            logger.warning(
                "Payment %s: %s %s exceeds open debts and was left unallocated",
                payment_id,
                format_amount(left),
                currency,
            )
        return result
