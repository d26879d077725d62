"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the reconciliation engine never
depends on the ORM schema.
"""

from debtsync.domain import entities as domain
from debtsync.database.models import (
    Company as ORMCompany,
    User as ORMUser,
    Customer as ORMCustomer,
    Debt as ORMDebt,
    Payment as ORMPayment,
    Note as ORMNote,
    Promise as ORMPromise,
)


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        base_currency=orm_company.base_currency,
        currencies=tuple(orm_company.currencies or ()),
        debt_types=tuple(orm_company.debt_types or ()),
        created_at=orm_company.created_at,
    )


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        company_id=orm_user.company_id,
        name=orm_user.name,
        role=domain.UserRole(orm_user.role),
        created_at=orm_user.created_at,
    )


def customer_to_domain(orm_customer: ORMCustomer) -> domain.Customer:
    """Convert SQLAlchemy Customer model to domain Customer entity."""
    return domain.Customer(
        id=orm_customer.id,
        company_id=orm_customer.company_id,
        name=orm_customer.name,
        assigned_user_id=orm_customer.assigned_user_id,
        created_at=orm_customer.created_at,
    )


def debt_to_domain(orm_debt: ORMDebt) -> domain.Debt:
    """Convert SQLAlchemy Debt model to domain Debt entity."""
    return domain.Debt(
        id=orm_debt.id,
        company_id=orm_debt.company_id,
        customer_id=orm_debt.customer_id,
        debt_type=orm_debt.debt_type,
        currency=orm_debt.currency,
        original_amount=orm_debt.original_amount,
        remaining_amount=orm_debt.remaining_amount,
        due_date=orm_debt.due_date,
        status=domain.DebtStatus(orm_debt.status),
        created_at=orm_debt.created_at,
        customer_name=orm_debt.customer.name if orm_debt.customer is not None else None,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        company_id=orm_payment.company_id,
        customer_id=orm_payment.customer_id,
        amount=orm_payment.amount,
        currency=orm_payment.currency,
        payment_date=orm_payment.payment_date,
        method=orm_payment.method,
        reference=orm_payment.reference,
        created_at=orm_payment.created_at,
        debt_id=orm_payment.debt_id,
    )


def note_to_domain(orm_note: ORMNote) -> domain.Note:
    """Convert SQLAlchemy Note model to domain Note entity."""
    return domain.Note(
        id=orm_note.id,
        company_id=orm_note.company_id,
        debt_id=orm_note.debt_id,
        content=orm_note.content,
        created_at=orm_note.created_at,
    )


def promise_to_domain(orm_promise: ORMPromise) -> domain.Promise:
    """Convert SQLAlchemy Promise model to domain Promise entity."""
    return domain.Promise(
        id=orm_promise.id,
        company_id=orm_promise.company_id,
        debt_id=orm_promise.debt_id,
        amount=orm_promise.amount,
        promised_date=orm_promise.promised_date,
        created_at=orm_promise.created_at,
    )
