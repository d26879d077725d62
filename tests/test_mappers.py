"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from debtsync.database.models import (
    Company as ORMCompany,
    Customer as ORMCustomer,
    Debt as ORMDebt,
    User as ORMUser,
)
from debtsync.database.mappers import company_to_domain, debt_to_domain, user_to_domain
from debtsync.domain.entities import Company, Debt, DebtStatus, UserRole


def test_company_to_domain():
    """JSON lists come back as tuples so the entity stays hashable."""
    orm_company = ORMCompany(
        id=1,
        name="Acme",
        base_currency="TRY",
        currencies=["TRY", "USD"],
        debt_types=["Cari", "Çek"],
        created_at=datetime.now(UTC),
    )

    company = company_to_domain(orm_company)

    assert isinstance(company, Company)
    assert company.currencies == ("TRY", "USD")
    assert company.debt_types == ("Cari", "Çek")


def test_user_to_domain():
    orm_user = ORMUser(id=3, company_id=1, name="Ayşe Demir", role="accounting", created_at=datetime.now(UTC))

    user = user_to_domain(orm_user)

    assert user.role == UserRole.ACCOUNTING


def test_debt_to_domain():
    orm_customer = ORMCustomer(id=7, company_id=1, name="Acme")
    orm_debt = ORMDebt(
        id=2,
        company_id=1,
        customer_id=7,
        debt_type="Senet",
        currency="USD",
        original_amount=Decimal("100.00"),
        remaining_amount=Decimal("40.00"),
        due_date=date(2024, 5, 20),
        status="partial",
        created_at=datetime.now(UTC),
        customer=orm_customer,
    )

    debt = debt_to_domain(orm_debt)

    assert isinstance(debt, Debt)
    assert debt.status == DebtStatus.PARTIAL
    assert debt.remaining_amount == Decimal("40")
    assert debt.customer_name == "Acme"


def test_debt_without_loaded_customer():
    orm_debt = ORMDebt(
        id=2,
        company_id=1,
        customer_id=7,
        debt_type="Cari",
        currency="TRY",
        original_amount=Decimal("1"),
        remaining_amount=Decimal("1"),
        due_date=date(2024, 5, 20),
        status="open",
        created_at=datetime.now(UTC),
    )

    assert debt_to_domain(orm_debt).customer_name is None
