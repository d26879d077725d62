"""Shared pytest fixtures for debtsync tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from debtsync.database.factories import create_sqlite_database
from debtsync.domain.errors import StoreError
from debtsync.domain.company import CompanyService
from debtsync.domain.normalizer import ImportRow
from debtsync.domain.payment import PaymentService
from debtsync.domain.reconciliation import ReconciliationService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def company_service(temp_db):
    """Create a CompanyService with a temporary database."""
    return CompanyService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def payment_service(temp_db):
    """Create a PaymentService with a temporary database."""
    return PaymentService(temp_db)


@pytest.fixture
def sample_company(company_service):
    """Create a company accepting TRY, USD and EUR."""
    company_id = company_service.create_company(name="Acme Dağıtım", base_currency="TRY")
    return company_service.get_company(company_id)


@pytest.fixture
def sample_users(company_service, sample_company):
    """Create a seller, an accountant and an admin; return them by name."""
    company_service.add_user(sample_company.id, "Ahmet Yılmaz", "seller")
    company_service.add_user(sample_company.id, "Ayşe Demir", "accounting")
    company_service.add_user(sample_company.id, "Mehmet Kaya", "company_admin")
    return {u.name: u for u in company_service.list_users(sample_company.id)}


@pytest.fixture
def accountant(sample_users):
    """User allowed to commit imports."""
    return sample_users["Ayşe Demir"]


@pytest.fixture
def seller(sample_users):
    """User not allowed to commit imports."""
    return sample_users["Ahmet Yılmaz"]


@pytest.fixture
def make_row():
    """Build an ImportRow with sensible defaults."""

    def _make_row(**overrides):
        values = {
            "customer_name": "Acme",
            "due_date": "2024-05-20",
            "amount": 15000,
            "currency": "TRY",
            "debt_type": "Cari",
            "sales_rep_name": "Ahmet Yılmaz",
        }
        values.update(overrides)
        return ImportRow(**values)

    return _make_row


@pytest.fixture
def add_debt(temp_db, sample_company):
    """Create a customer (if needed) and an open debt; return the debt."""

    def _add_debt(customer_name="Acme", due=date(2024, 5, 20), amount="15000", currency="TRY"):
        customer = next(
            (c for c in temp_db.list_customers(sample_company.id) if c.name == customer_name),
            None,
        )
        customer_id = (
            customer.id
            if customer is not None
            else temp_db.create_customer(sample_company.id, customer_name)
        )
        debt_id = temp_db.create_debt(
            company_id=sample_company.id,
            customer_id=customer_id,
            debt_type="Cari",
            currency=currency,
            amount=Decimal(amount),
            due_date=due,
        )
        return temp_db.get_debt(debt_id)

    return _add_debt


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def fail_on(temp_db, monkeypatch):
    """Make one store operation raise StoreError for the calls a predicate picks.

    The predicate receives the same arguments as the store method; calls it
    rejects go through to the real store.
    """

    def _fail_on(method_name, should_fail=lambda *args, **kwargs: True):
        original = getattr(temp_db, method_name)

        def failing(*args, **kwargs):
            if should_fail(*args, **kwargs):
                raise StoreError(f"{method_name} unavailable")
            return original(*args, **kwargs)

        monkeypatch.setattr(temp_db, method_name, failing)

    return _fail_on
