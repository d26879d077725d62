"""Company, user and customer domain service."""

from typing import Optional, Sequence
from debtsync.database.base import Database
from debtsync.domain.entities import (
    Company as CompanyEntity,
    Customer as CustomerEntity,
    User as UserEntity,
    UserRole,
)
from debtsync.domain.errors import (
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    company_not_found,
)
from debtsync.domain.resolver import name_key

DEFAULT_CURRENCIES = ("TRY", "USD", "EUR")
DEFAULT_DEBT_TYPES = ("Cari", "Çek", "Senet")


class CompanyService:
    """Service for managing companies and their users."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_company(
        self,
        name: str,
        base_currency: str = "TRY",
        currencies: Optional[Sequence[str]] = None,
        debt_types: Optional[Sequence[str]] = None,
    ) -> int:
        """Create a new company.

        Args:
            name: Company name
            base_currency: Currency used when an import row names an unknown one
            currencies: Accepted currency codes (defaults to TRY, USD, EUR)
            debt_types: Debt types offered (defaults to Cari, Çek, Senet)

        Returns:
            Company ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a company with the same name exists
            ConfigurationError: If the base currency is not an accepted currency
        """
        name = name.strip()
        if not name:
            raise ValidationError("Company name cannot be empty")
        if self.db.get_company_by_name(name) is not None:
            raise ConflictError(f"Company with name '{name}' already exists")

        base_currency = base_currency.strip().upper()
        codes = [c.strip().upper() for c in (currencies or DEFAULT_CURRENCIES) if c.strip()]
        codes = list(dict.fromkeys(codes))
        if base_currency not in codes:
            raise ConfigurationError(
                f"Base currency '{base_currency}' must be one of the accepted currencies "
                f"({', '.join(codes)})"
            )
        types = [t.strip() for t in (debt_types or DEFAULT_DEBT_TYPES) if t.strip()]

        return self.db.create_company(
            name=name,
            base_currency=base_currency,
            currencies=codes,
            debt_types=types,
        )

    def get_company(self, company_id: int) -> Optional[CompanyEntity]:
        """Get company by ID."""
        return self.db.get_company(company_id)

    def list_companies(self) -> list[CompanyEntity]:
        """List all companies."""
        return self.db.list_companies()

    def resolve_company(self, company: str | int) -> CompanyEntity:
        """Resolve company name or ID to a company.

        Raises:
            NotFoundError: If no company matches
        """
        if isinstance(company, int):
            found = self.db.get_company(company)
            if found is None:
                raise NotFoundError(company_not_found(company))
            return found

        # Try to parse as integer (handles string IDs like "1")
        try:
            company_id = int(company)
        except (ValueError, TypeError):
            pass
        else:
            found = self.db.get_company(company_id)
            if found is not None:
                return found

        found = self.db.get_company_by_name(company)
        if found is None:
            raise NotFoundError(f"Company '{company}' not found")
        return found

    def add_user(self, company_id: int, name: str, role: str = UserRole.SELLER.value) -> int:
        """Add a user to a company.

        Sales reps are found by name during imports, so names must be unique
        within a company, ignoring case.

        Raises:
            NotFoundError: If the company does not exist
            ValidationError: If the name is empty or the role unknown
            ConflictError: If a user with the same name exists
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        name = name.strip()
        if not name:
            raise ValidationError("User name cannot be empty")
        try:
            role = UserRole(role).value
        except ValueError:
            raise ValidationError(
                f"Unknown role '{role}' (expected one of: {', '.join(r.value for r in UserRole)})"
            )
        if self.find_user(company_id, name) is not None:
            raise ConflictError(f"User with name '{name}' already exists")
        return self.db.create_user(company_id=company_id, name=name, role=role)

    def list_users(self, company_id: int) -> list[UserEntity]:
        """List users of a company."""
        return self.db.list_users(company_id)

    def find_user(self, company_id: int, name: str) -> Optional[UserEntity]:
        """Find a user by name, ignoring case and surrounding whitespace."""
        key = name_key(name)
        for user in self.db.list_users(company_id):
            if name_key(user.name) == key:
                return user
        return None

    def list_customers(self, company_id: int) -> list[CustomerEntity]:
        """List customers of a company."""
        return self.db.list_customers(company_id)
