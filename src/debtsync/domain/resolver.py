"""Name-based resolution of sales reps and customers."""

from dataclasses import dataclass
from typing import Iterable, Optional

from debtsync.domain.entities import Customer, User


@dataclass(frozen=True)
class ExistingCustomer:
    """Customer already in the store."""

    id: int
    name: str


@dataclass(frozen=True)
class PendingCustomer:
    """Customer that commit would create."""

    name: str


CustomerRef = ExistingCustomer | PendingCustomer


def name_key(name: Optional[str]) -> str:
    """Case-insensitive, whitespace-trimmed lookup key for names."""
    return (name or "").strip().casefold()


class EntityResolver:
    """Resolves import names against one company's users and customers.

    Customers that are not found resolve to a ``PendingCustomer``, which is
    cached so every row naming the same new customer shares one reference.
    A resolver lives for a single analyze or commit run.
    """

    def __init__(self, users: Iterable[User], customers: Iterable[Customer]):
        self._users: dict[str, User] = {}
        for user in sorted(users, key=lambda u: u.id):
            self._users.setdefault(name_key(user.name), user)

        self._customers: dict[str, CustomerRef] = {}
        for customer in sorted(customers, key=lambda c: c.id):
            self._customers.setdefault(
                name_key(customer.name), ExistingCustomer(id=customer.id, name=customer.name)
            )

    def find_sales_rep(self, name: Optional[str]) -> Optional[User]:
        """Return the user whose name matches, or None."""
        key = name_key(name)
        if not key:
            return None
        return self._users.get(key)

    def resolve_customer(self, name: str) -> CustomerRef:
        """Return the existing customer for name, or the pending one for this run."""
        key = name_key(name)
        ref = self._customers.get(key)
        if ref is None:
            ref = PendingCustomer(name=name.strip())
            self._customers[key] = ref
        return ref
