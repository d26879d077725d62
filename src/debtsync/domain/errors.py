"""Shared domain error messages and error types."""

from enum import Enum


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StalePlanError(ConflictError):
    """Store changed between analysis and commit."""


class AuthorizationError(DomainError):
    """Caller's role does not allow the operation."""


class ConfigurationError(DomainError):
    """Tenant configuration is missing or inconsistent."""


class StoreError(DomainError):
    """A read or write against the store failed."""


class RowErrorCode(str, Enum):
    """Row-level validation failures reported by reconciliation."""

    CUSTOMER_NAME_EMPTY = "CUSTOMER_NAME_EMPTY"
    INVALID_DATE = "INVALID_DATE"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    SALES_REP_NOT_FOUND = "SALES_REP_NOT_FOUND"


def company_not_found(company_id: int) -> str:
    """Return message for missing company."""
    return f"Company {company_id} not found"


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def customer_not_found(customer_id: int) -> str:
    """Return message for missing customer."""
    return f"Customer {customer_id} not found"


def debt_not_found(debt_id: int) -> str:
    """Return message for missing debt."""
    return f"Debt {debt_id} not found"


def role_not_allowed(role: str, allowed: tuple[str, ...]) -> str:
    """Return message when a role may not run an operation."""
    return f"Role '{role}' is not allowed to do this (requires one of: {', '.join(allowed)})"


def sales_rep_not_found(name: str) -> str:
    """Return message for an unknown sales rep name."""
    return f"Sales rep not found ({name})"


def stale_plan(expected: str, actual: str) -> str:
    """Return message when the commit plan no longer matches the analysis."""
    return (
        f"Receivables changed since analysis (expected plan {expected[:12]}, "
        f"got {actual[:12]}). Re-run analysis before committing."
    )
