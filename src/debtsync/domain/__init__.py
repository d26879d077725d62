"""Domain layer for debtsync application."""

_SERVICES = {
    "CompanyService": "debtsync.domain.company",
    "ReconciliationService": "debtsync.domain.reconciliation",
    "PaymentService": "debtsync.domain.payment",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports entities from this
# package, so they are resolved lazily
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
