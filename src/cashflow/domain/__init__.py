"""Domain layer for cashflow application."""

# Services are resolved lazily so that importing entities from the database
# layer does not pull the services (and the database layer) back in.
_SERVICES = {
    "TransactionService": "cashflow.domain.transaction",
    "CategoryService": "cashflow.domain.category",
    "DashboardService": "cashflow.domain.dashboard",
    "ImportService": "cashflow.domain.sheet_import",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
