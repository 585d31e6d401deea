"""Service module exports."""

from . import (
    debt_registry,
    debts,
    errors,
    export_csv,
    import_csv,
    schedules,
)

__all__ = [
    "debt_registry",
    "debts",
    "errors",
    "export_csv",
    "import_csv",
    "schedules",
]
