"""ORM models used by the application infrastructure."""

from .import_run import ImportRunModel

__all__ = [
    "ImportRunModel",
]
