"""Repository implementations for infrastructure layer."""

from .import_run_repository import ImportRunRepository

__all__ = [
    "ImportRunRepository",
]
