"""Value objects exchanged between the stages of a bulk meal import."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .import_field import ImportField

GENERAL_ERROR_FIELD = "General"


@dataclass(frozen=True)
class RawImportRow:
    """Untyped cell values of one spreadsheet data row keyed by canonical field."""

    values: Mapping[ImportField, Any]
    row_number: int | None = None
    raw_cells: Mapping[ImportField, str] = field(default_factory=dict)

    def get(self, import_field: ImportField, default: Any = None) -> Any:
        return self.values.get(import_field, default)

    def has(self, import_field: ImportField) -> bool:
        return import_field in self.values

    def raw(self, import_field: ImportField) -> Any:
        """Return the cell text as displayed in the sheet, else the parsed value."""

        if import_field in self.raw_cells:
            return self.raw_cells[import_field]
        return self.values.get(import_field)


@dataclass(frozen=True)
class ValidationError:
    """A single problem attributed to a spreadsheet row and column."""

    row: int
    field: str
    message: str
    value: Any = None


@dataclass
class UploadResult:
    """Terminal outcome of submitting one batch of meals."""

    total_rows: int
    success_count: int = 0
    failed_count: int = 0
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.success_count > 0 and self.failed_count == 0

    @property
    def partial(self) -> bool:
        return self.success_count > 0 and self.failed_count > 0


__all__ = [
    "GENERAL_ERROR_FIELD",
    "RawImportRow",
    "UploadResult",
    "ValidationError",
]
