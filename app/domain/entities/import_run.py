"""Domain entity representing one execution of the bulk meal import."""

from dataclasses import dataclass
from datetime import datetime

IMPORT_STATUS_REJECTED = "Rejected"
IMPORT_STATUS_PENDING_REVIEW = "Pending review"
IMPORT_STATUS_CANCELLED = "Cancelled"
IMPORT_STATUS_COMPLETED = "Completed"
IMPORT_STATUS_COMPLETED_WITH_ERRORS = "Completed with errors"
IMPORT_STATUS_FAILED = "Failed"


@dataclass
class ImportRun:
    """Metadata describing an uploaded meal spreadsheet and its outcome."""

    id: int | None
    file_name: str
    operator_id: str
    status: str
    total_rows: int
    error_rows: int
    success_count: int
    failed_count: int
    created_at: datetime | None
    finished_at: datetime | None


__all__ = [
    "ImportRun",
    "IMPORT_STATUS_CANCELLED",
    "IMPORT_STATUS_COMPLETED",
    "IMPORT_STATUS_COMPLETED_WITH_ERRORS",
    "IMPORT_STATUS_FAILED",
    "IMPORT_STATUS_PENDING_REVIEW",
    "IMPORT_STATUS_REJECTED",
]
