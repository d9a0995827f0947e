"""Bulk meal import use cases."""

from .errors import PendingBatchNotFoundError, SpreadsheetFormatError
from .parser import parse_meal_spreadsheet
from .pipeline import (
    UploadOutcome,
    cancel_meal_batch,
    confirm_meal_batch,
    expire_pending_batches,
    get_import_run,
    get_pending_batch,
    list_import_runs,
    upload_meal_spreadsheet,
)
from .pricing import (
    CostModel,
    compute_cooking_cost,
    compute_pricing,
    derive_complexity,
    split_list,
    transform_meal_rows,
)
from .review import BatchRowSummary, BatchSummary, summarize_batch
from .submit import reconcile_bulk_response, submit_meal_batch
from .template import TEMPLATE_FILENAME, build_meal_template
from .validators import validate_meal_rows

__all__ = [
    "BatchRowSummary",
    "BatchSummary",
    "CostModel",
    "PendingBatchNotFoundError",
    "SpreadsheetFormatError",
    "TEMPLATE_FILENAME",
    "UploadOutcome",
    "build_meal_template",
    "cancel_meal_batch",
    "compute_cooking_cost",
    "compute_pricing",
    "confirm_meal_batch",
    "derive_complexity",
    "expire_pending_batches",
    "get_import_run",
    "get_pending_batch",
    "list_import_runs",
    "parse_meal_spreadsheet",
    "reconcile_bulk_response",
    "split_list",
    "submit_meal_batch",
    "summarize_batch",
    "transform_meal_rows",
    "upload_meal_spreadsheet",
    "validate_meal_rows",
]
