"""Submit a confirmed batch to the catalogue and reconcile the response."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from app.domain.entities import (
    GENERAL_ERROR_FIELD,
    CanonicalMealRecord,
    UploadResult,
    ValidationError,
)
from app.infrastructure.meals_api import MealsApiClient, MealsApiError

logger = logging.getLogger(__name__)

_UNKNOWN_MEAL = "Unknown meal"
_UNKNOWN_ERROR = "Unknown error"
_REJECTED_BATCH = "The catalogue rejected the batch"
_NO_RESULTS = "The catalogue response did not report any results"
_RESULT_KEYS = ("summary", "created", "errors")


def _unwrap(body: Mapping[str, Any]) -> Mapping[str, Any]:
    data = body.get("data")
    return data if isinstance(data, Mapping) else body


def _as_count(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


class _RowResolver:
    """Attribute catalogue errors back to the sheet rows they came from.

    Each submitted record is claimed at most once, so an echoed clientRef,
    index or name that was already used falls through to the next strategy.
    """

    def __init__(self, records: Sequence[CanonicalMealRecord]) -> None:
        self.records = list(records)
        self.by_ref = {record.client_ref: record for record in self.records}
        self.claimed: set[str] = set()

    def _unclaimed(self, record: CanonicalMealRecord | None) -> CanonicalMealRecord | None:
        if record is None or record.client_ref in self.claimed:
            return None
        return record

    def resolve(self, entry: Mapping[str, Any], position: int) -> tuple[int, str | None]:
        meal = entry.get("meal") if isinstance(entry.get("meal"), Mapping) else {}
        client_ref = entry.get("clientRef") or meal.get("clientRef")
        record = (
            self._unclaimed(self.by_ref.get(client_ref))
            if isinstance(client_ref, str)
            else None
        )

        if record is None:
            index = _as_count(entry.get("index"))
            if index is not None and 0 <= index < len(self.records):
                record = self._unclaimed(self.records[index])

        if record is None:
            name = meal.get("name")
            record = next(
                (
                    candidate
                    for candidate in self.records
                    if candidate.name == name and self._unclaimed(candidate)
                ),
                None,
            )

        if record is None:
            logger.warning(
                "Could not match catalogue error %s to a submitted meal; "
                "assuming sheet row %s",
                position,
                position + 2,
            )
            return position + 2, meal.get("name")

        self.claimed.add(record.client_ref)
        return record.row_number, meal.get("name") or record.name


def _error_message(entry: Mapping[str, Any], default: str = _UNKNOWN_ERROR) -> str:
    for key in ("error", "message"):
        message = entry.get(key)
        if isinstance(message, str) and message.strip():
            return message
    return default


def _batch_failure(total: int, message: str) -> UploadResult:
    return UploadResult(
        total_rows=total,
        success_count=0,
        failed_count=total,
        errors=[ValidationError(row=0, field=GENERAL_ERROR_FIELD, message=message)],
    )


def reconcile_bulk_response(
    records: Sequence[CanonicalMealRecord], body: Mapping[str, Any]
) -> UploadResult:
    """Build an :class:`UploadResult` from a bulk-create response body.

    A body flagged ``success: false``, one that reports no results at all, or
    one whose counts do not account for every submitted meal is treated as a
    failure of the whole batch.
    """

    total = len(records)
    data = _unwrap(body)
    if body.get("success") is False or data.get("success") is False:
        message = _error_message(data, _error_message(body, _REJECTED_BATCH))
        logger.error("Catalogue rejected the batch of %s meals: %s", total, message)
        return _batch_failure(total, message)
    if not any(key in data for key in _RESULT_KEYS):
        message = _error_message(data, _error_message(body, _NO_RESULTS))
        logger.error("Catalogue response reported no results: %s", message)
        return _batch_failure(total, message)

    summary = data.get("summary") if isinstance(data.get("summary"), Mapping) else {}
    created = _as_list(data.get("created"))
    failures = [entry for entry in _as_list(data.get("errors")) if isinstance(entry, Mapping)]

    success_count = _as_count(summary.get("created"))
    if success_count is None:
        success_count = len(created)
    failed_count = _as_count(summary.get("failed"))
    if failed_count is None:
        failed_count = len(failures)

    if success_count + failed_count < total:
        logger.error(
            "Catalogue accounted for %s of %s meals (%s created, %s failed)",
            success_count + failed_count,
            total,
            success_count,
            failed_count,
        )
        return _batch_failure(
            total,
            f"The catalogue reported results for {success_count + failed_count} "
            f"of {total} meals",
        )

    resolver = _RowResolver(records)
    errors: list[ValidationError] = []
    for position, entry in enumerate(failures):
        row, name = resolver.resolve(entry, position)
        errors.append(
            ValidationError(
                row=row,
                field=GENERAL_ERROR_FIELD,
                message=_error_message(entry),
                value=name or _UNKNOWN_MEAL,
            )
        )

    return UploadResult(
        total_rows=total,
        success_count=success_count,
        failed_count=failed_count,
        errors=errors,
    )


async def submit_meal_batch(
    records: Sequence[CanonicalMealRecord], client: MealsApiClient
) -> UploadResult:
    """Send every record in one request and report per-row outcomes.

    A request that fails as a whole marks every row failed with a single
    ``General`` error at row 0. No retries are attempted.
    """

    if not records:
        raise ValueError("There are no meals to submit")

    payload = [record.to_payload() for record in records]
    try:
        body = await client.bulk_create_meals(payload)
    except MealsApiError as exc:
        logger.error("Bulk submission of %s meals failed: %s", len(records), exc)
        return _batch_failure(len(records), str(exc))

    result = reconcile_bulk_response(records, body)
    logger.info(
        "Bulk submission finished: %s created, %s failed of %s",
        result.success_count,
        result.failed_count,
        result.total_rows,
    )
    return result


__all__ = ["reconcile_bulk_response", "submit_meal_batch"]
