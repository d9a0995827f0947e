"""Upload, review and submission flow of a bulk meal import."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import partial
from typing import Sequence
from uuid import uuid4

from anyio import to_thread
from sqlalchemy.orm import Session

from app.domain.entities import (
    IMPORT_STATUS_CANCELLED,
    IMPORT_STATUS_COMPLETED,
    IMPORT_STATUS_COMPLETED_WITH_ERRORS,
    IMPORT_STATUS_FAILED,
    IMPORT_STATUS_PENDING_REVIEW,
    IMPORT_STATUS_REJECTED,
    ImportRun,
    PipelineState,
    UploadResult,
    ValidationError,
)
from app.infrastructure.meals_api import MealsApiClient
from app.infrastructure.pending_batches import PendingBatchStore
from app.infrastructure.repositories import ImportRunRepository
from app.utils import now_in_app_timezone

from .errors import SpreadsheetFormatError
from .parser import parse_meal_spreadsheet
from .pricing import DEFAULT_COST_MODEL, CostModel, transform_meal_rows
from .submit import submit_meal_batch
from .validators import validate_meal_rows

logger = logging.getLogger(__name__)


@dataclass
class UploadOutcome:
    """Result of an upload: either a rejection or a batch staged for review."""

    run: ImportRun
    total_rows: int
    errors: list[ValidationError] = field(default_factory=list)
    state: PipelineState | None = None

    @property
    def accepted(self) -> bool:
        return self.state is not None


def _finish_run(
    repository: ImportRunRepository, run: ImportRun, status: str, **changes: int
) -> ImportRun:
    return repository.update(
        replace(run, status=status, finished_at=now_in_app_timezone(), **changes)
    )


def upload_meal_spreadsheet(
    session: Session,
    store: PendingBatchStore,
    *,
    file_bytes: bytes,
    filename: str,
    operator_id: str,
    cost_model: CostModel = DEFAULT_COST_MODEL,
) -> UploadOutcome:
    """Parse, validate and transform an upload, then stage it for review.

    A batch with any validation error is rejected as a whole and nothing is
    staged. Structural problems raise :class:`SpreadsheetFormatError` after
    the run is recorded as failed.
    """

    if not filename:
        raise SpreadsheetFormatError("File name was not provided")

    repository = ImportRunRepository(session)
    _cancel_expired(repository, store)
    run = repository.create(
        ImportRun(
            id=None,
            file_name=filename,
            operator_id=operator_id,
            status=IMPORT_STATUS_PENDING_REVIEW,
            total_rows=0,
            error_rows=0,
            success_count=0,
            failed_count=0,
            created_at=now_in_app_timezone(),
            finished_at=None,
        )
    )

    try:
        rows = parse_meal_spreadsheet(file_bytes, filename)
    except SpreadsheetFormatError:
        _finish_run(repository, run, IMPORT_STATUS_FAILED)
        raise

    errors = validate_meal_rows(rows)
    if errors:
        error_rows = len({error.row for error in errors})
        logger.info(
            "Rejected %s from operator %s: %s errors in %s of %s rows",
            filename,
            operator_id,
            len(errors),
            error_rows,
            len(rows),
        )
        run = _finish_run(
            repository,
            run,
            IMPORT_STATUS_REJECTED,
            total_rows=len(rows),
            error_rows=error_rows,
        )
        return UploadOutcome(run=run, total_rows=len(rows), errors=errors)

    records = transform_meal_rows(rows, cost_model)
    run = repository.update(replace(run, total_rows=len(records)))
    state = PipelineState(
        batch_id=uuid4().hex,
        operator_id=operator_id,
        file_name=filename,
        records=tuple(records),
        import_run_id=run.id,
        created_at=now_in_app_timezone(),
    )
    previous = store.stage(state)
    if previous is not None:
        logger.info(
            "Batch %s replaced pending batch %s for operator %s",
            state.batch_id,
            previous.batch_id,
            operator_id,
        )
        _cancel_run(repository, previous.import_run_id)

    return UploadOutcome(run=run, total_rows=len(records), state=state)


def _cancel_run(repository: ImportRunRepository, run_id: int | None) -> ImportRun | None:
    if run_id is None:
        return None
    run = repository.get(run_id)
    if run is None or run.status != IMPORT_STATUS_PENDING_REVIEW:
        return run
    return _finish_run(repository, run, IMPORT_STATUS_CANCELLED)


def _cancel_expired(
    repository: ImportRunRepository, store: PendingBatchStore
) -> list[ImportRun]:
    cancelled = []
    for state in store.drain_expired():
        logger.info(
            "Batch %s of operator %s expired before it was confirmed",
            state.batch_id,
            state.operator_id,
        )
        run = _cancel_run(repository, state.import_run_id)
        if run is not None:
            cancelled.append(run)
    return cancelled


def expire_pending_batches(session: Session, store: PendingBatchStore) -> list[ImportRun]:
    """Mark the runs of batches that timed out in review as cancelled."""

    return _cancel_expired(ImportRunRepository(session), store)


def _ensure_operator(state: PipelineState, operator_id: str | None) -> None:
    if operator_id is not None and state.operator_id != operator_id:
        raise PermissionError("This batch belongs to another operator")


def get_pending_batch(
    session: Session,
    store: PendingBatchStore,
    *,
    batch_id: str,
    operator_id: str | None = None,
) -> PipelineState:
    expire_pending_batches(session, store)
    state = store.get(batch_id)
    _ensure_operator(state, operator_id)
    return state


async def confirm_meal_batch(
    session: Session,
    store: PendingBatchStore,
    client: MealsApiClient,
    *,
    batch_id: str,
    operator_id: str | None = None,
) -> UploadResult:
    """Submit a staged batch exactly once and record the outcome.

    Database work runs in a worker thread so the event loop only waits on the
    catalogue request.
    """

    await to_thread.run_sync(partial(expire_pending_batches, session, store))
    _ensure_operator(store.get(batch_id), operator_id)
    state = store.take(batch_id)

    result = await submit_meal_batch(state.records, client)

    if result.failed_count == 0:
        status = IMPORT_STATUS_COMPLETED
    elif result.success_count == 0:
        status = IMPORT_STATUS_FAILED
    else:
        status = IMPORT_STATUS_COMPLETED_WITH_ERRORS

    if state.import_run_id is not None:
        await to_thread.run_sync(
            partial(_record_submission, session, state.import_run_id, status, result)
        )
    return result


def _record_submission(
    session: Session, run_id: int, status: str, result: UploadResult
) -> ImportRun | None:
    repository = ImportRunRepository(session)
    run = repository.get(run_id)
    if run is None:
        return None
    return _finish_run(
        repository,
        run,
        status,
        success_count=result.success_count,
        failed_count=result.failed_count,
        error_rows=len({error.row for error in result.errors}),
    )


def cancel_meal_batch(
    session: Session,
    store: PendingBatchStore,
    *,
    batch_id: str,
    operator_id: str | None = None,
) -> ImportRun | None:
    """Drop a staged batch without submitting anything."""

    expire_pending_batches(session, store)
    _ensure_operator(store.get(batch_id), operator_id)
    state = store.discard(batch_id)
    logger.info("Batch %s cancelled by operator %s", batch_id, state.operator_id)
    return _cancel_run(ImportRunRepository(session), state.import_run_id)


def list_import_runs(
    session: Session,
    store: PendingBatchStore | None = None,
    *,
    operator_id: str | None = None,
    status: str | None = None,
    skip: int = 0,
    limit: int | None = 100,
) -> Sequence[ImportRun]:
    if store is not None:
        expire_pending_batches(session, store)
    return ImportRunRepository(session).list(
        operator_id=operator_id, status=status, skip=skip, limit=limit
    )


def get_import_run(
    session: Session, store: PendingBatchStore | None = None, *, run_id: int
) -> ImportRun:
    if store is not None:
        expire_pending_batches(session, store)
    run = ImportRunRepository(session).get(run_id)
    if run is None:
        raise ValueError("Import run not found")
    return run


__all__ = [
    "UploadOutcome",
    "cancel_meal_batch",
    "confirm_meal_batch",
    "expire_pending_batches",
    "get_import_run",
    "get_pending_batch",
    "list_import_runs",
    "upload_meal_spreadsheet",
]
