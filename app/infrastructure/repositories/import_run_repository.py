"""Persistence layer for bulk meal import runs."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import ImportRun
from app.infrastructure.models import ImportRunModel
from app.utils import ensure_app_timezone, now_in_app_timezone


class ImportRunRepository:
    """Provide CRUD-style operations for :class:`ImportRun` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(
        self,
        *,
        operator_id: str | None = None,
        status: str | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> Sequence[ImportRun]:
        query = self.session.query(ImportRunModel)
        if operator_id is not None:
            query = query.filter(ImportRunModel.operator_id == operator_id)
        if status is not None:
            query = query.filter(ImportRunModel.status == status)
        query = query.order_by(
            ImportRunModel.created_at.desc(), ImportRunModel.id.desc()
        )
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def get(self, run_id: int) -> ImportRun | None:
        model = self.session.get(ImportRunModel, run_id)
        return self._to_entity(model) if model else None

    def create(self, run: ImportRun) -> ImportRun:
        model = ImportRunModel()
        self._apply_entity_to_model(model, run, include_creation_fields=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, run: ImportRun) -> ImportRun:
        model = self.session.get(ImportRunModel, run.id)
        if model is None:
            msg = f"Import run with id {run.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, run, include_creation_fields=False)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: ImportRunModel) -> ImportRun:
        return ImportRun(
            id=model.id,
            file_name=model.file_name,
            operator_id=model.operator_id,
            status=model.status,
            total_rows=model.total_rows,
            error_rows=model.error_rows,
            success_count=model.success_count,
            failed_count=model.failed_count,
            created_at=ensure_app_timezone(model.created_at),
            finished_at=ensure_app_timezone(model.finished_at),
        )

    @staticmethod
    def _apply_entity_to_model(
        model: ImportRunModel,
        run: ImportRun,
        *,
        include_creation_fields: bool,
    ) -> None:
        model.file_name = run.file_name
        model.operator_id = run.operator_id
        model.status = run.status
        model.total_rows = run.total_rows
        model.error_rows = run.error_rows
        model.success_count = run.success_count
        model.failed_count = run.failed_count
        if include_creation_fields:
            model.created_at = (
                ensure_app_timezone(run.created_at) or now_in_app_timezone()
            )
        model.finished_at = ensure_app_timezone(run.finished_at)


__all__ = ["ImportRunRepository"]
