"""Schemas exposed by the bulk meal import endpoints."""

from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from app.application.use_cases.meal_imports import BatchSummary
from app.domain.entities import UploadResult, ValidationError


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class RowErrorRead(_CamelModel):
    row: int
    field: str
    message: str
    value: Any = None

    @classmethod
    def from_error(cls, error: ValidationError) -> "RowErrorRead":
        return cls(
            row=error.row,
            field=error.field,
            message=error.message,
            value=_json_safe(error.value),
        )


class ImportRejectedResponse(_CamelModel):
    status: Literal["rejected"] = "rejected"
    import_run_id: int | None = None
    total_rows: int
    errors: list[RowErrorRead]


class BatchRowRead(_CamelModel):
    client_ref: str
    row: int
    name: str
    category: str
    complexity_level: str
    cooking_costs: Decimal
    total_price: Decimal
    chef_earnings: Decimal
    platform_earnings: Decimal

    @field_serializer(
        "cooking_costs", "total_price", "chef_earnings", "platform_earnings"
    )
    def _serialize_money(self, value: Decimal) -> float:
        return float(value)


class PendingBatchRead(_CamelModel):
    status: Literal["pending_review"] = "pending_review"
    batch_id: str
    file_name: str
    import_run_id: int | None
    total_rows: int
    rows: list[BatchRowRead]
    total_price: Decimal
    chef_earnings: Decimal
    platform_earnings: Decimal

    @field_serializer("total_price", "chef_earnings", "platform_earnings")
    def _serialize_money(self, value: Decimal) -> float:
        return float(value)

    @classmethod
    def from_summary(cls, summary: BatchSummary) -> "PendingBatchRead":
        return cls.model_validate(summary)


class UploadResultRead(_CamelModel):
    success: bool
    partial: bool
    total_rows: int
    success_count: int
    failed_count: int
    errors: list[RowErrorRead]

    @classmethod
    def from_result(cls, result: UploadResult) -> "UploadResultRead":
        return cls(
            success=result.success,
            partial=result.partial,
            total_rows=result.total_rows,
            success_count=result.success_count,
            failed_count=result.failed_count,
            errors=[RowErrorRead.from_error(error) for error in result.errors],
        )


class ImportRunRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
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
    "BatchRowRead",
    "ImportRejectedResponse",
    "ImportRunRead",
    "PendingBatchRead",
    "RowErrorRead",
    "UploadResultRead",
]
