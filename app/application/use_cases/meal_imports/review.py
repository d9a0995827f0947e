"""Operator facing summary of a transformed batch awaiting confirmation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities import PipelineState


@dataclass(frozen=True)
class BatchRowSummary:
    client_ref: str
    row: int
    name: str
    category: str
    complexity_level: str
    cooking_costs: Decimal
    total_price: Decimal
    chef_earnings: Decimal
    platform_earnings: Decimal


@dataclass(frozen=True)
class BatchSummary:
    """Figures shown to the operator before the batch is submitted."""

    batch_id: str
    file_name: str
    import_run_id: int | None
    total_rows: int
    rows: tuple[BatchRowSummary, ...]
    total_price: Decimal
    chef_earnings: Decimal
    platform_earnings: Decimal


def summarize_batch(state: PipelineState) -> BatchSummary:
    rows = tuple(
        BatchRowSummary(
            client_ref=record.client_ref,
            row=record.row_number,
            name=record.name,
            category=record.category,
            complexity_level=record.complexity_level.value,
            cooking_costs=record.pricing.cooking_costs,
            total_price=record.pricing.total_price,
            chef_earnings=record.pricing.chef_earnings,
            platform_earnings=record.pricing.platform_earnings,
        )
        for record in state.records
    )
    return BatchSummary(
        batch_id=state.batch_id,
        file_name=state.file_name,
        import_run_id=state.import_run_id,
        total_rows=state.total_rows,
        rows=rows,
        total_price=sum((row.total_price for row in rows), Decimal("0")),
        chef_earnings=sum((row.chef_earnings for row in rows), Decimal("0")),
        platform_earnings=sum((row.platform_earnings for row in rows), Decimal("0")),
    )


__all__ = ["BatchRowSummary", "BatchSummary", "summarize_batch"]
