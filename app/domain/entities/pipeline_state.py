"""State of a meal batch awaiting operator confirmation."""

from dataclasses import dataclass
from datetime import datetime

from .canonical_meal import CanonicalMealRecord


@dataclass(frozen=True)
class PipelineState:
    """Transformed batch held between the review and submission stages."""

    batch_id: str
    operator_id: str
    file_name: str
    records: tuple[CanonicalMealRecord, ...]
    import_run_id: int | None
    created_at: datetime

    @property
    def total_rows(self) -> int:
        return len(self.records)


__all__ = ["PipelineState"]
