"""FastAPI dependency utilities."""

from datetime import timedelta
from functools import lru_cache

from fastapi import Header

from app.application.use_cases.meal_imports import CostModel
from app.config import get_settings
from app.infrastructure.meals_api import MealsApiClient
from app.infrastructure.pending_batches import PendingBatchStore

DEFAULT_OPERATOR_ID = "default"


@lru_cache
def get_pending_batch_store() -> PendingBatchStore:
    """Return the process-wide store of batches awaiting confirmation."""

    settings = get_settings()
    return PendingBatchStore(ttl=timedelta(minutes=settings.review_ttl_minutes))


def get_meals_api_client() -> MealsApiClient:
    return MealsApiClient.from_settings(get_settings())


def get_cost_model() -> CostModel:
    return CostModel.from_settings(get_settings())


def get_operator_id(
    x_operator_id: str | None = Header(default=None, alias="X-Operator-Id"),
) -> str:
    """Identify the operator from the ``X-Operator-Id`` header.

    Authentication happens upstream; the header only scopes pending batches
    and import history.
    """

    operator_id = (x_operator_id or "").strip()
    return operator_id or DEFAULT_OPERATOR_ID
