import asyncio
import pathlib
import sys
import threading
from datetime import timedelta

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.application.use_cases.meal_imports import (
    PendingBatchNotFoundError,
    confirm_meal_batch,
    get_import_run,
    get_pending_batch,
    list_import_runs,
    upload_meal_spreadsheet,
)
from app.infrastructure import models  # noqa: F401
from app.infrastructure.database import Base
from app.infrastructure.meals_api import MealsApiClient
from app.infrastructure.pending_batches import PendingBatchStore
from app.infrastructure.repositories import ImportRunRepository
from app.utils import now_in_app_timezone

CONTENT = (
    "Meal Name,Ingredients (₦),Packaging (₦),Delivery (₦),Platform Fee (₦),Preparation Time (mins)\n"
    "Jollof Rice,2000,150,300,200,60\n"
    "Fruit Salad,1200,150,400,150,15\n"
).encode("utf-8")


@pytest.fixture()
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


def _upload(session, store):
    return upload_meal_spreadsheet(
        session,
        store,
        file_bytes=CONTENT,
        filename="meals.csv",
        operator_id="ada",
    )


def test_expired_batch_run_is_cancelled(session) -> None:
    offset = {"delta": timedelta(0)}
    store = PendingBatchStore(
        ttl=timedelta(minutes=30),
        clock=lambda: now_in_app_timezone() + offset["delta"],
    )
    outcome = _upload(session, store)

    offset["delta"] = timedelta(hours=2)
    with pytest.raises(PendingBatchNotFoundError):
        store.get(outcome.state.batch_id)

    runs = list_import_runs(session, store)
    assert [run.status for run in runs] == ["Cancelled"]
    assert runs[0].finished_at is not None


def test_expiry_is_recorded_before_a_late_review(session) -> None:
    offset = {"delta": timedelta(0)}
    store = PendingBatchStore(
        ttl=timedelta(minutes=30),
        clock=lambda: now_in_app_timezone() + offset["delta"],
    )
    outcome = _upload(session, store)

    offset["delta"] = timedelta(minutes=31)
    with pytest.raises(PendingBatchNotFoundError):
        get_pending_batch(session, store, batch_id=outcome.state.batch_id, operator_id="ada")

    run = get_import_run(session, run_id=outcome.run.id)
    assert run.status == "Cancelled"


def test_confirm_writes_the_run_outside_the_event_loop(session, monkeypatch) -> None:
    store = PendingBatchStore()
    outcome = _upload(session, store)
    threads = {}

    def handler(request: httpx.Request) -> httpx.Response:
        threads["loop"] = threading.get_ident()
        return httpx.Response(
            201, json={"summary": {"created": 2, "failed": 0}, "created": [{}, {}], "errors": []}
        )

    original_update = ImportRunRepository.update

    def recording_update(self, run):
        threads["update"] = threading.get_ident()
        return original_update(self, run)

    monkeypatch.setattr(ImportRunRepository, "update", recording_update)
    client = MealsApiClient("http://catalogue.test", transport=httpx.MockTransport(handler))

    result = asyncio.run(
        confirm_meal_batch(
            session, store, client, batch_id=outcome.state.batch_id, operator_id="ada"
        )
    )

    assert result.success
    assert threads["update"] != threads["loop"]
    run = get_import_run(session, run_id=outcome.run.id)
    assert (run.status, run.success_count, run.failed_count) == ("Completed", 2, 0)


def test_unusable_catalogue_response_marks_the_run_failed(session) -> None:
    store = PendingBatchStore()
    outcome = _upload(session, store)
    client = MealsApiClient(
        "http://catalogue.test",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(
                200, json={"success": False, "message": "Meals array is required"}
            )
        ),
    )

    result = asyncio.run(
        confirm_meal_batch(session, store, client, batch_id=outcome.state.batch_id)
    )

    assert result.errors[0].message == "Meals array is required"
    run = get_import_run(session, run_id=outcome.run.id)
    assert (run.status, run.success_count, run.failed_count) == ("Failed", 0, 2)
