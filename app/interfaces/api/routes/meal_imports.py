"""API routes for the bulk meal import flow."""

import logging

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Query,
    Response,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.application.use_cases.meal_imports import (
    TEMPLATE_FILENAME,
    CostModel,
    PendingBatchNotFoundError,
    SpreadsheetFormatError,
    build_meal_template,
    cancel_meal_batch as cancel_meal_batch_uc,
    confirm_meal_batch as confirm_meal_batch_uc,
    get_import_run as get_import_run_uc,
    get_pending_batch as get_pending_batch_uc,
    list_import_runs as list_import_runs_uc,
    summarize_batch,
    upload_meal_spreadsheet as upload_meal_spreadsheet_uc,
)
from app.infrastructure.database import get_db
from app.infrastructure.meals_api import MealsApiClient
from app.infrastructure.pending_batches import PendingBatchStore
from app.infrastructure.template_files import EXCEL_CONTENT_TYPE
from app.interfaces.api.dependencies import (
    get_cost_model,
    get_meals_api_client,
    get_operator_id,
    get_pending_batch_store,
)
from app.interfaces.api.schemas import (
    ImportRejectedResponse,
    ImportRunRead,
    PendingBatchRead,
    RowErrorRead,
    UploadResultRead,
)

router = APIRouter(prefix="/meals/imports", tags=["meal imports"])
logger = logging.getLogger(__name__)


@router.get("/template")
def download_meal_template() -> Response:
    """Return the spreadsheet template operators fill in."""

    return Response(
        content=build_meal_template(),
        media_type=EXCEL_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'},
    )


@router.post(
    "",
    response_model=PendingBatchRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ImportRejectedResponse},
    },
)
def upload_meal_spreadsheet(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    store: PendingBatchStore = Depends(get_pending_batch_store),
    cost_model: CostModel = Depends(get_cost_model),
    operator_id: str = Depends(get_operator_id),
):
    """Validate an uploaded sheet and stage it for review.

    A sheet with any invalid row is rejected as a whole with every error
    listed, so the operator can fix the file in one pass.
    """

    try:
        file_bytes = file.file.read()
    finally:
        file.file.seek(0)

    try:
        outcome = upload_meal_spreadsheet_uc(
            db,
            store,
            file_bytes=file_bytes,
            filename=file.filename or "",
            operator_id=operator_id,
            cost_model=cost_model,
        )
    except SpreadsheetFormatError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if outcome.state is None:
        rejection = ImportRejectedResponse(
            import_run_id=outcome.run.id,
            total_rows=outcome.total_rows,
            errors=[RowErrorRead.from_error(error) for error in outcome.errors],
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=rejection.model_dump(mode="json", by_alias=True),
        )

    return PendingBatchRead.from_summary(summarize_batch(outcome.state))


@router.get("/pending/{batch_id}", response_model=PendingBatchRead)
def read_pending_batch(
    batch_id: str,
    db: Session = Depends(get_db),
    store: PendingBatchStore = Depends(get_pending_batch_store),
    operator_id: str = Depends(get_operator_id),
) -> PendingBatchRead:
    try:
        state = get_pending_batch_uc(
            db, store, batch_id=batch_id, operator_id=operator_id
        )
    except PendingBatchNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return PendingBatchRead.from_summary(summarize_batch(state))


@router.post("/pending/{batch_id}/confirm", response_model=UploadResultRead)
async def confirm_pending_batch(
    batch_id: str,
    db: Session = Depends(get_db),
    store: PendingBatchStore = Depends(get_pending_batch_store),
    client: MealsApiClient = Depends(get_meals_api_client),
    operator_id: str = Depends(get_operator_id),
) -> UploadResultRead:
    """Submit a reviewed batch to the catalogue in a single request."""

    try:
        result = await confirm_meal_batch_uc(
            db, store, client, batch_id=batch_id, operator_id=operator_id
        )
    except PendingBatchNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return UploadResultRead.from_result(result)


@router.delete("/pending/{batch_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_pending_batch(
    batch_id: str,
    db: Session = Depends(get_db),
    store: PendingBatchStore = Depends(get_pending_batch_store),
    operator_id: str = Depends(get_operator_id),
) -> Response:
    try:
        cancel_meal_batch_uc(db, store, batch_id=batch_id, operator_id=operator_id)
    except PendingBatchNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/runs", response_model=list[ImportRunRead])
def list_import_runs(
    mine: bool = Query(False, description="Only return runs of the calling operator"),
    status_filter: str | None = Query(default=None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    db: Session = Depends(get_db),
    store: PendingBatchStore = Depends(get_pending_batch_store),
    operator_id: str = Depends(get_operator_id),
) -> list[ImportRunRead]:
    runs = list_import_runs_uc(
        db,
        store,
        operator_id=operator_id if mine else None,
        status=status_filter,
        skip=skip,
        limit=limit,
    )
    return [ImportRunRead.model_validate(run) for run in runs]


@router.get("/runs/{run_id}", response_model=ImportRunRead)
def read_import_run(
    run_id: int,
    db: Session = Depends(get_db),
    store: PendingBatchStore = Depends(get_pending_batch_store),
) -> ImportRunRead:
    try:
        run = get_import_run_uc(db, store, run_id=run_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ImportRunRead.model_validate(run)
