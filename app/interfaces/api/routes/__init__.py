from fastapi import FastAPI

from .meal_imports import router as meal_imports_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(meal_imports_router)
