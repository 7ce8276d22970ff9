from fastapi import FastAPI

from . import batch, categories, course_categories, health, insights, ratings


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(insights.router)
    app.include_router(categories.router)
    app.include_router(course_categories.router)
    app.include_router(batch.router)
    app.include_router(ratings.router)
