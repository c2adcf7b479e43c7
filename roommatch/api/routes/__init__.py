from fastapi import FastAPI

from . import health, matches, preferences, questionnaire


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(questionnaire.router)
    app.include_router(preferences.router)
    app.include_router(matches.router)
