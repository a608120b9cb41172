"""
FastAPI application entry point for the Q&A backend.
"""

from __future__ import annotations

from fastapi import FastAPI

from qna.config import get_settings
from qna.routes import router

DESCRIPTION = (
    "Questions with tags and threaded answers. The question list is "
    "searched by title, filtered by tag and paginated newest first."
)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Audit Q&A Backend",
        description=DESCRIPTION,
        version="0.1.0",
    )
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
