from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from app.config import Settings


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware.

    Action links are plain GETs from an email client, so only the JSON API
    needs credentialed CORS.
    """
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-User-Id", "X-Role", "X-Company-Id"],
    )
