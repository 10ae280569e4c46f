# src/contextscore/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and mounts the API router.
Business logic lives in `contextscore.api.routes` and `contextscore.recommender`.
"""

from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from contextscore import __version__
from contextscore.config.settings import get_settings
from contextscore.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title=f"{get_settings().app.name} API", version=__version__)

# CORS (dev-friendly): allow a local frontend to call this API.
# Configure via env:
# - CONTEXTSCORE_CORS_ORIGINS="http://localhost:3000,http://127.0.0.1:3000"
cors_origins = [s.strip() for s in os.getenv("CONTEXTSCORE_CORS_ORIGINS", "").split(",") if s.strip()]
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(router)
