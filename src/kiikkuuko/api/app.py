# src/kiikkuuko/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and ties the units controller to the app
lifespan: the bundled snapshot is loaded on startup and the network refresh runs in
the background. Handlers live in `kiikkuuko.api.routes`.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from kiikkuuko.core.logging import configure_logging

from . import routes

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    controller = routes.get_controller()
    await controller.start()
    try:
        yield
    finally:
        await controller.stop()


app = FastAPI(title="Kiikkuuko API", version="0.1.0", lifespan=lifespan)

# CORS (dev-friendly): allow a local front end (e.g. http://localhost:5173) to call this API.
# Configure via env:
# - KIIKKUUKO_CORS_ORIGINS="http://localhost:5173,http://127.0.0.1:5173"
# - KIIKKUUKO_CORS_ALLOW_LOCAL=0 to disable the default localhost allowance
cors_origins = [s.strip() for s in os.getenv("KIIKKUUKO_CORS_ORIGINS", "").split(",") if s.strip()]
cors_allow_local = os.getenv("KIIKKUUKO_CORS_ALLOW_LOCAL", "1").strip().lower() in {"1", "true", "yes", "y"}
cors_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if cors_allow_local and not cors_origins else ""
if cors_origins or cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=cors_origin_regex or None,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(routes.router)
