#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI application assembly.

- Creates the ASGI `app`
- CORS for a static UI
- Startup (lifespan):
    * configure logging
    * probe the manifest and build the lookup engine once (mode is fixed
      for the process lifetime)
- Maps LookupFault to HTTP 500 with a diagnosable detail
- Mounts route groups: /health, /manifest, /word/{key}, /search
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import (
    CACHE_LIMIT, CORS_ORIGINS, DICT_PATH, MANIFEST_PATH, READ_CHUNK_SIZE,
    SEARCH_LIMIT_DEFAULT, SEARCH_LIMIT_MAX, SHARDS_ROOT,
)
from .engine import LookupEngine, build_engine
from .errors import LookupFault
from .logging_config import configure_logging

from .routes_health import router as health_router
from .routes_search import router as search_router
from .routes_word   import router as word_router

logger = structlog.get_logger()


def create_app(engine: Optional[LookupEngine] = None,
               dict_path: str = DICT_PATH, shards_root: str = SHARDS_ROOT,
               manifest_path: str = MANIFEST_PATH) -> FastAPI:
    """
    Build the app. Pass a prebuilt `engine` to skip the startup probe
    (tests do this); otherwise one is built from config on startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if engine is None:
            configure_logging()
            app.state.engine = build_engine(
                dict_path, shards_root, manifest_path,
                cache_limit=CACHE_LIMIT,
                chunk_size=READ_CHUNK_SIZE,
                limit_default=SEARCH_LIMIT_DEFAULT,
                limit_max=SEARCH_LIMIT_MAX,
            )
        yield

    app = FastAPI(title="Dictionary Lookup API", version="1.0.0", lifespan=lifespan)
    app.state.engine = engine
    app.state.dict_path = dict_path
    app.state.shards_root = shards_root

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LookupFault)
    async def _lookup_fault(request: Request, exc: LookupFault):
        logger.error("lookup_fault", path=request.url.path, kind=exc.kind, source=exc.source, error=str(exc.cause))
        return JSONResponse(status_code=500, content={"error": "Server error", "detail": str(exc)})

    app.include_router(health_router)
    app.include_router(word_router)
    app.include_router(search_router)
    return app


app = create_app()
