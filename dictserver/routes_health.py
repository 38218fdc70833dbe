#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""GET /health and GET /manifest."""

from fastapi import APIRouter, HTTPException, Request

from .engine import MODE_SHARDED
from .models import HealthOut

router = APIRouter()


@router.get("/health", response_model=HealthOut)
async def health(request: Request):
    engine = request.app.state.engine
    store = getattr(engine.strategy, "store", None)
    return {
        "ok": True,
        "mode": engine.mode,
        "dict_path": request.app.state.dict_path,
        "shards_root": request.app.state.shards_root,
        "cache_size": len(engine.cache),
        "cache_limit": engine.cache.capacity,
        "shards_loaded": len(store.loaded_buckets()) if store else 0,
    }


@router.get("/manifest")
async def manifest(request: Request):
    """Manifest content verbatim (sharded mode only)."""
    engine = request.app.state.engine
    if engine.mode != MODE_SHARDED:
        raise HTTPException(status_code=404, detail="No manifest (streaming mode)")
    return engine.manifest
