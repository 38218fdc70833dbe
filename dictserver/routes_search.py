#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
GET /search?q=<prefix>&limit=<n>

Prefix search over keys. In sharded mode only the query's bucket is
scanned; in streaming mode the whole dictionary is streamed. Matches come
back in source order, not sorted.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from .models import ErrorOut, SearchOut

router = APIRouter()


@router.get("/search", response_model=SearchOut, responses={500: {"model": ErrorOut}})
async def search(request: Request, q: str = "", limit: Optional[int] = Query(None, ge=1)):
    if not q:
        raise HTTPException(status_code=400, detail="Missing ?q=")
    res = await request.app.state.engine.lookup_prefix(q, limit)
    return {"matches": res.matches, "truncated": res.truncated}
