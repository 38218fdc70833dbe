#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""GET /word/{key}: return only the requested entry."""

from fastapi import APIRouter, HTTPException, Request

from .engine import NOT_FOUND
from .models import ErrorOut

router = APIRouter()


@router.get("/word/{key:path}", responses={500: {"model": ErrorOut}})
async def word(key: str, request: Request):
    entry = await request.app.state.engine.lookup_exact(key)
    if entry is NOT_FOUND:
        raise HTTPException(status_code=404, detail="Word not found")
    return entry
