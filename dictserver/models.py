#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Pydantic response models for the API."""

from typing import List

from pydantic import BaseModel


class SearchOut(BaseModel):
    matches: List[str]
    truncated: bool


class HealthOut(BaseModel):
    ok: bool
    mode: str
    dict_path: str
    shards_root: str
    cache_size: int
    cache_limit: int
    shards_loaded: int


class ErrorOut(BaseModel):
    error: str
    detail: str
