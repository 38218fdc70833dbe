#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Per-bucket shard loading.

Layout (produced offline by scripts/shard_dictionary.py):
    SHARDS_ROOT/<bucket>.json   -> {"<word>": <entry>, ...}
    SHARDS_ROOT/_meta.json      -> manifest (presence enables sharded mode)

- Each shard is read at most once per process and kept for its lifetime.
- Concurrent requests for a bucket that is still loading await the same
  in-flight task (single-flight) instead of reading the file again.
- A missing shard file is an empty shard, not an error.
"""

from __future__ import annotations

import asyncio
import json
import os
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiofiles
import structlog

from .buckets import shard_filename
from .errors import IOFailure, ParseFailure

logger = structlog.get_logger()

Shard = Dict[str, Any]
Reader = Callable[[str], Awaitable[bytes]]


async def read_bytes(path: str) -> bytes:
    async with aiofiles.open(path, mode="rb") as f:
        return await f.read()


def read_manifest(path: str) -> Optional[Any]:
    """
    Return the parsed manifest, or None if it is missing or unreadable.
    Content is passed through as-is; only "parses as JSON" is checked.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning("manifest_unreadable", path=path, error=str(e))
        return None


def _loads_first_wins(raw: bytes) -> Any:
    """
    json.loads, except that duplicate top-level keys keep their first value
    (the streaming scan stops at the first occurrence). Nested objects keep
    json.loads behaviour.
    """
    last_pairs: List[list] = []

    def hook(pairs):
        last_pairs[:] = [pairs]
        return dict(pairs)

    data = json.loads(raw, object_pairs_hook=hook)
    if isinstance(data, dict):
        # the outermost object completes last
        first: Dict[str, Any] = {}
        for k, v in last_pairs[0]:
            first.setdefault(k, v)
        return first
    return data


class ShardStore:
    """Lazily loads and memoizes shards keyed by bucket id."""

    def __init__(self, root: str, reader: Optional[Reader] = None):
        self.root = root
        self._reader = reader or read_bytes
        self._shards: Dict[str, Shard] = {}
        self._pending: Dict[str, "asyncio.Task[Shard]"] = {}

    def path_for(self, bucket: str) -> str:
        return os.path.join(self.root, shard_filename(bucket))

    def loaded_buckets(self) -> List[str]:
        return sorted(self._shards)

    async def load(self, bucket: str) -> Shard:
        shard = self._shards.get(bucket)
        if shard is not None:
            return shard

        task = self._pending.get(bucket)
        if task is None:
            task = asyncio.ensure_future(self._load(bucket))
            self._pending[bucket] = task
        # shield: one cancelled caller must not cancel the load for the others
        return await asyncio.shield(task)

    async def _load(self, bucket: str) -> Shard:
        path = self.path_for(bucket)
        try:
            shard = await self._read(path)
        finally:
            # On failure the bucket becomes loadable again by a later request.
            self._pending.pop(bucket, None)
        self._shards[bucket] = shard
        logger.info("shard_loaded", bucket=bucket, entries=len(shard))
        return shard

    async def _read(self, path: str) -> Shard:
        try:
            raw = await self._reader(path)
        except FileNotFoundError:
            logger.debug("shard_missing", path=path)
            return {}
        except OSError as e:
            logger.error("shard_load_failed", path=path, error=str(e))
            raise IOFailure(path, e) from e

        try:
            data = _loads_first_wins(raw)
        except ValueError as e:
            logger.error("shard_load_failed", path=path, error=str(e))
            raise ParseFailure(path, e) from e
        if not isinstance(data, dict):
            raise ParseFailure(path, f"expected a JSON object, got {type(data).__name__}")
        return data
