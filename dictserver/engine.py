#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Lookup engine: cache first, then one of two strategies chosen at startup.

- sharded   : a readable manifest exists -> route key to its bucket and read
              that bucket's shard (loaded once, kept for the process lifetime)
- streaming : no manifest -> scan the monolithic dictionary incrementally

The mode never changes after `build_engine()`; there is no hot reload.

Exact lookups go through the RecencyCache and populate it on a hit.
Prefix search bypasses the cache (different result shape).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

import structlog

from .buckets import bucket_of
from .cache import RecencyCache
from .shards import ShardStore, read_manifest
from .stream import MISSING, StreamingScanner

logger = structlog.get_logger()

MODE_SHARDED = "sharded"
MODE_STREAMING = "streaming"


class _NotFound:
    """Falsy marker for "no such key" (a JSON null entry is a real value)."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


@dataclass
class PrefixResult:
    matches: List[str] = field(default_factory=list)
    truncated: bool = False


class ShardedStrategy:
    mode = MODE_SHARDED

    def __init__(self, store: ShardStore, manifest: Any):
        self.store = store
        self.manifest = manifest

    async def find(self, key: str) -> Any:
        shard = await self.store.load(bucket_of(key))
        return shard.get(key, MISSING)

    async def prefix(self, query: str, limit: int) -> PrefixResult:
        shard = await self.store.load(bucket_of(query))
        out: List[str] = []
        for key in shard:  # shard file order
            if key.startswith(query):
                out.append(key)
                if len(out) >= limit:
                    return PrefixResult(out, True)
        return PrefixResult(out, False)


class StreamingStrategy:
    mode = MODE_STREAMING
    manifest = None

    def __init__(self, scanner: StreamingScanner):
        self.scanner = scanner

    async def find(self, key: str) -> Any:
        return await self.scanner.find(key)

    async def prefix(self, query: str, limit: int) -> PrefixResult:
        matches, truncated = await self.scanner.prefix(query, limit)
        return PrefixResult(matches, truncated)


class LookupEngine:
    """Orchestrates cache -> strategy. Faults from the strategy propagate."""

    def __init__(self, strategy, cache: RecencyCache,
                 limit_default: int = 50, limit_max: int = 200):
        self.strategy = strategy
        self.cache = cache
        self.limit_default = limit_default
        self.limit_max = limit_max

    @property
    def mode(self) -> str:
        return self.strategy.mode

    @property
    def manifest(self) -> Any:
        return self.strategy.manifest

    async def lookup_exact(self, key: str) -> Any:
        """Entry for `key`, or NOT_FOUND. Raises LookupFault on read/parse errors."""
        cached = self.cache.get(key, MISSING)
        if cached is not MISSING:
            return cached

        entry = await self.strategy.find(key)
        if entry is MISSING:
            return NOT_FOUND
        self.cache.put(key, entry)
        return entry

    async def lookup_prefix(self, query: str, limit: Optional[int] = None) -> PrefixResult:
        """Keys starting with `query` (source order), at most `limit` of them."""
        if limit is None:
            limit = self.limit_default
        limit = max(1, min(int(limit), self.limit_max))
        return await self.strategy.prefix(query, limit)


def build_engine(dict_path: str, shards_root: str, manifest_path: str,
                 cache_limit: int = 200, chunk_size: int = 64 * 1024,
                 limit_default: int = 50, limit_max: int = 200) -> LookupEngine:
    """
    Probe the manifest once and build the engine for the selected mode.
    """
    manifest = read_manifest(manifest_path)
    if manifest is not None:
        strategy = ShardedStrategy(ShardStore(shards_root), manifest)
    else:
        strategy = StreamingStrategy(StreamingScanner(dict_path, chunk_size=chunk_size))

    logger.info("engine_mode_selected", mode=strategy.mode, dict_path=dict_path,
                shards_root=shards_root, manifest_path=manifest_path, cache_limit=cache_limit)
    return LookupEngine(strategy, RecencyCache(cache_limit),
                        limit_default=limit_default, limit_max=limit_max)
