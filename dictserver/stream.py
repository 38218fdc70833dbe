#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Streaming lookups over the monolithic dictionary (no full-file load).

The source is one big JSON object {"<word>": <entry>, ...}. We read it in
fixed-size chunks and rebuild top-level (key, value) members one at a time
from ijson parse events, so only the current member is ever held in memory.
A top level that is not an object is a ParseFailure, same as for a shard.

- scan(pred)           -> async generator of matching members, file order
- find(key)            -> stop at the first exact match (cost ~ position of key)
- prefix(q, limit)     -> collect keys in file order until `limit` is reached

Duplicate keys: scan() yields every occurrence; find() and prefix() keep the
first one.
Closing the scan generator closes the file, including on early exit.
Any read or parse error aborts the scan as IOFailure / ParseFailure.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable, List, Set, Tuple

import aiofiles
import ijson
import structlog

from .errors import IOFailure, ParseFailure

logger = structlog.get_logger()

MISSING = object()


class StreamingScanner:
    """Incremental scanner over a single large JSON object file."""

    def __init__(self, path: str, chunk_size: int = 64 * 1024,
                 opener: Callable[..., Any] = aiofiles.open):
        self.path = path
        self.chunk_size = chunk_size
        self._open = opener

    async def _members(self, f) -> AsyncIterator[Tuple[str, Any]]:
        started = False
        key = None
        builder = None
        depth = 0
        # use_float: same value types as json.loads on a shard file
        async for _, event, value in ijson.parse_async(f, buf_size=self.chunk_size, use_float=True):
            if not started:
                if event != "start_map":
                    raise ParseFailure(self.path, f"expected a JSON object, got {event}")
                started = True
            elif builder is None:
                # map_key of the next member, or end_map of the top-level object
                if event == "map_key":
                    key, builder, depth = value, ijson.ObjectBuilder(), 0
            else:
                builder.event(event, value)
                if event in ("start_map", "start_array"):
                    depth += 1
                elif event in ("end_map", "end_array"):
                    depth -= 1
                if depth == 0:
                    yield key, builder.value
                    builder = None

    async def scan(self, predicate: Callable[[str], bool]) -> AsyncIterator[Tuple[str, Any]]:
        """
        Lazily yield (key, entry) members whose key satisfies `predicate`, in
        file order. Callers that stop early must `aclose()` the generator.
        """
        logger.debug("scan_started", path=self.path)
        try:
            async with self._open(self.path, mode="rb") as f:
                members = self._members(f)
                try:
                    async for key, value in members:
                        if predicate(key):
                            yield key, value
                finally:
                    await members.aclose()
        except ParseFailure as e:
            logger.error("scan_failed", path=self.path, error=str(e.cause))
            raise
        except (ijson.JSONError, ValueError) as e:
            logger.error("scan_failed", path=self.path, error=str(e))
            raise ParseFailure(self.path, e) from e
        except OSError as e:
            logger.error("scan_failed", path=self.path, error=str(e))
            raise IOFailure(self.path, e) from e

    async def find(self, wanted: str) -> Any:
        """Entry for `wanted`, or MISSING if the whole source has no such key."""
        matches = self.scan(lambda k: k == wanted)
        try:
            async for _, value in matches:
                logger.debug("scan_hit", path=self.path, key=wanted)
                return value
        finally:
            await matches.aclose()
        logger.debug("scan_miss", path=self.path, key=wanted)
        return MISSING

    async def prefix(self, query: str, limit: int) -> Tuple[List[str], bool]:
        """Keys starting with `query` in file order, and whether `limit` was hit."""
        keys: List[str] = []
        seen: Set[str] = set()
        matches = self.scan(lambda k: k.startswith(query) and k not in seen)
        try:
            async for key, _ in matches:
                seen.add(key)
                keys.append(key)
                if 0 < limit <= len(keys):
                    return keys, True
        finally:
            await matches.aclose()
        return keys, False
