#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Bounded-memory dictionary lookup service."""

from .buckets import bucket_of
from .cache import RecencyCache
from .engine import NOT_FOUND, LookupEngine, PrefixResult, build_engine
from .errors import IOFailure, LookupFault, ParseFailure
from .shards import ShardStore
from .stream import StreamingScanner

__all__ = [
    "bucket_of", "RecencyCache", "ShardStore", "StreamingScanner",
    "LookupEngine", "PrefixResult", "build_engine", "NOT_FOUND",
    "LookupFault", "IOFailure", "ParseFailure",
]
