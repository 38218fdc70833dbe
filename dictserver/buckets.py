#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Bucket routing: which shard holds a key.

The offline splitter (scripts/shard_dictionary.py) uses the same functions,
so routing here must stay stable across releases.
"""

from urllib.parse import quote

MISC_BUCKET = "misc"

# Characters that cannot appear verbatim in a file name inside SHARDS_ROOT.
_UNSAFE = ("/", "\\", "\x00", "%")


def bucket_of(key: str) -> str:
    """
    First codepoint of the trimmed key; ASCII letters are lowercased.
    Empty / whitespace-only keys go to the "misc" bucket.
    """
    s = (key or "").strip()
    if not s:
        return MISC_BUCKET
    ch = s[0]
    if ch.isascii() and ch.isalpha():
        return ch.lower()
    return ch


def shard_filename(bucket: str) -> str:
    """File name for a bucket's shard (`<bucket>.json`, escaped if needed)."""
    name = bucket
    if any(c in bucket for c in _UNSAFE):
        name = quote(bucket, safe="")
    return f"{name}.json"
