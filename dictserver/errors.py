#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Fault taxonomy for lookups.

A key that is not in the dataset is NOT an error: lookups return the
NOT_FOUND sentinel (None is a valid entry).
Missing shard files are recovered inside the shard store and never reach
this module. Everything here is a real failure the caller must see.
"""

from __future__ import annotations


class LookupFault(Exception):
    """Umbrella for failures while reading the dataset."""

    kind = "fault"

    def __init__(self, source: str, cause: object):
        self.source = source
        self.cause = cause
        super().__init__(f"{source}: {cause}")


class IOFailure(LookupFault):
    """Source or shard exists but could not be read."""

    kind = "io"


class ParseFailure(LookupFault):
    """Source or shard content is not valid JSON of the expected shape."""

    kind = "parse"
