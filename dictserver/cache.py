#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tiny LRU cache to avoid re-reading on repeated hits.

- `get` refreshes recency (a read moves the key to the most-recent end).
- `put` on an existing key replaces the value and refreshes recency.
- When a new key pushes size past capacity, exactly one entry is evicted:
  the least recently used (strict insertion/access order).
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any


class RecencyCache:
    """Fixed-capacity key -> entry cache with LRU eviction."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("cache capacity must be >= 1")
        self.capacity = capacity
        self._data: "OrderedDict[str, Any]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            self._data.move_to_end(key)
            return self._data[key]

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
            self._data[key] = value
            if len(self._data) > self.capacity:
                self._data.popitem(last=False)

    def __contains__(self, key: str) -> bool:
        # Membership check only; does not touch recency.
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def keys(self):
        """Keys from least to most recently used (snapshot)."""
        with self._lock:
            return list(self._data.keys())
