#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Static configuration (override with environment variables).
"""

import os

ROOT          = os.path.abspath(os.getenv("PROJECT_ROOT", os.getcwd()))
DICT_PATH     = os.path.abspath(os.getenv("DICT_PATH",     os.path.join(ROOT, "dictionary.json")))
SHARDS_ROOT   = os.path.abspath(os.getenv("SHARDS_ROOT",   os.path.join(ROOT, "shards")))
MANIFEST_PATH = os.path.abspath(os.getenv("MANIFEST_PATH", os.path.join(SHARDS_ROOT, "_meta.json")))

CACHE_LIMIT          = int(os.getenv("CACHE_LIMIT", "200"))
SEARCH_LIMIT_DEFAULT = int(os.getenv("SEARCH_LIMIT_DEFAULT", "50"))
SEARCH_LIMIT_MAX     = int(os.getenv("SEARCH_LIMIT_MAX", "200"))
READ_CHUNK_SIZE      = int(os.getenv("READ_CHUNK_SIZE", str(64 * 1024)))  # 64KB chunks

PORT       = int(os.getenv("PORT", "3000"))
LOG_LEVEL  = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "console")  # "json" or "console"

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
