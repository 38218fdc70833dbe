import json
import os
from collections import OrderedDict

import pytest

from dictserver.buckets import bucket_of, shard_filename

# Source order matters for prefix results: keep "ca*" keys out of sort order.
WORDS = OrderedDict([
    ("apple", {"pos": "noun", "defs": ["a fruit"]}),
    ("cat", {"pos": "noun", "defs": ["a small feline"], "freq": 0.75}),
    ("Cab", {"pos": "noun", "defs": ["a taxi"]}),
    ("car", {"pos": "noun", "defs": ["a road vehicle"]}),
    ("bat", {"pos": "noun", "defs": ["a flying mammal", "a club"]}),
    ("cactus", {"pos": "noun", "defs": ["a desert plant"]}),
    ("café", {"pos": "noun", "defs": ["a coffee house"]}),
    ("élan", {"pos": "noun", "defs": ["energy and style"]}),
    ("nothing", None),
    ("42", {"pos": "num"}),
])


def write_dictionary(path, words=WORDS):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(words, f, ensure_ascii=False)
    return str(path)


def write_shards(root, words=WORDS, skip=()):
    """Split `words` into per-bucket files + _meta.json (skipping buckets in `skip`)."""
    os.makedirs(root, exist_ok=True)
    buckets = OrderedDict()
    for k, v in words.items():
        buckets.setdefault(bucket_of(k), OrderedDict())[k] = v
    for b, members in buckets.items():
        if b in skip:
            continue
        with open(os.path.join(root, shard_filename(b)), "w", encoding="utf-8") as f:
            json.dump(members, f, ensure_ascii=False)
    manifest = {"keys": len(words), "buckets": {b: len(m) for b, m in buckets.items()}}
    with open(os.path.join(root, "_meta.json"), "w", encoding="utf-8") as f:
        json.dump(manifest, f)
    return str(root)


@pytest.fixture
def dict_path(tmp_path):
    return write_dictionary(tmp_path / "dictionary.json")


@pytest.fixture
def shards_root(tmp_path):
    return write_shards(tmp_path / "shards")


@pytest.fixture
def empty_shards_root(tmp_path):
    root = tmp_path / "no_shards"
    root.mkdir()
    return str(root)
