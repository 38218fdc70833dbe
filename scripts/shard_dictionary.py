#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shard a monolithic dictionary JSON into per-bucket files.

INPUT:
  dictionary JSON file with shape:
    {
      "<word1>": <entry>,
      "<word2>": <entry>,
      ...
    }

OUTPUT (to --out):
  - <bucket>.json for every bucket: {"<word>": <entry>, ...} in source order
    (bucket = first character of the word, ASCII letters lowercased; see
    dictserver/buckets.py)
  - _meta.json { "src": <path>, "keys": <count>, "buckets": {<bucket>: <count>} }

The server switches to sharded mode as soon as _meta.json is readable, so it
is written last.

Entries are grouped in memory per bucket before writing; the source itself is
streamed.

Requires: ijson (for streaming monolithic JSON).
"""

import argparse, json, os, sys
from collections import OrderedDict

import ijson

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from dictserver.buckets import bucket_of, shard_filename  # noqa: E402


def split(src: str, out_dir: str) -> dict:
    os.makedirs(out_dir, exist_ok=True)
    buckets = OrderedDict()
    total_keys = 0

    # Stream through the big JSON so the parser never holds the whole file
    with open(src, "rb") as f:
        try:
            for key, entry in ijson.kvitems(f, "", use_float=True):
                # first occurrence wins, as in the server
                buckets.setdefault(bucket_of(key), OrderedDict()).setdefault(key, entry)
                total_keys += 1
                if total_keys % 10_000 == 0:
                    print(f"[info] read keys={total_keys:,}", file=sys.stderr)
        except Exception as e:
            print(f"[fatal] while reading {src}: {e}", file=sys.stderr)
            raise

    for bucket, members in buckets.items():
        p = os.path.join(out_dir, shard_filename(bucket))
        with open(p, "w", encoding="utf-8") as out:
            json.dump(members, out, ensure_ascii=False)

    meta = {
        "src": src,
        "keys": total_keys,
        "buckets": {b: len(m) for b, m in buckets.items()},
    }
    with open(os.path.join(out_dir, "_meta.json"), "w", encoding="utf-8") as f:
        json.dump(meta, f, ensure_ascii=False, indent=2)
    return meta


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--dict", required=True, help="Path to dictionary JSON (word->entry)")
    ap.add_argument("--out", required=True, help="Output shard dir (buckets become <bucket>.json)")
    args = ap.parse_args()

    meta = split(args.dict, args.out)
    print(json.dumps({"ok": True, "keys": meta["keys"], "buckets": len(meta["buckets"]), "out": args.out}))


if __name__ == "__main__":
    main()
