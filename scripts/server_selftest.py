#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Server self-test for the Dictionary Lookup API.

What it does
------------
1) Sanity checks: /health, /manifest (sharded mode only).
2) Correctness against the monolithic dictionary:
   - Pick sample words from the source file (streamed with ijson)
   - GET /word/<w> must return exactly the source entry
   - GET /word/<missing> must be 404 (not 500)
   - GET /search?q=<prefix> hits must all start with the prefix
3) Performance:
   - Latency stats (avg, p95) per endpoint
   - Concurrent /word load (cold + cached keys)
4) Summary:
   - PASS/FAIL with details

Run
---
python scripts/server_selftest.py \
  --base http://localhost:3000 \
  --dict ./dictionary.json \
  --samples 20 \
  --concurrency 12 \
  --word-runs 200 \
  --assert-word-ms 300
"""

import argparse, asyncio, json, random, statistics, time
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx
import ijson


def sample_words(path: str, k: int, scan_max: int = 50_000) -> Dict[str, Any]:
    """Reservoir-sample k (word, entry) pairs from the first scan_max members."""
    picked: List[Tuple[str, Any]] = []
    with open(path, "rb") as f:
        for i, (key, entry) in enumerate(ijson.kvitems(f, "", use_float=True)):
            if i >= scan_max:
                break
            if len(picked) < k:
                picked.append((key, entry))
            else:
                j = random.randint(0, i)
                if j < k:
                    picked[j] = (key, entry)
    return dict(picked)


async def get_json(client: httpx.AsyncClient, path: str, params: Optional[dict] = None) -> Tuple[int, Any, float]:
    t0 = time.perf_counter()
    r = await client.get(path, params=params)
    dt = (time.perf_counter() - t0) * 1000.0
    try:
        j = r.json()
    except Exception:
        raise RuntimeError(f"{path} returned non-JSON: {r.text[:160]}...")
    return r.status_code, j, dt


# ---------- Test runner ----------
class Runner:
    def __init__(self, base: str, dict_path: str, seed: int = 42):
        self.base = base.rstrip("/")
        self.dict_path = dict_path
        random.seed(seed)
        self.times: Dict[str, List[float]] = {"health": [], "word": [], "search": []}
        self.failures: List[str] = []
        self.notes: List[str] = []

    async def test_health(self, client: httpx.AsyncClient) -> str:
        code, j, dt = await get_json(client, "/health")
        self.times["health"].append(dt)
        if code != 200 or not j.get("ok"):
            raise RuntimeError(f"/health not ok -> {code} {j}")
        mode = j.get("mode")
        self.notes.append(f"/health ok (mode={mode}, {dt:.1f} ms)")
        if mode == "sharded":
            code, _, _ = await get_json(client, "/manifest")
            if code != 200:
                self.failures.append(f"/manifest -> HTTP {code} in sharded mode")
        return mode

    async def test_words(self, client: httpx.AsyncClient, samples: Dict[str, Any]):
        for word, entry in samples.items():
            code, j, dt = await get_json(client, f"/word/{quote(word, safe='')}")
            self.times["word"].append(dt)
            if code != 200:
                self.failures.append(f"/word/{word} -> HTTP {code}: {j}")
            elif j != entry:
                self.failures.append(f"/word/{word} entry differs from source")

        missing = "zzz_not_present_%d" % random.randint(0, 1_000_000)
        code, j, _ = await get_json(client, f"/word/{missing}")
        if code != 404:
            self.failures.append(f"/word/{missing} should be 404, got {code}: {j}")

    async def test_search(self, client: httpx.AsyncClient, samples: Dict[str, Any]):
        for word in list(samples)[:10]:
            q = word[:2]
            if not q.strip():
                continue
            code, j, dt = await get_json(client, "/search", {"q": q, "limit": 5})
            self.times["search"].append(dt)
            if code != 200:
                self.failures.append(f"/search?q={q} -> HTTP {code}: {j}")
                continue
            bad = [m for m in j.get("matches", []) if not m.startswith(q)]
            if bad:
                self.failures.append(f"/search?q={q} returned non-matching keys {bad[:3]}")
            if len(j.get("matches", [])) > 5:
                self.failures.append(f"/search?q={q} ignored limit=5")

        code, _, _ = await get_json(client, "/search")
        if code != 400:
            self.failures.append(f"/search without q should be 400, got {code}")

    async def load_test_words(self, client: httpx.AsyncClient, words: List[str], total_runs: int, concurrency: int):
        if total_runs <= 0 or not words:
            return
        tasks = []
        for _ in range(total_runs):
            tasks.append(self._word(client, random.choice(words)))
            if len(tasks) >= concurrency:
                await asyncio.gather(*tasks)
                tasks = []
        if tasks:
            await asyncio.gather(*tasks)

    async def _word(self, client: httpx.AsyncClient, word: str):
        try:
            code, j, dt = await get_json(client, f"/word/{quote(word, safe='')}")
            self.times["word"].append(dt)
            if code != 200:
                self.failures.append(f"load_test /word/{word} -> HTTP {code}")
        except Exception as e:
            self.failures.append(f"load_test /word error: {e}")

    def _assert_perf(self, key: str, threshold_ms: Optional[float]):
        if not threshold_ms:
            return
        arr = self.times.get(key, [])
        if not arr:
            return
        avg = sum(arr)/len(arr)
        if avg > threshold_ms:
            self.failures.append(f"perf: {key} avg {avg:.1f}ms > {threshold_ms:.1f}ms")

    def _fmt_stats(self, key: str) -> str:
        arr = self.times.get(key, [])
        if not arr:
            return f"{key}: n=0"
        avg = sum(arr)/len(arr)
        p95 = statistics.quantiles(arr, n=20)[18] if len(arr) >= 20 else max(arr)
        return f"{key}: n={len(arr)} avg={avg:.1f}ms p95={p95:.1f}ms max={max(arr):.1f}ms"

    async def run(self, samples: int, word_runs: int, concurrency: int, assert_word_ms: Optional[float]):
        picked = sample_words(self.dict_path, samples)
        if not picked:
            self.failures.append(f"no words sampled from {self.dict_path}")
        limits = httpx.Limits(max_keepalive_connections=concurrency, max_connections=concurrency)
        async with httpx.AsyncClient(base_url=self.base, limits=limits, timeout=60.0) as client:
            await self.test_health(client)
            await self.test_words(client, picked)
            await self.test_search(client, picked)
            await self.load_test_words(client, list(picked), word_runs, concurrency)
        self._assert_perf("word", assert_word_ms)
        self.print_summary()

    def print_summary(self):
        print("\n[SUMMARY]")
        for k in ["health", "word", "search"]:
            print("  " + self._fmt_stats(k))
        if self.notes:
            print("\n[NOTES]")
            for n in self.notes:
                print("  - " + n)
        if self.failures:
            print("\n[FAILURES]")
            for f in self.failures:
                print("  - " + f)
            print("\nRESULT: FAIL")
        else:
            print("\nRESULT: OK")


# ---------- CLI ----------
def main():
    ap = argparse.ArgumentParser(description="Dictionary API self-test (perf + accuracy).")
    ap.add_argument("--base", default="http://localhost:3000", help="API base URL")
    ap.add_argument("--dict", default="./dictionary.json", help="Path to the monolithic dictionary JSON")
    ap.add_argument("--samples", type=int, default=20, help="How many words to sample from the source")
    ap.add_argument("--word-runs", type=int, default=200, help="Total concurrent /word runs for load test")
    ap.add_argument("--concurrency", type=int, default=12, help="Concurrency level for the load test")
    ap.add_argument("--assert-word-ms", type=float, default=300.0, help="Assert avg /word latency (ms)")
    args = ap.parse_args()

    r = Runner(args.base, args.dict)
    try:
        asyncio.run(r.run(args.samples, args.word_runs, args.concurrency, args.assert_word_ms))
    except Exception as e:
        print("[FATAL]", e)
        print("RESULT: FAIL")

if __name__ == "__main__":
    main()
