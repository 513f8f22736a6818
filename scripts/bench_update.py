#!/usr/bin/env python3
"""Benchmark concurrent document updates: latency, throughput and lost revisions.

Every update must bump the stored revision by exactly one, so after N
concurrent PUTs on one document the revision must be N.

Usage:
    export API_URL=http://localhost:8000 DOCUMENT_TYPE=blog-post
    uv run python scripts/bench_update.py [--num-updates 200] [--concurrency 20]
"""
from __future__ import annotations

import argparse
import asyncio
import os
import statistics
import sys
import time

import httpx


async def _put(
    client: httpx.AsyncClient, url: str, body: dict, semaphore: asyncio.Semaphore
) -> float | None:
    async with semaphore:
        t0 = time.perf_counter()
        r = await client.put(url, json=body)
        elapsed = time.perf_counter() - t0
    return elapsed if r.status_code == 204 else None


async def run(api_url: str, document_type: str, num_updates: int, concurrency: int) -> int:
    async with httpx.AsyncClient(timeout=60.0) as client:
        r = await client.post(f"{api_url}/v1/documents", json={"documentType": document_type})
        r.raise_for_status()
        document = r.json()
        url = f"{api_url}/v1/documents/{document['id']}"

        semaphore = asyncio.Semaphore(concurrency)
        print(f"Sending {num_updates} updates to {document['id']} (concurrency {concurrency})...")
        start_total = time.perf_counter()
        results = await asyncio.gather(
            *(
                _put(client, url, {"title": f"rev {i}", "url": document["url"]}, semaphore)
                for i in range(num_updates)
            )
        )
        total_elapsed = time.perf_counter() - start_total

        r = await client.get(url)
        r.raise_for_status()
        revision = r.json()["revision"]
        await client.delete(url)

    latencies = [t for t in results if t is not None]
    n = len(latencies)
    if n == 0:
        print("No successful updates.")
        return 1
    p50 = statistics.median(latencies) * 1000
    p95 = sorted(latencies)[int(n * 0.95) - 1] * 1000 if n >= 20 else p50
    print(
        f"Update benchmark (n={n}, errors={num_updates - n})\n"
        f"  Throughput: {n / total_elapsed:.2f} updates/s\n"
        f"  Latency: p50={p50:.1f} ms, p95={p95:.1f} ms\n"
        f"  Final revision: {revision} (expected {n})\n"
    )
    return 0 if revision == n else 2


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark concurrent document updates")
    parser.add_argument("--num-updates", type=int, default=100, help="Number of updates")
    parser.add_argument("--concurrency", type=int, default=10, help="Updates in flight")
    args = parser.parse_args()

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    document_type = os.environ.get("DOCUMENT_TYPE", "blog-post")
    return asyncio.run(run(api_url, document_type, args.num_updates, args.concurrency))


if __name__ == "__main__":
    sys.exit(main())
