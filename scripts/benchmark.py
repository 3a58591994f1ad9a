"""Micro-benchmarks for the card parser on generated cards."""

from __future__ import annotations

import time

from dmcd.data.generator import generate_sample_card
from dmcd.decoder import DmcParser


def benchmark_parse(rows: int = 64, runs: int = 5) -> dict[str, float]:
    lines, _ = generate_sample_card(rows=rows, drift_rate=0.1)
    total_chars = sum(len(line) for line in lines)
    best = None
    for _ in range(runs):
        start = time.perf_counter()
        DmcParser().parse(lines)
        elapsed = time.perf_counter() - start
        best = elapsed if best is None or elapsed < best else best
    lines_per_sec = len(lines) / best if best else 0.0
    return {
        "lines": len(lines),
        "chars": total_chars,
        "best_seconds": best or 0.0,
        "lines_per_sec": lines_per_sec,
    }


if __name__ == "__main__":
    result = benchmark_parse()
    print(result)
