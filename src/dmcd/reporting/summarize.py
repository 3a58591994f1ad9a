"""Summaries over parse logs (CSV or JSONL)."""

from __future__ import annotations

import csv
import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

COUNTED_FIELDS = ("features", "enabled_features", "hex_codes", "diagnostics")


def _iter_csv(path: Path) -> Iterator[dict[str, str]]:
    with path.open(newline="") as f:
        reader = csv.DictReader(f)
        yield from reader


def _iter_jsonl(path: Path) -> Iterator[dict[str, Any]]:
    with path.open() as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            yield json.loads(line)


def iter_log_entries(path: Path) -> Iterator[dict[str, Any]]:
    return _iter_csv(path) if path.suffix.lower() == ".csv" else _iter_jsonl(path)


def summarize_log(path: Path) -> dict[str, object]:
    """Compute simple aggregates from a CSV/JSONL log."""
    entries = 0
    totals = dict.fromkeys(COUNTED_FIELDS, 0)
    sources: set[str] = set()

    for entry in iter_log_entries(path):
        # JSONL rows may nest the counts under "summary"
        counts = entry.get("summary") if isinstance(entry.get("summary"), dict) else entry
        entries += 1
        if entry.get("source"):
            sources.add(str(entry["source"]))
        for name in COUNTED_FIELDS:
            if name in counts:
                totals[name] += int(counts[name] or 0)

    return {
        "entries": entries,
        "sources": len(sources),
        "features_total": totals["features"],
        "enabled_total": totals["enabled_features"],
        "hex_codes_total": totals["hex_codes"],
        "diagnostics_total": totals["diagnostics"],
    }
