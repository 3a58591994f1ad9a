"""Helpers to log parse summaries for trend tracking."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from dmcd.model import DataManagementCard


def card_summary(card: DataManagementCard) -> dict[str, int]:
    """Count what a parse produced; diagnostics are included as a count."""
    sections = card.all_spec_sections()
    features = [f for _family, s in sections for f in s.features]
    return {
        "revisions": len(card.revisions),
        "packages": len(card.packages),
        "custom_groups": len(card.custom_software),
        "nc_sections": len(card.nc_spec_codes),
        "plc_sections": len(card.plc_spec_codes),
        "features": len(features),
        "enabled_features": sum(1 for f in features if f.enabled),
        "hex_codes": sum(len(s.hex_codes) for _family, s in sections),
        "diagnostics": len(card.diagnostics),
    }


def summary_to_row(summary: dict[str, Any], source: str, tag: str | None = None) -> dict:
    """Flatten a card summary into a CSV/JSONL-friendly row."""
    row: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "source": source,
        "tag": tag or "",
    }
    row.update({k: int(v or 0) for k, v in summary.items()})
    return row


def append_csv(path: Path, row: dict) -> None:
    """Append a row to a CSV file, writing headers when the file is new."""
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    with path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(row.keys()))
        if is_new:
            writer.writeheader()
        writer.writerow(row)


def append_jsonl(path: Path, payload: dict) -> None:
    """Append a JSON line (UTF-8) to a log file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(payload) + "\n")
