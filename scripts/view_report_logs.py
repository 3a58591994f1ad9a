"""Quick viewer for parse logs (CSV or JSONL).

Shows aggregate feature and diagnostic totals plus per-tag averages in Rich tables.
"""

from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path

from rich.console import Console
from rich.table import Table

from dmcd.reporting.summarize import iter_log_entries, summarize_log


def main() -> None:
    parser = argparse.ArgumentParser(description="View parse logs.")
    parser.add_argument("log", type=Path, help="CSV or JSONL log file.")
    args = parser.parse_args()

    console = Console()
    summary = summarize_log(args.log)

    console.print("[bold]Aggregate[/]")
    console.print(
        f"- entries: {summary['entries']}, sources: {summary['sources']}, "
        f"features: {summary['features_total']}, diagnostics: {summary['diagnostics_total']}"
    )

    tag_counts: Counter[str] = Counter()
    tag_features: Counter[str] = Counter()
    tag_diagnostics: Counter[str] = Counter()
    for entry in iter_log_entries(args.log):
        tag = str(entry.get("tag") or "")
        if not tag:
            continue
        tag_counts[tag] += 1
        tag_features[tag] += int(entry.get("features") or 0)
        tag_diagnostics[tag] += int(entry.get("diagnostics") or 0)
    if tag_counts:
        tag_table = Table(title="Tags")
        tag_table.add_column("Tag")
        tag_table.add_column("Entries", justify="right")
        tag_table.add_column("Avg Features", justify="right")
        tag_table.add_column("Avg Diagnostics", justify="right")
        for tag, count in tag_counts.most_common():
            tag_table.add_row(
                tag,
                str(count),
                f"{tag_features[tag] / count:.1f}",
                f"{tag_diagnostics[tag] / count:.1f}",
            )
        console.print(tag_table)


if __name__ == "__main__":
    main()
