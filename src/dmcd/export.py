"""Serialize parsed cards for downstream consumption (JSON, JSONL, Arrow)."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any

import orjson
import pyarrow as pa

from dmcd.model import DataManagementCard

FEATURE_SCHEMA = pa.schema(
    [
        ("family", pa.string()),
        ("section", pa.string()),
        ("name", pa.string()),
        ("enabled", pa.bool_()),
        ("bank_number", pa.int32()),
        ("bit_index", pa.int32()),
    ]
)


def card_to_dict(card: DataManagementCard) -> dict[str, Any]:
    """Plain mapping of the card; dates become ISO strings."""
    payload = asdict(card)
    payload["machine"]["production_date"] = (
        card.machine.production_date.isoformat() if card.machine.production_date else None
    )
    for entry, revision in zip(payload["revisions"], card.revisions, strict=True):
        entry["production_date"] = (
            revision.production_date.isoformat() if revision.production_date else None
        )
    return payload


def card_to_json(card: DataManagementCard, indent: bool = False) -> bytes:
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(card_to_dict(card), option=option)


def cards_to_jsonl(
    cards: list[tuple[str, DataManagementCard]], path: Path, gzip_output: bool = False
) -> None:
    """Write one ``{"source": ..., "card": ...}`` line per parsed card."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if gzip_output:
        import gzip as gzip_lib

        handle = gzip_lib.open(path, "wb")
    else:
        handle = path.open("wb")

    with handle as f:
        for source, card in cards:
            f.write(orjson.dumps({"source": source, "card": card_to_dict(card)}) + b"\n")


def features_to_arrow(card: DataManagementCard) -> pa.Table:
    """One row per spec-code feature, NC sections before PLC."""
    rows: dict[str, list] = {name: [] for name in FEATURE_SCHEMA.names}
    for family, section in card.all_spec_sections():
        for feature in section.features:
            rows["family"].append(family)
            rows["section"].append(section.title)
            rows["name"].append(feature.name)
            rows["enabled"].append(feature.enabled)
            rows["bank_number"].append(feature.bank_number)
            rows["bit_index"].append(feature.bit_index)
    return pa.table(rows, schema=FEATURE_SCHEMA)


def features_to_arrow_file(card: DataManagementCard, path: Path) -> None:
    """Write the feature table to Arrow IPC for analytics-friendly consumption."""
    path.parent.mkdir(parents=True, exist_ok=True)
    table = features_to_arrow(card)
    with pa.OSFile(str(path), "wb") as sink:
        with pa.ipc.new_file(sink, table.schema) as writer:
            writer.write_table(table)
