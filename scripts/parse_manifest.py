"""Parse a card described by a manifest into JSONL/Arrow outputs."""

from __future__ import annotations

import json
from pathlib import Path

from dmcd.data.loader import parse_file
from dmcd.export import cards_to_jsonl, features_to_arrow_file
from dmcd.manifest import load_manifest, validate_manifest


def parse_manifest(manifest_path: Path, output_dir: Path) -> dict:
    mf = load_manifest(manifest_path)
    validation = validate_manifest(mf)
    if validation.get("warnings"):
        raise RuntimeError(f"Manifest validation warnings: {validation['warnings']}")

    card = parse_file(mf.path, encoding=mf.encoding)

    output_dir.mkdir(parents=True, exist_ok=True)
    jsonl_path = output_dir / f"{mf.name}_card.jsonl"
    arrow_path = output_dir / f"{mf.name}_features.arrow"

    cards_to_jsonl([(str(mf.path), card)], jsonl_path)
    features_to_arrow_file(card, arrow_path)

    return {
        "manifest": mf.name,
        "features": validation["summary"]["features"],
        "jsonl": str(jsonl_path),
        "arrow": str(arrow_path),
        "validation": validation,
    }


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Parse a card described by a manifest.")
    parser.add_argument("manifest", type=Path, help="Path to manifest (json/yaml).")
    parser.add_argument(
        "--output-dir", type=Path, default=Path("artifacts/parsed"), help="Where to write outputs."
    )
    args = parser.parse_args()

    summary = parse_manifest(args.manifest, args.output_dir)
    print(json.dumps(summary, indent=2))
