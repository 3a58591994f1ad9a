from __future__ import annotations

import hashlib
import html
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from dmcd.data.loader import DEFAULT_ENCODING, parse_file
from dmcd.reporting.report import card_summary


@dataclass
class Manifest:
    name: str
    path: Path
    encoding: str = DEFAULT_ENCODING
    hash: str | None = None
    notes: str | None = None
    checks: dict[str, Any] | None = None

    @staticmethod
    def from_mapping(payload: dict[str, Any], base_dir: Path | None = None) -> Manifest:
        path = Path(payload["path"])
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return Manifest(
            name=str(payload["name"]),
            path=path,
            encoding=str(payload.get("encoding") or DEFAULT_ENCODING),
            hash=payload.get("hash"),
            notes=payload.get("notes"),
            checks=payload.get("checks"),
        )


def _hash_file(path: Path, algo: str = "sha256") -> str:
    h = hashlib.new(algo)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return f"{algo}:{h.hexdigest()}"


def validate_manifest(manifest: Manifest) -> dict[str, Any]:
    path = manifest.path
    result: dict[str, Any] = {
        "name": manifest.name,
        "path": str(path),
        "exists": path.exists(),
        "size_bytes": path.stat().st_size if path.exists() else 0,
        "encoding": manifest.encoding,
        "hash_expected": manifest.hash,
        "hash_actual": None,
        "hash_match": None,
        "summary": None,
        "diagnostics": [],
        "warnings": [],
    }
    if not path.exists():
        result["warnings"].append("file_missing")
        return result

    if manifest.hash:
        algo, _hex = (
            manifest.hash.split(":", 1) if ":" in manifest.hash else ("sha256", manifest.hash)
        )
        actual = _hash_file(path, algo=algo)
        result["hash_actual"] = actual
        result["hash_match"] = actual == manifest.hash
        if not result["hash_match"]:
            result["warnings"].append("hash_mismatch")

    card = parse_file(path, encoding=manifest.encoding)
    summary = card_summary(card)
    result["summary"] = summary
    result["diagnostics"] = list(card.diagnostics)

    checks = manifest.checks or {}
    if checks.get("min_nc_sections") is not None:
        if summary["nc_sections"] < int(checks["min_nc_sections"]):
            result["warnings"].append("missing_nc_sections")
    if checks.get("min_features") is not None:
        if summary["features"] < int(checks["min_features"]):
            result["warnings"].append("few_features")
    if checks.get("max_diagnostics") is not None:
        if summary["diagnostics"] > int(checks["max_diagnostics"]):
            result["warnings"].append("too_many_diagnostics")
    return result


def load_manifest(path: Path) -> Manifest:
    """Load a YAML or JSON manifest; relative card paths resolve beside it."""
    if path.suffix.lower() in {".yml", ".yaml"}:
        payload = yaml.safe_load(path.read_text())
    else:
        payload = json.loads(path.read_text())
    return Manifest.from_mapping(payload, base_dir=path.parent)


def sample_manifest() -> dict[str, Any]:
    return {
        "name": "sample_card",
        "path": "cards/sample.dmc",
        "encoding": "utf-8",
        "hash": "sha256:<hex>",
        "notes": "edit with real details",
        "checks": {"min_nc_sections": 1, "min_features": 4, "max_diagnostics": 0},
    }


def render_validation_html(result: dict[str, Any], output: Path) -> None:
    """Render a simple HTML report for validation results."""
    output.parent.mkdir(parents=True, exist_ok=True)
    warnings = result.get("warnings", [])
    rows = "".join(
        f"<tr><td>{k}</td><td>{html.escape(str(v))}</td></tr>"
        for k, v in result.items()
        if k not in {"warnings", "diagnostics", "summary"}
    )
    summary = result.get("summary") or {}
    summary_rows = "".join(f"<li>{k}: {v}</li>" for k, v in summary.items())
    diagnostics = "".join(f"<li>{html.escape(d)}</li>" for d in result.get("diagnostics") or [])
    page = f"""<!DOCTYPE html>
<html><head><title>DMC Manifest Validation</title></head>
<body>
<h1>DMC Manifest Validation Report</h1>
<p><strong>Name:</strong> {result.get("name")}</p>
<p><strong>Warnings:</strong> {", ".join(warnings) if warnings else "None"}</p>
<table border="1" cellpadding="4" cellspacing="0">
{rows}
</table>
<h3>Card Summary</h3>
<ul>{summary_rows}</ul>
<h3>Diagnostics</h3>
<ul>{diagnostics}</ul>
</body></html>
"""
    output.write_text(page)
