import json

import yaml

from dmcd.data.generator import generate_sample_card
from dmcd.manifest import (
    Manifest,
    _hash_file,
    load_manifest,
    render_validation_html,
    sample_manifest,
    validate_manifest,
)


def _write_card(path, **kwargs):
    lines, _meta = generate_sample_card(**kwargs)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_missing_file_warns(tmp_path):
    result = validate_manifest(Manifest(name="missing", path=tmp_path / "nope.dmc"))
    assert result["exists"] is False
    assert result["warnings"] == ["file_missing"]
    assert result["summary"] is None


def test_hash_and_checks_pass(tmp_path):
    card = _write_card(tmp_path / "card.dmc", rows=2)
    manifest = Manifest(
        name="card",
        path=card,
        hash=_hash_file(card),
        checks={"min_nc_sections": 1, "min_features": 8, "max_diagnostics": 0},
    )
    result = validate_manifest(manifest)
    assert result["hash_match"] is True
    assert result["warnings"] == []
    assert result["summary"]["features"] == 16
    assert result["size_bytes"] > 0


def test_failed_checks_are_reported(tmp_path):
    card = tmp_path / "card.dmc"
    card.write_text("=====[ Bogus ]=====\n", encoding="utf-8")
    manifest = Manifest(
        name="card",
        path=card,
        hash="sha256:deadbeef",
        checks={"min_nc_sections": 1, "min_features": 1, "max_diagnostics": 0},
    )
    result = validate_manifest(manifest)
    assert result["hash_match"] is False
    assert result["warnings"] == [
        "hash_mismatch",
        "missing_nc_sections",
        "few_features",
        "too_many_diagnostics",
    ]
    assert result["diagnostics"] == ["Unrecognized section header 'Bogus'"]


def test_load_yaml_and_json_resolve_relative_paths(tmp_path):
    _write_card(tmp_path / "card.dmc")
    (tmp_path / "m.yaml").write_text(yaml.safe_dump({"name": "y", "path": "card.dmc"}))
    (tmp_path / "m.json").write_text(
        json.dumps({"name": "j", "path": "card.dmc", "encoding": "utf-8"})
    )
    from_yaml = load_manifest(tmp_path / "m.yaml")
    from_json = load_manifest(tmp_path / "m.json")
    assert from_yaml.path == tmp_path / "card.dmc"
    assert from_json.path == tmp_path / "card.dmc"
    assert validate_manifest(from_yaml)["exists"] is True


def test_sample_manifest_has_required_keys():
    manifest = Manifest.from_mapping(sample_manifest())
    assert manifest.name == "sample_card"
    assert manifest.checks["min_nc_sections"] == 1


def test_render_html_escapes_diagnostics(tmp_path):
    result = {
        "name": "card",
        "path": "card.dmc",
        "warnings": ["too_many_diagnostics"],
        "summary": {"features": 0},
        "diagnostics": ["Value '<b>' for unhandled key"],
    }
    out = tmp_path / "report" / "index.html"
    render_validation_html(result, out)
    page = out.read_text()
    assert "too_many_diagnostics" in page
    assert "&lt;b&gt;" in page
    assert "<b>" not in page
