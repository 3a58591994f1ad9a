import orjson
from typer.testing import CliRunner

from dmcd.cli import app

runner = CliRunner()


def test_dataset_sample_then_parse(tmp_path):
    card = tmp_path / "sample.dmc"
    meta = tmp_path / "sample.json"
    result = runner.invoke(app, ["dataset", "sample", str(card), "--metadata", str(meta)])
    assert result.exit_code == 0
    assert card.exists()
    assert orjson.loads(meta.read_bytes())["rows"] == 8

    out = tmp_path / "card.json"
    log = tmp_path / "runs.jsonl"
    result = runner.invoke(
        app, ["parse", str(card), "--output", str(out), "--log-jsonl", str(log), "--tag", "t"]
    )
    assert result.exit_code == 0
    payload = orjson.loads(out.read_bytes())
    assert payload["machine"]["osp_type"] == "OSP-P300MA"
    assert log.exists()


def test_features_rejects_unknown_family(tmp_path):
    result = runner.invoke(app, ["features", str(tmp_path / "x.dmc"), "--family", "abc"])
    assert result.exit_code != 0


def test_parse_missing_file_is_a_usage_error(tmp_path):
    result = runner.invoke(app, ["parse", str(tmp_path / "missing.dmc")])
    assert result.exit_code == 2


def test_manifest_validate_exit_code(tmp_path):
    manifest = tmp_path / "m.json"
    manifest.write_text('{"name": "m", "path": "missing.dmc"}')
    result = runner.invoke(app, ["manifest", "validate", str(manifest)])
    assert result.exit_code == 1


def test_features_lists_enabled_plc_features(tmp_path):
    card = tmp_path / "sample.dmc"
    meta = tmp_path / "sample.json"
    runner.invoke(app, ["dataset", "sample", str(card), "--metadata", str(meta), "--rows", "4"])
    expected = orjson.loads(meta.read_bytes())["features"]
    enabled_plc = [f["name"] for f in expected if f["section"].startswith("PLC") and f["enabled"]]
    assert enabled_plc

    result = runner.invoke(app, ["features", str(card), "--family", "plc", "--enabled-only"])
    assert result.exit_code == 0
    assert "PLC-SPEC CODE No.1" in result.stdout
    assert "NC-SPEC CODE No.1" not in result.stdout.replace("PLC-SPEC", "")
    assert enabled_plc[0] in result.stdout
