import logging
from pathlib import Path

import orjson
import typer
from rich.console import Console
from rich.table import Table

from dmcd.data.generator import generate_sample_card
from dmcd.data.loader import DEFAULT_ENCODING, parse_file
from dmcd.export import card_to_dict, features_to_arrow_file
from dmcd.manifest import load_manifest, render_validation_html, validate_manifest
from dmcd.model import DataManagementCard
from dmcd.reporting.report import append_csv, append_jsonl, card_summary, summary_to_row
from dmcd.reporting.summarize import summarize_log

app = typer.Typer(help="Decode Data Management Card (DMC) files into structured records.")
dataset_app = typer.Typer(help="Dataset helpers (generated sample cards).")
manifest_app = typer.Typer(help="Manifest validation for batches of cards.")
report_app = typer.Typer(help="Summaries over parse logs.")
console = Console()
FAMILIES = {"nc", "plc", "all"}

app.add_typer(dataset_app, name="dataset")
app.add_typer(manifest_app, name="manifest")
app.add_typer(report_app, name="report")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)-5.5s [%(name)s] %(message)s",
    )


def _parse(input: Path, encoding: str) -> DataManagementCard:
    try:
        return parse_file(input, encoding=encoding)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Input file not found: {input}") from exc
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"Cannot decode {input} as {encoding}: {exc}") from exc


@app.command()
def parse(
    input: Path = typer.Argument(..., help="DMC file to parse."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the parsed card as JSON."
    ),
    encoding: str = typer.Option(DEFAULT_ENCODING, "--encoding", "-e", help="Text encoding."),
    arrow: Path | None = typer.Option(
        None, "--arrow", help="Optional path to write the spec-code feature table (Arrow IPC)."
    ),
    log_csv: Path | None = typer.Option(
        None, "--log-csv", help="Append a summary row as CSV for trend tracking."
    ),
    log_jsonl: Path | None = typer.Option(
        None, "--log-jsonl", help="Append a summary row as JSONL for trend tracking."
    ),
    tag: str | None = typer.Option(None, "--tag", help="Optional tag to mark this run."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug diagnostics."),
) -> None:
    """Parse a card and emit it as JSON."""
    _configure_logging(verbose)
    card = _parse(input, encoding)
    summary = card_summary(card)
    console.print(
        f"[bold green]Parsed[/] {input}: {summary['features']} features, "
        f"{summary['diagnostics']} diagnostics"
    )

    if log_csv or log_jsonl:
        row = summary_to_row(summary, source=str(input), tag=tag)
        if log_csv:
            append_csv(log_csv, row)
            console.print(f"[bold green]Appended CSV log[/] to {log_csv}")
        if log_jsonl:
            append_jsonl(log_jsonl, row)
            console.print(f"[bold green]Appended JSONL log[/] to {log_jsonl}")

    if arrow:
        features_to_arrow_file(card, arrow)
        console.print(f"[bold green]Wrote feature table[/] to {arrow}")

    payload = card_to_dict(card)
    if output:
        output.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote parsed card[/] to {output}")
    else:
        console.print_json(orjson.dumps(payload).decode())


@app.command()
def features(
    input: Path = typer.Argument(..., help="DMC file to parse."),
    family: str = typer.Option("all", "--family", "-f", help="nc | plc | all"),
    enabled_only: bool = typer.Option(False, "--enabled-only", help="Hide disabled features."),
    encoding: str = typer.Option(DEFAULT_ENCODING, "--encoding", "-e", help="Text encoding."),
) -> None:
    """Show spec-code features with their bank/bit addresses."""
    fam = family.lower()
    if fam not in FAMILIES:
        raise typer.BadParameter(f"Unsupported family '{family}'. Choose from {FAMILIES}.")
    _configure_logging(False)
    card = _parse(input, encoding)

    table = Table(title=f"Spec codes: {input.name}")
    table.add_column("Section")
    table.add_column("No.", justify="right")
    table.add_column("Bit", justify="right")
    table.add_column("Name")
    table.add_column("Enabled")
    for section_family, section in card.all_spec_sections():
        if fam != "all" and section_family.lower() != fam:
            continue
        for feature in section.features:
            if enabled_only and not feature.enabled:
                continue
            table.add_row(
                section.title,
                str(feature.bank_number),
                str(feature.bit_index),
                feature.name,
                "[green]o[/]" if feature.enabled else "[red]-[/]",
            )
    console.print(table)


@dataset_app.command("sample")
def dataset_sample(
    output: Path = typer.Argument(..., help="Path to write the generated card (.dmc)."),
    metadata: Path | None = typer.Option(
        None, "--metadata", "-m", help="Optional path to write JSON metadata (expected features)."
    ),
    rows: int = typer.Option(8, "--rows", "-r", help="Feature rows per spec-code section."),
    seed: int = typer.Option(1234, "--seed", help="Seed for reproducible generation."),
    drift_rate: float = typer.Option(
        0.0, "--drift-rate", help="Share of columns rendered one character late."
    ),
) -> None:
    """Generate a complete sample card with fixed-width spec-code tables."""
    lines, meta = generate_sample_card(seed=seed, rows=rows, drift_rate=drift_rate)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text("\n".join(lines) + "\n", encoding="utf-8")
    console.print(f"[bold green]Wrote[/] {len(lines)} lines to {output}")
    if metadata:
        metadata.write_bytes(orjson.dumps(meta, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote metadata[/] to {metadata}")


@manifest_app.command("validate")
def manifest_validate(
    manifest: Path = typer.Argument(..., help="Manifest (json/yaml) describing a card."),
    html: Path | None = typer.Option(None, "--html", help="Optional HTML report path."),
) -> None:
    """Check a card against its manifest (hash, expected sections, diagnostics)."""
    _configure_logging(False)
    if not manifest.is_file():
        raise typer.BadParameter(f"Manifest not found: {manifest}")
    result = validate_manifest(load_manifest(manifest))
    if html:
        render_validation_html(result, html)
        console.print(f"[bold green]Wrote HTML report[/] to {html}")
    console.print_json(orjson.dumps(result).decode())
    if result["warnings"]:
        raise typer.Exit(code=1)


@report_app.command("summarize")
def report_summarize(
    log: Path = typer.Argument(..., help="CSV or JSONL log file produced by parse."),
) -> None:
    """Summarize log(s) produced by parse logging."""
    summary = summarize_log(log)
    console.print_json(orjson.dumps(summary).decode())


if __name__ == "__main__":
    app()
