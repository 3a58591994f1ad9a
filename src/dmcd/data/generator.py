"""Sample DMC card generator.

Builds complete cards with every known section, including fixed-width
spec-code rows laid out exactly like real cards:
- 17 character feature names followed by an ``o``/``-`` status
- two-space column separators, 78 characters per row
- optional one-character status drift to exercise recovery
- hex code lines and production stamp footers

Used for fixtures, the CLI ``dataset sample`` command and benchmarks.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from dmcd.parsers.speccode import DEFAULT_LAYOUT, SpecCodeLayout, feature_address

HEADER_WIDTH = 78

FEATURE_NAMES: Sequence[str] = (
    "SLANT-Y AXIS",
    "ONE TOUCH IGF ADV",
    "Y AXIS BY CT-Z",
    "TAPE DATA IN/OUT",
    "HI-G CONTROL",
    "PROGRAM SELECT",
    "PFCII",
    "MG TOOL READY",
    "AUTO POWER OFF",
    "TOOL LIFE MGMT",
    "USER TASK 2",
    "CYCLE TIME RED",
    "THERMO FRIENDLY",
    "HOLE MACHINING",
    "SPINDLE MONITOR",
    "COLLISION GUARD",
    "MACHINING NAVI",
    "SUPER-NURBS",
)


@dataclass
class FeatureCell:
    name: str
    enabled: bool
    drift: bool = False


def render_header(title: str, width: int = HEADER_WIDTH) -> str:
    label = f"[ {title} ]"
    left = max(1, (width - len(label)) // 3)
    right = max(1, width - len(label) - left)
    return "=" * left + label + "=" * right


def render_feature_row(
    cells: Sequence[FeatureCell | None], layout: SpecCodeLayout = DEFAULT_LAYOUT
) -> str:
    """Lay out up to ``layout.max_columns`` cells as one fixed-width row.

    ``None`` renders an all-blank column (no status). A drifted cell has its
    status pushed one character right, eating one separator space.
    """
    cells = list(cells[: layout.max_columns])
    parts: list[str] = []
    for idx, cell in enumerate(cells):
        if cell is None:
            block = " " * layout.block_width
        else:
            status = layout.enabled_char if cell.enabled else layout.disabled_char
            name = cell.name.ljust(layout.name_width)[: layout.name_width]
            block = name + (" " + status if cell.drift else status)
        parts.append(block)
        if idx < len(cells) - 1:
            drifted = cell is not None and cell.drift
            parts.append(layout.separator[1:] if drifted else layout.separator)
    return "".join(parts).ljust(layout.row_width)


def render_hex_line(rng: random.Random, groups: int = 8) -> str:
    return "-".join(f"{rng.randrange(0x10000):04X}" for _ in range(groups))


def _spec_section(
    title: str, rows: int, rng: random.Random, layout: SpecCodeLayout, drift_rate: float
) -> tuple[list[str], list[dict]]:
    lines = [render_header(title), "=" * layout.row_width]
    expected: list[dict] = []
    for row_index in range(rows):
        cells: list[FeatureCell | None] = []
        for column in range(layout.max_columns):
            cell = FeatureCell(
                name=rng.choice(FEATURE_NAMES),
                enabled=rng.random() < 0.5,
                # drift only where the following separator can absorb it
                drift=column < layout.max_columns - 1 and rng.random() < drift_rate,
            )
            cells.append(cell)
            bank_number, bit_index = feature_address(column, row_index)
            expected.append(
                {
                    "section": title,
                    "name": cell.name,
                    "enabled": cell.enabled,
                    "bank_number": bank_number,
                    "bit_index": bit_index,
                }
            )
        lines.append(render_feature_row(cells, layout))
        if row_index % 8 == 7:
            lines.append("-" * layout.row_width)
    lines.append(render_hex_line(rng))
    lines.append(render_hex_line(rng))
    lines.append(f"<{title}>  {rng.randint(1, 12):02d}/{rng.randint(1, 28):02d}/23")
    return lines, expected


def generate_sample_card(
    *,
    seed: int = 1234,
    rows: int = 8,
    drift_rate: float = 0.0,
    layout: SpecCodeLayout = DEFAULT_LAYOUT,
) -> tuple[list[str], dict]:
    """Generate a full card plus metadata describing what a parse should yield."""
    rng = random.Random(seed)
    production = date(2023, 1, 1) + timedelta(days=rng.randint(0, 365))
    so_number = rng.randint(2_000_000, 2_999_999)
    project = rng.randint(1_000_000, 1_999_999)

    lines = [
        render_header("Machine Data"),
        "<Type of OSP>",
        "OSP-P300MA",
        "<Type of Machine>",
        "MB-5000H",
        "MB-5000HII",
        "<Soft Production No>",
        f"#{rng.randint(10000, 99999)}",
        "<Project No>",
        f"P{project}",
        "<Software Production Date>",
        production.isoformat(),
        render_header("Customer Data"),
        "<Name>",
        "Sample Distributor",
        "<Address>",
        "100 Main St",
        "Springfield, IL",
        "<Phone>",
        "555-0100",
        "<Customer>",
        "<Name>",
        "Sample End User",
        render_header("NOTE"),
        f"1  {production:%m/%d/%y}  SO#{so_number}  P#{project} Initial release",
        f"2  {production:%m/%d/%y}  SO# {so_number + 1}  P# {project + 1}",
        render_header("DVD Media Version Data"),
        "[Windows System CD/DVD Version]",
        "01.02",
        "[OSP System CD/DVD Version]",
        "03.04",
        render_header("Soft Version Excepted OSP System CD/DVD"),
        "[Windows System Version]",
        "10.0.19045",
        "[MTconnect Version]",
        "1.5.0",
        render_header("Package Soft composition"),
        "[NC INSTALLER]",
        "P300_NC_INSTALLER_L01-01_01.01.01.00R0001_11-1J",
        render_header("NC Custom Soft composition"),
        "[LPP]",
        r"C:\OSP-P\P-MANUAL\LPP\ENG\LPP627C-ENG.CNT",
        r"C:\OSP-P\P-MANUAL\LPP\JPN\LPP627C-JPN.CNT",
    ]

    expected: list[dict] = []
    for title in ("NC-SPEC CODE No.1", "PLC-SPEC CODE No.1"):
        section_lines, section_expected = _spec_section(title, rows, rng, layout, drift_rate)
        lines.extend(section_lines)
        expected.extend(section_expected)

    metadata = {
        "seed": seed,
        "rows": rows,
        "drift_rate": drift_rate,
        "production_date": production.isoformat(),
        "sales_order": f"SO#{so_number}",
        "project_number": f"P#{project}",
        "features": expected,
    }
    return lines, metadata
