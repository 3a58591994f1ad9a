"""Spec-code sections: fixed-width feature tables plus hex code lines.

A feature row holds up to four columns. Each column is a 17 character name
field followed by one status character (``o`` enabled, ``-`` disabled), and
columns are separated by two spaces::

    SLANT-Y AXIS     -  ONE TOUCH IGF ADVo  Y AXIS BY CT-Z   -  TAPE DATA IN/OUT o

Real cards drift by one column now and then, so a status found one character
late is accepted. Every decoded feature gets a (bank, bit) address derived from
its visual column and the number of feature rows already seen in the section.

Other lines in a spec-code section are separators (``====`` / ``----``),
production stamp footers (``<...> 03/07/23``) and hex code lines
(``1A2B-3C4D-...``).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from dmcd.model import DataManagementCard, SpecCodeSection, SpecFeature
from dmcd.parsers.base import SectionParser, diagnose
from dmcd.sections import SectionKind

logger = logging.getLogger(__name__)

HEX_CODE_LINE_RE = re.compile(r"^[0-9A-Fa-f]{4}(?:-[0-9A-Fa-f]{4})*$")
NUMERIC_PAIR_RE = re.compile(r"\d+/\d+")
BITS_PER_BANK = 8
SEPARATOR_PREFIXES = ("==", "--")


@dataclass(frozen=True)
class SpecCodeLayout:
    name_width: int = 17
    max_columns: int = 4
    separator: str = "  "
    row_width: int = 78
    enabled_char: str = "o"
    disabled_char: str = "-"

    @property
    def block_width(self) -> int:
        return self.name_width + 1

    def is_status(self, ch: str) -> bool:
        return ch in (self.enabled_char, self.disabled_char)


DEFAULT_LAYOUT = SpecCodeLayout()


class LineKind(Enum):
    SEPARATOR = "separator"
    FOOTER = "footer"
    HEX_CODES = "hex_codes"
    FEATURES = "features"


@dataclass
class DecodedColumn:
    column: int
    name: str
    enabled: bool


@dataclass
class DecodedRow:
    columns: list[DecodedColumn]
    # (column, raw name span, status char) for columns with no usable status
    rejected: list[tuple[int, str, str]]


def is_separator_line(line: str) -> bool:
    # a single leading "-" is a spare-bit status, a run of two starts a rule
    stripped = line.strip()
    if not stripped.startswith(SEPARATOR_PREFIXES):
        return False
    return set(stripped.replace(" ", "")) <= {"=", "-"}


def is_hex_code_line(line: str) -> bool:
    return HEX_CODE_LINE_RE.match(line.strip()) is not None


def is_footer_line(line: str) -> bool:
    return (
        "<" in line
        and ">" in line
        and NUMERIC_PAIR_RE.search(line) is not None
        and not is_hex_code_line(line)
    )


def classify_line(line: str) -> LineKind:
    if is_separator_line(line):
        return LineKind.SEPARATOR
    if is_footer_line(line):
        return LineKind.FOOTER
    if is_hex_code_line(line):
        return LineKind.HEX_CODES
    return LineKind.FEATURES


def decode_feature_row(line: str, layout: SpecCodeLayout = DEFAULT_LAYOUT) -> DecodedRow:
    """Slice a fixed-width row into name/status columns.

    Columns are numbered by visual position, so a skipped column still
    advances the column index of the ones after it.
    """
    row = DecodedRow(columns=[], rejected=[])
    idx = 0
    column = 0
    total = len(line)
    while idx < total and column < layout.max_columns:
        if idx + layout.block_width > total:
            break
        name_span = line[idx : idx + layout.name_width]
        status = line[idx + layout.name_width]
        consumed = layout.block_width

        if not layout.is_status(status) and idx + layout.block_width < total:
            late = line[idx + layout.block_width]
            if layout.is_status(late):
                # one column of drift: status one late, name still the fixed span
                status = late
                consumed += 1

        if layout.is_status(status):
            row.columns.append(
                DecodedColumn(
                    column=column,
                    name=name_span.strip(),
                    enabled=status == layout.enabled_char,
                )
            )
        else:
            row.rejected.append((column, name_span, status))

        column += 1
        idx += consumed

        if column < layout.max_columns:
            if line.startswith(layout.separator, idx):
                idx += len(layout.separator)
            elif idx < total and line[idx] == " ":
                idx += 1
            elif idx < total:
                logger.debug(
                    "Expected column separator after column %d, found %r in %r",
                    column - 1,
                    line[idx : idx + len(layout.separator)],
                    line,
                )
                break
    return row


def feature_address(column: int, row_index: int) -> tuple[int, int]:
    """(bank_number, bit_index) for a column on the ``row_index``-th feature row."""
    bit_index = row_index % BITS_PER_BANK
    bank_number = (column + 1) * BITS_PER_BANK - row_index // BITS_PER_BANK
    return bank_number, bit_index


def get_or_create_section(card: DataManagementCard, kind: SectionKind) -> SpecCodeSection:
    sections = card.nc_spec_codes if kind.family == "NC" else card.plc_spec_codes
    for section in sections:
        if section.title == kind.title:
            return section
    section = SpecCodeSection(title=kind.title)
    sections.append(section)
    return section


class SpecCodeParser(SectionParser):
    def __init__(self, layout: SpecCodeLayout = DEFAULT_LAYOUT) -> None:
        self.layout = layout
        self.kind: SectionKind | None = None
        self.feature_rows = 0

    def reset(self) -> None:
        self.kind = None
        self.feature_rows = 0

    def begin(self, kind: SectionKind) -> None:
        """Enter a spec-code section with a fresh feature-row counter."""
        self.kind = kind
        self.feature_rows = 0

    def feed(self, line: str, card: DataManagementCard) -> None:
        if self.kind is None:
            return
        line_kind = classify_line(line)
        if line_kind in (LineKind.SEPARATOR, LineKind.FOOTER):
            return
        if line_kind is LineKind.HEX_CODES:
            get_or_create_section(card, self.kind).hex_codes.append(line.strip())
            return

        row = decode_feature_row(line, self.layout)
        for column, name_span, status in row.rejected:
            if name_span.strip():
                diagnose(
                    card,
                    logger,
                    f"Invalid feature status {status!r} for '{name_span.strip()}' "
                    f"(column {column}) in {self.kind.title}",
                )
        if not row.columns:
            return

        section = get_or_create_section(card, self.kind)
        for decoded in row.columns:
            bank_number, bit_index = feature_address(decoded.column, self.feature_rows)
            section.features.append(
                SpecFeature(
                    name=decoded.name,
                    enabled=decoded.enabled,
                    bank_number=bank_number,
                    bit_index=bit_index,
                )
            )
        self.feature_rows += 1
