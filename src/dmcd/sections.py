"""Section header recognition and title classification.

Headers look like ``=====[ Machine Data ]=====``. The bracketed title is
normalized (upper-cased, spaces and the ``No.`` marker removed) and looked up
in a fixed table of known sections.
"""

from __future__ import annotations

import re
from enum import Enum

HEADER_RE = re.compile(r"^=+\s*\[(?P<title>[^\]]+)\]\s*=+$")
NUMBER_MARKER_RE = re.compile(r"NO\.?(?=\d)")


class SectionKind(Enum):
    MACHINE_DATA = "Machine Data"
    CUSTOMER_DATA = "Customer Data"
    NOTE = "NOTE"
    DVD_MEDIA_VERSION = "DVD Media Version Data"
    SOFT_VERSION = "Soft Version Excepted OSP System CD"
    PACKAGE_COMPOSITION = "Package Soft composition"
    CUSTOM_SOFT_COMPOSITION = "NC Custom Soft composition"
    NC_SPEC_CODE_1 = "NC-SPEC CODE No.1"
    NC_SPEC_CODE_2 = "NC-SPEC CODE No.2"
    NC_SPEC_CODE_3 = "NC-SPEC CODE No.3"
    PLC_SPEC_CODE_1 = "PLC-SPEC CODE No.1"
    PLC_SPEC_CODE_2 = "PLC-SPEC CODE No.2"
    PLC_SPEC_CODE_3 = "PLC-SPEC CODE No.3"

    @property
    def title(self) -> str:
        """Canonical title; spec-code sections are keyed by it."""
        return self.value

    @property
    def is_spec_code(self) -> bool:
        return self in NC_SPEC_KINDS or self in PLC_SPEC_KINDS

    @property
    def family(self) -> str | None:
        if self in NC_SPEC_KINDS:
            return "NC"
        if self in PLC_SPEC_KINDS:
            return "PLC"
        return None


NC_SPEC_KINDS = frozenset(
    {SectionKind.NC_SPEC_CODE_1, SectionKind.NC_SPEC_CODE_2, SectionKind.NC_SPEC_CODE_3}
)
PLC_SPEC_KINDS = frozenset(
    {SectionKind.PLC_SPEC_CODE_1, SectionKind.PLC_SPEC_CODE_2, SectionKind.PLC_SPEC_CODE_3}
)

TITLE_TABLE: dict[str, SectionKind] = {
    "MACHINEDATA": SectionKind.MACHINE_DATA,
    "CUSTOMERDATA": SectionKind.CUSTOMER_DATA,
    "NOTE": SectionKind.NOTE,
    "DVDMEDIAVERSIONDATA": SectionKind.DVD_MEDIA_VERSION,
    "SOFTVERSIONEXCEPTEDOSPSYSTEMCD": SectionKind.SOFT_VERSION,
    "SOFTVERSIONEXCEPTEDOSPSYSTEMCD/DVD": SectionKind.SOFT_VERSION,
    "PACKAGESOFTCOMPOSITION": SectionKind.PACKAGE_COMPOSITION,
    "NCCUSTOMSOFTCOMPOSITION": SectionKind.CUSTOM_SOFT_COMPOSITION,
    "NC-SPECCODE1": SectionKind.NC_SPEC_CODE_1,
    "NC-BSPECCODE1": SectionKind.NC_SPEC_CODE_1,
    "NC-SPECCODE2": SectionKind.NC_SPEC_CODE_2,
    "NC-SPECCODE3": SectionKind.NC_SPEC_CODE_3,
    "PLC-SPECCODE1": SectionKind.PLC_SPEC_CODE_1,
    "PLC-SPECCODE2": SectionKind.PLC_SPEC_CODE_2,
    "PLC-SPECCODE3": SectionKind.PLC_SPEC_CODE_3,
}


def match_header(line: str) -> str | None:
    """Return the trimmed bracketed title if ``line`` is a section header."""
    match = HEADER_RE.match(line.strip())
    if not match:
        return None
    return match.group("title").strip()


def normalize_title(title: str) -> str:
    key = title.strip().upper().replace(" ", "")
    key = key.replace("NO.", "")
    return NUMBER_MARKER_RE.sub("", key)


def classify_title(title: str) -> SectionKind | None:
    """Map a raw header title to its section kind, or None when unknown."""
    return TITLE_TABLE.get(normalize_title(title))
