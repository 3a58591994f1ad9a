"""Document driver: walks the card line by line and dispatches per section.

Each line is normalized, then either recognized as a section header (which
switches the active section) or handed to the active section's parser.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from dmcd.model import DataManagementCard
from dmcd.normalize import normalize_line
from dmcd.parsers.base import SectionParser, diagnose
from dmcd.parsers.customer import CustomerDataParser
from dmcd.parsers.keyvalue import (
    CustomSoftCompositionParser,
    DvdMediaVersionParser,
    MachineDataParser,
    PackageCompositionParser,
    SoftVersionParser,
)
from dmcd.parsers.note import NoteParser
from dmcd.parsers.speccode import DEFAULT_LAYOUT, SpecCodeLayout, SpecCodeParser
from dmcd.sections import SectionKind, classify_title, match_header

logger = logging.getLogger(__name__)


@dataclass
class DecoderConfig:
    layout: SpecCodeLayout = DEFAULT_LAYOUT


class DmcParser:
    """Parse DMC lines into a ``DataManagementCard``.

    An instance keeps per-section state while a parse runs; use one instance
    per thread.
    """

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self.config = config or DecoderConfig()
        self.spec_codes = SpecCodeParser(self.config.layout)
        self.parsers: dict[SectionKind, SectionParser] = {
            SectionKind.MACHINE_DATA: MachineDataParser(),
            SectionKind.CUSTOMER_DATA: CustomerDataParser(),
            SectionKind.NOTE: NoteParser(),
            SectionKind.DVD_MEDIA_VERSION: DvdMediaVersionParser(),
            SectionKind.SOFT_VERSION: SoftVersionParser(),
            SectionKind.PACKAGE_COMPOSITION: PackageCompositionParser(),
            SectionKind.CUSTOM_SOFT_COMPOSITION: CustomSoftCompositionParser(),
        }
        for kind in SectionKind:
            if kind.is_spec_code:
                self.parsers[kind] = self.spec_codes
        self.section: SectionKind | None = None

    def reset(self) -> None:
        self.section = None
        for parser in set(self.parsers.values()):
            parser.reset()

    def parse(self, lines: Iterable[str]) -> DataManagementCard:
        self.reset()
        card = DataManagementCard()
        for raw_line in lines:
            self.feed(raw_line, card)
        return card

    def feed(self, raw_line: str, card: DataManagementCard) -> None:
        line = normalize_line(raw_line)
        trimmed = line.strip()
        in_spec_codes = self.section is not None and self.section.is_spec_code
        if not trimmed and not in_spec_codes:
            return

        title = match_header(trimmed)
        if title is not None:
            self._enter_section(title, card)
            return

        if self.section is None:
            logger.debug("Dropping line outside any known section: %r", line)
            return
        if in_spec_codes:
            # full-width rows keep leading blank name fields aligned
            row = line if len(line) == self.config.layout.row_width else trimmed
            self.spec_codes.feed(row, card)
        else:
            self.parsers[self.section].feed(trimmed, card)

    def _enter_section(self, title: str, card: DataManagementCard) -> None:
        previous = self.section
        kind = classify_title(title)
        if kind is None:
            diagnose(card, logger, f"Unrecognized section header '{title}'")
            self.section = None
            return

        self.section = kind
        if kind.is_spec_code:
            # re-announcing the same spec-code section keeps its row count
            if kind is not previous:
                self.spec_codes.begin(kind)
        else:
            self.parsers[kind].reset()


def parse_lines(lines: Iterable[str], config: DecoderConfig | None = None) -> DataManagementCard:
    """Parse with a fresh ``DmcParser``."""
    return DmcParser(config).parse(lines)
