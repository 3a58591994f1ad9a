"""NOTE section: one revision entry per comment line.

Entry layout: ``<id> <MM/DD/YY> [SO#<n>] [P#<n>] free text``. Tags may be fused
(``SO#123``) or split across two tokens (``SO# 123``).
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from dmcd.model import DataManagementCard, RevisionEntry
from dmcd.parsers.base import SectionParser, diagnose

logger = logging.getLogger(__name__)

ENTRY_DATE_FORMAT = "%m/%d/%y"
SALES_ORDER_TAG = "SO#"
PROJECT_TAG = "P#"
NON_ENTRY_PREFIXES = ("<", "[", "=")


def is_comment_line(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(NON_ENTRY_PREFIXES)


def _tokens(line: str) -> list[str]:
    return [token for token in line.split(" ") if token]


def _parse_entry_date(token: str) -> date | None:
    try:
        return datetime.strptime(token, ENTRY_DATE_FORMAT).date()
    except ValueError:
        return None


def _match_tag(tokens: list[str], idx: int, tag: str, other_tag: str) -> tuple[str | None, int]:
    """Match ``tag`` at ``idx``; return (value, tokens consumed)."""
    token = tokens[idx]
    if token == tag:
        if idx + 1 < len(tokens) and not tokens[idx + 1].startswith(other_tag):
            return tag + tokens[idx + 1], 2
        return None, 0
    if token.startswith(tag) and len(token) > len(tag):
        return token, 1
    return None, 0


def parse_revision_entry(line: str, card: DataManagementCard) -> RevisionEntry | None:
    """Decode one comment line; None when it carries no identifier."""
    tokens = _tokens(line.strip())
    if not tokens:
        diagnose(card, logger, f"Could not parse identifier from comment line '{line}'")
        return None

    entry = RevisionEntry(identifier=tokens[0], raw_line=line)
    if len(tokens) >= 2:
        entry.production_date = _parse_entry_date(tokens[1])
        if entry.production_date is None:
            diagnose(card, logger, f"Could not parse date '{tokens[1]}' from comment line '{line}'")

    idx = 2
    while idx < len(tokens):
        if entry.sales_order is None:
            value, consumed = _match_tag(tokens, idx, SALES_ORDER_TAG, PROJECT_TAG)
            if value is not None:
                entry.sales_order = value
                if consumed == 2:
                    # the joined number is spent and cannot start a project tag
                    idx += consumed
                    continue
        if entry.project_number is None:
            value, consumed = _match_tag(tokens, idx, PROJECT_TAG, SALES_ORDER_TAG)
            if value is not None:
                entry.project_number = value
                idx += consumed
                continue
        idx += 1
    return entry


class NoteParser(SectionParser):
    def reset(self) -> None:
        pass

    def feed(self, line: str, card: DataManagementCard) -> None:
        if not is_comment_line(line):
            return
        entry = parse_revision_entry(line, card)
        if entry is not None:
            card.revisions.append(entry)
