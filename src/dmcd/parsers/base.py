"""Shared pieces for the per-section line parsers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from dmcd.model import DataManagementCard


class SectionParser(ABC):
    """One small state machine per section kind.

    ``feed`` receives one normalized line at a time and mutates the card;
    ``reset`` returns the parser to its initial phase when the driver enters
    the section again.
    """

    @abstractmethod
    def reset(self) -> None: ...

    @abstractmethod
    def feed(self, line: str, card: DataManagementCard) -> None: ...


def bracketed_key(line: str, opening: str, closing: str) -> str | None:
    """Return the trimmed key of a wholly bracketed line, else None."""
    if len(line) >= 2 and line.startswith(opening) and line.endswith(closing):
        return line[1:-1].strip()
    return None


def diagnose(card: DataManagementCard, logger: logging.Logger, message: str) -> None:
    logger.warning(message)
    card.warn(message)
