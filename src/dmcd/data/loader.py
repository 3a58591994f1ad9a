"""Helpers for reading DMC files from disk and parsing them."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from dmcd.decoder import DecoderConfig, DmcParser
from dmcd.model import DataManagementCard

DEFAULT_ENCODING = "utf-8"


def read_dmc_lines(path: Path, encoding: str = DEFAULT_ENCODING) -> list[str]:
    """Read a card and split it on CR/LF only.

    Form feeds and other Unicode line breaks stay inside their line so
    fixed-width rows keep their columns.
    """
    if not path.is_file():
        raise FileNotFoundError(f"DMC file not found: {path}")
    # universal newlines: CRLF and lone CR arrive as "\n"
    lines = path.read_text(encoding=encoding).split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def iter_dmc_files(directory: Path, pattern: str = "*.dmc") -> Iterator[Path]:
    """Yield matching card files under ``directory`` in a stable order."""
    yield from sorted(p for p in directory.rglob(pattern) if p.is_file())


def parse_file(
    path: Path, encoding: str = DEFAULT_ENCODING, config: DecoderConfig | None = None
) -> DataManagementCard:
    return DmcParser(config).parse(read_dmc_lines(path, encoding=encoding))
