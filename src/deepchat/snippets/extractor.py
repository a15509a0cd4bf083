"""Splits assistant text into files using the snippet marker convention.

A line starting with ``**`` opens a new output file named by the rest of
the line (``**src/app.py**`` or ``**src/app.py:**``). Every following
line goes to that file until the next marker or the end of input.
Blank lines and ``########`` fence lines are never written; text before
the first marker is discarded.
"""

import re
from pathlib import Path
from typing import TextIO

from ..config import DEFAULT_SNIPPETS_DIR, FENCE_SENTINEL, SNIPPET_MARKER
from ..logging import get_logger

logger = get_logger("snippets")

# Only CR, LF and CRLF end a line
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def snippet_path(marker_line: str) -> str:
    """Relative path named by a marker line."""
    return marker_line.strip("*").strip(":").strip()


class _SnippetWriter:
    """Holds at most one open output file.

    Opening a new file closes the previous one; leaving the context
    closes whatever is open, including on errors.
    """

    def __init__(self, root: Path):
        self._root = root
        self._resolved_root = root.resolve()
        self._current: TextIO | None = None
        self.created: list[Path] = []

    @property
    def is_open(self) -> bool:
        return self._current is not None

    def open(self, relative: str) -> Path | None:
        self.close()
        target = self._root / relative
        if not relative or not target.resolve().is_relative_to(self._resolved_root):
            logger.warning("Ignoring snippet path outside %s: %r", self._root, relative)
            return None
        target.parent.mkdir(parents=True, exist_ok=True)
        self._current = target.open("w", encoding="utf-8")
        self.created.append(target)
        logger.info("Creating file %s", relative)
        return target

    def write_line(self, line: str) -> None:
        if self._current is not None:
            self._current.write(line + "\n")

    def close(self) -> None:
        if self._current is not None:
            try:
                self._current.close()
            finally:
                self._current = None

    def __enter__(self) -> "_SnippetWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def extract_snippets(text: str, root: str | Path = DEFAULT_SNIPPETS_DIR) -> list[Path]:
    """Write every marked file found in text under root.

    Args:
        text: Text to scan, usually all assistant replies joined
        root: Directory the marker paths are relative to

    Returns:
        Paths of the files created, in marker order. A path named twice
        appears twice and keeps only its last section.

    Raises:
        OSError: If a directory or file cannot be created or written
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)

    with _SnippetWriter(root) as writer:
        for line in _LINE_BREAK.split(text):
            if not line.strip():
                continue
            if line[:2] == SNIPPET_MARKER:
                writer.open(snippet_path(line))
            elif line == FENCE_SENTINEL:
                continue
            else:
                writer.write_line(line)
        return writer.created
