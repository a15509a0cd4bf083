"""Transcript persistence in two sibling forms.

- Structured form (``.json``): the full message list, lossless.
- Plain form (``.txt``): one annotated line per message, meant for people.
  Content is written as-is, so any message containing line breaks does not
  survive a plain-form round trip. Each prefix is removed together with
  its trailing space, including ``[System] ``, so a single-line system
  message reads back without a leading space.

Both files are always written together under the same base name.
"""

import re
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from pydantic import TypeAdapter

from ..config import PLAIN_SUFFIX, STRUCTURED_SUFFIX, TRANSCRIPT_TIMESTAMP_FORMAT
from ..llm.models import ChatMessage, Role
from ..logging import get_logger

logger = get_logger("transcript")

# Line prefix -> role, for both rendering and parsing the plain form
PLAIN_PREFIXES: tuple[tuple[str, Role], ...] = (
    ("[System] ", "system"),
    ("You: ", "user"),
    ("AI: ", "assistant"),
)
_PREFIX_BY_ROLE = {role: prefix for prefix, role in PLAIN_PREFIXES}
# Roles followed by a blank separator line
_SEPARATED_ROLES = {"system", "assistant"}

_messages_adapter = TypeAdapter(list[ChatMessage])
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def render_plain(messages: Iterable[ChatMessage], saved_at: datetime | None = None) -> str:
    """Render messages in the plain annotated-line form."""
    saved_at = saved_at or datetime.now()
    lines = [
        f"Conversation saved on: {saved_at:%Y-%m-%d %H:%M:%S}",
        "-" * 50,
        "",
    ]
    for message in messages:
        lines.append(f"{_PREFIX_BY_ROLE[message.role]}{message.content}")
        if message.role in _SEPARATED_ROLES:
            lines.append("")
    return "\n".join(lines) + "\n"


def parse_plain(text: str) -> list[ChatMessage]:
    """Parse the plain form. Lines without a known prefix are dropped."""
    messages = []
    for line in _LINE_BREAK.split(text):
        for prefix, role in PLAIN_PREFIXES:
            if line.startswith(prefix):
                messages.append(ChatMessage(role=role, content=line[len(prefix):]))
                break
    return messages


def render_structured(messages: Iterable[ChatMessage]) -> str:
    """Serialize messages to indented JSON."""
    return _messages_adapter.dump_json(list(messages), indent=2).decode("utf-8")


def parse_structured(text: str) -> list[ChatMessage]:
    """Deserialize the structured form.

    Raises:
        ValueError: If the text is not a valid message list
    """
    return _messages_adapter.validate_json(text)


def default_base_name(now: datetime | None = None) -> str:
    """Timestamped base name used when the user gives none."""
    now = now or datetime.now()
    return f"conversation_{now.strftime(TRANSCRIPT_TIMESTAMP_FORMAT)}"


def select_transcript(files: list[Path], choice: str | None) -> Path | None:
    """Resolve a 1-based menu choice. Anything else means cancel."""
    try:
        index = int((choice or "").strip())
    except ValueError:
        return None
    if 1 <= index <= len(files):
        return files[index - 1]
    return None


class TranscriptStore:
    """Saves and restores transcripts in one directory."""

    def __init__(self, directory: str | Path = "."):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def paths_for(self, name: str | None) -> tuple[Path, Path]:
        """Plain and structured paths for a user-supplied name.

        An empty name falls back to a timestamped one; a trailing
        .txt or .json is ignored.
        """
        base = (name or "").strip()
        for suffix in (PLAIN_SUFFIX, STRUCTURED_SUFFIX):
            if base.endswith(suffix):
                base = base[:-len(suffix)]
                break
        if not base:
            base = default_base_name()
        return (
            self._directory / f"{base}{PLAIN_SUFFIX}",
            self._directory / f"{base}{STRUCTURED_SUFFIX}",
        )

    def save(self, messages: Iterable[ChatMessage], name: str | None = None) -> tuple[Path, Path]:
        """Write both forms of the same snapshot.

        Returns:
            (plain path, structured path)

        Raises:
            OSError: If either file cannot be written
        """
        snapshot = list(messages)
        plain_path, structured_path = self.paths_for(name)
        plain_path.parent.mkdir(parents=True, exist_ok=True)
        plain_path.write_text(render_plain(snapshot), encoding="utf-8")
        structured_path.write_text(render_structured(snapshot), encoding="utf-8")
        logger.info("Saved %d messages to %s and %s", len(snapshot), plain_path, structured_path)
        return plain_path, structured_path

    def list_files(self) -> list[Path]:
        """Transcript candidates of both forms, sorted by name."""
        if not self._directory.is_dir():
            return []
        return sorted(
            p for p in self._directory.iterdir()
            if p.is_file() and p.suffix in (PLAIN_SUFFIX, STRUCTURED_SUFFIX)
        )

    def load(self, path: str | Path) -> list[ChatMessage]:
        """Read a transcript of either form.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the extension is unknown or the structured form is invalid
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        if path.suffix == STRUCTURED_SUFFIX:
            messages = parse_structured(text)
        elif path.suffix == PLAIN_SUFFIX:
            messages = parse_plain(text)
        else:
            raise ValueError(f"Unsupported transcript format: {path.suffix}")
        logger.info("Loaded %d messages from %s", len(messages), path)
        return messages
