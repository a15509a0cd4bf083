"""Context store holding the source files injected ahead of the dialogue.

Hidden design decisions:
- Which files a directory scan accepts (binary denylist, excluded paths,
  extension filter)
- Language tagging of files
- The rendering of the single aggregated context message
"""

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from ..config import CONTEXT_TIMESTAMP_FORMAT
from ..logging import get_logger
from .languages import is_binary_extension, is_excluded_path, language_for_extension
from .models import ContextFile, LoadResult

logger = get_logger("context")


class ContextStore:
    """The set of source files loaded as context for a chat session.

    A scan replaces the whole set; files are never merged across scans.
    The store is owned by the session and passed explicitly to whoever
    needs to render it.
    """

    def __init__(self, files: Iterable[ContextFile] | None = None) -> None:
        self._files: list[ContextFile] = list(files or [])

    @property
    def files(self) -> list[ContextFile]:
        """Loaded files in scan order."""
        return list(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __bool__(self) -> bool:
        return bool(self._files)

    def load(
        self,
        directory: str | Path,
        extensions: set[str] | None = None,
        recursive: bool = False,
    ) -> LoadResult:
        """Scan a directory and replace the context set with its files.

        Args:
            directory: Directory to scan (a leading ~ is expanded)
            extensions: Lowercased extensions with leading dot; empty or None means all
            recursive: Whether to descend into subdirectories

        Returns:
            Counts of loaded and skipped files, plus paths that failed to read

        Raises:
            FileNotFoundError: If the directory does not exist
            NotADirectoryError: If the path is not a directory
        """
        root = Path(directory).expanduser()
        if not root.exists():
            raise FileNotFoundError(f"Directory not found: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        candidates = root.rglob("*") if recursive else root.iterdir()
        paths = sorted(p for p in candidates if p.is_file())

        loaded: list[ContextFile] = []
        skipped = 0
        failed: list[str] = []

        for file_path in paths:
            ext = file_path.suffix.lower()
            path_str = str(file_path)

            if extensions and ext not in extensions:
                skipped += 1
                continue

            if is_binary_extension(ext) or is_excluded_path(path_str):
                skipped += 1
                continue

            try:
                content = file_path.read_text(encoding="utf-8")
                modified = datetime.fromtimestamp(file_path.stat().st_mtime)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Error loading %s: %s", path_str, e)
                failed.append(path_str)
                continue

            loaded.append(ContextFile(
                path=path_str,
                display_name=file_path.name,
                content=content,
                language=language_for_extension(ext),
                last_modified=modified,
            ))

        self._files = loaded
        logger.info("Loaded %d context files from %s (%d skipped)", len(loaded), root, skipped)
        return LoadResult(loaded=len(loaded), skipped=skipped, failed=failed)

    def clear(self) -> None:
        """Remove every loaded file."""
        self._files = []

    def groups(self) -> list[tuple[str, list[ContextFile]]]:
        """Files grouped by language, groups in first-seen order.

        Files within a group are sorted by display name, ignoring case.
        """
        grouped: dict[str, list[ContextFile]] = {}
        for file in self._files:
            grouped.setdefault(file.language, []).append(file)
        return [
            (language, sorted(files, key=lambda f: (f.display_name.casefold(), f.display_name)))
            for language, files in grouped.items()
        ]

    def build_context_message(self) -> str:
        """Render every loaded file into one message body.

        Returns an empty string when nothing is loaded; callers must not
        send an empty context message.
        """
        if not self._files:
            return ""

        lines = ["I have loaded the following code files for context:", ""]
        for language, files in self.groups():
            lines.append(f"=== {language} Files ===")
            for file in files:
                lines.append(f"File: {file.display_name}")
                lines.append(f"Path: {file.path}")
                lines.append(f"Last Modified: {file.last_modified.strftime(CONTEXT_TIMESTAMP_FORMAT)}")
                lines.append("Content:")
                lines.append(f"```{language}")
                lines.append(file.content)
                lines.append("```")
                lines.append("")
        lines.append("Please use this code context to help answer my questions.")
        return "\n".join(lines) + "\n"
