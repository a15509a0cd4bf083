"""Data models for loaded source-file context."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ContextFile(BaseModel):
    """A source file loaded as conversation context."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Full path of the file as enumerated")
    display_name: str = Field(description="File name without directories")
    content: str = Field(description="Full text content")
    language: str = Field(description="Language tag inferred from the extension")
    last_modified: datetime = Field(description="Last modification time")

    @property
    def size(self) -> int:
        """Get content size in characters."""
        return len(self.content)

    def relative_path(self, base: Path | None = None) -> str:
        """Path relative to base (default: working directory) when it lies inside it."""
        base_str = str(base or Path.cwd())
        if self.path.startswith(base_str):
            return self.path[len(base_str):].lstrip("/\\")
        return self.path


class LoadResult(BaseModel):
    """Outcome of a directory scan."""

    model_config = ConfigDict(frozen=True)

    loaded: int = Field(default=0, description="Files added to the context set")
    skipped: int = Field(default=0, description="Files filtered out by extension or exclusion")
    failed: list[str] = Field(default_factory=list, description="Paths that could not be read")
