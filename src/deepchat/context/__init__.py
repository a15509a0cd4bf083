"""Source-file context module.

Loads a directory of code files and renders them as a single
context message for the model.
"""

from .languages import language_for_extension, normalize_extensions
from .models import ContextFile, LoadResult
from .store import ContextStore

__all__ = [
    "ContextFile",
    "ContextStore",
    "LoadResult",
    "language_for_extension",
    "normalize_extensions",
]
