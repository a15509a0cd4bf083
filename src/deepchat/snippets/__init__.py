"""Extraction of marked code snippets from assistant replies."""

from .extractor import extract_snippets, snippet_path

__all__ = ["extract_snippets", "snippet_path"]
