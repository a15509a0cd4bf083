"""Conversation module for deepchat.

Holds the session history, assembles outbound requests and persists
transcripts.
"""

from .assembler import assemble_request
from .state import Conversation
from .transcript import (
    TranscriptStore,
    default_base_name,
    parse_plain,
    parse_structured,
    render_plain,
    render_structured,
    select_transcript,
)

__all__ = [
    "Conversation",
    "TranscriptStore",
    "assemble_request",
    "default_base_name",
    "parse_plain",
    "parse_structured",
    "render_plain",
    "render_structured",
    "select_transcript",
]
