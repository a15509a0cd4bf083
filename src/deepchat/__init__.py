"""
Deepchat: a streaming command-line chat client for OpenAI-compatible models.

Conversation history, loaded code context and the streamed reply parser are
kept as separate modules, each hiding one design decision.
"""

__version__ = "0.1.0"

from .context import ContextFile, ContextStore
from .conversation import Conversation, TranscriptStore, assemble_request
from .llm import ChatMessage, LLMProvider, StreamConsumer, create_llm_provider
from .snippets import extract_snippets

__all__ = [
    "ChatMessage",
    "ContextFile",
    "ContextStore",
    "Conversation",
    "LLMProvider",
    "StreamConsumer",
    "TranscriptStore",
    "assemble_request",
    "create_llm_provider",
    "extract_snippets",
]
