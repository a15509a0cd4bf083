"""Configuration constants.

Centralizes the literal markers, sentinels and defaults shared by the
streaming consumer, the transcript codec and the snippet extractor.
"""

# Streaming protocol
EVENT_PREFIX = "data: "  # Prefix of every server-sent event line carrying a payload
DONE_SENTINEL = "[DONE]"  # Payload that terminates the stream

# Model endpoint defaults
DEFAULT_PROVIDER = "deepseek"
DEEPSEEK_BASE_URL = "https://api.deepseek.com"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"

# Transcript persistence
PLAIN_SUFFIX = ".txt"
STRUCTURED_SUFFIX = ".json"
TRANSCRIPT_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
RESTORED_PREVIEW_COUNT = 4  # Messages echoed after a load

# Snippet extraction
SNIPPET_MARKER = "**"  # Two leading characters of a file boundary line
FENCE_SENTINEL = "########"  # Code bracket line, never written to output
DEFAULT_SNIPPETS_DIR = "CodeSnippets"

# Context display
CONTEXT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
CONTEXT_PREVIEW_PER_LANGUAGE = 10  # Files listed per language in showcontext
