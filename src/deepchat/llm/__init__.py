from .base import LLMProvider
from .factory import create_llm_provider
from .models import ChatMessage, LLMResponse, Role, StreamingResponse
from .providers import DeepSeekProvider, OpenAIProvider
from .stream import StreamConsumer, StreamState, extract_fragment

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "ChatMessage",
    "LLMResponse",
    "Role",
    "StreamingResponse",
    "DeepSeekProvider",
    "OpenAIProvider",
    "StreamConsumer",
    "StreamState",
    "extract_fragment",
]
