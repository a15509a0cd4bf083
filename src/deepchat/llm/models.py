from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .stream import StreamConsumer

Role = Literal["system", "user", "assistant"]


class StreamingResponse:
    """Wrapper for streaming LLM responses.

    Acts as an async iterator for text fragments while the attached
    consumer accumulates the full reply and any usage info reported
    at the end of the stream.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for fragment in stream:
            print(fragment, end="")
        # After iteration, the reply and usage are available
        print(stream.text, stream.usage)
    """

    def __init__(
        self,
        async_iter: AsyncIterator[str],
        consumer: "StreamConsumer | None" = None,
    ):
        """Initialize with an async iterator of text fragments.

        Args:
            async_iter: Async iterator yielding text fragments
            consumer: Consumer producing the fragments, if any
        """
        self._iter = async_iter
        self._consumer = consumer
        self._parts: list[str] = []

    @property
    def text(self) -> str:
        """Get the text accumulated so far."""
        if self._consumer is not None:
            return self._consumer.text
        return "".join(self._parts)

    @property
    def usage(self) -> dict[str, Any] | None:
        """Get token usage info (available after iteration completes)."""
        if self._consumer is not None:
            return self._consumer.usage
        return None

    def __aiter__(self) -> "StreamingResponse":
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> str:
        """Get next fragment from the underlying iterator."""
        fragment = await self._iter.__anext__()
        if self._consumer is None:
            self._parts.append(fragment)
        return fragment


class ChatMessage(BaseModel):
    """Represents a chat message in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
