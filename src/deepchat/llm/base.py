from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse, StreamingResponse


class LLMProvider(ABC):
    """Interface to a chat model endpoint.

    This module hides which endpoint answers a request and how the reply
    travels back. The chat loop only hands over an ordered message list and
    reads fragments from the returned stream.

    Providers own network resources and are async context managers:
        async with provider:
            stream = await provider.chat_completion_stream(messages)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model used when a call does not name one."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Request a complete reply in one response.

        Args:
            messages: Ordered message list for this turn
            model: Model override
            temperature: Sampling temperature (None leaves the endpoint default)
            max_tokens: Completion length limit
            **kwargs: Extra request fields

        Returns:
            The reply with its model name and token usage
        """

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Request a reply delivered fragment by fragment.

        Nothing is read from the network until the returned stream is
        iterated. Breaking out of the iteration closes the connection.

        Returns:
            StreamingResponse yielding fragments in arrival order; the
            accumulated reply is on ``.text`` once iteration ends
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the HTTP client."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the provider on exit.

        Note: "Event loop is closed" raised by httpx during interpreter
        shutdown is ignored: https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
