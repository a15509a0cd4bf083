from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ...config import OPENAI_DEFAULT_MODEL
from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse, StreamingResponse
from ..stream import StreamConsumer


def _to_api_messages(messages: list[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": msg.role, "content": msg.content} for msg in messages]


def _sampling_options(temperature: float | None, max_tokens: int | None) -> dict[str, Any]:
    """Keep unset sampling options out of the request body."""
    options: dict[str, Any] = {}
    if temperature is not None:
        options["temperature"] = temperature
    if max_tokens is not None:
        options["max_tokens"] = max_tokens
    return options


class OpenAIProvider(LLMProvider):
    """Provider for any OpenAI-compatible chat-completions endpoint.

    Hidden design decisions:
    - Client setup and bearer authentication (OpenAI SDK)
    - Streaming through the SDK's raw response, so the ``data:`` lines
      reach StreamConsumer untouched and the SDK is only the transport
    """

    def __init__(
        self,
        api_key: str,
        model: str = OPENAI_DEFAULT_MODEL,
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Create the client. No request is made here.

        Args:
            api_key: Static credential
            model: Default model
            base_url: Endpoint root (None uses the SDK default)
            organization: OpenAI organization ID
            **client_kwargs: Passed through to AsyncOpenAI (timeout, http_client, ...)
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        completion = await self._client.chat.completions.create(
            model=model or self._model,
            messages=_to_api_messages(messages),
            **_sampling_options(temperature, max_tokens),
            **kwargs
        )

        usage = None
        if completion.usage:
            usage = completion.usage.model_dump(
                include={"prompt_tokens", "completion_tokens", "total_tokens"}
            )

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
            usage=usage,
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        consumer = StreamConsumer()
        lines = self._event_lines(
            model or self._model,
            _to_api_messages(messages),
            _sampling_options(temperature, max_tokens),
            **kwargs,
        )
        return StreamingResponse(consumer.fragments(lines), consumer=consumer)

    async def _event_lines(
        self,
        model: str,
        messages: list[dict[str, str]],
        options: dict[str, Any],
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        """Raw lines of the event-stream body, in arrival order."""
        async with self._client.chat.completions.with_streaming_response.create(
            model=model,
            messages=messages,
            stream=True,
            **options,
            **kwargs,
        ) as response:
            async for line in response.iter_lines():
                yield line

    async def close(self) -> None:
        await self._client.close()
