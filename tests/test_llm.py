"""Unit tests for the llm module."""
import json

import httpx
import pytest

from conftest import DONE_LINE, FakeProvider, aiter_lines, event_line
from deepchat.llm import (
    ChatMessage,
    DeepSeekProvider,
    LLMProvider,
    OpenAIProvider,
    StreamConsumer,
    StreamingResponse,
    create_llm_provider,
)


class TestLLMProviderInterface:
    """Tests for the abstract LLMProvider interface."""

    def test_provider_is_abstract(self):
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider()  # type: ignore


class TestFactory:
    """Tests for create_llm_provider."""

    def test_deepseek_defaults(self):
        provider = create_llm_provider("deepseek", api_key="fake-key")

        assert isinstance(provider, DeepSeekProvider)
        assert provider.model == "deepseek-chat"

    def test_openai_with_model(self):
        provider = create_llm_provider("OpenAI", api_key="fake-key", model="gpt-4o")

        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o"

    def test_missing_api_key(self):
        with pytest.raises(TypeError, match="api_key"):
            create_llm_provider("deepseek")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("llama", api_key="fake-key")


class TestChatMessage:
    """Tests for ChatMessage."""

    def test_rejects_unknown_role(self):
        with pytest.raises(ValueError):
            ChatMessage(role="tool", content="x")

    def test_is_frozen(self):
        message = ChatMessage(role="user", content="x")
        with pytest.raises(ValueError):
            message.content = "y"  # type: ignore


class TestStreamingResponse:
    """Tests for StreamingResponse."""

    @pytest.mark.asyncio
    async def test_text_and_usage_come_from_consumer(self):
        consumer = StreamConsumer()
        lines = aiter_lines([
            event_line("A"),
            event_line("B"),
            'data: {"choices": [], "usage": {"total_tokens": 7}}',
            DONE_LINE,
        ])
        stream = StreamingResponse(consumer.fragments(lines), consumer=consumer)

        fragments = [f async for f in stream]

        assert fragments == ["A", "B"]
        assert stream.text == "AB"
        assert stream.usage == {"total_tokens": 7}

    @pytest.mark.asyncio
    async def test_plain_iterator_is_accumulated(self):
        stream = StreamingResponse(aiter_lines(["x", "y"]))

        assert [f async for f in stream] == ["x", "y"]
        assert stream.text == "xy"
        assert stream.usage is None


class TestFakeProvider:
    """The shared fake behaves like a real provider."""

    @pytest.mark.asyncio
    async def test_context_manager_closes(self):
        provider = FakeProvider([event_line("hi"), DONE_LINE])

        async with provider:
            response = await provider.chat_completion([ChatMessage(role="user", content="q")])

        assert response.content == "hi"
        assert provider.closed


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestOpenAIProviderTransport:
    """Tests for OpenAIProvider against an in-process HTTP transport."""

    @pytest.mark.asyncio
    async def test_stream_feeds_raw_event_lines_to_consumer(self):
        bodies = []
        sse = "\n\n".join([
            event_line("A"),
            "data: {not json",
            event_line("B"),
            DONE_LINE,
            event_line("after done"),
        ]) + "\n\n"

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, headers={"content-type": "text/event-stream"}, text=sse)

        provider = OpenAIProvider(api_key="x", base_url="http://test/v1", http_client=mock_client(handler))
        async with provider:
            stream = await provider.chat_completion_stream([ChatMessage(role="user", content="hi")])
            fragments = [f async for f in stream]

        assert bodies[0]["stream"] is True
        assert bodies[0]["messages"] == [{"role": "user", "content": "hi"}]
        assert "temperature" not in bodies[0]
        assert fragments == ["A", "B"]
        assert stream.text == "AB"

    @pytest.mark.asyncio
    async def test_completion_returns_content_and_usage(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={
                "id": "chatcmpl-1",
                "object": "chat.completion",
                "created": 0,
                "model": "gpt-4o-mini",
                "choices": [{
                    "index": 0,
                    "message": {"role": "assistant", "content": "hello"},
                    "finish_reason": "stop",
                }],
                "usage": {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4},
            })

        provider = OpenAIProvider(api_key="x", base_url="http://test/v1", http_client=mock_client(handler))
        async with provider:
            response = await provider.chat_completion(
                [ChatMessage(role="user", content="hi")],
                temperature=0.2,
            )

        assert bodies[0]["temperature"] == 0.2
        assert not bodies[0].get("stream")
        assert response.content == "hello"
        assert response.model == "gpt-4o-mini"
        assert response.usage == {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_stream_real_api(api_keys):
    """Integration test: stream a short reply from DeepSeek."""
    if not api_keys["deepseek"]:
        pytest.skip("DEEPSEEK_API_KEY not set")

    async with DeepSeekProvider(api_key=api_keys["deepseek"]) as provider:
        stream = await provider.chat_completion_stream(
            [ChatMessage(role="user", content="Reply with the single word: pong")],
            max_tokens=5,
        )
        fragments = [f async for f in stream]

    assert fragments
    assert stream.text == "".join(fragments)
