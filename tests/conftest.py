"""Pytest configuration and shared fixtures."""
import json
import os
from collections.abc import AsyncIterator
from typing import Any

import pytest

from deepchat.llm import ChatMessage, LLMProvider, LLMResponse, StreamConsumer, StreamingResponse

SYSTEM_PROMPT = "You are a helpful assistant."


def event_line(content: str | None = None, **payload: Any) -> str:
    """Frame a chat-completions chunk as a server-sent event line."""
    if content is not None:
        payload.setdefault("choices", [{"index": 0, "delta": {"content": content}}])
    return "data: " + json.dumps(payload)


DONE_LINE = "data: [DONE]"


async def aiter_lines(lines: list[str]) -> AsyncIterator[str]:
    for line in lines:
        yield line


class FakeProvider(LLMProvider):
    """Provider that replays canned event lines for every request."""

    def __init__(self, lines: list[str] | None = None, error: Exception | None = None):
        self.lines = lines or []
        self.error = error
        self.requests: list[list[ChatMessage]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def chat_completion(self, messages, model=None, temperature=None, max_tokens=None, **kwargs):
        self.requests.append(list(messages))
        consumer = StreamConsumer()
        return LLMResponse(content=consumer.consume(self.lines), model=self.model)

    async def chat_completion_stream(self, messages, model=None, temperature=None, max_tokens=None, **kwargs):
        self.requests.append(list(messages))
        consumer = StreamConsumer()
        return StreamingResponse(consumer.fragments(self._lines()), consumer=consumer)

    async def _lines(self) -> AsyncIterator[str]:
        for line in self.lines:
            yield line
        if self.error is not None:
            raise self.error

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "deepseek": os.getenv("DEEPSEEK_API_KEY")
    }


@pytest.fixture
def system_prompt():
    return SYSTEM_PROMPT


@pytest.fixture
def sample_conversation():
    """A short dialogue with the canonical system message first."""
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content="Write hello world"),
        ChatMessage(role="assistant", content="print('hello world')"),
        ChatMessage(role="user", content="Now in C"),
        ChatMessage(role="assistant", content='puts("hello world");'),
    ]


@pytest.fixture
def source_tree(tmp_path):
    """A small directory of source files to load as context."""
    root = tmp_path / "project"
    (root / "pkg").mkdir(parents=True)
    (root / "main.py").write_text("print('main')\n")
    (root / "app.js").write_text("console.log('app');\n")
    (root / "helpers.py").write_text("def helper():\n    return 1\n")
    (root / "notes.unknown").write_text("plain notes\n")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n")
    (root / "pkg" / "util.py").write_text("X = 1\n")
    return root
