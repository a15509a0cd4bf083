"""Consumer for the chat-completions server-sent event stream.

This module hides the framing of the incremental response protocol:
- Which lines carry events (``data: <payload>``)
- The terminal sentinel that ends the stream
- Where a text fragment lives inside a decoded payload

The consumer is a two-state machine (STREAMING -> DONE). Lines are fed
strictly in arrival order; every fragment is handed out immediately and
appended to the accumulator.
"""

import json
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable
from enum import Enum
from typing import Any

from ..config import DONE_SENTINEL, EVENT_PREFIX
from ..logging import get_logger

logger = get_logger("stream")


class StreamState(str, Enum):
    """Lifecycle of a streamed reply."""

    STREAMING = "streaming"
    DONE = "done"


def extract_fragment(payload: Any) -> str | None:
    """Return ``choices[0].delta.content`` from a decoded event, if present.

    Missing fields, an empty choices array or a non-string value are not
    errors; the event simply carries no fragment.
    """
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if not isinstance(content, str) or not content:
        return None
    return content


class StreamConsumer:
    """Re-assembles a streamed reply from raw event lines.

    Usage:
        consumer = StreamConsumer(on_fragment=print)
        for line in lines:
            consumer.feed(line)
            if consumer.done:
                break
        consumer.finish()
        reply = consumer.text
    """

    def __init__(self, on_fragment: Callable[[str], None] | None = None):
        """Initialize the consumer.

        Args:
            on_fragment: Called with each fragment as soon as it is decoded
        """
        self._on_fragment = on_fragment
        self._state = StreamState.STREAMING
        self._parts: list[str] = []
        self._usage: dict[str, Any] | None = None
        self._dropped = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state is StreamState.DONE

    @property
    def text(self) -> str:
        """Text accumulated from every fragment seen so far."""
        return "".join(self._parts)

    @property
    def fragment_count(self) -> int:
        return len(self._parts)

    @property
    def dropped_events(self) -> int:
        """Number of event payloads that could not be decoded."""
        return self._dropped

    @property
    def usage(self) -> dict[str, Any] | None:
        """Token usage reported by the endpoint, if any event carried it."""
        return self._usage

    def feed(self, line: str) -> str | None:
        """Process one raw line.

        Args:
            line: A line from the response body, with or without its terminator

        Returns:
            The fragment carried by the line, or None
        """
        if self.done:
            return None

        line = line.rstrip("\r\n")
        if not line.startswith(EVENT_PREFIX):
            return None

        data = line[len(EVENT_PREFIX):]
        if data == DONE_SENTINEL:
            self.finish()
            return None

        try:
            payload = json.loads(data)
        except ValueError:
            self._dropped += 1
            logger.debug("Dropped malformed event payload: %r", data[:200])
            return None

        if isinstance(payload, dict) and isinstance(payload.get("usage"), dict):
            self._usage = payload["usage"]

        fragment = extract_fragment(payload)
        if fragment is None:
            return None

        if self._on_fragment is not None:
            self._on_fragment(fragment)
        self._parts.append(fragment)
        return fragment

    def finish(self) -> str:
        """Move to DONE and return the accumulated text.

        Called on the terminal sentinel, and on input exhaustion where it acts
        as an implicit end of stream.
        """
        self._state = StreamState.DONE
        return self.text

    def consume(self, lines: Iterable[str]) -> str:
        """Feed lines until DONE or exhaustion and return the reply text."""
        for line in lines:
            self.feed(line)
            if self.done:
                break
        return self.finish()

    async def fragments(self, lines: AsyncIterable[str]) -> AsyncIterator[str]:
        """Yield fragments from an async line source.

        Stops reading as soon as the terminal sentinel arrives. If the source
        ends without one, the stream is finished implicitly.
        """
        async for line in lines:
            fragment = self.feed(line)
            if fragment is not None:
                yield fragment
            if self.done:
                break
        self.finish()
