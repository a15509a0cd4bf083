"""Conversation state for a chat session.

The conversation is an ordered list of role-tagged messages. Position
encodes turn order. The canonical behaviour prompt is stored at most once
and is re-injected fresh on every request by the assembler.
"""

from collections.abc import Iterable, Iterator

from ..llm.models import ChatMessage, Role


class Conversation:
    """Ordered, mutable message history plus the canonical system prompt."""

    def __init__(self, system_prompt: str, messages: Iterable[ChatMessage] | None = None):
        """Initialize the conversation.

        Args:
            system_prompt: The canonical behaviour instruction
            messages: Initial history (default: empty)
        """
        self._system_prompt = system_prompt
        self._messages: list[ChatMessage] = list(messages or [])

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def system_message(self) -> ChatMessage:
        """The canonical system message, built fresh."""
        return ChatMessage(role="system", content=self._system_prompt)

    @property
    def messages(self) -> list[ChatMessage]:
        """Stored messages in turn order (a copy)."""
        return list(self._messages)

    @property
    def has_dialogue(self) -> bool:
        """Whether anything besides system messages is stored."""
        return any(msg.role != "system" for msg in self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))

    def dialogue(self) -> list[ChatMessage]:
        """Stored user and assistant messages, in order."""
        return [msg for msg in self._messages if msg.role != "system"]

    def assistant_messages(self) -> list[str]:
        return [msg.content for msg in self._messages if msg.role == "assistant"]

    def _append(self, role: Role, content: str) -> bool:
        if not content:
            return False
        self._messages.append(ChatMessage(role=role, content=content))
        return True

    def append_user(self, content: str) -> bool:
        """Append a user message. Empty content is not stored."""
        return self._append("user", content)

    def append_assistant(self, content: str) -> bool:
        """Append a completed assistant reply. Empty content is not stored."""
        return self._append("assistant", content)

    def ensure_system_prompt(self) -> None:
        """Insert the canonical system message first if no system message is stored."""
        if not any(msg.role == "system" for msg in self._messages):
            self._messages.insert(0, self.system_message)

    def clear(self) -> None:
        """Drop all history and reseed with the canonical system message."""
        self._messages = [self.system_message]

    def replace_all(self, messages: Iterable[ChatMessage]) -> None:
        """Replace the history wholesale, as loaded. No reseeding happens."""
        self._messages = list(messages)
