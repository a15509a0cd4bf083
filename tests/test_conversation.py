"""Tests for conversation state and request assembly."""
from datetime import datetime

from hypothesis import given
from hypothesis import strategies as st

from conftest import SYSTEM_PROMPT
from deepchat.context import ContextFile, ContextStore
from deepchat.conversation import Conversation, assemble_request
from deepchat.llm import ChatMessage

message_strategy = st.builds(
    ChatMessage,
    role=st.sampled_from(["system", "user", "assistant"]),
    content=st.text(min_size=1, max_size=40),
)


def loaded_context() -> ContextStore:
    return ContextStore([
        ContextFile(
            path="/src/main.py",
            display_name="main.py",
            content="print(1)",
            language="python",
            last_modified=datetime(2024, 1, 1),
        )
    ])


class TestConversation:
    """Tests for Conversation."""

    def test_starts_empty(self):
        conversation = Conversation(SYSTEM_PROMPT)
        assert len(conversation) == 0
        assert not conversation.has_dialogue

    def test_append_user_and_assistant(self):
        conversation = Conversation(SYSTEM_PROMPT)

        assert conversation.append_user("hi")
        assert conversation.append_assistant("hello")

        assert [(m.role, m.content) for m in conversation] == [("user", "hi"), ("assistant", "hello")]
        assert conversation.has_dialogue

    def test_empty_assistant_reply_is_not_stored(self):
        conversation = Conversation(SYSTEM_PROMPT)
        conversation.append_user("hi")

        assert not conversation.append_assistant("")

        assert len(conversation) == 1

    def test_clear_reseeds_canonical_message(self, sample_conversation):
        conversation = Conversation(SYSTEM_PROMPT, sample_conversation)

        conversation.clear()

        assert conversation.messages == [ChatMessage(role="system", content=SYSTEM_PROMPT)]

    def test_ensure_system_prompt_does_not_duplicate(self):
        conversation = Conversation(SYSTEM_PROMPT)

        conversation.ensure_system_prompt()
        conversation.ensure_system_prompt()

        assert [m.role for m in conversation] == ["system"]

    def test_replace_all_does_not_reseed(self):
        conversation = Conversation(SYSTEM_PROMPT)
        conversation.clear()
        loaded = [ChatMessage(role="user", content="q"), ChatMessage(role="assistant", content="a")]

        conversation.replace_all(loaded)

        assert conversation.messages == loaded

    def test_messages_is_a_copy(self):
        conversation = Conversation(SYSTEM_PROMPT)
        conversation.messages.append(ChatMessage(role="user", content="x"))
        assert len(conversation) == 0

    def test_assistant_messages(self, sample_conversation):
        conversation = Conversation(SYSTEM_PROMPT, sample_conversation)
        assert conversation.assistant_messages() == ["print('hello world')", 'puts("hello world");']


class TestAssembleRequest:
    """Tests for assemble_request."""

    def test_without_context(self, sample_conversation):
        conversation = Conversation(SYSTEM_PROMPT, sample_conversation)

        request = assemble_request(conversation, ContextStore(), "next")

        assert request[0] == ChatMessage(role="system", content=SYSTEM_PROMPT)
        assert [m.role for m in request].count("system") == 1
        assert request[1:-1] == sample_conversation[1:]
        assert request[-1] == ChatMessage(role="user", content="next")

    def test_with_context(self, sample_conversation):
        conversation = Conversation(SYSTEM_PROMPT, sample_conversation)
        context = loaded_context()

        request = assemble_request(conversation, context, "next")

        assert [m.role for m in request[:2]] == ["system", "system"]
        assert request[1].content == context.build_context_message()
        assert request[2:-1] == sample_conversation[1:]

    def test_stored_system_messages_never_leak(self):
        conversation = Conversation(SYSTEM_PROMPT)
        conversation.replace_all([
            ChatMessage(role="system", content="old instructions"),
            ChatMessage(role="user", content="q"),
            ChatMessage(role="system", content="more old instructions"),
            ChatMessage(role="assistant", content="a"),
        ])

        request = assemble_request(conversation, ContextStore(), "next")

        assert [(m.role, m.content) for m in request] == [
            ("system", SYSTEM_PROMPT),
            ("user", "q"),
            ("assistant", "a"),
            ("user", "next"),
        ]

    def test_does_not_mutate_conversation(self, sample_conversation):
        conversation = Conversation(SYSTEM_PROMPT, sample_conversation)

        assemble_request(conversation, loaded_context(), "next")

        assert conversation.messages == sample_conversation

    @given(st.lists(message_strategy, max_size=12), st.booleans())
    def test_canonical_message_always_first(self, history, with_context):
        """Property test: index 0 is the canonical prompt whatever is stored."""
        conversation = Conversation(SYSTEM_PROMPT, history)
        context = loaded_context() if with_context else ContextStore()

        request = assemble_request(conversation, context, "now")

        assert request[0] == ChatMessage(role="system", content=SYSTEM_PROMPT)
        expected_system = 2 if with_context else 1
        assert sum(1 for m in request if m.role == "system") == expected_system
        assert request[expected_system:-1] == [m for m in history if m.role != "system"]
