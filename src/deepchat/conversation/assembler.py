"""Builds the ordered message list sent to the model for one turn."""

from ..context import ContextStore
from ..llm.models import ChatMessage
from .state import Conversation


def assemble_request(
    conversation: Conversation,
    context: ContextStore,
    user_input: str,
) -> list[ChatMessage]:
    """Assemble the outbound messages for a turn.

    Order:
    1. The canonical system message, always first and never read from storage
    2. The aggregated context message, only when files are loaded
    3. Stored user/assistant messages; stored system messages are left out
    4. The new user message

    Args:
        conversation: Session history
        context: Loaded source files
        user_input: This turn's user text

    Returns:
        Ordered message list for the model endpoint
    """
    messages = [conversation.system_message]

    if context:
        messages.append(ChatMessage(role="system", content=context.build_context_message()))

    messages.extend(conversation.dialogue())
    messages.append(ChatMessage(role="user", content=user_input))
    return messages
