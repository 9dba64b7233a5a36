from typing import List, Tuple

from models import ASSISTANT_ROLE, SYSTEM_ROLE, USER_ROLE, Message


class ConversationStore:
    """
    Ordered user/assistant history for one chat session.

    The system prompt is not stored here; it is prepended each time the
    request payload is built, so it can change without touching history.
    """

    def __init__(self):
        self._history: List[Message] = []

    def __len__(self) -> int:
        return len(self._history)

    @property
    def messages(self) -> Tuple[Message, ...]:
        """Snapshot of the history in chronological order."""
        return tuple(self._history)

    def append_user(self, text: str) -> None:
        """
        Record a user turn.

        Text that is empty after trimming whitespace is ignored.

        Args:
            text: The user's message.
        """
        if not text.strip():
            return
        self._history.append(Message(role=USER_ROLE, content=text))

    def append_assistant(self, text: str) -> None:
        """
        Record an assistant turn exactly as the model returned it (even if empty).

        Args:
            text: The assistant's reply.
        """
        self._history.append(Message(role=ASSISTANT_ROLE, content=text))

    def build_request_messages(self, system_prompt: str) -> List[dict]:
        """
        Build the message list for a chat-completion request.

        Args:
            system_prompt: Instruction text sent as the leading system message.

        Returns:
            A new list of OpenAI-style message dicts: the system message followed
            by the full history. Mutating it has no effect on the store.
        """
        base = [{"role": SYSTEM_ROLE, "content": system_prompt}]
        base.extend(message.to_payload() for message in self._history)
        return base

    def clear(self) -> None:
        self._history = []
