"""In-memory chat history."""

from typing import Any, Iterator

from toolcall_demos.chat.types import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolMessage,
    UserMessage,
)


class ChatHistory:
    """Ordered list of messages exchanged with the model."""

    def __init__(self, system_prompt: str | None = None) -> None:
        self.messages: list[Message] = []
        if system_prompt:
            self.add_system_message(system_prompt)

    def add(self, message: Message) -> None:
        self.messages.append(message)

    def add_system_message(self, content: str) -> None:
        self.add(SystemMessage(content=content))

    def add_user_message(self, content: str) -> None:
        self.add(UserMessage(content=content))

    def add_assistant_message(self, content: str) -> None:
        self.add(AssistantMessage(content=content))

    def last(self) -> Message:
        """The most recent message.

        Raises:
            IndexError: If the history is empty
        """
        return self.messages[-1]

    def to_ollama_messages(self) -> list[dict[str, Any]]:
        """Convert the history to Ollama API format.

        Returns:
            List of message dicts: [{"role": "...", "content": "..."}, ...]
        """
        ollama_messages = []

        for msg in self.messages:
            ollama_msg: dict[str, Any] = {
                "role": msg.role,
                "content": msg.content,
            }

            # Assistant turns that requested tools must carry the calls back
            if isinstance(msg, AssistantMessage) and msg.tool_calls:
                ollama_msg["tool_calls"] = msg.tool_calls

            if isinstance(msg, ToolMessage):
                ollama_msg["tool_name"] = msg.tool_name

            ollama_messages.append(ollama_msg)

        return ollama_messages

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)
