"""Chat history, message types and the chat completion service."""

from toolcall_demos.chat.history import ChatHistory
from toolcall_demos.chat.service import ChatCompletionService
from toolcall_demos.chat.types import (
    AssistantMessage,
    ExecutionSettings,
    Message,
    SystemMessage,
    ToolMessage,
    UserMessage,
)

__all__ = [
    "AssistantMessage",
    "ChatCompletionService",
    "ChatHistory",
    "ExecutionSettings",
    "Message",
    "SystemMessage",
    "ToolMessage",
    "UserMessage",
]
