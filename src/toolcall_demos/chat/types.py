"""Data types for chat messages and execution settings."""

from dataclasses import dataclass
from typing import Any


@dataclass
class UserMessage:
    """A message from the user."""

    role: str = "user"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'user'."""
        self.role = "user"


@dataclass
class SystemMessage:
    """A system prompt message."""

    role: str = "system"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'system'."""
        self.role = "system"


@dataclass
class AssistantMessage:
    """A response from the LLM assistant."""

    role: str = "assistant"
    content: str = ""
    model: str = ""
    eval_count: int | None = None
    prompt_eval_count: int | None = None
    tool_calls: list[dict[str, Any]] | None = None

    def __post_init__(self) -> None:
        """Validate role is always 'assistant'."""
        self.role = "assistant"

    def __str__(self) -> str:
        return self.content


@dataclass
class ToolMessage:
    """A tool execution result."""

    role: str = "tool"
    tool_name: str = ""
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'tool'."""
        self.role = "tool"


# Union type for all message types
Message = UserMessage | SystemMessage | AssistantMessage | ToolMessage


@dataclass
class ExecutionSettings:
    """Per-request settings for a chat completion.

    Attributes:
        temperature: Sampling temperature, model default when None
        max_tokens: Maximum tokens to generate, model default when None
        auto_invoke_tools: Advertise registered tools and run the calls the model makes
        allow_concurrent_invocation: Run the tool calls of one model turn concurrently
        max_auto_invoke_iterations: Tool round trips before tools are withheld
    """

    temperature: float | None = None
    max_tokens: int | None = None
    auto_invoke_tools: bool = False
    allow_concurrent_invocation: bool = True
    max_auto_invoke_iterations: int = 5

    def to_options(self) -> dict[str, Any] | None:
        """Model options in Ollama's format, or None when nothing is set."""
        options: dict[str, Any] = {}
        if self.temperature is not None:
            options["temperature"] = self.temperature
        if self.max_tokens is not None:
            options["num_predict"] = self.max_tokens
        return options or None
