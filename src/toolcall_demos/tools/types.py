"""Data types for tool registration and invocation."""

import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol

from pydantic import BaseModel


class ToolNotFoundError(KeyError):
    """Raised when a tool name is not registered."""


@dataclass
class ToolMetadata:
    """What the @tool decorator records on a plugin method."""

    name: str
    description: str = ""


@dataclass
class ToolDefinition:
    """A registered, callable tool.

    Attributes:
        name: Name the model uses to call the tool (e.g. "ConvertCurrency")
        description: Description sent to the model
        plugin_name: Name of the plugin the tool was registered from
        func: The bound callable (sync or async)
        arguments_model: Pydantic model validating the model-supplied arguments
    """

    name: str
    description: str
    plugin_name: str
    func: Callable[..., Any]
    arguments_model: type[BaseModel]

    async def invoke(self, arguments: dict[str, Any]) -> Any:
        """Validate the raw arguments and call the underlying function.

        Raises:
            pydantic.ValidationError: If the arguments don't match the signature
        """
        validated = self.arguments_model.model_validate(arguments)
        kwargs = {
            name: getattr(validated, name)
            for name in type(validated).model_fields
        }
        result = self.func(**kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result


@dataclass
class FunctionInvocationContext:
    """State for a single tool invocation as it passes through the filters."""

    function: ToolDefinition
    arguments: dict[str, Any] = field(default_factory=dict)
    result: Any = None


InvocationNext = Callable[[FunctionInvocationContext], Awaitable[None]]


class FunctionInvocationFilter(Protocol):
    """Anything that can sit in front of a tool invocation.

    Implementations call ``next(context)`` at most once to continue the chain,
    or raise to stop it.
    """

    async def on_function_invocation(
        self,
        context: FunctionInvocationContext,
        next: InvocationNext,
    ) -> Any: ...
