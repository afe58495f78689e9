"""The @tool decorator for plugin methods."""

from typing import Any, Callable, TypeVar

from toolcall_demos.tools.types import ToolMetadata

TOOL_METADATA_ATTR = "__tool_metadata__"

F = TypeVar("F", bound=Callable[..., Any])


def tool(name: str | None = None, description: str = "") -> Callable[[F], F]:
    """Mark a function or method as a tool the model may call.

    Args:
        name: Name exposed to the model. Defaults to the function name.
        description: Description exposed to the model.

    Example:
        >>> class WeatherPlugin:
        ...     @tool(name="GetWeather", description="Gets the current weather for a city")
        ...     async def get_weather(self, city: str) -> str: ...
    """

    def decorator(func: F) -> F:
        setattr(
            func,
            TOOL_METADATA_ATTR,
            ToolMetadata(name=name or func.__name__, description=description),
        )
        return func

    return decorator


def get_tool_metadata(obj: Any) -> ToolMetadata | None:
    """Return the metadata recorded by @tool, or None for unmarked callables."""
    return getattr(obj, TOOL_METADATA_ATTR, None)
