"""Tool registry: discovers @tool methods on plugin objects."""

import inspect
import logging
from typing import Any

from toolcall_demos.tools.decorators import get_tool_metadata
from toolcall_demos.tools.schema import build_arguments_model, build_tool_schema
from toolcall_demos.tools.types import ToolDefinition, ToolNotFoundError

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registered tools, keyed by the name the model calls them with."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def add_plugin(self, plugin: Any, plugin_name: str | None = None) -> list[ToolDefinition]:
        """Register every @tool-marked method of ``plugin``.

        Args:
            plugin: Plugin instance
            plugin_name: Name to group the tools under. Defaults to the class name.

        Returns:
            list[ToolDefinition]: The tools that were registered

        Raises:
            ValueError: If a tool name is already registered or the plugin has no tools
        """
        plugin_name = plugin_name or type(plugin).__name__
        added: list[ToolDefinition] = []

        for _, member in inspect.getmembers(plugin, callable):
            metadata = get_tool_metadata(member)
            if metadata is None:
                continue
            added.append(
                self.add_function(
                    member,
                    name=metadata.name,
                    description=metadata.description,
                    plugin_name=plugin_name,
                )
            )

        if not added:
            raise ValueError(f"Plugin {plugin_name} has no @tool methods")

        logger.info(f"Registered plugin {plugin_name} with {len(added)} tools")
        return added

    def add_function(
        self,
        func: Any,
        name: str | None = None,
        description: str = "",
        plugin_name: str = "",
    ) -> ToolDefinition:
        """Register a single callable as a tool."""
        metadata = get_tool_metadata(func)
        name = name or (metadata.name if metadata else func.__name__)
        if not description and metadata:
            description = metadata.description

        if name in self._tools:
            raise ValueError(f"Tool {name} is already registered")

        definition = ToolDefinition(
            name=name,
            description=description,
            plugin_name=plugin_name,
            func=func,
            arguments_model=build_arguments_model(name, func),
        )
        self._tools[name] = definition
        logger.debug(f"Registered tool: {name}")
        return definition

    def get(self, name: str) -> ToolDefinition:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool with that name is registered
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(f"Tool {name} is not registered") from None

    def schemas(self) -> list[dict[str, Any]]:
        """Tool schemas for every registered tool, in registration order."""
        return [
            build_tool_schema(t.name, t.description, t.arguments_model)
            for t in self._tools.values()
        ]

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
