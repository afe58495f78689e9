"""Tool execution through the invocation filter chain."""

import json
import logging
from typing import Any, Mapping

from toolcall_demos.tools.registry import ToolRegistry
from toolcall_demos.tools.types import (
    FunctionInvocationContext,
    FunctionInvocationFilter,
    InvocationNext,
)

logger = logging.getLogger(__name__)


def _bind(filter_: FunctionInvocationFilter, next_: InvocationNext) -> InvocationNext:
    async def step(context: FunctionInvocationContext) -> None:
        await filter_.on_function_invocation(context, next_)

    return step


async def _run_function(context: FunctionInvocationContext) -> None:
    context.result = await context.function.invoke(context.arguments)


def result_to_text(result: Any) -> str:
    """Render a tool result as the text sent back to the model."""
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result, default=str)
    except (TypeError, ValueError):
        return str(result)


class ToolExecutionService:
    """Invokes registered tools, passing each call through the filters.

    Filters run in the order they were added. Each gets a ``next`` callable
    for the rest of the chain; the innermost stage validates the arguments
    and runs the tool.

    Attributes:
        registry: Where tools are looked up
        filters: Ordered invocation filters, mutable so callers can append
    """

    def __init__(
        self,
        registry: ToolRegistry,
        filters: list[FunctionInvocationFilter] | None = None,
    ) -> None:
        self.registry = registry
        self.filters: list[FunctionInvocationFilter] = list(filters or [])

    async def invoke(self, name: str, arguments: Mapping[str, Any] | None = None) -> Any:
        """Invoke a tool by name.

        Args:
            name: Registered tool name
            arguments: Raw arguments as supplied by the model

        Returns:
            The tool's return value

        Raises:
            ToolNotFoundError: If the tool is not registered
            PolicyViolation: If a filter denies the call
        """
        definition = self.registry.get(name)
        context = FunctionInvocationContext(
            function=definition, arguments=dict(arguments or {})
        )

        chain: InvocationNext = _run_function
        for filter_ in reversed(self.filters):
            chain = _bind(filter_, chain)

        logger.debug(f"Invoking tool {name} through {len(self.filters)} filters")
        await chain(context)
        return context.result

    async def invoke_tool_call(self, tool_call: Mapping[str, Any]) -> tuple[str, str]:
        """Invoke a tool call as returned by the chat API.

        Args:
            tool_call: {"function": {"name": ..., "arguments": {...} or "json"}}

        Returns:
            tuple[str, str]: (tool name, result text)
        """
        function = tool_call.get("function") or {}
        name = function.get("name", "")
        arguments = function.get("arguments") or {}
        if isinstance(arguments, str):
            arguments = json.loads(arguments) if arguments.strip() else {}

        result = await self.invoke(name, arguments)
        return name, result_to_text(result)
