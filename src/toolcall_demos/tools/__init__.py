"""Tool discovery, schema conversion, and execution layer.

Plugins mark methods with @tool; the ToolRegistry turns them into tool
schemas for the chat API and the ToolExecutionService runs the calls the
model requests through the configured invocation filters.
"""

from toolcall_demos.tools.decorators import tool
from toolcall_demos.tools.execution import ToolExecutionService
from toolcall_demos.tools.registry import ToolRegistry
from toolcall_demos.tools.types import (
    FunctionInvocationContext,
    FunctionInvocationFilter,
    ToolDefinition,
    ToolNotFoundError,
)

__all__ = [
    "FunctionInvocationContext",
    "FunctionInvocationFilter",
    "ToolDefinition",
    "ToolExecutionService",
    "ToolNotFoundError",
    "ToolRegistry",
    "tool",
]
