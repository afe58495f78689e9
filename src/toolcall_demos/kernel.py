"""Kernel factory wiring the chat client, tools, filters and plugins together.

Each demo creates one Kernel, registers the plugins and filters it needs and
then sends prompts through it. The kernel owns the HTTP client shared by its
plugins and closes it on exit.
"""

import logging
from typing import Any, AsyncIterator

import httpx

from toolcall_demos.chat import (
    AssistantMessage,
    ChatCompletionService,
    ChatHistory,
    ExecutionSettings,
)
from toolcall_demos.config import ToolcallSettings
from toolcall_demos.ollama import OllamaClient
from toolcall_demos.tools import (
    FunctionInvocationFilter,
    ToolDefinition,
    ToolExecutionService,
    ToolRegistry,
)

logger = logging.getLogger(__name__)


class Kernel:
    """Composition root for one demo run.

    Attributes:
        settings: Settings the kernel was created with
        ollama_client: Chat API client
        http_client: HTTP client shared by plugins
        registry: Registered tools
        executor: Runs tool calls through the filters
        chat_service: Chat completions for settings.model_name
    """

    def __init__(
        self,
        settings: ToolcallSettings,
        ollama_client: OllamaClient,
        http_client: httpx.AsyncClient,
    ) -> None:
        self.settings = settings
        self.ollama_client = ollama_client
        self.http_client = http_client
        self.registry = ToolRegistry()
        self.executor = ToolExecutionService(self.registry)
        self.chat_service = ChatCompletionService(
            ollama_client=ollama_client,
            model=settings.model_name,
            executor=self.executor,
        )

    @property
    def function_invocation_filters(self) -> list[FunctionInvocationFilter]:
        return self.executor.filters

    def add_plugin(self, plugin: Any, plugin_name: str | None = None) -> list[ToolDefinition]:
        return self.registry.add_plugin(plugin, plugin_name)

    def add_filter(self, filter_: FunctionInvocationFilter) -> None:
        self.executor.filters.append(filter_)

    def execution_settings(self, **overrides: Any) -> ExecutionSettings:
        """ExecutionSettings seeded with this kernel's configured limits."""
        values: dict[str, Any] = {
            "max_auto_invoke_iterations": self.settings.max_tool_iterations
        }
        values.update(overrides)
        return ExecutionSettings(**values)

    async def invoke_prompt(self, prompt: str, settings: ExecutionSettings | None = None) -> str:
        return await self.chat_service.invoke_prompt(prompt, settings)

    async def get_message(
        self, history: ChatHistory, settings: ExecutionSettings | None = None
    ) -> AssistantMessage:
        return await self.chat_service.get_message(history, settings)

    def stream(
        self, history: ChatHistory, settings: ExecutionSettings | None = None
    ) -> AsyncIterator[str]:
        return self.chat_service.stream(history, settings)

    async def warn_if_tools_unsupported(self) -> bool:
        """Log a warning if the configured model can't call tools.

        Returns:
            bool: False only when the model is known to lack tool support
        """
        try:
            info = await self.ollama_client.get_model_info(self.settings.model_name)
        except Exception as e:
            logger.warning(f"Could not check tool support for {self.settings.model_name}: {e}")
            return True

        if info is not None and not info.supports_tools:
            logger.warning(
                f"Model {self.settings.model_name} does not advertise tool support; "
                "function calling demos may not call any tools"
            )
            return False
        return True

    async def close(self) -> None:
        await self.http_client.aclose()
        await self.ollama_client.close()

    async def __aenter__(self) -> "Kernel":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def create_kernel(
    settings: ToolcallSettings,
    ollama_client: OllamaClient | None = None,
) -> Kernel:
    """Create a Kernel for ``settings``.

    Args:
        settings: Model, host and plugin configuration
        ollama_client: Optional pre-built client, mainly for tests

    Returns:
        Kernel: A kernel with no plugins or filters registered yet
    """
    if ollama_client is None:
        ollama_client = OllamaClient(host=settings.ollama_host)

    http_client = httpx.AsyncClient(timeout=settings.http_timeout)
    logger.info(f"Created kernel for model {settings.model_name}")
    return Kernel(settings=settings, ollama_client=ollama_client, http_client=http_client)
