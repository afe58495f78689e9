"""Chat completion with automatic tool invocation.

The model is offered the registered tools. Whenever it answers with tool
calls, the calls run through the ToolExecutionService (and so through every
invocation filter), their results are appended to the history as tool
messages, and the conversation is sent again until the model answers in text.
"""

import asyncio
import logging
from typing import Any, AsyncIterator

from toolcall_demos.chat.history import ChatHistory
from toolcall_demos.chat.types import AssistantMessage, ExecutionSettings, ToolMessage
from toolcall_demos.ollama import OllamaClient
from toolcall_demos.security import PolicyViolation
from toolcall_demos.tools import ToolExecutionService

logger = logging.getLogger(__name__)


class ChatCompletionService:
    """Chat completions against one model, optionally with tools.

    Attributes:
        ollama_client: The chat API client
        model: Model name used for every request
        executor: Runs tool calls; None disables tool calling entirely
    """

    def __init__(
        self,
        ollama_client: OllamaClient,
        model: str,
        executor: ToolExecutionService | None = None,
    ) -> None:
        self.ollama_client = ollama_client
        self.model = model
        self.executor = executor

    async def get_message(
        self,
        history: ChatHistory,
        settings: ExecutionSettings | None = None,
    ) -> AssistantMessage:
        """Get the next assistant message for ``history``.

        Intermediate assistant/tool messages produced while invoking tools are
        appended to ``history`` once a turn's tool calls have all run; the
        returned final message is not. A turn rejected with PolicyViolation
        adds nothing to ``history``.

        Raises:
            PolicyViolation: If an invocation filter denies a tool call
            ValueError: If the history is empty
        """
        settings = settings or ExecutionSettings()
        if not len(history):
            raise ValueError("Chat history has no messages to process")

        auto_invoke = settings.auto_invoke_tools and self.executor is not None
        options = settings.to_options()
        iteration = 0

        while True:
            tools = None
            if auto_invoke and iteration < settings.max_auto_invoke_iterations:
                tools = self.executor.registry.schemas() or None

            response = await self.ollama_client.chat(
                model=self.model,
                messages=history.to_ollama_messages(),
                tools=tools,
                options=options,
            )
            message = response.get("message") or {}
            tool_calls = message.get("tool_calls") or []

            assistant_message = AssistantMessage(
                content=message.get("content") or "",
                model=self.model,
                eval_count=response.get("eval_count"),
                prompt_eval_count=response.get("prompt_eval_count"),
                tool_calls=tool_calls or None,
            )

            if not tool_calls or tools is None:
                logger.info(f"Received response: {len(assistant_message.content)} characters")
                return assistant_message

            iteration += 1
            logger.info(f"Model requested {len(tool_calls)} tool calls (round {iteration})")
            tool_messages = await self._invoke_tool_calls(tool_calls, settings)
            history.add(assistant_message)
            for tool_message in tool_messages:
                history.add(tool_message)

    async def _invoke_tool_calls(
        self,
        tool_calls: list[dict[str, Any]],
        settings: ExecutionSettings,
    ) -> list[ToolMessage]:
        """Run one turn's tool calls and turn them into tool messages.

        A PolicyViolation from any call is re-raised once every call in the
        turn has finished; other failures become error text for the model.
        """
        if settings.allow_concurrent_invocation:
            outcomes = await asyncio.gather(
                *(self.executor.invoke_tool_call(call) for call in tool_calls),
                return_exceptions=True,
            )
        else:
            outcomes = []
            for call in tool_calls:
                try:
                    outcomes.append(await self.executor.invoke_tool_call(call))
                except PolicyViolation:
                    raise
                except Exception as e:
                    outcomes.append(e)

        messages: list[ToolMessage] = []
        violation: PolicyViolation | None = None

        for call, outcome in zip(tool_calls, outcomes):
            name = (call.get("function") or {}).get("name", "")
            if isinstance(outcome, PolicyViolation):
                violation = violation or outcome
                continue
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(f"Tool {name} failed: {outcome}")
                messages.append(ToolMessage(tool_name=name, content=f"Error: {outcome}"))
                continue
            tool_name, content = outcome
            messages.append(ToolMessage(tool_name=tool_name, content=content))

        if violation is not None:
            raise violation
        return messages

    async def stream(
        self,
        history: ChatHistory,
        settings: ExecutionSettings | None = None,
    ) -> AsyncIterator[str]:
        """Stream the assistant's reply as content deltas. Tools are not offered."""
        settings = settings or ExecutionSettings()

        async for chunk in self.ollama_client.chat_stream(
            model=self.model,
            messages=history.to_ollama_messages(),
            options=settings.to_options(),
        ):
            content = (chunk.get("message") or {}).get("content", "")
            if content:
                yield content
            if chunk.get("done"):
                break

    async def invoke_prompt(
        self,
        prompt: str,
        settings: ExecutionSettings | None = None,
    ) -> str:
        """Send a single prompt with no prior history and return the reply text."""
        history = ChatHistory()
        history.add_user_message(prompt)
        message = await self.get_message(history, settings)
        return message.content
