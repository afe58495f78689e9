"""Async Ollama client wrapper.

This module wraps ollama.AsyncClient with the few calls the demos make:
connectivity and capability checks, plain and tool-enabled chat, and
streaming chat.
"""

import logging
from typing import Any, AsyncIterator

import ollama

from toolcall_demos.ollama.types import ModelInfo

logger = logging.getLogger(__name__)


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert an ollama response object to a plain dict."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(exclude_none=True)
    if isinstance(obj, dict):
        return obj
    return vars(obj)


class OllamaClient:
    """Async client for the Ollama chat API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def get_model_info(self, model_name: str) -> ModelInfo | None:
        """Get capabilities and context size for a model.

        Returns:
            ModelInfo | None: Model information, or None if the model isn't pulled

        Raises:
            ollama.ResponseError: For API errors other than 404
        """
        try:
            show_response = await self._client.show(model_name)
        except ollama.ResponseError as e:
            if e.status_code == 404:
                logger.debug(f"Model not found: {model_name}")
                return None
            logger.error(f"Ollama API error for model {model_name}: {e}")
            raise

        return ModelInfo.from_show_response(model_name, show_response)

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a chat request and return the complete response.

        Args:
            model: The model name to use for the chat
            messages: Message dicts in Ollama format
            tools: Optional tool schemas the model may call
            options: Optional model parameters (temperature, num_predict, ...)

        Returns:
            dict: The response; ``response["message"]`` holds role, content and
                  any ``tool_calls`` the model requested

        Raises:
            Exception: If the Ollama API request fails
        """
        logger.debug(
            f"Chat request: model={model} messages={len(messages)} tools={len(tools or [])}"
        )
        try:
            response = await self._client.chat(
                model=model,
                messages=messages,
                tools=tools,
                stream=False,
                options=options,
            )
        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

        return _to_dict(response)

    async def chat_stream(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Stream chat responses from Ollama.

        Yields:
            dict: Response chunks; ``chunk["message"]["content"]`` is the delta
                  and the final chunk has ``done`` set to True
        """
        try:
            logger.debug(f"Starting chat stream with model: {model}")

            async for chunk in await self._client.chat(
                model=model,
                messages=messages,
                stream=True,
                options=options,
            ):
                yield _to_dict(chunk)

            logger.debug("Chat stream completed")

        except Exception as e:
            logger.error(f"Chat stream failed: {e}")
            raise

    async def close(self) -> None:
        """Close the client.

        ollama.AsyncClient keeps no resources that need explicit cleanup.
        """
        logger.debug("OllamaClient closed")
