"""Pytest configuration and shared fixtures for toolcall-demos tests.

This module provides common fixtures used across all test modules,
including isolated settings, a mocked Ollama client and a kernel built on it.
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from toolcall_demos.config import ToolcallSettings
from toolcall_demos.kernel import create_kernel
from toolcall_demos.ollama import ModelInfo


@pytest.fixture
def test_settings(tmp_path, monkeypatch):
    """Create test settings isolated from any appsettings.json on disk.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.
        monkeypatch: Pytest fixture used to switch the working directory.

    Returns:
        ToolcallSettings: Settings instance configured for testing.
    """
    monkeypatch.chdir(tmp_path)
    return ToolcallSettings(
        model_name="llama3.1:8b",
        ollama_host="http://localhost:11434",
        exchange_rate_url="https://rates.test/latest/{base}",
        weather_url="https://weather.test/{city}?format=3",
        log_level="DEBUG",
    )


@pytest.fixture
def make_chat_response():
    """Factory for non-streaming chat responses in Ollama's dict format."""

    def _make(content: str = "", tool_calls: list[dict] | None = None) -> dict:
        message = {"role": "assistant", "content": content}
        if tool_calls:
            message["tool_calls"] = tool_calls
        return {
            "model": "llama3.1:8b",
            "message": message,
            "done": True,
            "eval_count": 12,
            "prompt_eval_count": 40,
        }

    return _make


@pytest.fixture
def make_tool_call():
    """Factory for a single tool call as the model returns it."""

    def _make(name: str, **arguments) -> dict:
        return {"function": {"name": name, "arguments": arguments}}

    return _make


@pytest.fixture
def mock_ollama_client():
    """Create a mock OllamaClient for a tool-capable model."""
    mock_client = AsyncMock()
    mock_client.check_connection.return_value = True
    mock_client.get_model_info.return_value = ModelInfo(
        name="llama3.1:8b",
        family="llama",
        capabilities=["completion", "tools"],
        context_length=131072,
    )
    return mock_client


@pytest_asyncio.fixture
async def kernel(test_settings, mock_ollama_client):
    """Create a kernel wired to the mocked Ollama client."""
    kernel = create_kernel(test_settings, ollama_client=mock_ollama_client)
    yield kernel
    await kernel.close()
