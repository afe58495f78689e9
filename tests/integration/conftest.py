"""Fixtures for running the demo programs end to end without a network.

The chat model is replaced by a scripted fake that turns "Convert N X to Y"
and "weather for City" phrases into tool calls, and plugin HTTP traffic is
served by httpx.MockTransport.
"""

import json
import re
from unittest.mock import AsyncMock

import httpx
import pytest

from toolcall_demos.kernel import Kernel
from toolcall_demos.ollama import ModelInfo

CONVERT_PATTERN = re.compile(r"Convert (\d+) ([A-Z]{3}) to ([A-Z]{3})")
WEATHER_PATTERN = re.compile(r"weather for (\w+)", re.IGNORECASE)

RATES = {"USD": 1.0, "EUR": 0.9, "GBP": 0.8, "JPY": 150.0}


def plugin_http_handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "rates.test":
        return httpx.Response(200, text=json.dumps({"rates": RATES}))
    city = request.url.path.strip("/")
    return httpx.Response(200, text=f"{city}: sunny\n")


def scripted_tool_calls(text: str) -> list[dict]:
    calls = [
        {
            "function": {
                "name": "ConvertCurrency",
                "arguments": {"amount": int(amount), "fromCurrency": src, "toCurrency": dst},
            }
        }
        for amount, src, dst in CONVERT_PATTERN.findall(text)
    ]
    calls.extend(
        {"function": {"name": "GetWeather", "arguments": {"city": city}}}
        for city in WEATHER_PATTERN.findall(text)
    )
    return calls


async def scripted_chat(model, messages, tools=None, options=None):
    """Answer like a tool-calling model would."""
    last = messages[-1]
    if last["role"] == "tool":
        results = [m["content"] for m in messages if m["role"] == "tool"]
        content = "Done: " + "; ".join(results)
        return {"model": model, "message": {"role": "assistant", "content": content}, "done": True}

    tool_calls = scripted_tool_calls(last["content"]) if tools else []
    message = {"role": "assistant", "content": "" if tool_calls else f"echo: {last['content']}"}
    if tool_calls:
        message["tool_calls"] = tool_calls
    return {"model": model, "message": message, "done": True}


@pytest.fixture
def scripted_ollama_client():
    client = AsyncMock()
    client.chat.side_effect = scripted_chat
    client.get_model_info.return_value = ModelInfo(
        name="llama3.1:8b", capabilities=["completion", "tools"]
    )
    return client


@pytest.fixture
def patch_kernel(monkeypatch, scripted_ollama_client):
    """Make the demo modules build kernels on the scripted client."""

    def _create_kernel(settings, ollama_client=None):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(plugin_http_handler))
        return Kernel(settings, scripted_ollama_client, http_client)

    monkeypatch.setattr("toolcall_demos.demos.fundamentals.create_kernel", _create_kernel)
    monkeypatch.setattr("toolcall_demos.demos.function_calling.create_kernel", _create_kernel)
    return scripted_ollama_client


@pytest.fixture
def console_input(monkeypatch):
    """Feed lines to input(); EOF once they run out."""

    def _feed(*lines: str) -> None:
        remaining = iter(lines)

        def fake_input(prompt=""):
            try:
                return next(remaining)
            except StopIteration:
                raise EOFError from None

        monkeypatch.setattr("builtins.input", fake_input)

    return _feed
