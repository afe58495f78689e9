"""Unit tests for chat history and the chat completion service.

Tests message conversion, the automatic tool invocation loop, error
handling for tool failures and policy violations, and streaming.
"""

from unittest.mock import AsyncMock

import pytest

from toolcall_demos.chat import (
    AssistantMessage,
    ChatCompletionService,
    ChatHistory,
    ExecutionSettings,
    SystemMessage,
    ToolMessage,
    UserMessage,
)
from toolcall_demos.security import PolicyViolation, SecurityFilter
from toolcall_demos.tools import ToolExecutionService, ToolRegistry, tool


class FakeWeatherPlugin:
    def __init__(self, fail_for=()):
        self.calls = []
        self.fail_for = set(fail_for)

    @tool(name="GetWeather", description="Gets the current weather for a city")
    async def get_weather(self, city: str) -> str:
        self.calls.append(city)
        if city in self.fail_for:
            raise RuntimeError(f"wttr.in unavailable for {city}")
        return f"{city}: sunny"


class FakeCurrencyPlugin:
    def __init__(self):
        self.calls = []

    @tool(name="ConvertCurrency", description="Converts currencies")
    def convert_currency(self, amount: float, fromCurrency: str, toCurrency: str) -> str:
        self.calls.append((amount, fromCurrency, toCurrency))
        return f"{amount} {fromCurrency} = ? {toCurrency}"


@pytest.fixture
def weather_plugin():
    return FakeWeatherPlugin(fail_for={"Atlantis"})


@pytest.fixture
def currency_plugin():
    return FakeCurrencyPlugin()


@pytest.fixture
def executor(weather_plugin, currency_plugin):
    registry = ToolRegistry()
    registry.add_plugin(weather_plugin)
    registry.add_plugin(currency_plugin)
    return ToolExecutionService(registry, filters=[SecurityFilter()])


@pytest.fixture
def service(mock_ollama_client, executor):
    return ChatCompletionService(mock_ollama_client, "llama3.1:8b", executor)


def user_history(text: str) -> ChatHistory:
    history = ChatHistory()
    history.add_user_message(text)
    return history


class TestChatHistory:
    """Tests for ChatHistory and message conversion."""

    def test_system_prompt_added_first(self):
        history = ChatHistory("You are helpful")

        assert len(history) == 1
        assert isinstance(history.last(), SystemMessage)

    def test_roles_fixed_by_message_type(self):
        assert UserMessage(role="assistant").role == "user"
        assert ToolMessage(role="user").role == "tool"

    def test_to_ollama_messages(self):
        tool_calls = [{"function": {"name": "GetWeather", "arguments": {"city": "Paris"}}}]
        history = ChatHistory("Be brief")
        history.add_user_message("Weather in Paris?")
        history.add(AssistantMessage(content="", tool_calls=tool_calls))
        history.add(ToolMessage(tool_name="GetWeather", content="Paris: rain"))
        history.add_assistant_message("It's raining.")

        assert history.to_ollama_messages() == [
            {"role": "system", "content": "Be brief"},
            {"role": "user", "content": "Weather in Paris?"},
            {"role": "assistant", "content": "", "tool_calls": tool_calls},
            {"role": "tool", "content": "Paris: rain", "tool_name": "GetWeather"},
            {"role": "assistant", "content": "It's raining."},
        ]

    def test_empty_history_last_raises(self):
        with pytest.raises(IndexError):
            ChatHistory().last()

    def test_execution_settings_options(self):
        assert ExecutionSettings().to_options() is None
        assert ExecutionSettings(temperature=0, max_tokens=500).to_options() == {
            "temperature": 0,
            "num_predict": 500,
        }


class TestGetMessage:
    """Tests for ChatCompletionService.get_message."""

    @pytest.mark.asyncio
    async def test_plain_reply(self, service, mock_ollama_client, make_chat_response):
        mock_ollama_client.chat.return_value = make_chat_response("Hello!")
        history = user_history("Hi")

        reply = await service.get_message(history)

        assert reply.content == "Hello!"
        assert reply.model == "llama3.1:8b"
        assert reply.eval_count == 12
        assert len(history) == 1
        assert mock_ollama_client.chat.call_args.kwargs["tools"] is None

    @pytest.mark.asyncio
    async def test_empty_history_rejected(self, service):
        with pytest.raises(ValueError):
            await service.get_message(ChatHistory())

    @pytest.mark.asyncio
    async def test_tools_invoked_and_results_sent_back(
        self, service, mock_ollama_client, make_chat_response, make_tool_call, weather_plugin
    ):
        mock_ollama_client.chat.side_effect = [
            make_chat_response(
                tool_calls=[
                    make_tool_call("GetWeather", city="London"),
                    make_tool_call("GetWeather", city="Paris"),
                ]
            ),
            make_chat_response("London and Paris are sunny."),
        ]
        history = user_history("Weather in London and Paris?")

        reply = await service.get_message(history, ExecutionSettings(auto_invoke_tools=True))

        assert reply.content == "London and Paris are sunny."
        assert sorted(weather_plugin.calls) == ["London", "Paris"]
        assert [m.role for m in history] == ["user", "assistant", "tool", "tool"]
        assert [m.content for m in history.messages[2:]] == ["London: sunny", "Paris: sunny"]

        first_tools = mock_ollama_client.chat.call_args_list[0].kwargs["tools"]
        assert {t["function"]["name"] for t in first_tools} == {"GetWeather", "ConvertCurrency"}
        second_messages = mock_ollama_client.chat.call_args_list[1].kwargs["messages"]
        assert second_messages[-1] == {
            "role": "tool",
            "content": "Paris: sunny",
            "tool_name": "GetWeather",
        }

    @pytest.mark.asyncio
    async def test_tools_not_offered_without_auto_invoke(
        self, service, mock_ollama_client, make_chat_response, make_tool_call, weather_plugin
    ):
        mock_ollama_client.chat.return_value = make_chat_response(
            tool_calls=[make_tool_call("GetWeather", city="Paris")]
        )

        reply = await service.get_message(user_history("Weather?"))

        assert reply.tool_calls is not None
        assert weather_plugin.calls == []

    @pytest.mark.asyncio
    async def test_policy_violation_propagates(
        self,
        service,
        mock_ollama_client,
        make_chat_response,
        make_tool_call,
        weather_plugin,
        currency_plugin,
    ):
        mock_ollama_client.chat.return_value = make_chat_response(
            tool_calls=[
                make_tool_call("GetWeather", city="London"),
                make_tool_call("ConvertCurrency", amount=500, fromCurrency="USD", toCurrency="BTC"),
            ]
        )

        with pytest.raises(PolicyViolation) as exc_info:
            await service.get_message(
                user_history("Weather in London, then 500 USD to BTC"),
                ExecutionSettings(auto_invoke_tools=True),
            )

        assert exc_info.value.field == "toCurrency"
        assert weather_plugin.calls == ["London"]
        assert currency_plugin.calls == []
        assert mock_ollama_client.chat.call_count == 1

    @pytest.mark.asyncio
    async def test_sequential_invocation_stops_at_violation(
        self, service, mock_ollama_client, make_chat_response, make_tool_call, weather_plugin
    ):
        mock_ollama_client.chat.return_value = make_chat_response(
            tool_calls=[
                make_tool_call("GetWeather", city="Tehran"),
                make_tool_call("GetWeather", city="London"),
            ]
        )

        with pytest.raises(PolicyViolation):
            await service.get_message(
                user_history("Weather in Tehran and London"),
                ExecutionSettings(auto_invoke_tools=True, allow_concurrent_invocation=False),
            )

        assert weather_plugin.calls == []

    @pytest.mark.asyncio
    async def test_rejected_turn_leaves_history_unchanged(
        self, service, mock_ollama_client, make_chat_response, make_tool_call
    ):
        mock_ollama_client.chat.side_effect = [
            make_chat_response(tool_calls=[make_tool_call("GetWeather", city="Tehran")]),
            make_chat_response("Madrid is sunny."),
        ]
        history = user_history("Weather in Tehran?")
        settings = ExecutionSettings(auto_invoke_tools=True)

        with pytest.raises(PolicyViolation):
            await service.get_message(history, settings)

        assert [m.role for m in history] == ["user"]

        history.add_user_message("Then Madrid?")
        reply = await service.get_message(history, settings)

        assert reply.content == "Madrid is sunny."
        sent = mock_ollama_client.chat.call_args.kwargs["messages"]
        assert [m["role"] for m in sent] == ["user", "user"]

    @pytest.mark.asyncio
    async def test_tool_failure_reported_to_model(
        self, service, mock_ollama_client, make_chat_response, make_tool_call
    ):
        mock_ollama_client.chat.side_effect = [
            make_chat_response(tool_calls=[make_tool_call("GetWeather", city="Atlantis")]),
            make_chat_response("Sorry, no weather for Atlantis."),
        ]
        history = user_history("Weather in Atlantis?")

        reply = await service.get_message(history, ExecutionSettings(auto_invoke_tools=True))

        assert reply.content == "Sorry, no weather for Atlantis."
        assert history.last().content == "Error: wttr.in unavailable for Atlantis"

    @pytest.mark.asyncio
    async def test_unknown_tool_reported_to_model(
        self, service, mock_ollama_client, make_chat_response, make_tool_call
    ):
        mock_ollama_client.chat.side_effect = [
            make_chat_response(tool_calls=[make_tool_call("LaunchRocket")]),
            make_chat_response("I can't do that."),
        ]
        history = user_history("Launch!")

        await service.get_message(history, ExecutionSettings(auto_invoke_tools=True))

        assert history.last().role == "tool"
        assert history.last().content.startswith("Error:")

    @pytest.mark.asyncio
    async def test_iteration_limit_withholds_tools(
        self, service, mock_ollama_client, make_chat_response, make_tool_call
    ):
        looping = make_chat_response(tool_calls=[make_tool_call("GetWeather", city="Rome")])
        mock_ollama_client.chat.side_effect = [looping, looping, make_chat_response("Done")]

        reply = await service.get_message(
            user_history("Weather forever"),
            ExecutionSettings(auto_invoke_tools=True, max_auto_invoke_iterations=2),
        )

        assert reply.content == "Done"
        calls = mock_ollama_client.chat.call_args_list
        assert len(calls) == 3
        assert calls[2].kwargs["tools"] is None

    @pytest.mark.asyncio
    async def test_options_forwarded(self, service, mock_ollama_client, make_chat_response):
        mock_ollama_client.chat.return_value = make_chat_response("idea")

        await service.invoke_prompt("Suggest", ExecutionSettings(temperature=1, max_tokens=500))

        assert mock_ollama_client.chat.call_args.kwargs["options"] == {
            "temperature": 1,
            "num_predict": 500,
        }

    @pytest.mark.asyncio
    async def test_invoke_prompt_returns_text(self, service, mock_ollama_client, make_chat_response):
        mock_ollama_client.chat.return_value = make_chat_response("42")

        assert await service.invoke_prompt("Answer?") == "42"
        assert mock_ollama_client.chat.call_args.kwargs["messages"] == [
            {"role": "user", "content": "Answer?"}
        ]

    @pytest.mark.asyncio
    async def test_no_executor_never_offers_tools(self, mock_ollama_client, make_chat_response):
        service = ChatCompletionService(mock_ollama_client, "llama3.1:8b")
        mock_ollama_client.chat.return_value = make_chat_response("plain")

        reply = await service.get_message(
            user_history("Hi"), ExecutionSettings(auto_invoke_tools=True)
        )

        assert reply.content == "plain"
        assert mock_ollama_client.chat.call_args.kwargs["tools"] is None


class TestStream:
    """Tests for streaming content deltas."""

    @pytest.mark.asyncio
    async def test_stream_yields_non_empty_deltas(self):
        chunks = [
            {"message": {"role": "assistant", "content": ""}, "done": False},
            {"message": {"role": "assistant", "content": "Try "}, "done": False},
            {"message": {"role": "assistant", "content": "Slovenia."}, "done": False},
            {"message": {"role": "assistant", "content": ""}, "done": True},
        ]
        mock_client = AsyncMock()

        async def mock_stream(*args, **kwargs):
            for chunk in chunks:
                yield chunk

        mock_client.chat_stream = mock_stream
        service = ChatCompletionService(mock_client, "llama3.1:8b")

        deltas = [d async for d in service.stream(user_history("Where to?"))]

        assert deltas == ["Try ", "Slovenia."]

    @pytest.mark.asyncio
    async def test_stream_error_propagates(self):
        mock_client = AsyncMock()

        async def mock_stream(*args, **kwargs):
            raise Exception("Connection refused")
            yield  # Unreachable, but makes this a generator

        mock_client.chat_stream = mock_stream
        service = ChatCompletionService(mock_client, "llama3.1:8b")

        with pytest.raises(Exception, match="Connection refused"):
            async for _ in service.stream(user_history("Hi")):
                pass
