"""Console demo programs, keyed by the name the CLI accepts."""

from typing import Awaitable, Callable

from toolcall_demos.config import ToolcallSettings
from toolcall_demos.demos import function_calling, fundamentals

Demo = Callable[[ToolcallSettings], Awaitable[object]]

DEMOS: dict[str, Demo] = {
    "basic-prompt": fundamentals.basic_prompt_interaction,
    "chat-history": fundamentals.chat_with_history,
    "travel-streaming": fundamentals.travel_streaming_demo,
    "startup-settings": fundamentals.startup_idea_settings_demo,
    "travel-image": fundamentals.create_travel_lounge_image,
    "weather-chat": function_calling.weather_chat_demo,
    "document-summary": function_calling.document_summarization_demo,
    "currency-conversion": function_calling.currency_conversion_demo,
    "parallelism": function_calling.parallelism_demo_comparison,
    "security-filter": function_calling.security_filter_demo,
    "complex-security": function_calling.complex_security_demo,
}

DEFAULT_DEMO = "weather-chat"

__all__ = ["DEFAULT_DEMO", "DEMOS", "Demo"]
