"""Function calling demos: plugins, parallel tool calls and the security filter."""

import logging
import time

from toolcall_demos.chat import ChatHistory
from toolcall_demos.config import ToolcallSettings
from toolcall_demos.demos.console import read_message, timestamp
from toolcall_demos.kernel import Kernel, create_kernel
from toolcall_demos.plugins import CurrencyPlugin, WeatherPlugin
from toolcall_demos.security import PolicyViolation, SecurityFilter

logger = logging.getLogger(__name__)

LONG_ARTICLE = """\
Function calling in LLMs allows models to break through knowledge, execution, and skill walls.
Large Language Models have revolutionized how we interact with AI systems, but they face inherent limitations.
These models are trained on data up to a certain point in time, creating a knowledge wall that prevents them
from accessing real-time information. Additionally, they cannot execute code or interact with external systems
directly, forming an execution wall. Finally, they may lack specialized skills for domain-specific tasks,
creating a skill wall.

Function calling bridges these gaps by enabling LLMs to invoke external functions, access live data, execute
operations, and leverage specialized tools, transforming them from static text generators into dynamic, capable
AI agents that can solve complex real-world problems.

The implementation of function calling involves several key components. First, the model must understand the
available functions and their parameters through detailed function descriptions. Second, the model needs to
determine when to call a function based on user input and context. Third, the system must execute the function
call and return results to the model for further processing.

Popular frameworks like OpenAI's GPT models, Microsoft's Semantic Kernel, and Google's function calling APIs
provide robust implementations of this capability. These platforms allow developers to register custom functions,
define their schemas, and let the AI automatically decide when and how to use them.

The benefits of function calling extend beyond simple API interactions. They enable AI agents to perform complex
workflows, integrate with enterprise systems, handle multi-step reasoning tasks, and provide more accurate and
up-to-date responses. This technology is fundamental to building sophisticated AI applications that can interact
with the real world effectively and reliably."""

CURRENCY_CONVERSION_QUERY = """\
Convert 500 USD to EUR, GBP, and JPY using current exchange rates.
Also get the current exchange rates for each conversion.
Present the results in a clear format and mention if real-time or fallback rates are used."""

SEQUENTIAL_QUERIES = (
    "Convert 1000 USD to EUR",
    "Convert 1000 USD to GBP",
    "Convert 1000 USD to JPY",
    "Get weather for London",
    "Get weather for Paris",
)

PARALLEL_QUERY = """\
Please perform these operations simultaneously:
1. Convert 1000 USD to EUR
2. Convert 1000 USD to GBP
3. Convert 1000 USD to JPY
4. Get current weather for London
5. Get current weather for Paris

Execute all these tasks and provide a summary of the results."""

ALLOWED_QUERIES = ("Convert 500 USD to EUR", "Get weather for Madrid")
BLOCKED_QUERIES = ("Convert 1000 USD to BTC", "Get weather for Pyongyang")
ALERT_QUERY = "Convert 500000 USD to EUR"

COMPLEX_QUERY = """\
I need help with the following financial operations:
1. Convert 1000 USD to EUR
2. Convert 500 USD to BTC (this should be blocked)
3. Convert 2000 EUR to GBP
4. Get weather for London
5. Get weather for Tehran (this should be blocked)
6. Convert 750000 USD to JPY (this should trigger an alert)

Please process all these requests."""


def _add_currency_and_weather(kernel: Kernel) -> None:
    kernel.add_plugin(
        CurrencyPlugin(kernel.http_client, rates_url=kernel.settings.exchange_rate_url)
    )
    kernel.add_plugin(
        WeatherPlugin(kernel.http_client, weather_url=kernel.settings.weather_url)
    )


def _add_security_filter(kernel: Kernel) -> None:
    kernel.add_filter(SecurityFilter(kernel.settings.policy_rules()))


async def weather_chat_demo(settings: ToolcallSettings) -> None:
    """Interactive chat where the model can look up the weather."""
    async with create_kernel(settings) as kernel:
        kernel.add_plugin(
            WeatherPlugin(kernel.http_client, weather_url=settings.weather_url)
        )
        await kernel.warn_if_tools_unsupported()

        history = ChatHistory()
        execution_settings = kernel.execution_settings(auto_invoke_tools=True)

        while (message := read_message()) is not None:
            history.add_user_message(message)
            reply = await kernel.get_message(history, execution_settings)
            print(reply.content)
            history.add(reply)


async def document_summarization_demo(settings: ToolcallSettings) -> None:
    """Summarize a fixed article in three bullet points."""
    async with create_kernel(settings) as kernel:
        print("\n--- Document Summarization Example ---")
        summary = await kernel.invoke_prompt(
            f"Summarize this article in 3 bullet points:\n\n{LONG_ARTICLE}",
            kernel.execution_settings(auto_invoke_tools=True),
        )
        print(summary)


async def currency_conversion_demo(settings: ToolcallSettings) -> None:
    """Convert one amount into three currencies with a single prompt."""
    async with create_kernel(settings) as kernel:
        kernel.add_plugin(
            CurrencyPlugin(kernel.http_client, rates_url=settings.exchange_rate_url)
        )
        await kernel.warn_if_tools_unsupported()

        print("\n--- Currency Conversion with Parallel Function Calls Demo ---")
        print("Note: Using real-time exchange rates with automatic parallel calls")
        print("Converting currencies with parallel function calls...\n")

        result = await kernel.invoke_prompt(
            CURRENCY_CONVERSION_QUERY,
            kernel.execution_settings(auto_invoke_tools=True),
        )
        print(result)


async def sequential_function_calls_demo(settings: ToolcallSettings) -> float:
    """Send five single-task prompts one after another.

    Returns:
        float: Elapsed seconds
    """
    async with create_kernel(settings) as kernel:
        _add_currency_and_weather(kernel)

        print("--- SEQUENTIAL FUNCTION CALLS DEMO ---")
        print("Forcing sequential execution by asking one thing at a time...\n")

        execution_settings = kernel.execution_settings(auto_invoke_tools=True)
        start = time.perf_counter()
        print(f"[{timestamp()}] Starting sequential calls...")

        for query in SEQUENTIAL_QUERIES:
            result = await kernel.invoke_prompt(query, execution_settings)
            print(f"[{timestamp()}] Completed: {query}")
            print(f"Result: {result}\n")

        duration = time.perf_counter() - start
        print(f"SEQUENTIAL EXECUTION TIME: {duration:.2f} seconds")
        return duration


async def parallel_function_calls_demo(settings: ToolcallSettings) -> float:
    """Ask for all five tasks in one prompt so the model batches the calls.

    Returns:
        float: Elapsed seconds
    """
    async with create_kernel(settings) as kernel:
        _add_currency_and_weather(kernel)

        print("--- PARALLEL FUNCTION CALLS DEMO ---")
        print("Asking for multiple operations in a single prompt...\n")

        start = time.perf_counter()
        print(f"[{timestamp()}] Starting parallel function calls...")

        result = await kernel.invoke_prompt(
            PARALLEL_QUERY, kernel.execution_settings(auto_invoke_tools=True)
        )

        duration = time.perf_counter() - start
        print(f"[{timestamp()}] All parallel calls completed!")
        print(f"\nPARALLEL EXECUTION TIME: {duration:.2f} seconds")
        print("\n--- PARALLEL RESULTS ---")
        print(result)
        return duration


async def parallelism_demo_comparison(settings: ToolcallSettings) -> None:
    """Run the sequential demo, then the parallel demo, and compare timings."""
    print("\n=== PARALLELISM COMPARISON DEMO ===\n")

    sequential = await sequential_function_calls_demo(settings)
    print("\n" + "-" * 60 + "\n")
    parallel = await parallel_function_calls_demo(settings)

    if parallel > 0:
        print(f"\nSpeed-up: {sequential / parallel:.2f}x")


async def _run_guarded_query(kernel: Kernel, query: str, blocked_label: str) -> None:
    print(f"Query: {query}")
    try:
        result = await kernel.invoke_prompt(
            query, kernel.execution_settings(auto_invoke_tools=True)
        )
        print(f"Result: {result}\n")
    except PolicyViolation as e:
        print(f"{blocked_label}: {e.reason}\n")


async def security_filter_demo(settings: ToolcallSettings) -> None:
    """Send allowed, blocked and alerting prompts through the security filter."""
    print("\n=== SECURITY FILTER DEMO ===\n")

    async with create_kernel(settings) as kernel:
        _add_currency_and_weather(kernel)
        _add_security_filter(kernel)
        await kernel.warn_if_tools_unsupported()

        print("Testing allowed operations...\n")
        for query in ALLOWED_QUERIES:
            await _run_guarded_query(kernel, query, "Error")

        print("Testing BLOCKED operations...\n")
        for query in BLOCKED_QUERIES:
            await _run_guarded_query(kernel, query, "BLOCKED")

        await _run_guarded_query(kernel, ALERT_QUERY, "Error")

    print("=== Security Filter Demo Complete ===")


async def complex_security_demo(settings: ToolcallSettings) -> None:
    """One multi-step prompt mixing allowed, blocked and alerting operations."""
    print("\n=== COMPLEX SECURITY SCENARIO DEMO ===\n")

    async with create_kernel(settings) as kernel:
        _add_currency_and_weather(kernel)
        _add_security_filter(kernel)
        await kernel.warn_if_tools_unsupported()

        print(f"Complex Query:\n{COMPLEX_QUERY}\n")
        print("Processing...\n")

        try:
            result = await kernel.invoke_prompt(
                COMPLEX_QUERY, kernel.execution_settings(auto_invoke_tools=True)
            )
            print(f"Final Result:\n{result}")
        except PolicyViolation as e:
            logger.info(f"Complex scenario stopped by {e.function_name} ({e.field}={e.value})")
            print(f"Operation stopped due to security violation: {e.reason}")

    print("\n=== Complex Security Demo Complete ===")
