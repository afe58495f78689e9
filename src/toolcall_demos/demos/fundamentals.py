"""Chat fundamentals: prompts, history, streaming, settings and images."""

from openai import AsyncOpenAI

from toolcall_demos.chat import ChatHistory, ExecutionSettings
from toolcall_demos.config import ToolcallSettings
from toolcall_demos.demos.console import read_message
from toolcall_demos.kernel import create_kernel
from toolcall_demos.services import ImageGenerationService

TRAVEL_SYSTEM_PROMPT = (
    "You are a travel expert who recommends unique destinations and unforgettable experiences."
)
TRAVEL_GREETING = "Hello! I'm your travel assistant. Where would you like to go?"
TRAVEL_REQUEST = "I want a different kind of vacation in Europe."

STARTUP_IDEA_PROMPT = (
    "Suggest an innovative idea for a tech startup focused on improving online education."
)

TRAVEL_LOUNGE_PROMPT = """\
Imagine a vibrant travel agency lounge inspired by the spirit of global adventure. \
The space features sleek, modern furniture with pops of color representing different \
continents, large world maps adorning the walls, and interactive digital displays \
showcasing breathtaking destinations.
Sunlight streams through panoramic windows, illuminating travel memorabilia, vintage \
suitcases, and shelves filled with guidebooks and souvenirs. The atmosphere is energetic \
yet welcoming, encouraging visitors to dream, plan, and embark on their next \
unforgettable journey.
Cozy nooks with plush seating invite guests to relax and discuss travel ideas, while a \
central coffee bar offers international treats and beverages. The overall design \
celebrates exploration, curiosity, and the joy of discovering new places."""


async def basic_prompt_interaction(settings: ToolcallSettings) -> None:
    """Answer each line independently until the user types quit."""
    async with create_kernel(settings) as kernel:
        while (message := read_message()) is not None:
            print(await kernel.invoke_prompt(message))


async def chat_with_history(settings: ToolcallSettings) -> None:
    """Interactive chat that keeps the whole conversation as context."""
    async with create_kernel(settings) as kernel:
        history = ChatHistory()
        while (message := read_message()) is not None:
            history.add_user_message(message)
            reply = await kernel.get_message(history)
            print(reply.content)
            history.add(reply)


async def travel_streaming_demo(settings: ToolcallSettings) -> None:
    """Stream a travel recommendation for a seeded conversation."""
    async with create_kernel(settings) as kernel:
        history = ChatHistory(TRAVEL_SYSTEM_PROMPT)

        history.add_assistant_message(TRAVEL_GREETING)
        message = history.last()
        print(f"{message.role}: {message.content}")

        history.add_user_message(TRAVEL_REQUEST)
        message = history.last()
        print(f"{message.role}: {message.content}")

        async for delta in kernel.stream(history):
            print(delta, end="", flush=True)
        print()


async def startup_idea_settings_demo(settings: ToolcallSettings) -> None:
    """Ask the same question at temperature 0 and at temperature 1."""
    async with create_kernel(settings) as kernel:
        for temperature in (0, 1):
            print(f"Temperature {temperature}:")
            print(
                await kernel.invoke_prompt(
                    STARTUP_IDEA_PROMPT,
                    ExecutionSettings(max_tokens=500, temperature=temperature),
                )
            )


async def create_travel_lounge_image(settings: ToolcallSettings) -> None:
    """Generate the travel agency lounge image and print its URL."""
    service = ImageGenerationService(
        client=AsyncOpenAI(api_key=settings.openai_api_key),
        model=settings.image_model_name,
    )
    try:
        url = await service.generate_image(
            TRAVEL_LOUNGE_PROMPT, settings.image_width, settings.image_height
        )
        print(f"Image URL: {url}")
    finally:
        await service.close()
