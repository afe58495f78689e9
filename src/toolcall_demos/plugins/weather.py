"""Weather lookup plugin backed by wttr.in."""

import logging
from typing import Annotated

import httpx
from pydantic import Field

from toolcall_demos.tools import tool

logger = logging.getLogger(__name__)

DEFAULT_WEATHER_URL = "https://wttr.in/{city}?format=3"


class WeatherPlugin:
    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        weather_url: str = DEFAULT_WEATHER_URL,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=10.0)
        self.weather_url = weather_url

    @tool(name="GetWeather", description="Gets the current weather for a city")
    async def get_weather(
        self, city: Annotated[str, Field(description="City name")]
    ) -> str:
        logger.info(f"Getting weather for {city}...")

        response = await self._http.get(self.weather_url.format(city=city))
        response.raise_for_status()

        logger.info(f"Weather retrieved for {city}")
        return response.text.strip()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
