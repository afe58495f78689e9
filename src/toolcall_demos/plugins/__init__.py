"""Plugins whose methods the model can call as tools."""

from toolcall_demos.plugins.currency import CurrencyPlugin
from toolcall_demos.plugins.weather import WeatherPlugin

__all__ = ["CurrencyPlugin", "WeatherPlugin"]
