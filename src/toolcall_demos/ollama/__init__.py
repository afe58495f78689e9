"""Ollama client wrapper and integration layer."""

from toolcall_demos.ollama.client import OllamaClient
from toolcall_demos.ollama.types import ModelInfo

__all__ = ["OllamaClient", "ModelInfo"]
