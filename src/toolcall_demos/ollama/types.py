"""Type definitions for Ollama integration."""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_CONTEXT_LENGTH = 2048


def _get_value(obj: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from either an attribute or a dict entry."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


@dataclass
class ModelInfo:
    """What the demos need to know about a chat model.

    Attributes:
        name: Full model name (e.g. "llama3.1:8b")
        family: Model family (e.g. "llama")
        capabilities: Model capabilities (e.g. ["completion", "tools"])
        context_length: Maximum context window size in tokens
    """

    name: str
    family: str = "unknown"
    capabilities: list[str] = field(default_factory=lambda: ["completion"])
    context_length: int = DEFAULT_CONTEXT_LENGTH

    @property
    def supports_tools(self) -> bool:
        return "tools" in self.capabilities

    @staticmethod
    def from_show_response(name: str, show_response: Any) -> "ModelInfo":
        """Create a ModelInfo from an Ollama ``show`` response.

        Args:
            name: The model name that was queried
            show_response: Response object or dict from ``AsyncClient.show``
        """
        details = _get_value(show_response, "details") or {}
        family = _get_value(details, "family") or "unknown"
        capabilities = list(_get_value(show_response, "capabilities") or ["completion"])

        modelinfo = _get_value(show_response, "modelinfo") or {}
        context_length = DEFAULT_CONTEXT_LENGTH
        if isinstance(modelinfo, dict):
            # Family-specific key first, e.g. "llama.context_length"
            for key in (f"{family}.context_length", "context_length"):
                if key in modelinfo:
                    context_length = int(modelinfo[key])
                    break

        return ModelInfo(
            name=name,
            family=family,
            capabilities=capabilities,
            context_length=context_length,
        )
