"""Conversion of Python callables to tool schemas.

Arguments are described with ``Annotated[T, Field(alias=..., description=...)]``
so the model sees the alias (``fromCurrency``) while the Python signature keeps
snake_case (``from_currency``). Only the alias is accepted when validating.
"""

import inspect
import logging
import typing
from typing import Any, Callable

from pydantic import BaseModel, create_model

logger = logging.getLogger(__name__)

# JSON schema keys the chat API understands for a single property
_PROPERTY_KEYS = ("type", "description", "enum", "items")


def build_arguments_model(name: str, func: Callable[..., Any]) -> type[BaseModel]:
    """Create a pydantic model that validates the arguments of ``func``.

    Args:
        name: Tool name, used to name the generated model
        func: Plain function or bound method

    Returns:
        type[BaseModel]: Model with one field per parameter (self excluded)

    Raises:
        TypeError: If the function takes *args or **kwargs
    """
    target = inspect.unwrap(getattr(func, "__func__", func))
    hints = typing.get_type_hints(target, include_extras=True)
    signature = inspect.signature(func)

    fields: dict[str, Any] = {}
    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            raise TypeError(f"Tool {name} cannot take *args or **kwargs")
        annotation = hints.get(param.name, Any)
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (annotation, default)

    # Aliased fields only accept the alias, the key invocation filters inspect
    return create_model(f"{name}Arguments", **fields)


def _simplify_property(prop: dict[str, Any]) -> dict[str, Any]:
    """Reduce a pydantic property schema to what the chat API accepts."""
    if "type" not in prop and "anyOf" in prop:
        types = [
            option["type"]
            for option in prop["anyOf"]
            if option.get("type") and option.get("type") != "null"
        ]
        if types:
            prop = {**prop, "type": types[0]}
    return {key: prop[key] for key in _PROPERTY_KEYS if key in prop}


def build_tool_schema(
    name: str, description: str, arguments_model: type[BaseModel]
) -> dict[str, Any]:
    """Build the chat API tool schema for a function.

    Returns:
        dict: {"type": "function", "function": {"name", "description", "parameters"}}
    """
    json_schema = arguments_model.model_json_schema(by_alias=True)
    properties = {
        prop_name: _simplify_property(prop)
        for prop_name, prop in json_schema.get("properties", {}).items()
    }
    logger.debug(f"Built schema for tool {name} with {len(properties)} parameters")
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": list(json_schema.get("required", [])),
            },
        },
    }
