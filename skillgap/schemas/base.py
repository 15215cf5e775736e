from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_STRICT_KEYWORDS = {
    "type",
    "properties",
    "required",
    "items",
    "enum",
    "anyOf",
    "$ref",
    "$defs",
    "description",
    "additionalProperties",
}


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire and in model prompts."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def _strictify(node: Any) -> Any:
    if isinstance(node, list):
        return [_strictify(item) for item in node]
    if not isinstance(node, dict):
        return node

    clean = {
        key: _strictify(value)
        for key, value in node.items()
        if key in _STRICT_KEYWORDS and key not in {"properties", "$defs"}
    }
    if "properties" in node:
        clean["properties"] = {name: _strictify(prop) for name, prop in node["properties"].items()}
        clean["required"] = list(node["properties"].keys())
        clean["additionalProperties"] = False
    if "$defs" in node:
        clean["$defs"] = {name: _strictify(sub) for name, sub in node["$defs"].items()}
    return clean


def strict_json_schema(model: type[BaseModel]) -> dict[str, Any]:
    """JSON schema for structured-output mode: every key required, no extras, no defaults."""
    return _strictify(model.model_json_schema(by_alias=True))
