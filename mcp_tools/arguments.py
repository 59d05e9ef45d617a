# =============================================================================
# mcp_tools/arguments.py  —  Declared Tool Parameters & Strict Extraction
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Tool arguments arrive as an untyped JSON object.  Each tool declares its
#   parameters once (a Param per argument); the same declarations produce
#   the JSON schema advertised in tools/list AND check the real arguments
#   on every call.
#
# EXTRACTION RULES:
#   - absent or null            → None
#   - wrong JSON kind           → InvalidArgument ("Expected ... got ...")
#   - required + absent/""      → InvalidArgument ('"name" is required')
#   - value outside the enum    → InvalidArgument listing allowed values
#   - undeclared keys           → ignored
#   Nothing is coerced: 5 is never accepted as "5".
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional

from billing.errors import InvalidArgument

STRING = "string"
ARRAY = "array"
OBJECT = "object"


def _json_kind(value: Any) -> str:
    """Name a Python value by its JSON kind, for error messages."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


@dataclass(frozen=True)
class Param:
    """One declared tool argument."""

    name: str
    kind: str = STRING
    description: Optional[str] = None
    required: bool = False
    enum: Optional[tuple[str, ...]] = None
    # For ARRAY params whose items are objects: the item's own fields.
    item_params: tuple["Param", ...] = field(default_factory=tuple)
    item_description: Optional[str] = None

    def schema(self) -> dict[str, Any]:
        """JSON schema fragment for this parameter."""
        schema: dict[str, Any] = {"type": self.kind}
        if self.description:
            schema["description"] = self.description
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.kind == ARRAY and self.item_params:
            schema["items"] = object_schema(self.item_params)
        return schema

    def extract(self, arguments: dict[str, Any], path: str | None = None) -> Any:
        """Pull this parameter's value out of `arguments`, enforcing the rules above."""
        label = path or self.name
        value = arguments.get(self.name)

        if value is None:
            if self.required:
                raise InvalidArgument(f'"{label}" is required')
            return None

        if self.kind == STRING:
            if not isinstance(value, str):
                raise InvalidArgument(f'Expected "{label}" to be a string, got {_json_kind(value)}')
            if self.required and not value:
                raise InvalidArgument(f'"{label}" is required')
            if self.enum and value and value not in self.enum:
                allowed = ", ".join(f'"{v}"' for v in self.enum)
                raise InvalidArgument(f'Invalid {label} "{value}". Must be one of {allowed}.')
            return value

        if self.kind == ARRAY:
            if not isinstance(value, (list, tuple)):
                raise InvalidArgument(f'Expected "{label}" to be an array, got {_json_kind(value)}')
            if not self.item_params:
                return list(value)
            return [self._extract_item(item, f"{label}[{i}]") for i, item in enumerate(value)]

        raise InvalidArgument(f'Unsupported parameter kind "{self.kind}" for "{label}"')

    def _extract_item(self, item: Any, label: str) -> dict[str, Any]:
        if not isinstance(item, dict):
            raise InvalidArgument(f'Expected "{label}" to be an object, got {_json_kind(item)}')
        return {p.name: p.extract(item, f"{label}.{p.name}") for p in self.item_params}


def object_schema(params: tuple[Param, ...]) -> dict[str, Any]:
    """JSON schema for an object with the given parameters."""
    schema: dict[str, Any] = {
        "type": OBJECT,
        "properties": {p.name: p.schema() for p in params},
    }
    required = [p.name for p in params if p.required]
    if required:
        schema["required"] = required
    return schema


def extract_arguments(params: tuple[Param, ...], arguments: dict[str, Any] | None) -> dict[str, Any]:
    """Extract every declared parameter; the result has one key per Param."""
    arguments = arguments or {}
    if not isinstance(arguments, dict):
        raise InvalidArgument(f"Expected tool arguments to be an object, got {_json_kind(arguments)}")
    return {p.name: p.extract(arguments) for p in params}
