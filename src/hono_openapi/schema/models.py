"""Schema tree: the JSON-Schema-like values produced by the synthesizer.

Each node renders itself with ``to_openapi()`` into the dict layout used in
the generated OpenAPI document.
"""

import json
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

RECURSIVE_MARKER = "...recursive..."


class _SchemaBase(BaseModel):
    nullable: bool = False

    def to_openapi(self) -> dict:
        raise NotImplementedError

    def _finish(self, data: dict) -> dict:
        if self.nullable:
            data["nullable"] = True
        return data

    def structural_key(self) -> str:
        """Serialized form used to compare schemas structurally."""
        return json.dumps(self.to_openapi(), sort_keys=True)


class PrimitiveSchema(_SchemaBase):
    kind: Literal["primitive"] = "primitive"
    type: Literal["string", "number", "boolean", "null"]
    format: str | None = None

    def to_openapi(self) -> dict:
        data: dict = {"type": self.type}
        if self.format:
            data["format"] = self.format
        return self._finish(data)


class ArraySchema(_SchemaBase):
    kind: Literal["array"] = "array"
    items: "SchemaNode"

    def to_openapi(self) -> dict:
        return self._finish({"type": "array", "items": self.items.to_openapi()})


class ObjectSchema(_SchemaBase):
    kind: Literal["object"] = "object"
    properties: dict[str, "SchemaNode"] = {}
    required: list[str] = []

    def to_openapi(self) -> dict:
        data: dict = {
            "type": "object",
            "properties": {name: s.to_openapi() for name, s in self.properties.items()},
        }
        if self.required:
            data["required"] = list(self.required)
        return self._finish(data)


class MapSchema(_SchemaBase):
    """An object keyed by arbitrary strings (``Record<string, V>``)."""

    kind: Literal["map"] = "map"
    values: "SchemaNode"

    def to_openapi(self) -> dict:
        return self._finish({"type": "object", "additionalProperties": self.values.to_openapi()})


class UnionSchema(_SchemaBase):
    kind: Literal["union"] = "union"
    variants: list["SchemaNode"]

    def to_openapi(self) -> dict:
        return self._finish({"anyOf": [v.to_openapi() for v in self.variants]})


class UnparsedSchema(_SchemaBase):
    """Fallback leaf carrying the best available description (or nothing)."""

    kind: Literal["unparsed"] = "unparsed"
    description: str | None = None

    def to_openapi(self) -> dict:
        data: dict = {"description": self.description} if self.description is not None else {}
        return self._finish(data)


SchemaNode = Annotated[
    Union[PrimitiveSchema, ArraySchema, ObjectSchema, MapSchema, UnionSchema, UnparsedSchema],
    Field(discriminator="kind"),
]

for _model in (ArraySchema, ObjectSchema, MapSchema, UnionSchema):
    _model.model_rebuild()


def string_schema(format: str | None = None) -> PrimitiveSchema:
    return PrimitiveSchema(type="string", format=format)


def binary_schema() -> PrimitiveSchema:
    return PrimitiveSchema(type="string", format="binary")


def recursive_marker() -> UnparsedSchema:
    return UnparsedSchema(description=RECURSIVE_MARKER)


def dedupe(schemas: list) -> list:
    """Drop structurally equal schemas, keeping first occurrences."""
    seen: set[str] = set()
    unique = []
    for s in schemas:
        key = s.structural_key()
        if key not in seen:
            seen.add(key)
            unique.append(s)
    return unique
