"""A small, closed grammar for zod schema builders.

Only a handful of builder calls are understood: ``z.string()``,
``z.number()``, ``z.boolean()``, ``z.array(<inner>)`` and
``z.object({...})``, plus the ``.optional()`` / ``.nullable()`` modifiers.
Refinements that do not change the shape (``.min(1)``, ``.email()``, ...)
are skipped. Anything else parses to ``ZodUnknown``.
"""

from typing import Annotated, Callable, Literal, Union

from pydantic import BaseModel, Field
from tree_sitter import Node

from hono_openapi.schema.models import (
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    SchemaNode,
    UnparsedSchema,
)

from .nodes import call_arguments, member_name, member_object, named_children, property_key, strip_parens_and_casts, text

REFINEMENTS = {"min", "max", "length", "email", "url", "uuid", "cuid", "regex", "int", "positive",
               "negative", "nonnegative", "nonpositive", "trim", "toLowerCase", "toUpperCase",
               "nonempty", "describe", "datetime", "startsWith", "endsWith"}


class _ZodBase(BaseModel):
    optional: bool = False
    nullable: bool = False

    def to_schema(self) -> SchemaNode:
        raise NotImplementedError


class ZodString(_ZodBase):
    kind: Literal["string"] = "string"

    def to_schema(self):
        return PrimitiveSchema(type="string", nullable=self.nullable)


class ZodNumber(_ZodBase):
    kind: Literal["number"] = "number"

    def to_schema(self):
        return PrimitiveSchema(type="number", nullable=self.nullable)


class ZodBoolean(_ZodBase):
    kind: Literal["boolean"] = "boolean"

    def to_schema(self):
        return PrimitiveSchema(type="boolean", nullable=self.nullable)


class ZodArray(_ZodBase):
    kind: Literal["array"] = "array"
    items: "ZodType | None" = None

    def to_schema(self):
        items = self.items.to_schema() if self.items is not None else UnparsedSchema()
        return ArraySchema(items=items, nullable=self.nullable)


class ZodObject(_ZodBase):
    kind: Literal["object"] = "object"
    fields: dict[str, "ZodType"] = {}

    def to_schema(self):
        properties = {name: f.to_schema() for name, f in self.fields.items()}
        required = [name for name, f in self.fields.items() if not f.optional]
        return ObjectSchema(properties=properties, required=required, nullable=self.nullable)


class ZodUnknown(_ZodBase):
    kind: Literal["unknown"] = "unknown"

    def to_schema(self):
        return UnparsedSchema(description="Unparsed Zod schema", nullable=self.nullable)


ZodType = Annotated[
    Union[ZodString, ZodNumber, ZodBoolean, ZodArray, ZodObject, ZodUnknown],
    Field(discriminator="kind"),
]

for _model in (ZodArray, ZodObject):
    _model.model_rebuild()


def is_zod_receiver(node: Node) -> bool:
    name = text(strip_parens_and_casts(node))
    return name == "z" or name.endswith(".z")


def _parse_array(call: Node) -> ZodArray:
    args = call_arguments(call)
    return ZodArray(items=parse_zod(args[0]) if args else None)


def _parse_object(call: Node) -> ZodType:
    args = call_arguments(call)
    shape = strip_parens_and_casts(args[0]) if args else None
    if shape is None or shape.type != "object":
        return ZodUnknown()
    fields = {}
    for prop in named_children(shape):
        if prop.type != "pair":
            continue
        name = property_key(prop.child_by_field_name("key"))
        if name is not None:
            fields[name] = parse_zod(prop.child_by_field_name("value"))
    return ZodObject(fields=fields)


BUILDERS: dict[str, Callable[[Node], ZodType]] = {
    "string": lambda call: ZodString(),
    "number": lambda call: ZodNumber(),
    "boolean": lambda call: ZodBoolean(),
    "array": _parse_array,
    "object": _parse_object,
}


def parse_zod(node: Node | None) -> ZodType:
    """Parse a zod builder expression such as ``z.string().email().optional()``."""
    if node is None:
        return ZodUnknown()
    optional = nullable = False
    current = strip_parens_and_casts(node)
    while current.type == "call_expression":
        callee = current.child_by_field_name("function")
        name = member_name(callee)
        if name is None:
            break
        receiver = member_object(callee)
        if is_zod_receiver(receiver):
            builder = BUILDERS.get(name)
            if builder is None:
                break
            return builder(current).model_copy(update={"optional": optional, "nullable": nullable})
        if name == "optional":
            optional = True
        elif name == "nullable":
            nullable = True
        elif name == "nullish":
            optional = nullable = True
        elif name not in REFINEMENTS:
            break
        current = strip_parens_and_casts(receiver)
    return ZodUnknown(optional=optional, nullable=nullable)


def is_zod_object_call(node: Node | None) -> bool:
    if node is None:
        return False
    node = strip_parens_and_casts(node)
    if node.type != "call_expression":
        return False
    callee = node.child_by_field_name("function")
    return member_name(callee) == "object" and is_zod_receiver(member_object(callee))


def zod_object_to_schema(node: Node) -> SchemaNode | None:
    """Schema of a ``z.object({...})`` call, or None if the shape is not a literal."""
    parsed = _parse_object(strip_parens_and_casts(node))
    if not isinstance(parsed, ZodObject):
        return None
    return parsed.to_schema()
