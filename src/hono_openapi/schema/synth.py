"""Type-to-schema synthesizer.

One recursive algorithm, ``to_schema``, works over a "type-like" input that
is either a live oracle type (``FromOracleType``) or a raw type text
(``FromDisplayText``). Priority order: union, primitive, array, map, object,
fallback. The set of object types currently being expanded is threaded
through the recursion so self-referential types terminate.
"""

import re
from typing import NamedTuple

from hono_openapi.parser.oracle import TsType

from .models import (
    ArraySchema,
    MapSchema,
    ObjectSchema,
    PrimitiveSchema,
    SchemaNode,
    UnionSchema,
    UnparsedSchema,
    dedupe,
    recursive_marker,
)


class Member(NamedTuple):
    name: str
    optional: bool
    type: "TypeLike"


class TypeLike:
    """The queries the synthesizer needs from a type."""

    def union_members(self) -> list["TypeLike"] | None:
        return None

    def is_string(self) -> bool:
        return False

    def is_number(self) -> bool:
        return False

    def is_boolean(self) -> bool:
        return False

    def is_null(self) -> bool:
        return False

    def is_undefined(self) -> bool:
        return False

    def element(self) -> "TypeLike | None":
        return None

    def map_value(self) -> "TypeLike | None":
        return None

    def members(self) -> list[Member] | None:
        return None

    def identity(self) -> object | None:
        """Key identifying the type for the cycle guard (None: never recursive)."""
        return None

    def describe(self) -> str:
        raise NotImplementedError


class FromOracleType(TypeLike):
    def __init__(self, t: TsType):
        self.t = t

    def union_members(self):
        members = self.t.union_members()
        return [FromOracleType(m) for m in members] if members is not None else None

    def is_string(self):
        return self.t.is_string_like()

    def is_number(self):
        return self.t.is_number_like()

    def is_boolean(self):
        return self.t.is_boolean_like()

    def is_null(self):
        return self.t.is_null()

    def is_undefined(self):
        return self.t.is_undefined()

    def element(self):
        element = self.t.array_element_type()
        return FromOracleType(element) if element is not None else None

    def map_value(self):
        value = self.t.map_value_type()
        return FromOracleType(value) if value is not None else None

    def members(self):
        props = self.t.properties()
        if props is None:
            return None
        return [Member(p.name, p.optional, FromOracleType(p.type)) for p in props]

    def identity(self):
        return id(self.t)

    def describe(self):
        return self.t.display_text()


_PRIMITIVE_TEXT = {"string": "string", "String": "string", "number": "number", "Number": "number",
                   "boolean": "boolean", "Boolean": "boolean"}
_ARRAY_SUFFIX_RE = re.compile(r"^(.*)\[]$", re.DOTALL)
_ARRAY_GENERIC_RE = re.compile(r"^Array<(.+)>$", re.DOTALL)
_RECORD_RE = re.compile(r"^Record<\s*string\s*,\s*(.+)>$", re.DOTALL)
_MEMBER_SPLIT_RE = re.compile(r"[;,]\s*")
_MEMBER_RE = re.compile(r"^(\w+)(\?)?:\s*(.+)$", re.DOTALL)


class FromDisplayText(TypeLike):
    """Low-fidelity reading of a type from its text alone."""

    def __init__(self, type_text: str):
        self.text = type_text.strip()

    def is_string(self):
        return _PRIMITIVE_TEXT.get(self.text) == "string"

    def is_number(self):
        return _PRIMITIVE_TEXT.get(self.text) == "number"

    def is_boolean(self):
        return _PRIMITIVE_TEXT.get(self.text) == "boolean"

    def is_null(self):
        return self.text == "null"

    def is_undefined(self):
        return self.text in ("undefined", "void")

    def element(self):
        for pattern in (_ARRAY_SUFFIX_RE, _ARRAY_GENERIC_RE):
            match = pattern.match(self.text)
            if match and match.group(1).strip():
                return FromDisplayText(match.group(1))
        return None

    def map_value(self):
        match = _RECORD_RE.match(self.text)
        return FromDisplayText(match.group(1)) if match else None

    def members(self):
        if not (self.text.startswith("{") and self.text.endswith("}")):
            return None
        inner = self.text[1:-1].strip()
        members = []
        for part in filter(None, _MEMBER_SPLIT_RE.split(inner)):
            match = _MEMBER_RE.match(part.strip())
            if match:
                members.append(Member(match.group(1), bool(match.group(2)), FromDisplayText(match.group(3))))
        return members

    def describe(self):
        return self.text


def to_schema(t: TypeLike, expanding: frozenset = frozenset()) -> SchemaNode:
    """Map a type-like value to a schema. ``expanding`` holds the object types on the current path."""
    members = t.union_members()
    if members is not None:
        return _union_schema(members, expanding)

    if t.is_string():
        return PrimitiveSchema(type="string")
    if t.is_number():
        return PrimitiveSchema(type="number")
    if t.is_boolean():
        return PrimitiveSchema(type="boolean")
    if t.is_null():
        return PrimitiveSchema(type="null")
    if t.is_undefined():
        return UnparsedSchema(nullable=True)

    element = t.element()
    if element is not None:
        return ArraySchema(items=to_schema(element, expanding))

    value = t.map_value()
    if value is not None:
        return MapSchema(values=to_schema(value, expanding))

    props = t.members()
    if props is not None:
        identity = t.identity()
        if identity is not None and identity in expanding:
            return recursive_marker()
        inner = expanding | {identity} if identity is not None else expanding
        properties = {}
        required = []
        for member in props:
            properties[member.name] = to_schema(member.type, inner)
            if not member.optional:
                required.append(member.name)
        return ObjectSchema(properties=properties, required=required)

    return UnparsedSchema(description=f"Unparsed type: {t.describe()}")


def _union_schema(members: list[TypeLike], expanding: frozenset) -> SchemaNode:
    nullish = any(m.is_null() or m.is_undefined() for m in members)
    rest = [m for m in members if not (m.is_null() or m.is_undefined())]
    if not rest:
        return UnparsedSchema(nullable=True)
    if len(rest) == 1:
        schema = to_schema(rest[0], expanding)
        return schema.model_copy(update={"nullable": True}) if nullish else schema
    variants = dedupe([to_schema(m, expanding) for m in rest])
    if len(variants) == 1:
        return variants[0].model_copy(update={"nullable": True}) if nullish else variants[0]
    return UnionSchema(variants=variants, nullable=nullish)


def type_to_schema(t: TsType) -> SchemaNode:
    """Schema for a type reported by the oracle."""
    return to_schema(FromOracleType(t))


def type_text_to_schema(type_text: str | None) -> SchemaNode | None:
    """Schema for a textual type annotation, or None when there is no text."""
    if not type_text or not type_text.strip():
        return None
    return to_schema(FromDisplayText(type_text))
