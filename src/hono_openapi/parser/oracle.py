"""A lossy, per-file type oracle over tree-sitter TypeScript syntax.

There is no TypeScript checker to ask from Python, so this module answers the
questions the analyzer needs (what is the type of this expression, is it a
string, what are its properties, ...) from declarations and literals found in
the same file. Anything it cannot see degrades to ``any`` or to an opaque
named type, which the schema synthesizer renders as an unparsed leaf.
"""

import re
from typing import Callable, NamedTuple

from tree_sitter import Node

from .nodes import (
    call_arguments,
    declaration_kind,
    find_declaration,
    first_named,
    is_function_like,
    member_name,
    member_object,
    named_children,
    node_key,
    property_key,
    string_literal_value,
    strip_parens_and_casts,
    text,
    walk,
)
from .source import SourceFile


class Property(NamedTuple):
    name: str
    optional: bool
    type: "TsType"


class TsType:
    """Base class of oracle types. Every query has a conservative default."""

    def union_members(self) -> list["TsType"] | None:
        return None

    def is_string_like(self) -> bool:
        return False

    def is_number_like(self) -> bool:
        return False

    def is_boolean_like(self) -> bool:
        return False

    def is_null(self) -> bool:
        return False

    def is_undefined(self) -> bool:
        return False

    def is_any(self) -> bool:
        return False

    def array_element_type(self) -> "TsType | None":
        return None

    def map_value_type(self) -> "TsType | None":
        return None

    def properties(self) -> list[Property] | None:
        return None

    def literal_numeric_value(self) -> int | float | None:
        return None

    def literal_string_value(self) -> str | None:
        return None

    def symbol_name(self) -> str | None:
        return None

    def display_text(self) -> str:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.display_text()}>"


class PrimitiveType(TsType):
    def __init__(self, name: str):
        self.name = name

    def is_string_like(self):
        return self.name == "string"

    def is_number_like(self):
        return self.name in ("number", "bigint")

    def is_boolean_like(self):
        return self.name == "boolean"

    def is_null(self):
        return self.name == "null"

    def is_undefined(self):
        return self.name in ("undefined", "void")

    def is_any(self):
        return self.name in ("any", "unknown")

    def display_text(self):
        return self.name


STRING = PrimitiveType("string")
NUMBER = PrimitiveType("number")
BOOLEAN = PrimitiveType("boolean")
NULL = PrimitiveType("null")
UNDEFINED = PrimitiveType("undefined")
ANY = PrimitiveType("any")

_PREDEFINED = {name: PrimitiveType(name) for name in
               ("string", "number", "boolean", "bigint", "symbol", "null", "undefined", "void",
                "any", "unknown", "never", "object")}
_PREDEFINED.update(string=STRING, number=NUMBER, boolean=BOOLEAN, null=NULL, undefined=UNDEFINED, any=ANY)


class LiteralType(TsType):
    def __init__(self, base: PrimitiveType, value):
        self.base = base
        self.value = value

    def is_string_like(self):
        return self.base is STRING

    def is_number_like(self):
        return self.base is NUMBER

    def is_boolean_like(self):
        return self.base is BOOLEAN

    def literal_numeric_value(self):
        return self.value if self.base is NUMBER else None

    def literal_string_value(self):
        return self.value if self.base is STRING else None

    def display_text(self):
        if self.base is STRING:
            return f'"{self.value}"'
        if self.base is BOOLEAN:
            return "true" if self.value else "false"
        return str(self.value)


class EnumMemberType(TsType):
    def __init__(self, enum_name: str, member: str, value: int | str | None):
        self.enum_name = enum_name
        self.member = member
        self.value = value

    def is_string_like(self):
        return isinstance(self.value, str)

    def is_number_like(self):
        return not isinstance(self.value, str)

    def literal_numeric_value(self):
        return self.value if isinstance(self.value, int) else None

    def literal_string_value(self):
        return self.value if isinstance(self.value, str) else None

    def display_text(self):
        return f"{self.enum_name}.{self.member}"


class UnionType(TsType):
    def __init__(self, members: list[TsType]):
        self.members = members

    def union_members(self):
        return self.members

    def is_string_like(self):
        return all(m.is_string_like() for m in self.members)

    def is_number_like(self):
        return all(m.is_number_like() for m in self.members)

    def is_boolean_like(self):
        return all(m.is_boolean_like() for m in self.members)

    def display_text(self):
        return " | ".join(m.display_text() for m in self.members)


class ArrayType(TsType):
    def __init__(self, element: TsType):
        self.element = element

    def array_element_type(self):
        return self.element

    def display_text(self):
        inner = self.element.display_text()
        if isinstance(self.element, UnionType):
            inner = f"({inner})"
        return f"{inner}[]"


class TupleType(TsType):
    def __init__(self, elements: list[TsType]):
        self.elements = elements

    def array_element_type(self):
        return make_union(self.elements) if self.elements else ANY

    def display_text(self):
        return "[" + ", ".join(e.display_text() for e in self.elements) + "]"


class MapType(TsType):
    """``Record<string, V>`` and ``{ [key: string]: V }``."""

    def __init__(self, value: TsType):
        self.value = value

    def map_value_type(self):
        return self.value

    def display_text(self):
        return f"Record<string, {self.value.display_text()}>"


class ObjectType(TsType):
    """Object shape. Properties may be supplied lazily so self-references resolve."""

    def __init__(self, props: list[Property] | Callable[[], list[Property]], name: str | None = None):
        self._props = props
        self.name = name
        self._displaying = False

    def properties(self):
        if callable(self._props):
            compute = self._props
            # self-references met while expanding see an empty shape
            self._props = []
            self._props = compute()
        return self._props

    def symbol_name(self):
        return self.name

    def display_text(self):
        if self.name:
            return self.name
        if self._displaying:
            return "{...}"
        self._displaying = True
        try:
            members = [f"{p.name}{'?' if p.optional else ''}: {_strip_undefined(p).display_text()};"
                       for p in self.properties()]
        finally:
            self._displaying = False
        return "{ " + " ".join(members) + " }" if members else "{}"


class PromiseType(TsType):
    def __init__(self, inner: TsType):
        self.inner = inner

    def symbol_name(self):
        return "Promise"

    def display_text(self):
        return f"Promise<{self.inner.display_text()}>"


class NamedType(TsType):
    """An opaque type known only by name (classes, imported or built-in types)."""

    def __init__(self, name: str, args: list[TsType] | None = None):
        self.name = name
        self.args = args or []

    def symbol_name(self):
        return self.name

    def display_text(self):
        if self.args:
            return f"{self.name}<{', '.join(a.display_text() for a in self.args)}>"
        return self.name


class FunctionType(TsType):
    def __init__(self, signature: str = "(...args: any[]) => any"):
        self.signature = signature

    def display_text(self):
        return self.signature


def _strip_undefined(prop: Property) -> TsType:
    if not prop.optional:
        return prop.type
    members = prop.type.union_members()
    if members is None:
        return prop.type
    return make_union([m for m in members if not m.is_undefined()])


def make_union(types: list[TsType]) -> TsType:
    """Flatten and de-duplicate union members (objects by identity, the rest by display text)."""
    flat: list[TsType] = []
    seen: set[str] = set()
    for t in types:
        members = t.union_members() or [t]
        for m in members:
            key = f"object:{id(m)}" if isinstance(m, ObjectType) else m.display_text()
            if key in seen:
                continue
            seen.add(key)
            flat.append(m)
    if not flat:
        return PrimitiveType("never")
    if any(m.is_any() for m in flat):
        return ANY
    if len(flat) == 1:
        return flat[0]
    return UnionType(flat)


def widen(t: TsType) -> TsType:
    """Widen literal types the way mutable positions do (``let``, object members)."""
    if isinstance(t, LiteralType):
        return t.base
    members = t.union_members()
    if members is not None:
        return make_union([widen(m) for m in members])
    return t


def strip_nullish(t: TsType) -> TsType:
    members = t.union_members()
    if members is None:
        return t
    return make_union([m for m in members if not (m.is_null() or m.is_undefined())])


def with_undefined(t: TsType) -> TsType:
    return make_union([t, UNDEFINED])


# Return types of the Hono request API, by method name and whether an argument is passed.
_REQUEST_API: dict[str, tuple[TsType, TsType]] = {
    "param": (MapType(STRING), STRING),
    "query": (MapType(STRING), UnionType([STRING, UNDEFINED])),
    "queries": (MapType(ArrayType(STRING)), UnionType([ArrayType(STRING), UNDEFINED])),
    "header": (MapType(STRING), UnionType([STRING, UNDEFINED])),
    "json": (PromiseType(ANY), PromiseType(ANY)),
    "text": (PromiseType(STRING), PromiseType(STRING)),
    "arrayBuffer": (PromiseType(NamedType("ArrayBuffer")), PromiseType(NamedType("ArrayBuffer"))),
    "blob": (PromiseType(NamedType("Blob")), PromiseType(NamedType("Blob"))),
    "formData": (PromiseType(NamedType("FormData")), PromiseType(NamedType("FormData"))),
    "parseBody": (PromiseType(MapType(ANY)), PromiseType(MapType(ANY))),
}

_STRING_METHODS = {"toUpperCase", "toLowerCase", "trim", "trimStart", "trimEnd", "slice", "substring",
                   "replace", "replaceAll", "padStart", "padEnd", "repeat", "concat", "toString",
                   "toFixed", "toISOString", "join", "charAt", "normalize"}
_NUMBER_FUNCTIONS = {"Number", "parseInt", "parseFloat"}
_COMPARISON_OPERATORS = {"==", "===", "!=", "!==", "<", ">", "<=", ">=", "instanceof", "in"}
_ARITHMETIC_OPERATORS = {"-", "*", "/", "%", "**", "<<", ">>", ">>>", "&", "|", "^"}
_ARRAY_WRAPPERS = {"Array", "ReadonlyArray", "Set", "ReadonlySet"}
_NUMBER_RE = re.compile(r"^-?(0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|[0-9_]*\.?[0-9_]+([eE][+-]?[0-9]+)?)$")


def parse_number(raw: str) -> int | float | None:
    raw = raw.strip().rstrip("n")
    if not _NUMBER_RE.match(raw):
        return None
    cleaned = raw.replace("_", "")
    try:
        return int(cleaned, 0)
    except ValueError:
        value = float(cleaned)
        return int(value) if value.is_integer() else value


class TypeOracle:
    """Answers type queries for expressions and type annotations of one file."""

    def __init__(self, source: SourceFile):
        self.source = source
        self._aliases: dict[str, Node] = {}
        self._enums: dict[str, Node] = {}
        self._resolved_aliases: dict[str, TsType] = {}
        self._resolving_aliases: set[str] = set()
        self._resolving: set[tuple[int, int, str]] = set()
        self._collect_declarations(source.root)

    def _collect_declarations(self, root: Node) -> None:
        for node in walk(root):
            if node.type in ("type_alias_declaration", "interface_declaration"):
                name = text(node.child_by_field_name("name"))
                self._aliases.setdefault(name, node)
            elif node.type == "enum_declaration":
                name = text(node.child_by_field_name("name"))
                self._enums.setdefault(name, node)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def type_of(self, node: Node | None) -> TsType:
        """Resolved type of an expression node."""
        if node is None:
            return ANY
        key = node_key(node)
        if key in self._resolving:
            return ANY
        self._resolving.add(key)
        try:
            return self._type_of(node)
        finally:
            self._resolving.discard(key)

    def _type_of(self, node: Node) -> TsType:
        kind = node.type
        if kind in ("string", "template_string"):
            value = string_literal_value(node)
            return LiteralType(STRING, value) if value is not None else STRING
        if kind == "number":
            value = parse_number(text(node))
            return LiteralType(NUMBER, value) if value is not None else NUMBER
        if kind in ("true", "false"):
            return LiteralType(BOOLEAN, kind == "true")
        if kind == "null":
            return NULL
        if kind == "undefined":
            return UNDEFINED
        if kind == "regex":
            return NamedType("RegExp")
        if kind == "identifier":
            return self._identifier_type(node)
        if kind == "parenthesized_expression":
            return self.type_of(first_named(node))
        if kind in ("as_expression", "type_assertion"):
            children = named_children(node)
            if kind == "type_assertion":
                type_args = named_children(children[0])
                return self.type_from_annotation(type_args[0]) if type_args else ANY
            if len(children) > 1:
                return self.type_from_annotation(children[1])
            return self.type_of(children[0])
        if kind == "satisfies_expression":
            return self.type_of(first_named(node))
        if kind == "non_null_expression":
            return strip_nullish(self.type_of(first_named(node)))
        if kind == "await_expression":
            inner = self.type_of(first_named(node))
            return inner.inner if isinstance(inner, PromiseType) else inner
        if kind == "object":
            return self._object_literal_type(node)
        if kind == "array":
            elements = [widen(self.type_of(e)) for e in named_children(node) if e.type != "spread_element"]
            return ArrayType(make_union(elements) if elements else ANY)
        if kind == "member_expression":
            return self._member_type(node)
        if kind == "subscript_expression":
            target = self.type_of(node.child_by_field_name("object"))
            return target.array_element_type() or target.map_value_type() or ANY
        if kind == "call_expression":
            return self._call_type(node)
        if kind == "new_expression":
            return self._new_type(node)
        if is_function_like(node):
            return FunctionType()
        if kind == "ternary_expression":
            return make_union([self.type_of(node.child_by_field_name("consequence")),
                               self.type_of(node.child_by_field_name("alternative"))])
        if kind == "binary_expression":
            return self._binary_type(node)
        if kind == "unary_expression":
            return self._unary_type(node)
        if kind in ("update_expression",):
            return NUMBER
        if kind == "assignment_expression":
            return self.type_of(node.child_by_field_name("right"))
        if kind == "sequence_expression":
            children = named_children(node)
            return self.type_of(children[-1]) if children else ANY
        return ANY

    def _identifier_type(self, node: Node) -> TsType:
        name = text(node)
        if name == "undefined":
            return UNDEFINED
        decl = find_declaration(node)
        if decl is None:
            return ANY
        if decl.type == "variable_declarator":
            annotation = decl.child_by_field_name("type")
            if annotation is not None:
                return self.type_from_annotation(annotation)
            value = decl.child_by_field_name("value")
            if value is None:
                return ANY
            value_type = self.type_of(value)
            return value_type if declaration_kind(decl) == "const" else widen(value_type)
        if decl.type in ("required_parameter", "optional_parameter"):
            annotation = decl.child_by_field_name("type")
            if annotation is None:
                return ANY
            declared = self.type_from_annotation(annotation)
            return with_undefined(declared) if decl.type == "optional_parameter" else declared
        if decl.type == "enum_declaration":
            return NamedType(f"typeof {name}")
        if decl.type == "class_declaration":
            return NamedType(f"typeof {name}")
        if is_function_like(decl):
            return FunctionType()
        return ANY

    def _object_literal_type(self, node: Node) -> TsType:
        props: dict[str, Property] = {}
        for member in named_children(node):
            if member.type == "pair":
                name = property_key(member.child_by_field_name("key"))
                if name is None:
                    continue
                props[name] = Property(name, False, widen(self.type_of(member.child_by_field_name("value"))))
            elif member.type == "shorthand_property_identifier":
                name = text(member)
                value = self._identifier_type(member)
                props[name] = Property(name, False, widen(value))
            elif member.type == "method_definition":
                name = property_key(member.child_by_field_name("name"))
                if name is not None:
                    props[name] = Property(name, False, FunctionType())
            elif member.type == "spread_element":
                spread = self.type_of(first_named(member)).properties() or []
                for prop in spread:
                    props[prop.name] = prop
        return ObjectType(list(props.values()))

    def _member_type(self, node: Node) -> TsType:
        target = member_object(node)
        name = member_name(node)
        if target is None or name is None:
            return ANY
        stripped = strip_parens_and_casts(target)
        if stripped.type == "identifier":
            decl = find_declaration(stripped)
            if decl is not None and decl.type == "enum_declaration":
                return self._enum_member(decl, name)
        target_type = self.type_of(target)
        if name == "length" and (target_type.is_string_like() or target_type.array_element_type()):
            return NUMBER
        for prop in self._properties_of(strip_nullish(target_type)):
            if prop.name == name:
                return prop.type
        value = target_type.map_value_type()
        return value if value is not None else ANY

    def _call_type(self, node: Node) -> TsType:
        callee = node.child_by_field_name("function")
        if callee is None:
            return ANY
        args = call_arguments(node)
        callee = strip_parens_and_casts(callee)
        if callee.type == "member_expression":
            method = member_name(callee)
            receiver = strip_parens_and_casts(member_object(callee))
            if member_name(receiver) == "req" and method in _REQUEST_API:
                without_args, with_args = _REQUEST_API[method]
                return with_args if args else without_args
            receiver_text = text(receiver)
            if receiver_text == "JSON":
                return STRING if method == "stringify" else ANY
            if receiver_text == "Math":
                return NUMBER
            if method in _STRING_METHODS:
                return STRING
            return ANY
        if callee.type == "identifier":
            name = text(callee)
            if name == "String":
                return STRING
            if name in _NUMBER_FUNCTIONS:
                return NUMBER
            if name == "Boolean":
                return BOOLEAN
            return self._function_return_type(callee)
        return ANY

    def _function_return_type(self, callee: Node) -> TsType:
        decl = find_declaration(callee)
        func = None
        if decl is not None and is_function_like(decl):
            func = decl
        elif decl is not None and decl.type == "variable_declarator":
            value = decl.child_by_field_name("value")
            if value is not None and is_function_like(strip_parens_and_casts(value)):
                func = strip_parens_and_casts(value)
        if func is None:
            return ANY
        return_type = func.child_by_field_name("return_type")
        if return_type is not None:
            return self.type_from_annotation(return_type)
        body = func.child_by_field_name("body")
        if body is not None and body.type != "statement_block":
            result = self.type_of(body)
            is_async = any(c.type == "async" for c in func.children)
            return PromiseType(result) if is_async else result
        return ANY

    def _new_type(self, node: Node) -> TsType:
        constructor = node.child_by_field_name("constructor")
        name = text(constructor)
        type_args = node.child_by_field_name("type_arguments")
        args = [self.type_from_annotation(a) for a in named_children(type_args)] if type_args else []
        if name in ("Array",):
            return ArrayType(args[0] if args else ANY)
        return NamedType(name, args)

    def _binary_type(self, node: Node) -> TsType:
        operator = text(node.child_by_field_name("operator"))
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if operator in _COMPARISON_OPERATORS:
            return BOOLEAN
        if operator in _ARITHMETIC_OPERATORS:
            return NUMBER
        if operator == "+":
            left_type, right_type = self.type_of(left), self.type_of(right)
            if left_type.is_string_like() or right_type.is_string_like():
                return STRING
            if left_type.is_number_like() and right_type.is_number_like():
                return NUMBER
            return ANY
        if operator in ("||", "??"):
            return make_union([strip_nullish(self.type_of(left)), self.type_of(right)])
        if operator == "&&":
            return self.type_of(right)
        return ANY

    def _unary_type(self, node: Node) -> TsType:
        operator = text(node.child_by_field_name("operator"))
        argument = node.child_by_field_name("argument")
        if operator == "!":
            return BOOLEAN
        if operator == "typeof":
            return STRING
        if operator == "void":
            return UNDEFINED
        if operator == "-" and argument is not None and argument.type == "number":
            value = parse_number(text(argument))
            if value is not None:
                return LiteralType(NUMBER, -value)
        return NUMBER

    # ------------------------------------------------------------------
    # Enums
    # ------------------------------------------------------------------

    def enum_members(self, decl: Node) -> dict[str, int | str | None]:
        """Member values of an enum declaration, with numeric auto-increment."""
        values: dict[str, int | str | None] = {}
        body = decl.child_by_field_name("body")
        if body is None:
            return values
        next_value: int | None = 0
        for member in named_children(body):
            if member.type == "enum_assignment":
                name = property_key(member.child_by_field_name("name"))
                value = _constant_value(member.child_by_field_name("value"))
            else:
                name = property_key(member)
                value = next_value
            if name is None:
                continue
            values[name] = value
            next_value = value + 1 if isinstance(value, int) else None
        return values

    def _enum_member(self, decl: Node, member: str) -> TsType:
        values = self.enum_members(decl)
        if member not in values:
            return ANY
        return EnumMemberType(text(decl.child_by_field_name("name")), member, values[member])

    # ------------------------------------------------------------------
    # Type annotations
    # ------------------------------------------------------------------

    def type_from_annotation(self, node: Node | None) -> TsType:
        """Type denoted by a type node (or a ``: T`` type annotation)."""
        if node is None:
            return ANY
        kind = node.type
        if kind in ("type_annotation", "parenthesized_type", "readonly_type", "asserts_annotation"):
            return self.type_from_annotation(first_named(node))
        if kind == "predefined_type":
            return _PREDEFINED.get(text(node), ANY)
        if kind == "literal_type":
            return self._literal_type(first_named(node))
        if kind in ("null", "undefined"):
            return _PREDEFINED[kind]
        if kind == "union_type":
            return make_union([self.type_from_annotation(c) for c in named_children(node)])
        if kind == "intersection_type":
            return self._intersection_type([self.type_from_annotation(c) for c in named_children(node)])
        if kind == "array_type":
            return ArrayType(self.type_from_annotation(first_named(node)))
        if kind == "tuple_type":
            return TupleType([self.type_from_annotation(c) for c in named_children(node)])
        if kind in ("object_type", "interface_body"):
            return self._object_type(node)
        if kind == "type_identifier":
            return self._named_type(text(node))
        if kind == "nested_type_identifier":
            return self._nested_type(node)
        if kind == "generic_type":
            return self._generic_type(node)
        if kind in ("function_type", "constructor_type"):
            return FunctionType(text(node))
        if kind == "type_query":
            target = first_named(node)
            return self.type_of(target) if target is not None and target.type == "identifier" else ANY
        if kind == "this_type":
            return NamedType("this")
        return NamedType(text(node))

    def _literal_type(self, node: Node | None) -> TsType:
        if node is None:
            return ANY
        if node.type in ("string", "template_string"):
            return LiteralType(STRING, string_literal_value(node) or "")
        if node.type in ("true", "false"):
            return LiteralType(BOOLEAN, node.type == "true")
        if node.type in ("null", "undefined"):
            return _PREDEFINED[node.type]
        value = _constant_value(node)
        if isinstance(value, (int, float)):
            return LiteralType(NUMBER, value)
        return ANY

    def _named_type(self, name: str, args: list[TsType] | None = None) -> TsType:
        if name in self._aliases:
            return self._resolve_alias(name)
        if name in self._enums:
            values = self.enum_members(self._enums[name])
            return make_union([EnumMemberType(name, member, value) for member, value in values.items()])
        if name in ("String", "Number", "Boolean"):
            return _PREDEFINED[name.lower()]
        if name == "Object":
            return _PREDEFINED["object"]
        return NamedType(name, args)

    def _nested_type(self, node: Node) -> TsType:
        parts = text(node).split(".")
        if len(parts) == 2 and parts[0] in self._enums:
            return self._enum_member(self._enums[parts[0]], parts[1])
        return NamedType(text(node))

    def _resolve_alias(self, name: str) -> TsType:
        if name in self._resolved_aliases:
            return self._resolved_aliases[name]
        if name in self._resolving_aliases:
            return NamedType(name)
        decl = self._aliases[name]
        self._resolving_aliases.add(name)
        try:
            if decl.type == "interface_declaration":
                resolved: TsType = ObjectType(lambda: self._interface_members(decl), name=name)
            else:
                value = decl.child_by_field_name("value")
                if value is not None and value.type == "object_type":
                    resolved = self._object_type(value, name=name)
                else:
                    resolved = self.type_from_annotation(value)
        finally:
            self._resolving_aliases.discard(name)
        if isinstance(resolved, ObjectType) and resolved.name is None:
            resolved.name = name
        self._resolved_aliases[name] = resolved
        return resolved

    def _interface_members(self, decl: Node) -> list[Property]:
        props: dict[str, Property] = {}
        for clause in named_children(decl):
            if clause.type != "extends_type_clause":
                continue
            for base in named_children(clause):
                for prop in self._properties_of(self.type_from_annotation(base)):
                    props[prop.name] = prop
        body = decl.child_by_field_name("body")
        if body is not None:
            for prop in self._object_type_members(body):
                props[prop.name] = prop
        return list(props.values())

    def _object_type(self, node: Node, name: str | None = None) -> TsType:
        if not any(m.type in ("property_signature", "method_signature") for m in named_children(node)):
            value = self._index_signature_value(node)
            if value is not None:
                return MapType(value)
        return ObjectType(lambda: self._object_type_members(node), name=name)

    def _object_type_members(self, node: Node) -> list[Property]:
        props: list[Property] = []
        for member in named_children(node):
            if member.type in ("property_signature", "method_signature"):
                name = property_key(member.child_by_field_name("name"))
                if name is None:
                    continue
                optional = any(c.type == "?" for c in member.children)
                if member.type == "method_signature":
                    prop_type: TsType = FunctionType(text(member))
                else:
                    prop_type = self.type_from_annotation(member.child_by_field_name("type"))
                props.append(Property(name, optional, with_undefined(prop_type) if optional else prop_type))
        return props

    def _index_signature_value(self, node: Node) -> TsType | None:
        for member in named_children(node):
            if member.type == "index_signature":
                annotation = member.child_by_field_name("type")
                if annotation is None:
                    annotations = [c for c in named_children(member) if c.type == "type_annotation"]
                    annotation = annotations[-1] if annotations else None
                return self.type_from_annotation(annotation)
        return None

    def _generic_type(self, node: Node) -> TsType:
        name = text(node.child_by_field_name("name"))
        type_args = node.child_by_field_name("type_arguments")
        args = [self.type_from_annotation(a) for a in named_children(type_args)] if type_args else []
        if name in _ARRAY_WRAPPERS and args:
            return ArrayType(args[0])
        if name == "Promise" and args:
            return PromiseType(args[0])
        if name == "Record" and len(args) == 2:
            return self._record_type(args[0], args[1])
        if name in ("Partial", "Required", "Readonly") and args:
            return self._mapped_object(args[0], name)
        if name == "NonNullable" and args:
            return strip_nullish(args[0])
        if name in ("Pick", "Omit") and len(args) == 2:
            keys = {m.literal_string_value() for m in (args[1].union_members() or [args[1]])}
            source = self._properties_of(args[0])
            keep = [p for p in source if (p.name in keys) == (name == "Pick")]
            return ObjectType(keep)
        return self._named_type(name, args)

    def _record_type(self, key: TsType, value: TsType) -> TsType:
        keys = key.union_members() or [key]
        names = [k.literal_string_value() for k in keys]
        if all(n is not None for n in names):
            return ObjectType([Property(n, False, value) for n in names])
        return MapType(value)

    def _mapped_object(self, source: TsType, wrapper: str) -> TsType:
        def members() -> list[Property]:
            out = []
            for prop in self._properties_of(source):
                if wrapper == "Partial":
                    out.append(Property(prop.name, True, with_undefined(prop.type)))
                elif wrapper == "Required":
                    out.append(Property(prop.name, False, _strip_undefined(prop)))
                else:
                    out.append(prop)
            return out
        return ObjectType(members)

    def _intersection_type(self, parts: list[TsType]) -> TsType:
        objects = [p for p in parts if p.properties() is not None]
        if not objects:
            return parts[0] if parts else ANY

        def members() -> list[Property]:
            props: dict[str, Property] = {}
            for part in objects:
                for prop in part.properties():
                    props[prop.name] = prop
            return list(props.values())
        return ObjectType(members)

    def _properties_of(self, t: TsType) -> list[Property]:
        return t.properties() or []


def _constant_value(node: Node | None) -> int | float | str | None:
    """Value of a numeric/string constant, including a negated number."""
    if node is None:
        return None
    node = strip_parens_and_casts(node)
    if node.type == "number":
        return parse_number(text(node))
    value = string_literal_value(node)
    if value is not None:
        return value
    if node.type == "unary_expression":
        operator = text(node.child_by_field_name("operator"))
        argument = node.child_by_field_name("argument")
        if operator == "-" and argument is not None and argument.type == "number":
            number = parse_number(text(argument))
            return -number if number is not None else None
    return None


def enum_member_value(oracle: TypeOracle, node: Node) -> int | str | None:
    """Initializer value of ``Enum.Member`` when the enum is declared in this file."""
    node = strip_parens_and_casts(node)
    if node.type != "member_expression":
        return None
    target = strip_parens_and_casts(member_object(node))
    if target.type != "identifier":
        return None
    decl = find_declaration(target)
    if decl is None or decl.type != "enum_declaration":
        return None
    return oracle.enum_members(decl).get(member_name(node))
