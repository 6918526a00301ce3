"""Helpers for reading tree-sitter TypeScript syntax nodes."""

from typing import Iterator

from tree_sitter import Node

FUNCTION_TYPES = {"arrow_function", "function_expression", "function", "function_declaration",
                  "generator_function", "generator_function_declaration", "method_definition"}
DECLARATION_LISTS = {"lexical_declaration", "variable_declaration"}
NAMED_DECLARATIONS = {"function_declaration", "generator_function_declaration", "class_declaration",
                      "enum_declaration"}
_WRAPPERS = {"parenthesized_expression", "as_expression", "satisfies_expression",
             "non_null_expression", "type_assertion"}


def text(node: Node | None) -> str:
    if node is None:
        return ""
    return node.text.decode("utf-8")


def node_key(node: Node) -> tuple[int, int, str]:
    return (node.start_byte, node.end_byte, node.type)


def named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def first_named(node: Node) -> Node | None:
    children = named_children(node)
    return children[0] if children else None


def walk(node: Node) -> Iterator[Node]:
    """Depth-first, document-order traversal including ``node`` itself."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def strip_parens_and_casts(node: Node) -> Node:
    """Remove parentheses, ``as``/``satisfies`` casts, ``<T>x`` and ``x!``."""
    while node.type in _WRAPPERS:
        if node.type == "type_assertion":
            inner = named_children(node)[-1]
        else:
            inner = first_named(node)
        if inner is None:
            break
        node = inner
    return node


def string_literal_value(node: Node | None) -> str | None:
    """Value of a string literal or of a template string without substitutions."""
    if node is None:
        return None
    if node.type == "string":
        return text(node)[1:-1]
    if node.type == "template_string":
        if any(c.type == "template_substitution" for c in node.children):
            return None
        return text(node)[1:-1]
    return None


def call_arguments(call: Node) -> list[Node]:
    args = call.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return []
    return named_children(args)


def member_name(node: Node | None) -> str | None:
    """Property name of a member expression, e.g. ``json`` for ``c.json``."""
    if node is None or node.type != "member_expression":
        return None
    prop = node.child_by_field_name("property")
    return text(prop) if prop is not None else None


def member_object(node: Node) -> Node | None:
    return node.child_by_field_name("object")


def property_key(node: Node | None) -> str | None:
    """Name of an object/type member key (identifier, string or number)."""
    if node is None:
        return None
    if node.type in ("property_identifier", "identifier", "shorthand_property_identifier",
                     "private_property_identifier", "number"):
        return text(node)
    return string_literal_value(node)


def is_function_like(node: Node | None) -> bool:
    return node is not None and node.type in FUNCTION_TYPES


def first_parameter_name(func: Node) -> str | None:
    """Name bound to the first parameter, if it is a plain identifier."""
    single = func.child_by_field_name("parameter")
    if single is not None:
        return text(single) if single.type == "identifier" else None
    params = func.child_by_field_name("parameters")
    if params is None:
        return None
    children = named_children(params)
    if not children:
        return None
    first = children[0]
    pattern = first.child_by_field_name("pattern") or first
    return text(pattern) if pattern.type == "identifier" else None


def declaration_kind(declarator: Node) -> str:
    """``const``, ``let`` or ``var`` for a variable declarator."""
    parent = declarator.parent
    if parent is None:
        return "var"
    kind = parent.child_by_field_name("kind")
    if kind is not None:
        return text(kind)
    return text(parent.children[0]) if parent.children else "var"


def _declared_in(scope: Node, name: str) -> Node | None:
    if scope.type in FUNCTION_TYPES:
        single = scope.child_by_field_name("parameter")
        if single is not None and text(single) == name:
            return single
        params = scope.child_by_field_name("parameters")
        if params is not None:
            for param in named_children(params):
                pattern = param.child_by_field_name("pattern")
                if pattern is not None and pattern.type == "identifier" and text(pattern) == name:
                    return param
    for child in named_children(scope):
        if child.type == "export_statement":
            child = child.child_by_field_name("declaration") or child
        if child.type in DECLARATION_LISTS:
            for declarator in named_children(child):
                if declarator.type != "variable_declarator":
                    continue
                target = declarator.child_by_field_name("name")
                if target is not None and target.type == "identifier" and text(target) == name:
                    return declarator
        elif child.type in NAMED_DECLARATIONS:
            target = child.child_by_field_name("name")
            if target is not None and text(target) == name:
                return child
    return None


def find_declaration(identifier: Node) -> Node | None:
    """Find the declaration an identifier refers to by walking lexical scopes outward.

    Returns a ``variable_declarator``, a parameter node, a bare parameter
    identifier of an arrow function, or a function/class/enum declaration.
    """
    name = text(identifier)
    scope = identifier.parent
    while scope is not None:
        found = _declared_in(scope, name)
        if found is not None:
            return found
        scope = scope.parent
    return None


def resolve_identifier_to_init(node: Node) -> Node | None:
    """Initializer expression of the variable an identifier refers to."""
    base = strip_parens_and_casts(node)
    if base.type != "identifier":
        return None
    decl = find_declaration(base)
    if decl is None or decl.type != "variable_declarator":
        return None
    return decl.child_by_field_name("value")


def resolve_function(node: Node | None) -> Node | None:
    """Follow an identifier to the function or arrow function it names."""
    if node is None:
        return None
    node = strip_parens_and_casts(node)
    if is_function_like(node):
        return node
    if node.type != "identifier":
        return None
    decl = find_declaration(node)
    if decl is None:
        return None
    if is_function_like(decl):
        return decl
    if decl.type == "variable_declarator":
        value = decl.child_by_field_name("value")
        if value is not None:
            value = strip_parens_and_casts(value)
            if is_function_like(value):
                return value
    return None


def resolve_to_string_literal(node: Node, oracle=None) -> str | None:
    """Follow identifiers to their initializers until a string literal is found.

    When the chain ends in an identifier the oracle is asked for a string
    literal type instead.
    """
    current: Node | None = strip_parens_and_casts(node)
    seen: set[tuple[int, int, str]] = set()
    while current is not None and node_key(current) not in seen:
        seen.add(node_key(current))
        value = string_literal_value(current)
        if value is not None:
            return value
        if current.type != "identifier":
            return None
        init = resolve_identifier_to_init(current)
        if init is not None:
            current = strip_parens_and_casts(init)
            continue
        if oracle is not None:
            return oracle.type_of(current).literal_string_value()
        return None
    return None
