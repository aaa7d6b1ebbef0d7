"""Syntax classification for tree-sitter-rust nodes.

Maps raw tree-sitter node types onto the small, closed set of node kinds the
unsafety walker dispatches on, and interprets the attributes that matter for
counting:
    - #![forbid(unsafe_code)] / #[forbid(unsafe_code)]: ForbidUnsafe annotation
    - #[test] on functions, #[cfg(test)] on modules: test code

Attributes in tree-sitter-rust are siblings of the item they decorate (outer
attributes) or leading members of the enclosing body (inner attributes), not
children of the item itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from tree_sitter import Node


class NodeKind(Enum):
    """Node kinds the walker distinguishes."""

    FUNCTION = "function"
    METHOD = "method"
    TRAIT = "trait"
    IMPL = "impl"
    MODULE = "module"
    BLOCK = "block"
    UNSAFE_BLOCK = "unsafe_block"
    OTHER = "other"


class SafetyAnnotation(Enum):
    """Scope-level safety policy declared in source."""

    NONE = "none"
    FORBID_UNSAFE = "forbid_unsafe"


_FUNCTION_TYPES = frozenset({"function_item", "function_signature_item"})

# Containers whose declaration_list members are methods
_METHOD_OWNERS = frozenset({"impl_item", "trait_item"})

_SIMPLE_KINDS = {
    "trait_item": NodeKind.TRAIT,
    "impl_item": NodeKind.IMPL,
    "mod_item": NodeKind.MODULE,
    "block": NodeKind.BLOCK,
    "unsafe_block": NodeKind.UNSAFE_BLOCK,
}

_COMMENT_TYPES = frozenset({"line_comment", "block_comment"})

# Children of a block that are not executable statements
_NON_STATEMENT_TYPES = frozenset(
    {
        "label",
        "empty_statement",
        "attribute_item",
        "inner_attribute_item",
        # items declared inside a block
        "function_item",
        "function_signature_item",
        "struct_item",
        "union_item",
        "enum_item",
        "trait_item",
        "impl_item",
        "mod_item",
        "foreign_mod_item",
        "type_item",
        "const_item",
        "static_item",
        "use_declaration",
        "extern_crate_declaration",
        "macro_definition",
        "associated_type",
    }
    | _COMMENT_TYPES
)

_ATTRIBUTE_RE = re.compile(r"^\s*(?P<path>[A-Za-z_][\w:]*)\s*(?:\((?P<args>.*)\))?\s*$", re.DOTALL)

FORBID_LINT = "unsafe_code"


@dataclass(frozen=True)
class Attribute:
    """A parsed attribute such as `forbid(unsafe_code)` or `test`."""

    path: str
    args: tuple[str, ...] = ()
    inner: bool = False

    @property
    def name(self) -> str:
        """Last path segment (`tokio::test` -> `test`)."""
        return self.path.rsplit("::", 1)[-1]


def node_text(node: Node) -> str:
    if node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def classify(node: Node) -> NodeKind:
    """Map a tree-sitter node onto the walker's node kinds."""
    if node.type in _FUNCTION_TYPES:
        if _is_method(node):
            return NodeKind.METHOD
        # Bodiless signatures outside traits are foreign (extern block) declarations
        if node.type == "function_signature_item":
            return NodeKind.OTHER
        return NodeKind.FUNCTION
    return _SIMPLE_KINDS.get(node.type, NodeKind.OTHER)


def _is_method(node: Node) -> bool:
    parent = node.parent
    if parent is None or parent.type != "declaration_list":
        return False
    owner = parent.parent
    return owner is not None and owner.type in _METHOD_OWNERS


def is_marked_unsafe(node: Node) -> bool:
    """True if a function, method, trait or impl is declared `unsafe`."""
    if node.type in _FUNCTION_TYPES:
        for child in node.children:
            if child.type == "function_modifiers":
                return any(m.type == "unsafe" for m in child.children)
        return False
    return any(child.type == "unsafe" for child in node.children)


def is_statement(node: Node) -> bool:
    """True if a child of a block is an executable statement.

    A statement that consists only of an unsafe block is not a statement in
    its own right; the walker descends into it instead.
    """
    if not node.is_named or node.type in _NON_STATEMENT_TYPES:
        return False
    if node.type == "unsafe_block":
        return False
    if node.type == "expression_statement":
        inner = [c for c in node.named_children if c.type not in _COMMENT_TYPES]
        if len(inner) == 1 and inner[0].type == "unsafe_block":
            return False
    return True


def parse_attribute(item: Node) -> Optional[Attribute]:
    """Parse an attribute_item / inner_attribute_item node."""
    attr = next((c for c in item.named_children if c.type == "attribute"), None)
    if attr is None:
        return None
    match = _ATTRIBUTE_RE.match(node_text(attr))
    if match is None:
        return None
    args = tuple(_split_arguments(match.group("args") or ""))
    return Attribute(
        path=re.sub(r"\s+", "", match.group("path")),
        args=args,
        inner=item.type == "inner_attribute_item",
    )


def _split_arguments(raw: str) -> list[str]:
    """Split an attribute argument list on top-level commas only.

    `clippy::x(a, b), unsafe_code` -> ["clippy::x(a, b)", "unsafe_code"].
    Commas inside string literals are not special-cased.
    """
    args: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(raw):
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            args.append(raw[start:i])
            start = i + 1
    args.append(raw[start:])
    return [a.strip() for a in args if a.strip()]


def outer_attributes(node: Node) -> list[Attribute]:
    """Outer attributes (`#[...]`) written directly before an item."""
    attributes: list[Attribute] = []
    sibling = node.prev_sibling
    while sibling is not None and (
        sibling.type == "attribute_item" or sibling.type in _COMMENT_TYPES
    ):
        if sibling.type == "attribute_item":
            parsed = parse_attribute(sibling)
            if parsed is not None:
                attributes.append(parsed)
        sibling = sibling.prev_sibling
    attributes.reverse()
    return attributes


def inner_attributes(scope: Optional[Node]) -> list[Attribute]:
    """Inner attributes (`#![...]`) declared in a source_file or item body."""
    if scope is None:
        return []
    attributes: list[Attribute] = []
    for child in scope.named_children:
        if child.type == "inner_attribute_item":
            parsed = parse_attribute(child)
            if parsed is not None:
                attributes.append(parsed)
    return attributes


def safety_annotation(attributes: Iterable[Attribute]) -> SafetyAnnotation:
    """ForbidUnsafe if any attribute is forbid(...) naming unsafe_code."""
    for attribute in attributes:
        if attribute.path == "forbid" and FORBID_LINT in attribute.args:
            return SafetyAnnotation.FORBID_UNSAFE
    return SafetyAnnotation.NONE


def is_test_function(node: Node) -> bool:
    """True for functions annotated with a `test` attribute (#[test], #[tokio::test])."""
    return any(a.name == "test" and not a.args for a in outer_attributes(node))


def is_test_module(node: Node) -> bool:
    """True for #[cfg(test)] modules.

    Only the plain form is recognised; compound cfg expressions such as
    cfg(all(test, unix)) are treated as regular code.
    """
    return any(a.path == "cfg" and "test" in a.args for a in outer_attributes(node))
