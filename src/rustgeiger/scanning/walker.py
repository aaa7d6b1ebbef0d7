"""Unsafety walker: counts unsafe usage in a parsed Rust syntax tree.

Traversal is depth-first and pre-order over an explicit work stack, so deeply
nested expressions cannot exhaust the interpreter's recursion limit. Each
stack entry carries the context it is visited in (inside an unsafe scope or
not, and the enclosing module path); a subtree's context therefore ends with
the subtree and never leaks to its siblings.

Counting rules:
    - functions / methods: one per item, unsafe if declared `unsafe fn`
    - item_traits / item_impls: one per item, unsafe if declared `unsafe`
    - exprs: one per statement of a block, unsafe if the block lies in an
      unsafe context; sub-expressions of a statement are not counted, but
      statements of blocks nested inside it are
Nesting an unsafe block inside another unsafe context changes nothing
about what is counted.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, NamedTuple, Union

from .models import Count, CounterBlock, RsFileMetrics
from .syntax import (
    NodeKind,
    SafetyAnnotation,
    classify,
    inner_attributes,
    is_marked_unsafe,
    is_statement,
    is_test_function,
    is_test_module,
    node_text,
    outer_attributes,
    safety_annotation,
)

if TYPE_CHECKING:
    from tree_sitter import Node, Tree


_CATEGORIES = ("functions", "exprs", "item_traits", "item_impls", "methods")


class _Frame(NamedTuple):
    """A node waiting to be visited, with the context it is visited in."""

    node: Node
    in_unsafe: bool
    module_path: tuple[str, ...]


class UnsafetyWalker:
    """Counts unsafe functions, methods, traits, impls and statements.

    Usage:
        walker = UnsafetyWalker(include_tests=False)
        metrics = walker.count(tree)

    count() keeps all traversal state local to the call, so a walker may be
    reused for any number of trees.
    """

    def __init__(self, include_tests: bool = True) -> None:
        self.include_tests = include_tests

    def count(self, root: Union[Tree, Node]) -> RsFileMetrics:
        """Walk a syntax tree (or its root node) and return its metrics."""
        node = root.root_node if hasattr(root, "root_node") else root

        tally: Counter[tuple[str, bool]] = Counter()
        forbidding_scopes: list[str] = []

        # The crate-level flag comes only from inner attributes of the file itself
        forbids_unsafe = (
            safety_annotation(inner_attributes(node)) is SafetyAnnotation.FORBID_UNSAFE
        )

        stack: list[_Frame] = []
        _push_children(stack, node, in_unsafe=False, module_path=())
        while stack:
            frame = stack.pop()
            current = frame.node
            in_unsafe = frame.in_unsafe
            module_path = frame.module_path
            kind = classify(current)

            if kind is NodeKind.FUNCTION or kind is NodeKind.METHOD:
                if not self.include_tests and is_test_function(current):
                    continue
                unsafe_fn = is_marked_unsafe(current)
                category = "functions" if kind is NodeKind.FUNCTION else "methods"
                tally[(category, unsafe_fn)] += 1
                # The body of an unsafe fn is an unsafe context
                in_unsafe = in_unsafe or unsafe_fn

            elif kind is NodeKind.TRAIT:
                tally[("item_traits", is_marked_unsafe(current))] += 1

            elif kind is NodeKind.IMPL:
                tally[("item_impls", is_marked_unsafe(current))] += 1

            elif kind is NodeKind.MODULE:
                if not self.include_tests and is_test_module(current):
                    continue
                name_node = current.child_by_field_name("name")
                module_path = module_path + (node_text(name_node) if name_node is not None else "",)
                body = current.child_by_field_name("body")
                attributes = outer_attributes(current) + inner_attributes(body)
                if safety_annotation(attributes) is SafetyAnnotation.FORBID_UNSAFE:
                    forbidding_scopes.append("::".join(module_path))

            elif kind is NodeKind.BLOCK:
                for child in current.children:
                    if is_statement(child):
                        tally[("exprs", in_unsafe)] += 1

            elif kind is NodeKind.UNSAFE_BLOCK:
                in_unsafe = True

            _push_children(stack, current, in_unsafe, module_path)

        counters = CounterBlock(
            **{
                category: Count(safe=tally[(category, False)], unsafe=tally[(category, True)])
                for category in _CATEGORIES
            }
        )
        return RsFileMetrics(
            counters=counters,
            forbids_unsafe=forbids_unsafe,
            forbidding_scopes=tuple(forbidding_scopes),
        )


def _push_children(
    stack: list[_Frame], node: Node, in_unsafe: bool, module_path: tuple[str, ...]
) -> None:
    # Reversed, so the leftmost child is popped first
    for child in reversed(node.children):
        stack.append(_Frame(child, in_unsafe, module_path))


def count_unsafe(root: Union[Tree, Node], include_tests: bool = True) -> RsFileMetrics:
    """Count unsafe usage in a parsed tree with a fresh walker."""
    return UnsafetyWalker(include_tests=include_tests).count(root)
