"""Tree-sitter parser wrapper for Rust sources.

Turns source text into a tree-sitter syntax tree, or a ParseFailure locating
the first syntax error. tree-sitter always produces a tree; malformed input
shows up as ERROR or MISSING nodes, which are reported here instead of being
walked.

Usage:
    parser = RustParser()
    result = parser.parse(code)
    if isinstance(result, ParseFailure):
        ...
    else:
        root = result.root_node
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Union

import tree_sitter
import tree_sitter_rust

from .models import ParseFailure

logger = logging.getLogger(__name__)

LANGUAGE = "rust"

_SNIPPET_LENGTH = 24


@lru_cache(maxsize=1)
def rust_language() -> tree_sitter.Language:
    """The compiled Rust grammar, loaded once per process."""
    # tree-sitter >= 0.22 returns PyCapsule; wrap in Language()
    return tree_sitter.Language(tree_sitter_rust.language())


class RustParser:
    """Wrapper around tree-sitter's parser for one compilation unit.

    tree-sitter parsers keep internal state between calls, so instances
    should not be shared across threads. Creating one is cheap.
    """

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(rust_language())

    def parse(self, code: Union[str, bytes]) -> Union[tree_sitter.Tree, ParseFailure]:
        """Parse code and return its syntax tree.

        Args:
            code: Source text, or its UTF-8 encoding

        Returns:
            Tree if the grammar matched the whole input, ParseFailure otherwise
        """
        if isinstance(code, str):
            code = code.encode("utf-8")

        tree = self._parser.parse(code)
        root = tree.root_node
        if not root.has_error:
            return tree

        failure = _failure_for(root, code)
        logger.debug(f"Syntax error at {failure.line}:{failure.column}: {failure.message}")
        return failure


def _first_error(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    """Leftmost ERROR or MISSING node beneath node, in pre-order.

    Iterative, so malformed input nested deeper than the recursion limit is
    still reported as a ParseFailure.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            return current
        # Reversed, so the leftmost child is popped first
        for child in reversed(current.children):
            if child.has_error or child.is_missing:
                stack.append(child)
    return None


def _failure_for(root: tree_sitter.Node, code: bytes) -> ParseFailure:
    error = _first_error(root)
    if error is None:
        return ParseFailure("syntax error", offset=0, line=1, column=1)

    row, column = error.start_point[0], error.start_point[1]
    if error.is_missing:
        message = f"expected `{error.type}`"
    else:
        snippet = code[error.start_byte : error.end_byte].decode("utf-8", errors="replace")
        snippet = snippet.strip().splitlines()[0] if snippet.strip() else ""
        if not snippet:
            message = "unexpected end of input"
        else:
            if len(snippet) > _SNIPPET_LENGTH:
                snippet = snippet[:_SNIPPET_LENGTH] + "..."
            message = f"unexpected `{snippet}`"

    return ParseFailure(message, offset=error.start_byte, line=row + 1, column=column + 1)
