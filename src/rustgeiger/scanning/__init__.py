"""Rust source parsing and unsafe counting."""

from .models import Count, CounterBlock, ParseFailure, RsFileMetrics, ScanOutcome
from .syntax import Attribute, NodeKind, SafetyAnnotation, classify
from .treesitter_parser import RustParser, rust_language
from .walker import UnsafetyWalker, count_unsafe

__all__ = [
    # Models
    "Count",
    "CounterBlock",
    "RsFileMetrics",
    "ParseFailure",
    "ScanOutcome",
    # Syntax
    "Attribute",
    "NodeKind",
    "SafetyAnnotation",
    "classify",
    # Parser and walker
    "RustParser",
    "rust_language",
    "UnsafetyWalker",
    "count_unsafe",
]
