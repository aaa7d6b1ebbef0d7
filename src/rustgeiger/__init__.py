"""
rustgeiger - Unsafe usage counter for Rust sources

Parses a Rust compilation unit with tree-sitter and counts unsafe functions,
methods, traits, impls and statements executed in unsafe context, along with
crate-level #![forbid(unsafe_code)] opt-outs. Aggregation across a dependency
graph and report rendering belong to the consuming tool.
"""

__version__ = "0.3.0"

from .api import (
    find_rs_files_in_dir,
    find_unsafe_in_file,
    find_unsafe_in_source,
    scan_file,
    scan_source,
)
from .config import ScanConfig, load_config
from .exceptions import ParsingError, RustGeigerError
from .logging_config import setup_logging
from .scanning.models import Count, CounterBlock, ParseFailure, RsFileMetrics, ScanOutcome

__all__ = [
    "scan_source",  # Main entry points
    "scan_file",
    "find_unsafe_in_source",
    "find_unsafe_in_file",
    "find_rs_files_in_dir",
    "ScanConfig",
    "load_config",
    "setup_logging",
    "Count",
    "CounterBlock",
    "RsFileMetrics",
    "ParseFailure",
    "ScanOutcome",
    "RustGeigerError",
    "ParsingError",
]
