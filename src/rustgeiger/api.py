"""Public API for rustgeiger.

Each function scans one compilation unit: parse, walk, return counters.
Scans share no state, so callers may run them concurrently, one per file.

Example:
    >>> from rustgeiger import scan_source
    >>> outcome = scan_source("unsafe fn f() {}")
    >>> outcome.counters.functions.unsafe
    1
"""

from __future__ import annotations

import codecs
from pathlib import Path
from typing import Iterator, Optional, Union

from .config import DEFAULT_CONFIG, ScanConfig
from .logging_config import get_logger
from .scanning.models import ParseFailure, RsFileMetrics, ScanOutcome
from .scanning.treesitter_parser import RustParser
from .scanning.walker import count_unsafe

logger = get_logger(__name__)

RS_EXTENSION = ".rs"


def scan_source(
    source: Union[str, bytes], config: Optional[ScanConfig] = None
) -> ScanOutcome:
    """Scan in-memory Rust source text.

    Args:
        source: Source text of one compilation unit (str, or UTF-8 bytes)
        config: Scan settings (defaults to DEFAULT_CONFIG)

    Returns:
        RsFileMetrics, or ParseFailure if the text is not valid Rust or the
        bytes are not valid UTF-8
    """
    config = config or DEFAULT_CONFIG
    if isinstance(source, bytes):
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as e:
            return _decode_failure(source, e)

    result = RustParser().parse(source)
    if isinstance(result, ParseFailure):
        return result
    return count_unsafe(result, include_tests=config.include_tests)


def scan_file(path: Union[str, Path], config: Optional[ScanConfig] = None) -> ScanOutcome:
    """Read and scan a Rust source file.

    A leading UTF-8 byte order mark is skipped. Failure offsets, lines and
    columns always refer to positions in the file as stored on disk. Bytes
    that do not decode with the configured encoding are reported as a
    ParseFailure at the first offending byte.

    Raises:
        OSError: If the file cannot be read (propagated unchanged)
    """
    config = config or DEFAULT_CONFIG
    path = Path(path)
    data = path.read_bytes()

    bom_length = len(codecs.BOM_UTF8) if data.startswith(codecs.BOM_UTF8) else 0
    try:
        text = data[bom_length:].decode(config.encoding)
    except UnicodeDecodeError as e:
        failure = _decode_failure(data[bom_length:], e).shifted(bom_length).with_path(path)
        logger.debug(f"Cannot decode {path}: {failure}")
        return failure

    outcome = scan_source(text, config)
    if isinstance(outcome, ParseFailure):
        outcome = outcome.shifted(bom_length).with_path(path)
        logger.debug(f"Cannot parse {outcome}")
        return outcome

    logger.debug(
        f"Scanned {path}: unsafe={outcome.counters.has_unsafe()} "
        f"forbids_unsafe={outcome.forbids_unsafe}"
    )
    return outcome


def find_unsafe_in_source(
    source: Union[str, bytes], config: Optional[ScanConfig] = None
) -> RsFileMetrics:
    """Like scan_source(), but raises ParsingError on malformed input."""
    outcome = scan_source(source, config)
    if isinstance(outcome, ParseFailure):
        raise outcome.to_error()
    return outcome


def find_unsafe_in_file(
    path: Union[str, Path], config: Optional[ScanConfig] = None
) -> RsFileMetrics:
    """Like scan_file(), but raises ParsingError on malformed input.

    Raises:
        ParsingError: If the file is not valid Rust
        OSError: If the file cannot be read
    """
    outcome = scan_file(path, config)
    if isinstance(outcome, ParseFailure):
        raise outcome.to_error()
    return outcome


def find_rs_files_in_dir(directory: Union[str, Path]) -> Iterator[Path]:
    """Yield resolved paths of all .rs files below a directory, sorted."""
    root = Path(directory)
    for candidate in sorted(root.rglob(f"*{RS_EXTENSION}")):
        if candidate.is_file():
            yield candidate.resolve()


def _decode_failure(data: bytes, error: UnicodeDecodeError) -> ParseFailure:
    offset = error.start
    line_start = data.rfind(b"\n", 0, offset) + 1
    return ParseFailure(
        f"invalid {error.encoding} byte sequence: {error.reason}",
        offset=offset,
        line=data.count(b"\n", 0, offset) + 1,
        column=offset - line_start + 1,
    )
