"""Result models for unsafe scans.

A scan of one compilation unit yields a ScanOutcome, which is either:
    - RsFileMetrics: per-category counters plus the crate-level forbid flag
    - ParseFailure: diagnostic and location of the first syntax error

All models are immutable. The walker builds them once, after traversal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from ..exceptions import ParsingError


@dataclass(frozen=True)
class Count:
    """Occurrences of one syntactic category.

    Attributes:
        safe: Occurrences outside any unsafe marking or context
        unsafe: Occurrences declared unsafe, or inside an unsafe context
    """

    safe: int = 0
    unsafe: int = 0

    @property
    def total(self) -> int:
        return self.safe + self.unsafe

    def __add__(self, other: Count) -> Count:
        if not isinstance(other, Count):
            return NotImplemented
        return Count(safe=self.safe + other.safe, unsafe=self.unsafe + other.unsafe)


@dataclass(frozen=True)
class CounterBlock:
    """Unsafe usage metrics for the five tracked categories.

    Attributes:
        functions: Free-standing functions (`unsafe fn`)
        exprs: Statements executed inside an unsafe block or unsafe function
        item_traits: Trait declarations (`unsafe trait`)
        item_impls: Trait implementations (`unsafe impl`)
        methods: Methods in impl and trait bodies (`unsafe fn` members)
    """

    functions: Count = field(default_factory=Count)
    exprs: Count = field(default_factory=Count)
    item_traits: Count = field(default_factory=Count)
    item_impls: Count = field(default_factory=Count)
    methods: Count = field(default_factory=Count)

    def has_unsafe(self) -> bool:
        """True if any category recorded unsafe usage."""
        return any(count.unsafe > 0 for count in self.as_dict().values())

    def as_dict(self) -> dict[str, Count]:
        return {
            "functions": self.functions,
            "exprs": self.exprs,
            "item_traits": self.item_traits,
            "item_impls": self.item_impls,
            "methods": self.methods,
        }

    def __add__(self, other: CounterBlock) -> CounterBlock:
        if not isinstance(other, CounterBlock):
            return NotImplemented
        return CounterBlock(
            functions=self.functions + other.functions,
            exprs=self.exprs + other.exprs,
            item_traits=self.item_traits + other.item_traits,
            item_impls=self.item_impls + other.item_impls,
            methods=self.methods + other.methods,
        )


@dataclass(frozen=True)
class RsFileMetrics:
    """Successful scan of one compilation unit.

    Attributes:
        counters: Per-category safe/unsafe counts
        forbids_unsafe: True if the unit carries a crate-level
            `#![forbid(unsafe_code)]`
        forbidding_scopes: Module paths (e.g. "outer::inner") whose own scope
            carries a forbid(unsafe_code) annotation, in source order
    """

    counters: CounterBlock = field(default_factory=CounterBlock)
    forbids_unsafe: bool = False
    forbidding_scopes: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ParseFailure:
    """Source text could not be matched by the grammar.

    Attributes:
        message: Human-readable diagnostic
        offset: Byte offset of the offending token
        line: 1-indexed line of the offending token
        column: 1-indexed byte column of the offending token
        path: File the text came from, if any
    """

    message: str
    offset: int
    line: int
    column: int
    path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return False

    def with_path(self, path: Path) -> ParseFailure:
        return ParseFailure(self.message, self.offset, self.line, self.column, path)

    def shifted(self, prefix_length: int) -> ParseFailure:
        """Relocate past a prefix of prefix_length bytes stripped before parsing."""
        if prefix_length == 0:
            return self
        column = self.column + prefix_length if self.line == 1 else self.column
        return ParseFailure(
            self.message, self.offset + prefix_length, self.line, column, self.path
        )

    def to_error(self) -> ParsingError:
        """Convert into a raisable ParsingError."""
        return ParsingError(
            self.path,
            "rust",
            self.message,
            offset=self.offset,
            line=self.line,
            column=self.column,
        )

    def __str__(self) -> str:
        location = f"{self.path}:" if self.path is not None else ""
        return f"{location}{self.line}:{self.column}: {self.message}"


ScanOutcome = Union[RsFileMetrics, ParseFailure]
