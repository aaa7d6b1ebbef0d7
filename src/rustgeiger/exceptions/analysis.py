"""Analysis-related exceptions."""

from pathlib import Path
from typing import Optional

from .base import RustGeigerError


class AnalysisError(RustGeigerError):
    """Base class for analysis-related errors."""
    pass


class ParsingError(AnalysisError):
    """Raised when source text cannot be parsed.

    Carries the location of the first syntax error so callers can report it
    without parsing the file again. In-memory sources have no path.
    """

    def __init__(
        self,
        filepath: Optional[Path],
        language: str,
        reason: str,
        offset: int = 0,
        line: int = 1,
        column: int = 1,
    ):
        super().__init__(
            f"Failed to parse {language} source at {line}:{column}",
            details={"reason": reason, "offset": str(offset)},
            path=filepath,
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason
        self.offset = offset
        self.line = line
        self.column = column
