"""Base exception for rustgeiger."""

from pathlib import Path
from typing import Dict, Optional


class RustGeigerError(Exception):
    """Base exception for all rustgeiger errors.

    Attributes:
        message: What went wrong
        details: Structured context, rendered as key=value pairs
        path: Source file the error concerns, if any; rendered as a prefix
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, str]] = None,
        path: Optional[Path] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.path = path

    def __str__(self) -> str:
        text = f"{self.path}: {self.message}" if self.path is not None else self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{text} ({details_str})"
        return text
