"""Exception hierarchy for rustgeiger."""

from .analysis import AnalysisError, ParsingError
from .base import RustGeigerError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "RustGeigerError",
    "AnalysisError",
    "ParsingError",
    "ConfigurationError",
    "InvalidConfigError",
]
