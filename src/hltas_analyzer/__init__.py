from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hltas-analyzer")
except PackageNotFoundError:  # pragma: no cover
    # Allow running from source (e.g. `PYTHONPATH=src`) without installed package metadata.
    __version__ = "0.0.0+dev"

from .analyzer import (
    AnalyzerError,
    AnalyzerResult,
    FinalTime,
    FrametimeParseError,
    FrametimeStats,
    ZeroMsFrametimeParseError,
    analyze_hltas,
    analyze_lines,
)
from .config import AnalyzerConfig, AnalyzerConfigError

__all__ = [
    "AnalyzerConfig",
    "AnalyzerConfigError",
    "AnalyzerError",
    "AnalyzerResult",
    "FinalTime",
    "FrametimeParseError",
    "FrametimeStats",
    "ZeroMsFrametimeParseError",
    "__version__",
    "analyze_hltas",
    "analyze_lines",
]
