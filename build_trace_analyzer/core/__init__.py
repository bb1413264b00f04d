"""Core components for build trace analysis."""

from .analyzer import BuildAnalyzer
from .exceptions import BuildAnalyzerError, NoEventsError, TraceFileError
from .types import AnalysisConfig, AnalysisReport, EventKind

__all__ = [
    "BuildAnalyzer",
    "BuildAnalyzerError",
    "NoEventsError",
    "TraceFileError",
    "AnalysisConfig",
    "AnalysisReport",
    "EventKind",
]
