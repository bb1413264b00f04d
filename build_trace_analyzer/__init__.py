"""
Build Trace Analyzer - Clang -ftime-trace Build Analysis Tool
"""

__version__ = "1.0.0"

from .core.analyzer import BuildAnalyzer
from .core.exceptions import NoEventsError, TraceFileError
from .core.types import AnalysisConfig, AnalysisReport, EventKind

__all__ = ["BuildAnalyzer", "AnalysisConfig", "AnalysisReport", "EventKind", "NoEventsError", "TraceFileError"]
