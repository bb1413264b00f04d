"""Processors for trace decoding, tree reconstruction and aggregation."""

from .file_processor import ParsedTrace, RawEvent, TraceFileProcessor
from .hierarchy_builder import HierarchyBuilder
from .timing_calculator import TimingCalculator
from .aggregator import AggregatedStats, EventAggregator
from .metrics_populator import MetricsPopulator
from .parallel_processor import ParallelTraceLoader

__all__ = [
    "ParsedTrace",
    "RawEvent",
    "TraceFileProcessor",
    "HierarchyBuilder",
    "TimingCalculator",
    "AggregatedStats",
    "EventAggregator",
    "MetricsPopulator",
    "ParallelTraceLoader",
]
