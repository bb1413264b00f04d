"""
Event aggregator across all parsed translation units.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import DefaultDict, Dict, List, Tuple

from ..core.exceptions import NoEventsError
from ..core.types import AnalysisConfig, EventKind, EventStats, GlobalTotals, HeaderStats, NO_DETAIL, NO_EVENT
from ..storage import EventStore, NameInterner
from .file_processor import FILE_NAMED_KINDS
from .timing_calculator import TimingCalculator


@dataclass
class AggregatedStats:
    """Grouped statistics for the whole forest."""
    event_stats: Dict[Tuple[EventKind, int], EventStats] = field(default_factory=dict)
    header_stats: Dict[int, HeaderStats] = field(default_factory=dict)
    self_times: List[int] = field(default_factory=list)
    totals: GlobalTotals = field(default_factory=GlobalTotals)


class EventAggregator:
    """Aggregates events sharing the same (kind, name) across every trace file."""

    def __init__(self, timing_calculator: TimingCalculator, config: AnalysisConfig):
        """
        Initialize with timing calculator and configuration.

        Args:
            timing_calculator: TimingCalculator instance
            config: AnalysisConfig instance
        """
        self.timing_calculator = timing_calculator
        self.config = config

    def aggregate(self, events: EventStore, names: NameInterner, file_count: int = 0) -> AggregatedStats:
        """
        Walk every event once and accumulate grouped statistics.

        Args:
            events: Fully populated EventStore
            names: NameInterner holding every detail string
            file_count: Number of trace files that contributed events

        Returns:
            AggregatedStats

        Raises:
            NoEventsError: If the store is empty
        """
        if len(events) == 0:
            raise NoEventsError("No trace events found in any input file; nothing to analyze.")

        self_times = self.timing_calculator.calculate_self_times(events)

        event_stats: DefaultDict[Tuple[EventKind, int], EventStats] = defaultdict(
            lambda: {
                'count': 0,
                'total_time_us': 0,
                'total_self_time_us': 0,
                'max_time_us': 0
            }
        )
        header_stats: DefaultDict[int, HeaderStats] = defaultdict(
            lambda: {
                'count': 0,
                'total_time_us': 0,
                'total_self_time_us': 0,
                'include_chains': defaultdict(int)
            }
        )
        totals = GlobalTotals(
            event_count=len(events),
            name_count=len(names),
            file_count=file_count
        )

        for handle, event in enumerate(events):
            duration = event.duration_us

            stats = event_stats[(event.kind, event.detail)]
            stats['count'] += 1
            stats['total_time_us'] += duration
            stats['total_self_time_us'] += self_times[handle]
            stats['max_time_us'] = max(stats['max_time_us'], duration)

            if event.kind == EventKind.COMPILER:
                totals.compilation_count += 1
                totals.compiler_time_us += duration
            elif event.kind == EventKind.FRONTEND:
                totals.frontend_time_us += duration
            elif event.kind == EventKind.BACKEND:
                totals.backend_time_us += duration
            elif event.kind == EventKind.PARSE_FILE and event.detail != NO_DETAIL:
                self._add_header(events, handle, self_times[handle], header_stats)

        self._add_span_totals(events, totals)

        return AggregatedStats(
            event_stats=dict(event_stats),
            header_stats=dict(header_stats),
            self_times=self_times,
            totals=totals
        )

    def _add_header(self, events: EventStore, handle: int, self_time: int,
                    header_stats: DefaultDict[int, HeaderStats]) -> None:
        """Record one ParseFile event and the include chain that led to it."""
        event = events[handle]
        includers = []
        translation_unit = NO_DETAIL

        ancestor = event.parent
        while ancestor != NO_EVENT:
            parent = events[ancestor]
            if parent.kind == EventKind.PARSE_FILE and parent.detail != NO_DETAIL:
                includers.append(parent.detail)
            elif parent.kind in FILE_NAMED_KINDS:
                translation_unit = parent.detail
            ancestor = parent.parent

        if includers and self.config.only_root_headers:
            return

        chain = tuple(reversed(includers))
        if translation_unit != NO_DETAIL:
            chain = (translation_unit,) + chain

        stats = header_stats[event.detail]
        stats['count'] += 1
        stats['total_time_us'] += event.duration_us
        stats['total_self_time_us'] += self_time
        stats['include_chains'][chain] += 1

    def _add_span_totals(self, events: EventStore, totals: GlobalTotals) -> None:
        """Wall span, busy time and parallelism over all root events."""
        roots = [events[h] for h in events.roots()]
        intervals = [(root.start_us, root.end_us) for root in roots]

        totals.wall_span_us = max(end for _, end in intervals) - min(start for start, _ in intervals)
        totals.busy_time_us = self.timing_calculator.calculate_busy_time_us(intervals)
        totals.parallelism_factor = self.timing_calculator.calculate_parallelism_factor(
            sum(root.duration_us for root in roots),
            totals.busy_time_us
        )
