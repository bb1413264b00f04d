"""
Timing calculator for the event forest.
"""

from typing import Dict, List, Tuple

from ..core.types import EventKind, NO_EVENT
from ..storage import EventStore


# Events only discount the time of descendants from their own family
KIND_FAMILIES: Dict[EventKind, str] = {
    EventKind.COMPILER: 'phase',
    EventKind.FRONTEND: 'phase',
    EventKind.BACKEND: 'phase',
    EventKind.PARSE_FILE: 'parse',
    EventKind.PARSE_TEMPLATE: 'parse',
    EventKind.PARSE_CLASS: 'parse',
    EventKind.INSTANTIATE_CLASS: 'instantiate',
    EventKind.INSTANTIATE_FUNCTION: 'instantiate',
    EventKind.OPTIMIZE_MODULE: 'optimize',
    EventKind.OPTIMIZE_FUNCTION: 'optimize',
    EventKind.UNKNOWN: 'unknown',
}


class TimingCalculator:
    """Calculates self times and wall-clock metrics for the event forest."""

    @staticmethod
    def merge_time_intervals(intervals: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
        """
        Merge overlapping time intervals to calculate actual wall-clock coverage.

        Args:
            intervals: List of (start_us, end_us) tuples

        Returns:
            List of merged non-overlapping intervals
        """
        if not intervals:
            return []

        # Filter out empty intervals and sort by start time
        valid = [(s, e) for s, e in intervals if s < e]
        if not valid:
            return []

        sorted_intervals = sorted(valid, key=lambda x: x[0])
        merged = [sorted_intervals[0]]

        for start, end in sorted_intervals[1:]:
            last_start, last_end = merged[-1]
            if start <= last_end:
                merged[-1] = (last_start, max(last_end, end))
            else:
                merged.append((start, end))

        return merged

    @staticmethod
    def calculate_busy_time_us(intervals: List[Tuple[int, int]]) -> int:
        """
        Calculate total covered time from possibly overlapping intervals.

        Args:
            intervals: List of (start_us, end_us) tuples

        Returns:
            Length of the union of the intervals in microseconds
        """
        merged = TimingCalculator.merge_time_intervals(intervals)
        return sum(end - start for start, end in merged)

    @staticmethod
    def calculate_parallelism_factor(cumulative_us: int, busy_us: int) -> float:
        """
        Ratio of summed durations to covered wall-clock time.
        Factor > 1 means compilations ran in parallel.
        """
        if busy_us <= 0:
            return 1.0
        return round(cumulative_us / busy_us, 2)

    @staticmethod
    def calculate_self_times(events: EventStore) -> List[int]:
        """
        Calculate the self time of every event in the store.

        Each event's duration is subtracted from its nearest ancestor of the
        same kind family, so an outer ParseFile does not also count the time
        of a ParseTemplate nested inside it. Results are clamped at zero since
        sibling intervals may overlap.

        Args:
            events: Populated EventStore

        Returns:
            List of self times indexed by event handle
        """
        self_times = [event.duration_us for event in events]

        for event in events:
            family = KIND_FAMILIES[event.kind]
            ancestor = event.parent
            while ancestor != NO_EVENT:
                if KIND_FAMILIES[events[ancestor].kind] == family:
                    self_times[ancestor] -= event.duration_us
                    break
                ancestor = events[ancestor].parent

        return [max(0, t) for t in self_times]
