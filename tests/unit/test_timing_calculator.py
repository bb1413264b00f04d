"""
Unit tests for build_trace_analyzer.processors.timing_calculator module.
"""
import pytest
from build_trace_analyzer.core.types import BuildEvent, EventKind
from build_trace_analyzer.processors.file_processor import ParsedTrace, RawEvent
from build_trace_analyzer.processors.hierarchy_builder import HierarchyBuilder
from build_trace_analyzer.processors.timing_calculator import TimingCalculator
from build_trace_analyzer.storage import EventStore, NameInterner


def _build(*raw_events):
    """Build an EventStore from (kind, start, duration, detail) tuples in sort order."""
    events = EventStore()
    HierarchyBuilder(events, NameInterner()).build(
        ParsedTrace("tu.json", [RawEvent(k, s, d, n) for k, s, d, n in raw_events])
    )
    return events


class TestMergeTimeIntervals:
    """Tests for the merge_time_intervals static method."""

    def test_non_overlapping_intervals(self):
        intervals = [(100, 200), (300, 400), (500, 600)]
        assert TimingCalculator.merge_time_intervals(intervals) == intervals

    def test_fully_overlapping_intervals(self):
        intervals = [
            (100, 500),  # Outer compilation
            (150, 300),  # Fully inside
            (200, 400),  # Fully inside
        ]
        assert TimingCalculator.merge_time_intervals(intervals) == [(100, 500)]

    def test_partially_overlapping_intervals(self):
        intervals = [(100, 300), (200, 400), (350, 500)]
        assert TimingCalculator.merge_time_intervals(intervals) == [(100, 500)]

    def test_adjacent_intervals(self):
        """Intervals that touch are merged into one."""
        assert TimingCalculator.merge_time_intervals([(100, 200), (200, 300)]) == [(100, 300)]

    def test_empty_intervals(self):
        assert TimingCalculator.merge_time_intervals([]) == []

    def test_zero_length_intervals_dropped(self):
        assert TimingCalculator.merge_time_intervals([(5, 5), (7, 7)]) == []

    def test_unsorted_intervals(self):
        intervals = [(500, 600), (100, 200), (300, 400)]
        merged = TimingCalculator.merge_time_intervals(intervals)
        assert merged == [(100, 200), (300, 400), (500, 600)]


class TestBusyTimeAndParallelism:
    """Tests for wall-clock coverage of parallel compilations."""

    def test_sequential_compilations(self):
        intervals = [(0, 100_000), (200_000, 300_000), (400_000, 500_000)]
        assert TimingCalculator.calculate_busy_time_us(intervals) == 300_000

    def test_parallel_compilations(self):
        # Four compilations of 1s each on four cores, staggered by 10ms
        base = 1_700_000_000_000_000
        intervals = [(base + i * 10_000, base + i * 10_000 + 1_000_000) for i in range(4)]
        busy = TimingCalculator.calculate_busy_time_us(intervals)
        assert busy == 1_030_000
        factor = TimingCalculator.calculate_parallelism_factor(4_000_000, busy)
        assert factor == pytest.approx(3.88, abs=0.01)

    def test_parallelism_without_busy_time(self):
        assert TimingCalculator.calculate_parallelism_factor(0, 0) == 1.0


class TestCalculateSelfTimes:
    """Tests for same-family self time."""

    def test_parse_file_minus_nested_template(self):
        events = _build(
            (EventKind.PARSE_FILE, 0, 1000, "a.h"),
            (EventKind.PARSE_TEMPLATE, 100, 300, "T"),
        )
        assert TimingCalculator.calculate_self_times(events) == [700, 300]

    def test_only_nearest_descendants_subtracted(self):
        """A header nested two levels down is only subtracted from its direct includer."""
        events = _build(
            (EventKind.PARSE_FILE, 0, 1000, "a.h"),
            (EventKind.PARSE_FILE, 100, 600, "b.h"),
            (EventKind.PARSE_FILE, 200, 200, "c.h"),
        )
        assert TimingCalculator.calculate_self_times(events) == [400, 400, 200]

    def test_other_families_not_subtracted(self):
        events = _build(
            (EventKind.FRONTEND, 0, 1000, "tu"),
            (EventKind.PARSE_FILE, 0, 400, "a.h"),
            (EventKind.INSTANTIATE_FUNCTION, 500, 300, "f<int>"),
        )
        self_times = TimingCalculator.calculate_self_times(events)
        assert self_times == [1000, 400, 300]

    def test_same_family_through_unrelated_ancestor(self):
        """Nesting is found through events of other families."""
        events = _build(
            (EventKind.INSTANTIATE_FUNCTION, 0, 1000, "f<int>"),
            (EventKind.UNKNOWN, 100, 800, None),
            (EventKind.INSTANTIATE_CLASS, 200, 500, "C<int>"),
        )
        assert TimingCalculator.calculate_self_times(events) == [500, 800, 500]

    def test_phase_events(self):
        events = _build(
            (EventKind.COMPILER, 0, 10_000, "tu"),
            (EventKind.FRONTEND, 0, 7000, "tu"),
            (EventKind.BACKEND, 7000, 2500, "tu"),
        )
        assert TimingCalculator.calculate_self_times(events) == [500, 7000, 2500]

    def test_self_time_clamped_at_zero(self):
        events = _build(
            (EventKind.PARSE_FILE, 0, 100, "a.h"),
            (EventKind.PARSE_FILE, 0, 80, "b.h"),
        )
        # Overlapping siblings can claim more than the parent's duration
        sibling = events.append(BuildEvent(EventKind.PARSE_FILE, 20, 80, parent=0))
        events[0].children.append(sibling)
        assert TimingCalculator.calculate_self_times(events)[0] == 0
