"""
Unit tests for build_trace_analyzer.processors.aggregator module.
"""
import json
import pytest
from build_trace_analyzer.core.exceptions import NoEventsError
from build_trace_analyzer.core.types import AnalysisConfig, EventKind
from build_trace_analyzer.processors import EventAggregator, HierarchyBuilder, TimingCalculator, TraceFileProcessor
from build_trace_analyzer.storage import EventStore, NameInterner


def _load(documents, config=None):
    """Commit (file_name, document) pairs and aggregate them."""
    events, names = EventStore(), NameInterner()
    builder = HierarchyBuilder(events, names)
    processor = TraceFileProcessor()
    for file_name, document in documents:
        builder.build(processor.parse_document(file_name, json.dumps(document)))
    aggregator = EventAggregator(TimingCalculator(), config or AnalysisConfig())
    return aggregator.aggregate(events, names, file_count=len(documents)), names


def _stats_for(stats, names, kind, name):
    return stats.event_stats[(kind, names.lookup(name))]


class TestEventStats:
    """Tests for per-(kind, name) grouping."""

    def test_same_name_summed_across_translation_units(self, make_trace, trace_event):
        documents = [
            ("a.json", make_trace([
                trace_event("ExecuteCompiler", 0, 1000),
                trace_event("InstantiateFunction", 10, 100, "foo"),
            ])),
            ("b.json", make_trace([
                trace_event("ExecuteCompiler", 0, 1000),
                trace_event("InstantiateFunction", 10, 250, "foo"),
            ])),
        ]
        stats, names = _load(documents)
        foo = _stats_for(stats, names, EventKind.INSTANTIATE_FUNCTION, "foo")
        assert foo['total_time_us'] == 350
        assert foo['count'] == 2
        assert foo['max_time_us'] == 250

    def test_kind_is_part_of_the_key(self, make_trace, trace_event):
        documents = [("a.json", make_trace([
            trace_event("InstantiateClass", 0, 100, "Foo<int>"),
            trace_event("ParseClass", 200, 50, "Foo<int>"),
        ]))]
        stats, names = _load(documents)
        assert _stats_for(stats, names, EventKind.INSTANTIATE_CLASS, "Foo<int>")['count'] == 1
        assert _stats_for(stats, names, EventKind.PARSE_CLASS, "Foo<int>")['count'] == 1

    def test_self_time_accumulated(self, make_trace, trace_event):
        documents = [("a.json", make_trace([
            trace_event("Source", 0, 1000, "a.h"),
            trace_event("ParseTemplate", 100, 300, "T"),
        ]))]
        stats, names = _load(documents)
        header = _stats_for(stats, names, EventKind.PARSE_FILE, "a.h")
        assert header['total_time_us'] == 1000
        assert header['total_self_time_us'] == 700

    def test_empty_store_raises(self):
        aggregator = EventAggregator(TimingCalculator(), AnalysisConfig())
        with pytest.raises(NoEventsError):
            aggregator.aggregate(EventStore(), NameInterner())


class TestGlobalTotals:
    """Tests for headline build numbers."""

    def test_phase_totals(self, sample_trace):
        stats, _ = _load([("a.json", sample_trace), ("b.json", sample_trace)])
        totals = stats.totals
        assert totals.compilation_count == 2
        assert totals.compiler_time_us == 20_000
        assert totals.frontend_time_us == 14_000
        assert totals.backend_time_us == 6_000
        assert totals.event_count == 24
        assert totals.file_count == 2

    def test_wall_span_and_busy_time(self, make_trace, trace_event):
        documents = [
            ("a.json", make_trace([trace_event("ExecuteCompiler", 0, 1000)], beginningOfTime=1_000_000)),
            ("b.json", make_trace([trace_event("ExecuteCompiler", 0, 1000)], beginningOfTime=1_000_500)),
            ("c.json", make_trace([trace_event("ExecuteCompiler", 0, 500)], beginningOfTime=1_003_000)),
        ]
        totals = _load(documents)[0].totals
        assert totals.wall_span_us == 3500
        assert totals.busy_time_us == 2000
        assert totals.parallelism_factor == 1.25


class TestHeaderStats:
    """Tests for expensive header bookkeeping."""

    @pytest.fixture
    def documents(self, make_trace, trace_event):
        def tu(name):
            return (name, make_trace([
                trace_event("ExecuteCompiler", 0, 10_000),
                trace_event("Frontend", 0, 8000),
                trace_event("Source", 100, 3000, "a.h"),
                trace_event("Source", 200, 1000, "common.h"),
                trace_event("Source", 4000, 500, "common.h"),
            ]))
        return [tu("x.json"), tu("y.json")]

    def test_only_root_headers(self, documents):
        stats, names = _load(documents)
        common = stats.header_stats[names.lookup("common.h")]
        # Only the direct include from each TU counts; the one under a.h is nested
        assert common['count'] == 2
        assert common['total_time_us'] == 1000
        assert dict(common['include_chains']) == {
            (names.lookup("x.json"),): 1,
            (names.lookup("y.json"),): 1,
        }

    def test_all_headers_with_chains(self, documents):
        stats, names = _load(documents, AnalysisConfig(only_root_headers=False))
        common = stats.header_stats[names.lookup("common.h")]
        assert common['count'] == 4
        assert common['total_time_us'] == 3000
        via_a = (names.lookup("x.json"), names.lookup("a.h"))
        assert common['include_chains'][via_a] == 1

    def test_header_self_time(self, documents):
        stats, names = _load(documents, AnalysisConfig(only_root_headers=False))
        a = stats.header_stats[names.lookup("a.h")]
        assert a['total_self_time_us'] == 2 * (3000 - 1000)


class TestDeterminism:
    """Processing order must not change the numbers."""

    def test_file_order_does_not_change_totals(self, sample_trace, make_trace, trace_event):
        other = make_trace([
            trace_event("ExecuteCompiler", 0, 5000),
            trace_event("InstantiateFunction", 100, 700, "foo<int>"),
            trace_event("Source", 1000, 900, "include/a.h"),
        ])
        forward, names_f = _load([("a.json", sample_trace), ("b.json", other)])
        backward, names_b = _load([("b.json", other), ("a.json", sample_trace)])

        def by_name(stats, names):
            return {
                (kind, names.resolve(detail) if detail >= 0 else None): dict(entry)
                for (kind, detail), entry in stats.event_stats.items()
            }

        assert by_name(forward, names_f) == by_name(backward, names_b)
        assert forward.totals == backward.totals
