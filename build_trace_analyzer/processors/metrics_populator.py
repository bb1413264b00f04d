"""
Metrics populator for ranked report views.
"""

import heapq
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from ..core.types import (
    AnalysisConfig,
    AnalysisReport,
    EventKind,
    NO_DETAIL,
    RankedEntry,
    ReportView,
)
from ..storage import EventStore, NameInterner
from .aggregator import AggregatedStats


INSTANTIATE_KINDS = (EventKind.INSTANTIATE_CLASS, EventKind.INSTANTIATE_FUNCTION)


def collapse_name(name: str) -> str:
    """
    Collapse template arguments so related instantiations group together.

    Every top-level '<...>' argument list is replaced by '<$>', e.g.
    'std::vector<int, std::allocator<int>>::push_back' becomes
    'std::vector<$>::push_back'. Names with unbalanced brackets (such as
    'operator<') are returned unchanged.
    """
    if '<' not in name:
        return name

    collapsed = []
    depth = 0
    for ch in name:
        if ch == '<':
            if depth == 0:
                collapsed.append('<$')
            depth += 1
        elif ch == '>' and depth > 0:
            depth -= 1
            if depth == 0:
                collapsed.append('>')
        elif depth == 0:
            collapsed.append(ch)

    if depth != 0:
        return name
    return ''.join(collapsed)


def rank_entries(items: Iterable[Tuple[str, int, int]], limit: int) -> List[RankedEntry]:
    """
    Pick the top entries by duration, ties broken by ascending name.

    Args:
        items: Iterable of (name, duration_us, count)
        limit: Maximum number of entries to return

    Returns:
        RankedEntry list with ranks starting at 1
    """
    if limit <= 0:
        return []
    top = heapq.nsmallest(limit, items, key=lambda item: (-item[1], item[0]))
    return [
        RankedEntry(rank=i + 1, name=name, duration_us=duration, count=count)
        for i, (name, duration, count) in enumerate(top)
    ]


class MetricsPopulator:
    """Builds the ranked top-N views from aggregated statistics."""

    def __init__(self, config: AnalysisConfig):
        """
        Initialize with configuration.

        Args:
            config: AnalysisConfig instance
        """
        self.config = config

    def build_report(self, stats: AggregatedStats, events: EventStore, names: NameInterner) -> AnalysisReport:
        """
        Populate every report view.

        Args:
            stats: AggregatedStats from EventAggregator
            events: EventStore the statistics were computed from
            names: NameInterner for resolving detail handles

        Returns:
            AnalysisReport
        """
        config = self.config
        report = AnalysisReport(totals=stats.totals)

        def add_view(key: str, title: str, entries: List[RankedEntry]) -> None:
            report.views[key] = ReportView(key=key, title=title, entries=entries)

        add_view(
            'files_parse', 'Files that took longest to parse (compiler frontend)',
            rank_entries(self._grouped(stats, names, (EventKind.FRONTEND,)), config.file_parse_count)
        )
        add_view(
            'files_codegen', 'Files that took longest to codegen (compiler backend)',
            rank_entries(self._grouped(stats, names, (EventKind.BACKEND,)), config.file_codegen_count)
        )
        add_view(
            'templates', 'Templates that took longest to instantiate',
            rank_entries(self._grouped(stats, names, INSTANTIATE_KINDS), config.template_count)
        )
        add_view(
            'template_sets', 'Template sets that took longest to instantiate',
            rank_entries(self._grouped(stats, names, INSTANTIATE_KINDS, collapse=True), config.template_count)
        )
        add_view(
            'template_instantiations', 'Slowest individual template instantiations',
            rank_entries(self._individual(events, names, INSTANTIATE_KINDS), config.template_count)
        )
        add_view(
            'functions', 'Functions that took longest to compile',
            rank_entries(self._grouped(stats, names, (EventKind.OPTIMIZE_FUNCTION,)), config.function_count)
        )
        add_view(
            'function_sets', 'Function sets that took longest to compile / optimize',
            rank_entries(
                self._grouped(stats, names, (EventKind.OPTIMIZE_FUNCTION,), collapse=True),
                config.function_count
            )
        )
        add_view(
            'headers_self', 'Files with the most exclusive parse time',
            rank_entries(self._grouped(stats, names, (EventKind.PARSE_FILE,), self_time=True), config.header_count)
        )

        headers = rank_entries(
            (
                (names.resolve(detail), header['total_time_us'], header['count'])
                for detail, header in stats.header_stats.items()
            ),
            config.header_count
        )
        add_view('headers', 'Expensive headers', headers)
        report.header_chains = self._header_chains(stats, names, headers)

        return report

    @staticmethod
    def _grouped(stats: AggregatedStats, names: NameInterner, kinds: Tuple[EventKind, ...],
                 collapse: bool = False, self_time: bool = False) -> List[Tuple[str, int, int]]:
        """Sum durations and counts per resolved (optionally collapsed) name over the given kinds."""
        metric = 'total_self_time_us' if self_time else 'total_time_us'
        grouped: Dict[str, List[int]] = defaultdict(lambda: [0, 0])

        for (kind, detail), entry in stats.event_stats.items():
            if kind not in kinds or detail == NO_DETAIL:
                continue
            name = names.resolve(detail)
            if collapse:
                name = collapse_name(name)
            grouped[name][0] += entry[metric]
            grouped[name][1] += entry['count']

        return [(name, duration, count) for name, (duration, count) in grouped.items()]

    @staticmethod
    def _individual(events: EventStore, names: NameInterner,
                    kinds: Tuple[EventKind, ...]) -> Iterable[Tuple[str, int, int]]:
        """One (name, duration, 1) item per named event of the given kinds."""
        for event in events:
            if event.kind in kinds and event.detail != NO_DETAIL:
                yield names.resolve(event.detail), event.duration_us, 1

    def _header_chains(self, stats: AggregatedStats, names: NameInterner,
                       headers: List[RankedEntry]) -> Dict[str, List[Tuple[Tuple[str, ...], int]]]:
        """Most frequent include chains for each reported header."""
        chains = {}
        for entry in headers:
            detail = names.lookup(entry.name)
            header = stats.header_stats[detail]
            resolved = [
                (tuple(names.resolve(h) for h in chain), count)
                for chain, count in header['include_chains'].items()
            ]
            resolved.sort(key=lambda item: (-item[1], item[0]))
            chains[entry.name] = resolved[:max(0, self.config.header_chain_count)]
        return chains
