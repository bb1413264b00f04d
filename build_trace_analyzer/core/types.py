"""
Type definitions for build trace analysis.
"""

import configparser
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple, TypedDict


# Sentinel handles
NO_EVENT = -1
NO_DETAIL = -1


class EventKind(Enum):
    """Kinds of compiler timing events."""
    UNKNOWN = 'Unknown'
    COMPILER = 'Compiler'
    FRONTEND = 'Frontend'
    BACKEND = 'Backend'
    PARSE_FILE = 'ParseFile'
    PARSE_TEMPLATE = 'ParseTemplate'
    PARSE_CLASS = 'ParseClass'
    INSTANTIATE_CLASS = 'InstantiateClass'
    INSTANTIATE_FUNCTION = 'InstantiateFunction'
    OPTIMIZE_MODULE = 'OptimizeModule'
    OPTIMIZE_FUNCTION = 'OptimizeFunction'


@dataclass
class BuildEvent:
    """One reconstructed timing event stored in the event arena."""
    kind: EventKind
    start_us: int
    duration_us: int
    detail: int = NO_DETAIL
    parent: int = NO_EVENT
    children: List[int] = field(default_factory=list)

    @property
    def end_us(self) -> int:
        return self.start_us + self.duration_us

    def contains(self, start_us: int, duration_us: int) -> bool:
        """Check whether [start_us, start_us + duration_us] lies within this event."""
        return self.start_us <= start_us and start_us + duration_us <= self.end_us


class EventStats(TypedDict):
    """Statistics for one (kind, detail) group."""
    count: int
    total_time_us: int
    total_self_time_us: int
    max_time_us: int


class HeaderStats(TypedDict):
    """Statistics for one parsed header file."""
    count: int
    total_time_us: int
    total_self_time_us: int
    include_chains: Dict[Tuple[int, ...], int]


class RankedEntry(NamedTuple):
    """One row of a ranked report view."""
    rank: int
    name: str
    duration_us: int
    count: int


@dataclass
class ReportView:
    """A titled, ranked top-N list."""
    key: str
    title: str
    entries: List[RankedEntry] = field(default_factory=list)


@dataclass
class GlobalTotals:
    """Headline numbers for the whole build."""
    compilation_count: int = 0
    compiler_time_us: int = 0
    frontend_time_us: int = 0
    backend_time_us: int = 0
    wall_span_us: int = 0
    busy_time_us: int = 0
    parallelism_factor: float = 1.0
    event_count: int = 0
    name_count: int = 0
    file_count: int = 0


@dataclass
class AnalysisReport:
    """Structured analysis result handed to the formatters."""
    totals: GlobalTotals
    views: Dict[str, ReportView] = field(default_factory=dict)
    header_chains: Dict[str, List[Tuple[Tuple[str, ...], int]]] = field(default_factory=dict)


class AnalysisConfig:
    """Configuration for build trace analysis."""

    def __init__(
        self,
        file_parse_count: int = 10,
        file_codegen_count: int = 10,
        template_count: int = 30,
        function_count: int = 30,
        header_count: int = 10,
        header_chain_count: int = 5,
        only_root_headers: bool = True,
        max_name_length: int = 70,
        num_workers: int = 1
    ):
        """
        Initialize build trace analysis configuration.

        Args:
            file_parse_count: Number of translation units listed by frontend time
            file_codegen_count: Number of translation units listed by backend time
            template_count: Number of templates (and template sets) listed
            function_count: Number of functions (and function sets) listed
            header_count: Number of expensive headers listed
            header_chain_count: Number of include chains shown per header

            only_root_headers: If True, only headers that are not nested inside
                               another parsed header are counted as expensive headers.
                               Default: True (nested cost is already included in the
                               including header)

            max_name_length: Names longer than this are truncated in the text report
            num_workers: Number of worker processes used to decode trace files.
                         Default: 1 (sequential)
        """
        self.file_parse_count = file_parse_count
        self.file_codegen_count = file_codegen_count
        self.template_count = template_count
        self.function_count = function_count
        self.header_count = header_count
        self.header_chain_count = header_chain_count
        self.only_root_headers = only_root_headers
        self.max_name_length = max_name_length
        self.num_workers = num_workers

    @classmethod
    def from_ini(cls, path: str, num_workers: Optional[int] = None) -> 'AnalysisConfig':
        """
        Load configuration from an INI file with [counts] and [misc] sections.

        A missing file yields the defaults.
        """
        config = cls()
        parser = configparser.ConfigParser()
        if not parser.read(path):
            if num_workers is not None:
                config.num_workers = num_workers
            return config

        counts = {
            'fileParseCount': 'file_parse_count',
            'fileCodegenCount': 'file_codegen_count',
            'templateCount': 'template_count',
            'functionCount': 'function_count',
            'headerCount': 'header_count',
            'headerChainCount': 'header_chain_count',
        }
        for option, attr in counts.items():
            if parser.has_option('counts', option):
                setattr(config, attr, parser.getint('counts', option))

        if parser.has_option('misc', 'maxNameLength'):
            config.max_name_length = parser.getint('misc', 'maxNameLength')
        if parser.has_option('misc', 'onlyRootHeaders'):
            config.only_root_headers = parser.getboolean('misc', 'onlyRootHeaders')

        if num_workers is not None:
            config.num_workers = num_workers
        return config
