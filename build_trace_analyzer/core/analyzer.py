"""
Main build trace analyzer orchestrator.
"""

from typing import Dict, List, Optional, Union

from ..core.exceptions import TraceFileError
from ..core.types import AnalysisConfig, AnalysisReport
from ..processors import (
    EventAggregator,
    HierarchyBuilder,
    MetricsPopulator,
    ParallelTraceLoader,
    ParsedTrace,
    TimingCalculator,
    TraceFileProcessor,
)
from ..storage import EventStore, NameInterner


class BuildAnalyzer:
    """Main orchestrator for build trace analysis."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize the BuildAnalyzer.

        Args:
            config: AnalysisConfig instance (defaults are used when omitted)
        """
        self.config = config or AnalysisConfig()

        # Shared, append-only stores for every parsed file
        self.names = NameInterner()
        self.events = EventStore()

        # Run bookkeeping
        self.parsed_files: List[str] = []
        self.empty_files: List[str] = []
        self.skipped_files: Dict[str, str] = {}

        # Initialize components
        self.file_processor = TraceFileProcessor()
        self.hierarchy_builder = HierarchyBuilder(self.events, self.names)
        self.timing_calculator = TimingCalculator()
        self.aggregator = EventAggregator(self.timing_calculator, self.config)
        self.metrics_populator = MetricsPopulator(self.config)

    def process_trace_files(self, file_paths: List[str]) -> int:
        """
        Parse several trace files into the shared stores.

        Files are committed in the given order. Unusable files are skipped
        with a warning.

        Args:
            file_paths: Paths to trace JSON files

        Returns:
            Number of events added
        """
        if self.config.num_workers <= 1 or len(file_paths) <= 1:
            return sum(self.process_trace_file(path) for path in file_paths)

        print(f"Processing {len(file_paths)} trace files with {self.config.num_workers} workers...")
        loader = ParallelTraceLoader(self.config.num_workers)

        added = 0
        for file_path, result in loader.load(file_paths, self._report_progress):
            if isinstance(result, TraceFileError):
                self._skip(result)
            else:
                added += self._commit(result)
        return added

    def process_trace_file(self, file_path: str) -> int:
        """
        Parse one trace file into the shared stores.

        Args:
            file_path: Path to the trace JSON file

        Returns:
            Number of events added (0 if the file was skipped)
        """
        print(f"Processing {file_path}...")
        try:
            parsed = self.file_processor.process_file(file_path)
        except TraceFileError as exc:
            self._skip(exc)
            return 0
        return self._commit(parsed)

    def process_trace_data(self, file_name: str, data: Union[str, bytes]) -> int:
        """
        Parse one in-memory trace document into the shared stores.

        Args:
            file_name: Name used for diagnostics and phase events
            data: Raw document text or bytes

        Returns:
            Number of events added (0 if the document was skipped)
        """
        try:
            parsed = self.file_processor.parse_document(file_name, data)
        except TraceFileError as exc:
            self._skip(exc)
            return 0
        return self._commit(parsed)

    def analyze(self) -> AnalysisReport:
        """
        Aggregate every parsed event and build the ranked report.

        Returns:
            AnalysisReport

        Raises:
            NoEventsError: If no events were parsed from any file
            InvariantViolationError: If the reconstructed forest is inconsistent
        """
        self.events.check_invariants()
        stats = self.aggregator.aggregate(self.events, self.names, file_count=len(self.parsed_files))
        report = self.metrics_populator.build_report(stats, self.events, self.names)

        print(f"\nAnalyzed {len(self.events)} events from {len(self.parsed_files)} trace files")
        print(f"Found {len(self.names)} unique names, {report.totals.compilation_count} compilations")
        if self.skipped_files:
            print(f"Skipped {len(self.skipped_files)} files")
        return report

    def _commit(self, parsed: ParsedTrace) -> int:
        """Commit a decoded trace into the shared stores."""
        if not parsed.events:
            print(f"  WARN: no trace events found in '{parsed.file_name}'")
            self.empty_files.append(parsed.file_name)
            return 0

        self.hierarchy_builder.build(parsed)
        self.parsed_files.append(parsed.file_name)
        return len(parsed.events)

    def _skip(self, error: TraceFileError) -> None:
        print(f"  WARN: skipping '{error.file_name}': {error.reason}")
        self.skipped_files[error.file_name] = error.reason

    @staticmethod
    def _report_progress(completed: int, total: int) -> None:
        if completed % 100 == 0 or completed == total:
            print(f"  Decoded {completed}/{total} files...")
