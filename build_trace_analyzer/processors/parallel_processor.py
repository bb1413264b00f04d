"""
Parallel trace file decoding for builds with many translation units.
"""

import os
from multiprocessing import Pool
from typing import List, Optional, Tuple, Union

from ..core.exceptions import TraceFileError
from .file_processor import ParsedTrace, TraceFileProcessor


LoadResult = Tuple[str, Union[ParsedTrace, TraceFileError]]


def _load_single_trace(file_path: str) -> LoadResult:
    """
    Read and decode one trace file. Designed to run in a worker process.

    Per-file errors are returned rather than raised so one bad file does not
    abort the pool.
    """
    try:
        return file_path, TraceFileProcessor().process_file(file_path)
    except TraceFileError as exc:
        return file_path, exc


class ParallelTraceLoader:
    """Decode trace files in parallel using multiprocessing."""

    def __init__(self, num_workers: Optional[int] = None):
        """
        Initialize parallel loader.

        Args:
            num_workers: Number of worker processes (default: CPU count)
        """
        self.num_workers = num_workers or os.cpu_count() or 4

    def load(self, file_paths: List[str], progress_callback=None) -> List[LoadResult]:
        """
        Decode files, returning results in the same order as file_paths.

        Workers only produce file-local ParsedTrace objects; committing them
        into the shared stores is left to the caller, one file at a time.

        Args:
            file_paths: Trace files to decode
            progress_callback: Optional callback(completed, total) for progress updates

        Returns:
            List of (file_path, ParsedTrace or TraceFileError)
        """
        total = len(file_paths)

        if total <= 1 or self.num_workers <= 1:
            return self._load_sequential(file_paths, progress_callback)

        results = []
        effective_workers = min(self.num_workers, total)

        with Pool(processes=effective_workers) as pool:
            for result in pool.imap(_load_single_trace, file_paths, chunksize=4):
                results.append(result)
                if progress_callback:
                    progress_callback(len(results), total)

        return results

    def _load_sequential(self, file_paths: List[str], progress_callback=None) -> List[LoadResult]:
        """
        Fallback sequential decoding for a single file or single worker.
        """
        results = []
        total = len(file_paths)
        for file_path in file_paths:
            results.append(_load_single_trace(file_path))
            if progress_callback:
                progress_callback(len(results), total)
        return results
