"""
Exceptions raised during build trace analysis.
"""


class BuildAnalyzerError(Exception):
    """Base class for analysis errors reported to the caller."""


class TraceFileError(BuildAnalyzerError):
    """A single trace file could not be used. The run continues without it."""

    def __init__(self, file_name: str, reason: str):
        super().__init__(file_name, reason)
        self.file_name = file_name
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.file_name}: {self.reason}"


class UnreadableTraceError(TraceFileError):
    """The trace file could not be read from disk."""


class NotClangTraceError(TraceFileError):
    """The document does not carry the clang process marker."""


class MalformedTraceError(TraceFileError):
    """The document is not valid JSON or its events are malformed."""


class NoEventsError(BuildAnalyzerError):
    """No timing events were parsed from any input file."""


class InvariantViolationError(RuntimeError):
    """The reconstructed event forest is structurally inconsistent."""
