"""
Clang -ftime-trace JSON file processing using streaming parser.
"""

import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import ijson

from ..core.exceptions import MalformedTraceError, NotClangTraceError, UnreadableTraceError
from ..core.types import EventKind


# Trace event names -> event kinds. Anything else becomes EventKind.UNKNOWN.
TRACE_EVENT_KINDS: Dict[str, EventKind] = {
    'ExecuteCompiler': EventKind.COMPILER,
    'Frontend': EventKind.FRONTEND,
    'Backend': EventKind.BACKEND,
    'Source': EventKind.PARSE_FILE,
    'ParseTemplate': EventKind.PARSE_TEMPLATE,
    'ParseClass': EventKind.PARSE_CLASS,
    'InstantiateClass': EventKind.INSTANTIATE_CLASS,
    'InstantiateFunction': EventKind.INSTANTIATE_FUNCTION,
    'OptModule': EventKind.OPTIMIZE_MODULE,
    'OptFunction': EventKind.OPTIMIZE_FUNCTION,
}

# Phase events have no detail of their own; they are named after the trace file
FILE_NAMED_KINDS = {EventKind.COMPILER, EventKind.FRONTEND, EventKind.BACKEND}

CLANG_PROCESS_NAME = 'clang'
TOTAL_EVENT_PREFIX = 'Total '


@dataclass
class RawEvent:
    """A decoded timing event that is not yet part of any tree."""
    kind: EventKind
    start_us: int
    duration_us: int
    detail: Optional[str] = None


@dataclass
class ParsedTrace:
    """File-local result of decoding one trace document."""
    file_name: str
    events: List[RawEvent] = field(default_factory=list)


class TraceFileProcessor:
    """Decodes clang time-trace JSON documents using a streaming parser."""

    @staticmethod
    def read_file(file_path: str) -> bytes:
        """
        Read a trace file from disk.

        Raises:
            UnreadableTraceError: If the file cannot be read or is empty
        """
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as exc:
            raise UnreadableTraceError(file_path, f"could not read file ({exc.strerror or exc})") from exc

        if not data:
            raise UnreadableTraceError(file_path, "file is empty")
        return data

    def process_file(self, file_path: str) -> ParsedTrace:
        """
        Read and decode one trace file.

        Args:
            file_path: Path to the trace JSON file

        Returns:
            ParsedTrace with events sorted for tree reconstruction
        """
        return self.parse_document(file_path, self.read_file(file_path))

    def parse_document(self, file_name: str, data: Union[str, bytes]) -> ParsedTrace:
        """
        Decode one trace document into a sorted list of raw events.

        Events are ordered by ascending start time, then descending duration,
        so that an enclosing event always precedes the events it contains.
        Events with identical start and duration keep their document order.

        Args:
            file_name: Name used for diagnostics and for naming phase events
            data: Raw document text or bytes

        Returns:
            ParsedTrace (possibly with no events)

        Raises:
            MalformedTraceError: Invalid or truncated JSON, or malformed events
            NotClangTraceError: The document lacks the clang process marker
        """
        if isinstance(data, str):
            data = data.encode('utf-8')

        trace_events = None
        beginning_of_time = 0
        try:
            for key, value in ijson.kvitems(io.BytesIO(data), '', use_float=True):
                if key == 'traceEvents':
                    trace_events = value
                elif key == 'beginningOfTime':
                    beginning_of_time = value
        except (ijson.JSONError, ValueError) as exc:
            raise MalformedTraceError(file_name, f"invalid JSON ({exc})") from exc

        if not isinstance(trace_events, list):
            raise MalformedTraceError(file_name, "no 'traceEvents' list found")

        if not self.has_clang_marker(trace_events):
            raise NotClangTraceError(file_name, "not a clang -ftime-trace file")

        offset = self._to_int(beginning_of_time)
        if offset is None:
            raise MalformedTraceError(file_name, "invalid 'beginningOfTime' value")

        parsed = ParsedTrace(file_name=file_name)
        for index, item in enumerate(trace_events):
            event = self._decode_event(file_name, index, item)
            if event is not None:
                event.start_us += offset
                parsed.events.append(event)

        parsed.events.sort(key=lambda e: (e.start_us, -e.duration_us))
        return parsed

    @staticmethod
    def has_clang_marker(trace_events: List[Any]) -> bool:
        """Check for the process_name metadata record naming clang."""
        for item in trace_events:
            if not isinstance(item, dict):
                continue
            if item.get('ph') != 'M' or item.get('name') != 'process_name':
                continue
            args = item.get('args')
            if isinstance(args, dict) and args.get('name') == CLANG_PROCESS_NAME:
                return True
        return False

    def _decode_event(self, file_name: str, index: int, item: Any) -> Optional[RawEvent]:
        """Turn one traceEvents entry into a RawEvent, or None if it is not a timing record."""
        if not isinstance(item, dict) or item.get('ph') != 'X':
            return None

        name = item.get('name')
        if not isinstance(name, str):
            name = ''
        if name.startswith(TOTAL_EVENT_PREFIX):
            return None

        start_us = self._to_int(item.get('ts'))
        duration_us = self._to_int(item.get('dur'))
        if start_us is None or duration_us is None:
            raise MalformedTraceError(file_name, f"event #{index} ('{name}') has missing or invalid timing")
        if duration_us < 0:
            raise MalformedTraceError(file_name, f"event #{index} ('{name}') has negative duration")

        kind = TRACE_EVENT_KINDS.get(name, EventKind.UNKNOWN)
        if kind in FILE_NAMED_KINDS:
            detail = file_name
        else:
            detail = self._extract_detail(item.get('args'))
            if detail and kind == EventKind.PARSE_FILE:
                detail = detail.replace('\\', '/')

        return RawEvent(kind=kind, start_us=start_us, duration_us=duration_us, detail=detail or None)

    @staticmethod
    def _extract_detail(args: Any) -> Optional[str]:
        """Extract the detail string from an event's args bag."""
        if not isinstance(args, dict):
            return None
        for key in ('detail', 'name'):
            value = args.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    @staticmethod
    def _to_int(value: Any) -> Optional[int]:
        """Convert a JSON number to int; booleans and non-numbers yield None."""
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if value != value or value in (float('inf'), float('-inf')):
                return None
            return int(value)
        return None
