"""
Hierarchy builder for trace events.
"""

from typing import List

from ..core.types import BuildEvent, NO_DETAIL, NO_EVENT
from ..storage import EventStore, NameInterner
from .file_processor import ParsedTrace


class HierarchyBuilder:
    """Builds tree structure from a flat, time-ordered list of events."""

    def __init__(self, events: EventStore, names: NameInterner):
        """
        Initialize with the shared stores the trees are committed into.

        Args:
            events: EventStore shared by all parsed files
            names: NameInterner shared by all parsed files
        """
        self.events = events
        self.names = names

    def build(self, parsed: ParsedTrace) -> List[int]:
        """
        Commit one decoded trace into the shared stores, reconstructing nesting
        from interval containment.

        A stack holds the chain of currently open events. Each new event pops
        the stack until the top contains it; the top then becomes its parent,
        or the event becomes a new root if the stack ran empty. Relies on
        parsed.events being sorted by start time, longest first on ties.

        Args:
            parsed: ParsedTrace from TraceFileProcessor

        Returns:
            Handles of the root events added for this file
        """
        roots = []
        stack: List[int] = []

        for raw in parsed.events:
            while stack and not self.events[stack[-1]].contains(raw.start_us, raw.duration_us):
                stack.pop()

            parent = stack[-1] if stack else NO_EVENT
            detail = self.names.intern(raw.detail) if raw.detail else NO_DETAIL
            handle = self.events.append(BuildEvent(
                kind=raw.kind,
                start_us=raw.start_us,
                duration_us=raw.duration_us,
                detail=detail,
                parent=parent,
            ))

            if parent == NO_EVENT:
                roots.append(handle)
            else:
                self.events[parent].children.append(handle)
            stack.append(handle)

        return roots
