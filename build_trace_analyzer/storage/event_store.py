"""
Event arena holding the reconstructed forest of timing events.
"""

from typing import Iterator, List

from ..core.exceptions import InvariantViolationError
from ..core.types import BuildEvent, NO_EVENT


class EventStore:
    """
    Append-only arena of BuildEvent records addressed by integer handles.

    Parent and children fields are set by the hierarchy builder; the store
    only keeps track of which appended events are roots.
    """

    def __init__(self):
        self._events: List[BuildEvent] = []
        self._roots: List[int] = []

    def append(self, event: BuildEvent) -> int:
        """
        Append a fully formed event.

        Args:
            event: Event record; its parent must already be in the store

        Returns:
            Handle of the new event
        """
        handle = len(self._events)
        self._events.append(event)
        if event.parent == NO_EVENT:
            self._roots.append(handle)
        return handle

    def roots(self) -> List[int]:
        """Handles of all events without a parent, in commit order."""
        return list(self._roots)

    def __getitem__(self, handle: int) -> BuildEvent:
        if handle < 0 or handle >= len(self._events):
            raise IndexError(f"Event handle {handle} out of range")
        return self._events[handle]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[BuildEvent]:
        return iter(self._events)

    def check_invariants(self) -> None:
        """
        Verify the structural invariants of the forest.

        Every non-root event must lie within its parent's interval, appear
        in its parent's children list, and have a smaller handle than its
        own (which rules out cycles). Children lists must be sorted by
        start time and point back at their parent.

        Raises:
            InvariantViolationError: On the first violation found
        """
        events = self._events
        listed = set()
        for handle, event in enumerate(events):
            if event.duration_us < 0:
                raise InvariantViolationError(f"Event {handle} has negative duration")

            previous_start = None
            for child in event.children:
                if not 0 <= child < len(events) or events[child].parent != handle:
                    raise InvariantViolationError(
                        f"Child {child} of event {handle} does not point back at it"
                    )
                if child in listed:
                    raise InvariantViolationError(f"Event {child} is listed as a child twice")
                if previous_start is not None and events[child].start_us < previous_start:
                    raise InvariantViolationError(
                        f"Children of event {handle} are not ordered by start time"
                    )
                listed.add(child)
                previous_start = events[child].start_us

        for handle, event in enumerate(events):
            if event.parent == NO_EVENT:
                continue
            if not 0 <= event.parent < handle:
                raise InvariantViolationError(
                    f"Event {handle} has invalid parent {event.parent}"
                )
            if not events[event.parent].contains(event.start_us, event.duration_us):
                raise InvariantViolationError(
                    f"Event {handle} is not contained in parent {event.parent}"
                )
            if handle not in listed:
                raise InvariantViolationError(
                    f"Event {handle} missing from children of {event.parent}"
                )
