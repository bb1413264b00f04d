"""
Name interner mapping detail strings to compact integer handles.
"""

from typing import Dict, List, Optional


class NameInterner:
    """
    Bidirectional string <-> handle table shared by every parsed trace.

    Handles are allocated densely from 0 in first-seen order and are never
    released.
    """

    def __init__(self):
        self._handles: Dict[str, int] = {}
        self._names: List[str] = []

    def intern(self, name: str) -> int:
        """
        Return the handle for a name, allocating one on first sight.

        Args:
            name: Detail string (path, symbol, template signature)

        Returns:
            Integer handle
        """
        handle = self._handles.get(name)
        if handle is None:
            handle = len(self._names)
            self._handles[name] = handle
            self._names.append(name)
        return handle

    def resolve(self, handle: int) -> str:
        """Return the string behind a handle returned by intern()."""
        if handle < 0 or handle >= len(self._names):
            raise IndexError(f"Unknown detail handle {handle}")
        return self._names[handle]

    def lookup(self, name: str) -> Optional[int]:
        """Return the handle for an already interned name, or None."""
        return self._handles.get(name)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._handles
