"""
Clipboard collaborator.

A single shared slot holding a serialized node payload. The payload format is
opaque to the editing core; an empty slot means nothing can be pasted.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Clipboard(Protocol):
    """Abstract protocol for the shared clipboard slot."""

    @property
    def content(self) -> Optional[str]:
        """Return the stored payload, or None when empty."""
        ...

    @content.setter
    def content(self, payload: Optional[str]) -> None:
        ...


class InMemoryClipboard:
    """Process-local clipboard slot."""

    def __init__(self, content: Optional[str] = None):
        self._content = content

    @property
    def content(self) -> Optional[str]:
        return self._content

    @content.setter
    def content(self, payload: Optional[str]) -> None:
        self._content = payload
