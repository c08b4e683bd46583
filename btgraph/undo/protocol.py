"""
UndoHistory Protocol Definition.

The editing core writes to an undo history but never reads from it. Any engine
that accepts these calls can back a GraphDocument; InMemoryUndoHistory is the one
shipped with btgraph.
"""

from typing import Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from btgraph.undo.records import UndoRecord


@runtime_checkable
class UndoHistory(Protocol):
    """
    Abstract protocol for undo-history collaborators.

    Records written between begin_group() and end_group() form one atomic step.
    Groups nest exactly one level deep.
    """

    def record(self, entry: "UndoRecord") -> None:
        """
        Append an undo record.

        Args:
            entry: The record describing how to revert and replay one change
        """
        ...

    def begin_group(self, label: str) -> None:
        """
        Open a transaction; subsequent records belong to it until end_group().

        Args:
            label: Human-readable name of the step (e.g. "Moved node(s)")
        """
        ...

    def end_group(self) -> None:
        """Close the open transaction."""
        ...

    def clear(self) -> None:
        """Drop all recorded history."""
        ...
