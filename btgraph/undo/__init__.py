"""
Undo recording for btgraph.

- UndoHistory: protocol the editing core writes to
- UndoRecord and its subclasses: positional, replayable change records
- InMemoryUndoHistory: transaction-based engine that can undo and redo records
"""

from btgraph.undo.protocol import UndoHistory
from btgraph.undo.records import (
    UndoRecord,
    NodeCreated,
    NodeDeleted,
    NodeMoved,
    GroupPushed,
    GroupPopped,
)
from btgraph.undo.history import InMemoryUndoHistory, UndoTransaction

__all__ = [
    'UndoHistory',
    'UndoRecord',
    'NodeCreated',
    'NodeDeleted',
    'NodeMoved',
    'GroupPushed',
    'GroupPopped',
    'InMemoryUndoHistory',
    'UndoTransaction',
]
