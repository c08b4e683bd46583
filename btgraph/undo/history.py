"""
In-memory undo history.

Records are grouped into transactions. A record written outside of a group becomes
a transaction of its own. undo() reverts the newest transaction's records in
reverse order; redo() replays them in the original order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from btgraph.errors import UndoGroupError
from btgraph.undo.records import UndoRecord

if TYPE_CHECKING:
    from btgraph.document import GraphDocument

logger = logging.getLogger(__name__)


@dataclass
class UndoTransaction:
    """One atomic undo step."""
    label: str
    entries: List[UndoRecord] = field(default_factory=list)


class InMemoryUndoHistory:
    """Transaction-based undo/redo stacks."""

    def __init__(self, max_steps: Optional[int] = None):
        self.max_steps = max_steps
        self._undo_stack: List[UndoTransaction] = []
        self._redo_stack: List[UndoTransaction] = []
        self._open: Optional[UndoTransaction] = None

    # --- UndoHistory protocol ---

    def record(self, entry: UndoRecord) -> None:
        if self._open is not None:
            self._open.entries.append(entry)
        else:
            self._push(UndoTransaction(entry.title, [entry]))

    def begin_group(self, label: str) -> None:
        if self._open is not None:
            raise UndoGroupError(f"Cannot begin '{label}': group '{self._open.label}' is still open")
        self._open = UndoTransaction(label)

    def end_group(self) -> None:
        if self._open is None:
            raise UndoGroupError("end_group() called without an open group")
        transaction, self._open = self._open, None
        if transaction.entries:
            self._push(transaction)

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._open = None

    # --- Replay ---

    @property
    def is_group_open(self) -> bool:
        return self._open is not None

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def labels(self) -> List[str]:
        """Labels of undoable steps, oldest first."""
        return [t.label for t in self._undo_stack]

    def peek(self) -> Optional[UndoTransaction]:
        return self._undo_stack[-1] if self._undo_stack else None

    def undo(self, document: GraphDocument) -> Optional[str]:
        """Revert the newest step. Returns its label, or None if there is nothing to undo."""
        self._ensure_closed("undo")
        if not self._undo_stack:
            return None
        transaction = self._undo_stack.pop()
        for entry in reversed(transaction.entries):
            entry.undo(document)
        self._redo_stack.append(transaction)
        logger.info(f"Undo: {transaction.label}")
        return transaction.label

    def redo(self, document: GraphDocument) -> Optional[str]:
        """Replay the most recently undone step. Returns its label, or None."""
        self._ensure_closed("redo")
        if not self._redo_stack:
            return None
        transaction = self._redo_stack.pop()
        for entry in transaction.entries:
            entry.redo(document)
        self._undo_stack.append(transaction)
        logger.info(f"Redo: {transaction.label}")
        return transaction.label

    def _push(self, transaction: UndoTransaction) -> None:
        self._undo_stack.append(transaction)
        self._redo_stack.clear()
        if self.max_steps is not None and len(self._undo_stack) > self.max_steps:
            del self._undo_stack[0]

    def _ensure_closed(self, action: str) -> None:
        if self._open is not None:
            raise UndoGroupError(f"Cannot {action} while group '{self._open.label}' is open")
