"""
Editing focus stack.

The top of the stack is the working root: the subtree currently being edited.
Entering a node group pushes it; exiting pops back out. The master root always
stays at the bottom, so the stack is never empty.
"""

import logging
from typing import List, Optional, TYPE_CHECKING

from btgraph.domain import NodeKind
from btgraph.graph_node import GraphNode
from btgraph.undo.records import GroupPopped, GroupPushed

if TYPE_CHECKING:
    from btgraph.undo.protocol import UndoHistory

logger = logging.getLogger(__name__)

SILENT_PUSH_KINDS = frozenset({NodeKind.NODE_GROUP, NodeKind.ROOT})


class FocusStack:
    """Stack of working roots with undoable and silent push/pop."""

    def __init__(self, root: GraphNode, history: "UndoHistory"):
        self._stack: List[GraphNode] = [root]
        self._history = history

    @property
    def working_root(self) -> GraphNode:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    def is_working_root(self, node: Optional[GraphNode]) -> bool:
        return node is not None and node is self._stack[-1]

    def reset(self, root: GraphNode) -> None:
        self._stack = [root]

    def push(self, node: Optional[GraphNode]) -> bool:
        """Enter a node group, recording the step. Returns True if pushed."""
        if node is None or node.kind != NodeKind.NODE_GROUP:
            return False
        self._history.record(GroupPushed.capture(node))
        self._stack.append(node)
        logger.debug(f"Entered {node!r}, depth {self.depth}")
        return True

    def push_silent(self, node: Optional[GraphNode]) -> bool:
        """Enter a node group or root without recording. Returns True if pushed."""
        if node is None or node.kind not in SILENT_PUSH_KINDS:
            return False
        self._stack.append(node)
        return True

    def pop(self) -> Optional[GraphNode]:
        """Exit the working root, recording the step. No-op at the master root."""
        if len(self._stack) <= 1:
            return None
        node = self._stack.pop()
        self._history.record(GroupPopped.capture(node))
        logger.debug(f"Exited {node!r}, depth {self.depth}")
        return node

    def pop_silent(self) -> Optional[GraphNode]:
        if len(self._stack) <= 1:
            return None
        return self._stack.pop()

    def prune(self, removed: GraphNode) -> int:
        """Drop entries inside a subtree that was removed. Returns how many were dropped."""
        keep = [self._stack[0]]
        for node in self._stack[1:]:
            if node.is_descendant_of(removed):
                break
            keep.append(node)
        dropped = len(self._stack) - len(keep)
        self._stack = keep
        return dropped
