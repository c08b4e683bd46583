"""
Edit Commands - structural edits of the behavior tree graph.

Each command validates its preconditions, mutates the tree, and writes matching
undo records. A command whose preconditions fail does nothing: no exception, no
partial mutation, no record.
"""

import logging
from typing import List, Optional, Tuple, TYPE_CHECKING

from btgraph.clipboard import Clipboard
from btgraph.conversion import deserialize_node, serialize_node
from btgraph.domain import Breakpoint, NodeKind
from btgraph.graph_node import GraphNode
from btgraph.node_types import NodeTypeRegistry
from btgraph.undo.protocol import UndoHistory
from btgraph.undo.records import NodeCreated, NodeDeleted, NodeMoved

if TYPE_CHECKING:
    from btgraph.document import GraphDocument

logger = logging.getLogger(__name__)

MOVE_GROUP_LABEL = "Moved node(s)"
DELETE_CHILDREN_GROUP_LABEL = "Delete children"


class EditCommands:
    """
    Executes edits against a GraphDocument.

    The undo history, clipboard and node type registry are injected so the commands
    can run without an editor host.
    """

    def __init__(self, document: "GraphDocument", history: UndoHistory, clipboard: Clipboard,
                 registry: NodeTypeRegistry, enforce_read_only: bool = True):
        self.document = document
        self.history = history
        self.clipboard = clipboard
        self.registry = registry
        self.enforce_read_only = enforce_read_only
        self._drag_anchor: Optional[GraphNode] = None
        self._drag_nodes: List[GraphNode] = []

    def _can_edit(self, action: str) -> bool:
        if self.document.master_root is None:
            logger.debug(f"Ignored {action}: no behaviour tree bound")
            return False
        if self.enforce_read_only and self.document.read_only:
            logger.debug(f"Ignored {action}: document is read-only")
            return False
        return True

    # --- Create / delete ---

    def create_child(self, parent: Optional[GraphNode], child_type: Optional[str]) -> Optional[GraphNode]:
        """Create a child_type node under parent. Returns the new node or None."""
        if parent is None or child_type is None:
            return None
        if not self._can_edit("create child") or not self.document.contains(parent):
            return None

        child = parent.create_child(child_type, self.registry)
        if child is None:
            logger.debug(f"{parent!r} rejected child type '{child_type}'")
            return None

        self.history.record(NodeCreated.capture(child))
        logger.info(f"Created {child!r} under {parent!r}")
        return child

    def delete_node(self, node: Optional[GraphNode]) -> bool:
        """Remove node and its subtree. The master root cannot be deleted."""
        if node is None or not self._can_edit("delete"):
            return False
        if node is self.document.master_root or not self.document.contains(node):
            return False

        self.history.record(NodeDeleted.capture(node))
        self.document.remove_node(node)
        logger.info(f"Deleted {node!r}")
        return True

    def delete_all_children(self, node: Optional[GraphNode]) -> int:
        """Remove every child of node as one undo step. Returns how many were removed."""
        if node is None or not self._can_edit("delete children") or not self.document.contains(node):
            return 0

        removed = 0
        self.history.begin_group(DELETE_CHILDREN_GROUP_LABEL)
        try:
            while node.child_count > 0:
                child = node.get_child(0)
                self.history.record(NodeDeleted.capture(child, sequence=removed))
                self.document.remove_node(child)
                removed += 1
        finally:
            self.history.end_group()

        if removed:
            logger.info(f"Deleted {removed} children of {node!r}")
        return removed

    # --- Drag (three-phase move gesture) ---

    @property
    def is_dragging(self) -> bool:
        return self._drag_anchor is not None

    def begin_drag(self, anchor: Optional[GraphNode], position: Tuple[float, float]) -> bool:
        """Start moving the selection. Ignored unless anchor is selected."""
        if anchor is None or anchor not in self.document.selection or self.is_dragging:
            return False
        if not self._can_edit("move"):
            return False

        self._drag_anchor = anchor
        self._drag_nodes = list(self.document.selection)
        self.history.begin_group(MOVE_GROUP_LABEL)
        for node in self._drag_nodes:
            self.history.record(NodeMoved.capture(node))
            node.begin_drag(position)
        return True

    def drag(self, anchor: Optional[GraphNode], position: Tuple[float, float]) -> bool:
        if anchor is None or anchor is not self._drag_anchor:
            return False
        for node in self._drag_nodes:
            node.drag(position)
        return True

    def end_drag(self, anchor: Optional[GraphNode]) -> bool:
        if anchor is None or anchor is not self._drag_anchor:
            return False
        for node in self._drag_nodes:
            node.end_drag()
        self._drag_anchor = None
        self._drag_nodes = []
        self.history.end_group()
        return True

    def cancel_drag(self) -> None:
        """Finish a gesture in progress, e.g. when the document is rebound mid-drag."""
        if self._drag_anchor is not None:
            self.end_drag(self._drag_anchor)

    # --- Clipboard ---

    def can_copy(self, node: Optional[GraphNode]) -> bool:
        return node is not None and node.node is not None

    def copy(self, node: Optional[GraphNode]) -> bool:
        if not self.can_copy(node):
            return False
        self.clipboard.content = serialize_node(node.node)
        return True

    def can_paste(self, destination: Optional[GraphNode]) -> bool:
        if destination is None or destination.node is None or not self.clipboard.content:
            return False

        kind = destination.kind
        if kind == NodeKind.NODE_GROUP:
            return self.document.is_working_root(destination) and destination.child_count == 0
        if kind == NodeKind.DECORATOR:
            return destination.child_count == 0
        if kind == NodeKind.COMPOSITE:
            return True
        return False

    def paste(self, destination: Optional[GraphNode]) -> Optional[GraphNode]:
        """Attach the clipboard node under destination and select the pasted branch."""
        if not self.can_paste(destination) or not self._can_edit("paste"):
            return None
        if not self.document.contains(destination):
            return None

        try:
            node = deserialize_node(self.clipboard.content)
        except ValueError as e:
            logger.warning(f"Cannot paste clipboard content: {e}")
            return None

        child = self.document.insert_node(destination, node)
        if child is None:
            return None

        self.document.selection.select_subtree(child)
        self.history.record(NodeCreated.capture(child, title=f"Pasted {child.title}"))
        logger.info(f"Pasted {child!r} into {destination!r}")
        return child

    # --- Debugging aids ---

    def delete_all_breakpoints(self) -> int:
        """Clear every breakpoint marker in the tree. Not undoable. Returns how many were set."""
        root = self.document.master_root
        if root is None:
            return 0
        cleared = 0
        for node in root.walk():
            if node.breakpoint != Breakpoint.NONE:
                cleared += 1
            node.breakpoint = Breakpoint.NONE
        return cleared
