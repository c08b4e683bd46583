"""
GraphNode - editor-side wrapper around a behavior tree node.

A GraphNode mirrors one BehaviourNode and its children. The wrapper tree and the
domain tree are mutated together so child indices always agree. The parent link is
a weak reference: ownership flows strictly parent -> children, and a detached node
has no parent at all.
"""

import logging
import weakref
from typing import Iterator, Optional, Tuple, TYPE_CHECKING

from btgraph.domain import BehaviourNode, Breakpoint, NodeKind

if TYPE_CHECKING:
    from btgraph.node_types import NodeTypeRegistry

logger = logging.getLogger(__name__)


class GraphNode:
    """Tree node of the editor graph."""

    def __init__(self, node: BehaviourNode, parent: Optional["GraphNode"] = None):
        self.node = node
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        self._children = [GraphNode(child, self) for child in node.children]
        self.is_selected = False
        self._drag_offset: Optional[Tuple[float, float]] = None

    def __repr__(self) -> str:
        return f"GraphNode({self.node.type_name!r}, title={self.node.title!r})"

    # --- Structure ---

    @property
    def parent(self) -> Optional["GraphNode"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> Tuple["GraphNode", ...]:
        return tuple(self._children)

    @property
    def child_count(self) -> int:
        return len(self._children)

    @property
    def kind(self) -> NodeKind:
        return self.node.kind

    @property
    def title(self) -> str:
        return self.node.title

    def get_child(self, index: int) -> Optional["GraphNode"]:
        if 0 <= index < len(self._children):
            return self._children[index]
        return None

    def child_index(self, child: "GraphNode") -> int:
        """Position of child among this node's children (by identity), -1 if absent."""
        for i, c in enumerate(self._children):
            if c is child:
                return i
        return -1

    def walk(self) -> Iterator["GraphNode"]:
        """Iterate this node and all descendants, depth-first pre-order."""
        yield self
        for child in self._children:
            yield from child.walk()

    def is_descendant_of(self, ancestor: "GraphNode") -> bool:
        node = self
        while node is not None:
            if node is ancestor:
                return True
            node = node.parent
        return False

    # --- Mutation (wrapper and domain tree in lock-step) ---

    def insert_child(self, node: BehaviourNode, index: Optional[int] = None) -> Optional["GraphNode"]:
        """
        Attach a domain node (and its subtree) at index; appended when index is None.

        Returns the new wrapper, or None if the domain node rejects the child.
        """
        if index is None or index > len(self._children):
            index = len(self._children)
        index = max(index, 0)
        if not self.node.add_child(node, index):
            return None
        child = GraphNode(node, self)
        self._children.insert(index, child)
        return child

    def create_child(self, type_name: str, registry: "NodeTypeRegistry") -> Optional["GraphNode"]:
        """Ask the domain layer for a new type_name child; None if it is rejected."""
        created = registry.create_child(self.node, type_name)
        if created is None:
            return None
        child = GraphNode(created, self)
        self._children.append(child)
        return child

    def remove_child(self, index: int) -> Optional["GraphNode"]:
        """Detach the child at index from both trees. Returns the detached wrapper."""
        if not 0 <= index < len(self._children):
            return None
        child = self._children.pop(index)
        self.node.remove_child(index)
        child._parent_ref = None
        return child

    def detach(self) -> Optional[int]:
        """Remove this node from its parent. Returns the index it had, None if already detached."""
        parent = self.parent
        if parent is None:
            return None
        index = parent.child_index(self)
        if index < 0:
            self._parent_ref = None
            return None
        parent.remove_child(index)
        return index

    def destroy(self) -> None:
        """Tear down this subtree's editor state. The domain nodes are left untouched."""
        for child in self._children:
            child.destroy()
        self._children = []
        self._parent_ref = None
        self.is_selected = False
        self._drag_offset = None

    # --- Editor state ---

    @property
    def breakpoint(self) -> Breakpoint:
        return self.node.breakpoint

    @breakpoint.setter
    def breakpoint(self, value: Breakpoint) -> None:
        self.node.breakpoint = Breakpoint(value)

    @property
    def position(self) -> Tuple[float, float]:
        return self.node.position

    @position.setter
    def position(self, value: Tuple[float, float]) -> None:
        self.node.position = (float(value[0]), float(value[1]))

    def on_selected(self) -> None:
        self.is_selected = True
        logger.debug(f"Selected {self!r}")

    def on_deselected(self) -> None:
        self.is_selected = False
        logger.debug(f"Deselected {self!r}")

    @property
    def is_dragging(self) -> bool:
        return self._drag_offset is not None

    def begin_drag(self, pointer: Tuple[float, float]) -> None:
        x, y = self.position
        self._drag_offset = (x - pointer[0], y - pointer[1])

    def drag(self, pointer: Tuple[float, float]) -> None:
        if self._drag_offset is None:
            return
        self.position = (pointer[0] + self._drag_offset[0], pointer[1] + self._drag_offset[1])

    def end_drag(self) -> None:
        self._drag_offset = None
