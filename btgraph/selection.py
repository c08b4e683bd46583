"""
Selection - which graph nodes are selected, and the box-select gesture.

Selection policy for a single "node was clicked" event:

1. Shift on a composite or decorator selects the whole branch
2. Ctrl, or an active box selection, adds the node (never toggles it off)
3. Otherwise the node becomes the only selected node

Node-level hit testing against the box rectangle is done by the renderer; this
module only owns the rectangle's lifecycle.
"""

import logging
from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import Dict, Iterator, Optional, Tuple

from btgraph.domain import NodeKind
from btgraph.graph_node import GraphNode

logger = logging.getLogger(__name__)

BRANCH_SELECT_KINDS = frozenset({NodeKind.COMPOSITE, NodeKind.DECORATOR})


class Modifiers(Flag):
    """Modifier keys held during a pointer event."""
    NONE = 0
    SHIFT = auto()
    CTRL = auto()


class SelectionSet:
    """Ordered set of selected nodes. Iteration follows selection order."""

    def __init__(self):
        # dict keys keep insertion order; GraphNode hashes by identity
        self._nodes: Dict[GraphNode, None] = {}

    def __contains__(self, node) -> bool:
        return node in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(list(self._nodes))

    @property
    def nodes(self) -> Tuple[GraphNode, ...]:
        return tuple(self._nodes)

    def select_node(self, node: GraphNode, modifiers: Modifiers = Modifiers.NONE,
                    box_select_active: bool = False) -> None:
        if node is None:
            return

        if Modifiers.SHIFT in modifiers and node.kind in BRANCH_SELECT_KINDS:
            self.select_subtree(node)
        elif Modifiers.CTRL in modifiers or box_select_active:
            self._select(node)
        else:
            self.clear()
            self._select(node)

    def deselect(self, node: GraphNode) -> None:
        if node in self._nodes:
            del self._nodes[node]
            node.on_deselected()

    def clear(self) -> None:
        if self._nodes:
            for node in self._nodes:
                node.on_deselected()
            self._nodes.clear()

    def select_subtree(self, root: GraphNode) -> None:
        """Replace the selection with root and all of its descendants, pre-order."""
        self.clear()
        if root is None:
            return
        for node in root.walk():
            self._select(node)

    def add(self, node: GraphNode) -> None:
        """Add without notifying the node."""
        if node is not None and node not in self._nodes:
            self._nodes[node] = None

    def discard(self, node: GraphNode) -> None:
        """Remove without notifying the node."""
        if node is not None:
            self._nodes.pop(node, None)

    def discard_subtree(self, root: GraphNode) -> int:
        """Deselect root and every descendant. Returns how many were selected."""
        removed = 0
        for node in root.walk():
            if node in self._nodes:
                self.deselect(node)
                removed += 1
        return removed

    def _select(self, node: GraphNode) -> None:
        if node not in self._nodes:
            self._nodes[node] = None
            node.on_selected()


class BoxState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    DRAWING = "drawing"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def contains(self, point: Tuple[float, float]) -> bool:
        px, py = point
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height


class BoxSelection:
    """
    Box-select gesture: idle -> armed (press) -> drawing (drag) -> idle (release).

    Positions are in document space; the canvas converts from screen space.
    """

    def __init__(self):
        self.state = BoxState.IDLE
        self._origin: Optional[Tuple[float, float]] = None
        self._current: Optional[Tuple[float, float]] = None

    @property
    def is_active(self) -> bool:
        return self.state == BoxState.DRAWING

    @property
    def rect(self) -> Optional[Rect]:
        if self.state != BoxState.DRAWING:
            return None
        (x0, y0), (x1, y1) = self._origin, self._current
        return Rect(min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0))

    def press(self, position: Tuple[float, float]) -> None:
        self.state = BoxState.ARMED
        self._origin = position
        self._current = position

    def drag(self, position: Tuple[float, float]) -> None:
        if self.state == BoxState.IDLE:
            return
        self.state = BoxState.DRAWING
        self._current = position

    def release(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.state = BoxState.IDLE
        self._origin = None
        self._current = None
