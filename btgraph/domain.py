"""
Behavior tree domain model.

These are the nodes the editor graph wraps. The editor never owns them; it mirrors
them. Each node carries a kind that decides how many children it admits:

- ROOT:       exactly one child (the entry point of the tree)
- COMPOSITE:  any number of children (Sequence, Selector, Parallel)
- DECORATOR:  at most one child (Inverter, Repeater)
- NODE_GROUP: at most one child; a collapsible folder the editor can enter
- LEAF:       no children (Action, Condition, Wait)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class NodeKind(str, Enum):
    """Closed set of node kinds. Using str Enum for JSON serialization compatibility."""

    ROOT = "root"
    COMPOSITE = "composite"
    DECORATOR = "decorator"
    NODE_GROUP = "node_group"
    LEAF = "leaf"


class Breakpoint(str, Enum):
    """Debugger breakpoint marker stored on a node."""

    NONE = "none"
    ENABLED = "enabled"
    DISABLED = "disabled"


# None means unbounded
CHILD_CAPACITY: Dict[NodeKind, Optional[int]] = {
    NodeKind.ROOT: 1,
    NodeKind.COMPOSITE: None,
    NodeKind.DECORATOR: 1,
    NodeKind.NODE_GROUP: 1,
    NodeKind.LEAF: 0,
}


@dataclass
class BehaviourNode:
    """A single node of a behavior tree."""

    type_name: str
    kind: NodeKind
    title: str = ""
    position: Tuple[float, float] = (0.0, 0.0)
    breakpoint: Breakpoint = Breakpoint.NONE
    properties: Dict[str, Any] = field(default_factory=dict)
    children: List["BehaviourNode"] = field(default_factory=list)

    def __post_init__(self):
        self.kind = NodeKind(self.kind)
        self.breakpoint = Breakpoint(self.breakpoint)
        if not self.title:
            self.title = self.type_name

    @property
    def capacity(self) -> Optional[int]:
        return CHILD_CAPACITY[self.kind]

    def can_add_child(self) -> bool:
        capacity = self.capacity
        return capacity is None or len(self.children) < capacity

    def add_child(self, child: "BehaviourNode", index: Optional[int] = None) -> bool:
        """
        Attach a child at index (appended when index is None).

        Returns False when this node has no free child slot or the child is a root.
        """
        if child.kind == NodeKind.ROOT or not self.can_add_child():
            return False
        if index is None or index > len(self.children):
            index = len(self.children)
        self.children.insert(max(index, 0), child)
        return True

    def remove_child(self, index: int) -> Optional["BehaviourNode"]:
        if 0 <= index < len(self.children):
            return self.children.pop(index)
        return None


@dataclass
class BehaviourTree:
    """A behavior tree asset: a root node plus asset-level flags."""

    name: str = "BehaviourTree"
    root: BehaviourNode = field(default_factory=lambda: BehaviourNode("Root", NodeKind.ROOT))
    read_only: bool = False
