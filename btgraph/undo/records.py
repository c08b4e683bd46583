"""
Undo records.

Every record refers to nodes by address rather than by object, so it stays valid
after undo/redo has rebuilt the wrapper objects it touched. Removed subtrees are kept
as serialized payloads and rebuilt on replay.

Replaying a record goes through GraphDocument.insert_node/remove_node, which keep
selection and focus consistent and never record anything themselves.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

from btgraph.address import encode_address
from btgraph.conversion import deserialize_node, serialize_node
from btgraph.graph_node import GraphNode

if TYPE_CHECKING:
    from btgraph.document import GraphDocument

logger = logging.getLogger(__name__)


@dataclass
class UndoRecord(ABC):
    """A single revertible change."""

    title: str

    @abstractmethod
    def undo(self, document: GraphDocument) -> None:
        ...

    @abstractmethod
    def redo(self, document: GraphDocument) -> None:
        ...


def _child_at(document: GraphDocument, parent_address: str, index: int) -> Optional[GraphNode]:
    parent = document.resolve(parent_address)
    if parent is None:
        return None
    return parent.get_child(index)


@dataclass
class NodeCreated(UndoRecord):
    """A subtree was attached at parent_address[index]."""

    parent_address: str
    index: int
    payload: str

    @classmethod
    def capture(cls, node: GraphNode, title: Optional[str] = None) -> "NodeCreated":
        parent = node.parent
        return cls(
            title=title or f"Created {node.title}",
            parent_address=encode_address(parent),
            index=parent.child_index(node),
            payload=serialize_node(node.node),
        )

    def undo(self, document: GraphDocument) -> None:
        child = _child_at(document, self.parent_address, self.index)
        if child is None:
            logger.warning(f"Cannot undo '{self.title}': no node at {self.parent_address!r}[{self.index}]")
            return
        document.remove_node(child)

    def redo(self, document: GraphDocument) -> None:
        parent = document.resolve(self.parent_address)
        if parent is None:
            logger.warning(f"Cannot redo '{self.title}': parent {self.parent_address!r} not found")
            return
        document.insert_node(parent, deserialize_node(self.payload), self.index)


@dataclass
class NodeDeleted(UndoRecord):
    """
    A subtree was removed from parent_address[index].

    sequence numbers the removals of one multi-delete (0, 1, 2, ...). It is a label
    only: undo reinserts at index, the position the node was actually removed from.
    """

    parent_address: str
    index: int
    payload: str
    sequence: Optional[int] = None

    @classmethod
    def capture(cls, node: GraphNode, sequence: Optional[int] = None) -> "NodeDeleted":
        parent = node.parent
        return cls(
            title=f"Deleted {node.title}",
            parent_address=encode_address(parent),
            index=parent.child_index(node),
            payload=serialize_node(node.node),
            sequence=sequence,
        )

    def undo(self, document: GraphDocument) -> None:
        parent = document.resolve(self.parent_address)
        if parent is None:
            logger.warning(f"Cannot undo '{self.title}': parent {self.parent_address!r} not found")
            return
        document.insert_node(parent, deserialize_node(self.payload), self.index)

    def redo(self, document: GraphDocument) -> None:
        child = _child_at(document, self.parent_address, self.index)
        if child is None:
            logger.warning(f"Cannot redo '{self.title}': no node at {self.parent_address!r}[{self.index}]")
            return
        document.remove_node(child)


@dataclass
class NodeMoved(UndoRecord):
    """Holds the position to restore; undo and redo swap it with the current one."""

    address: str
    position: Tuple[float, float]

    @classmethod
    def capture(cls, node: GraphNode) -> "NodeMoved":
        return cls(title=f"Moved {node.title}", address=encode_address(node), position=node.position)

    def _swap(self, document: GraphDocument) -> None:
        node = document.resolve(self.address)
        if node is None:
            logger.warning(f"Cannot revert '{self.title}': node {self.address!r} not found")
            return
        node.position, self.position = self.position, node.position

    def undo(self, document: GraphDocument) -> None:
        self._swap(document)

    def redo(self, document: GraphDocument) -> None:
        self._swap(document)


@dataclass
class GroupPushed(UndoRecord):
    """The node group at address was entered."""

    address: str

    @classmethod
    def capture(cls, node: GraphNode) -> "GroupPushed":
        return cls(title=f"Open {node.title}", address=encode_address(node))

    def undo(self, document: GraphDocument) -> None:
        node = document.resolve(self.address)
        if node is not None and document.focus.is_working_root(node):
            document.focus.pop_silent()

    def redo(self, document: GraphDocument) -> None:
        node = document.resolve(self.address)
        if node is not None:
            document.focus.push_silent(node)


@dataclass
class GroupPopped(UndoRecord):
    """The node group at address was exited."""

    address: str

    @classmethod
    def capture(cls, node: GraphNode) -> "GroupPopped":
        return cls(title=f"Close {node.title}", address=encode_address(node))

    def undo(self, document: GraphDocument) -> None:
        node = document.resolve(self.address)
        if node is not None:
            document.focus.push_silent(node)

    def redo(self, document: GraphDocument) -> None:
        node = document.resolve(self.address)
        if node is not None and document.focus.is_working_root(node):
            document.focus.pop_silent()
