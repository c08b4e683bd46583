"""
GraphDocument - the editing model of one behavior tree.

Composes the wrapped tree, the selection, the focus stack and the edit commands.
It is the single entry point for the input layer: pointer events and editor commands
arrive here and are delegated to SelectionSet/FocusStack for policy and to
EditCommands for mutation.

Lifecycle: Unbound -> bind(tree) -> Bound -> bind(other) -> Bound -> unbind() -> Unbound.
Binding resets the selection, the focus stack and the undo history.
"""

import logging
from typing import Callable, Optional, Tuple

import networkx as nx

from btgraph.address import decode_address, encode_address
from btgraph.clipboard import Clipboard, InMemoryClipboard
from btgraph.commands import EditCommands
from btgraph.config import EditorConfig, load_config
from btgraph.domain import BehaviourNode, BehaviourTree
from btgraph.events import PointerAction, PointerEvent, PointerOutcome, PRIMARY_BUTTON, SECONDARY_BUTTON
from btgraph.focus import FocusStack
from btgraph.graph_node import GraphNode
from btgraph.node_types import NodeTypeRegistry
from btgraph.selection import BoxSelection, Modifiers, Rect, SelectionSet
from btgraph.snapshot import build_digraph
from btgraph.undo.history import InMemoryUndoHistory
from btgraph.undo.protocol import UndoHistory

logger = logging.getLogger(__name__)


class GraphDocument:
    """Editing model over one bound BehaviourTree."""

    def __init__(
        self,
        history: Optional[UndoHistory] = None,
        clipboard: Optional[Clipboard] = None,
        registry: Optional[NodeTypeRegistry] = None,
        config: Optional[EditorConfig] = None,
        is_running: Optional[Callable[[], bool]] = None,
    ):
        self.config = config or load_config()
        self.history = history if history is not None else InMemoryUndoHistory()
        self.clipboard = clipboard if clipboard is not None else InMemoryClipboard()
        self.registry = registry or NodeTypeRegistry(self.config.resolved_node_types_dir())
        self._is_running = is_running or (lambda: False)

        self.tree: Optional[BehaviourTree] = None
        self.master_root: Optional[GraphNode] = None
        self.focus: Optional[FocusStack] = None
        self.selection = SelectionSet()
        self.box = BoxSelection()
        self.commands = EditCommands(
            self, self.history, self.clipboard, self.registry,
            enforce_read_only=self.config.enforce_read_only,
        )

    # --- Binding ---

    @property
    def is_bound(self) -> bool:
        return self.master_root is not None

    def bind(self, tree: BehaviourTree) -> GraphNode:
        """Wrap tree, replacing whatever was bound before. Returns the new master root."""
        self._teardown()
        self.tree = tree
        self.master_root = GraphNode(tree.root)
        self.focus = FocusStack(self.master_root, self.history)
        self.history.clear()
        logger.info(f"Bound behaviour tree '{tree.name}' (read_only={tree.read_only})")
        return self.master_root

    def unbind(self) -> None:
        self._teardown()
        self.history.clear()

    def _teardown(self) -> None:
        self.commands.cancel_drag()
        self.selection.clear()
        self.box.reset()
        if self.master_root is not None:
            self.master_root.destroy()
        self.master_root = None
        self.focus = None
        self.tree = None

    @property
    def read_only(self) -> bool:
        """True when the tree itself is read-only or it is currently running."""
        if self.tree is None:
            return False
        return bool(self.tree.read_only or self._is_running())

    # --- Structure queries ---

    def contains(self, node: Optional[GraphNode]) -> bool:
        """True if node is reachable from the master root."""
        if node is None or self.master_root is None:
            return False
        return node.is_descendant_of(self.master_root)

    @property
    def working_root(self) -> Optional[GraphNode]:
        return self.focus.working_root if self.focus else None

    @property
    def depth(self) -> int:
        return self.focus.depth if self.focus else 0

    def is_working_root(self, node: Optional[GraphNode]) -> bool:
        return self.focus is not None and self.focus.is_working_root(node)

    def address_of(self, node: Optional[GraphNode]) -> Optional[str]:
        if not self.contains(node):
            return None
        return encode_address(node)

    def resolve(self, address: str) -> Optional[GraphNode]:
        return decode_address(address, self.master_root)

    def to_digraph(self) -> nx.DiGraph:
        return build_digraph(self.master_root)

    # --- Structural primitives (no undo records) ---

    def insert_node(self, parent: GraphNode, node: BehaviourNode,
                    index: Optional[int] = None) -> Optional[GraphNode]:
        if not self.contains(parent):
            return None
        return parent.insert_child(node, index)

    def remove_node(self, node: GraphNode) -> Optional[int]:
        """Detach node, dropping it and its descendants from selection and focus."""
        if node is self.master_root or not self.contains(node):
            return None
        self.selection.discard_subtree(node)
        index = node.detach()
        self.focus.prune(node)
        return index

    # --- Selection ---

    @property
    def selected_nodes(self) -> Tuple[GraphNode, ...]:
        return self.selection.nodes

    @property
    def selection_box(self) -> Optional[Rect]:
        return self.box.rect

    def select_node(self, node: Optional[GraphNode], modifiers: Modifiers = Modifiers.NONE) -> None:
        if self.contains(node):
            self.selection.select_node(node, modifiers, self.box.is_active)

    def deselect_node(self, node: Optional[GraphNode]) -> None:
        if node is not None:
            self.selection.deselect(node)

    def add_to_selection(self, node: Optional[GraphNode]) -> None:
        if self.contains(node):
            self.selection.add(node)

    def remove_from_selection(self, node: Optional[GraphNode]) -> None:
        self.selection.discard(node)

    def clear_selection(self) -> None:
        self.selection.clear()

    def select_branch(self, node: Optional[GraphNode]) -> None:
        if self.contains(node):
            self.selection.select_subtree(node)

    def select_entire_graph(self) -> None:
        if self.focus is not None:
            self.selection.select_subtree(self.focus.working_root)

    # --- Focus ---

    def enter_group(self, node: Optional[GraphNode]) -> bool:
        """Make a node group the working root, as an undoable step."""
        return self.contains(node) and self.focus.push(node)

    def exit_group(self) -> Optional[GraphNode]:
        return self.focus.pop() if self.focus else None

    def increase_editing_depth(self, node: Optional[GraphNode]) -> bool:
        """Drill into a node group or root without recording an undo step."""
        return self.contains(node) and self.focus.push_silent(node)

    def decrease_editing_depth(self) -> Optional[GraphNode]:
        return self.focus.pop_silent() if self.focus else None

    # --- Commands ---

    def create_child(self, parent: Optional[GraphNode], child_type: Optional[str]) -> Optional[GraphNode]:
        return self.commands.create_child(parent, child_type)

    def delete_node(self, node: Optional[GraphNode]) -> bool:
        return self.commands.delete_node(node)

    def delete_all_children(self, node: Optional[GraphNode]) -> int:
        return self.commands.delete_all_children(node)

    def begin_drag(self, anchor: Optional[GraphNode], position: Tuple[float, float]) -> bool:
        return self.commands.begin_drag(anchor, position)

    def drag(self, anchor: Optional[GraphNode], position: Tuple[float, float]) -> bool:
        return self.commands.drag(anchor, position)

    def end_drag(self, anchor: Optional[GraphNode]) -> bool:
        return self.commands.end_drag(anchor)

    def can_copy(self, node: Optional[GraphNode]) -> bool:
        return self.commands.can_copy(node)

    def copy(self, node: Optional[GraphNode]) -> bool:
        return self.commands.copy(node)

    def can_paste(self, destination: Optional[GraphNode]) -> bool:
        return self.commands.can_paste(destination)

    def paste(self, destination: Optional[GraphNode]) -> Optional[GraphNode]:
        return self.commands.paste(destination)

    def delete_all_breakpoints(self) -> int:
        return self.commands.delete_all_breakpoints()

    # --- Pointer input on the graph background ---

    def handle_pointer(self, event: PointerEvent) -> PointerOutcome:
        """
        Drive box selection and the context menu from background pointer events.

        Primary press inside the editable area clears the selection and arms the box;
        dragging draws it; release ends it. Secondary release requests the context menu.
        """
        if not self.is_bound:
            return PointerOutcome.IGNORED

        if event.action == PointerAction.PRESS:
            if event.button == PRIMARY_BUTTON and event.inside:
                self.selection.clear()
                self.box.press(event.position)
                return PointerOutcome.HANDLED

        elif event.action == PointerAction.DRAG:
            if event.button == PRIMARY_BUTTON and event.inside:
                self.box.drag(event.position)
                return PointerOutcome.HANDLED

        elif event.action == PointerAction.RELEASE:
            self.box.release()
            if event.inside:
                if event.button == PRIMARY_BUTTON:
                    return PointerOutcome.HANDLED
                if event.button == SECONDARY_BUTTON:
                    return PointerOutcome.CONTEXT_MENU

        return PointerOutcome.IGNORED
