"""
btgraph - editing model for a behavior tree node-graph editor.

This package provides the document behind the editor canvas:
- GraphDocument: binds a BehaviourTree and is the single entry point for the input layer
- GraphNode: editor wrapper of a behavior tree node
- SelectionSet / FocusStack: selection policy and the editing focus stack
- EditCommands: undoable structural edits
- encode_address / decode_address: positional node addresses

Usage:
    from btgraph import GraphDocument, BehaviourTree
    doc = GraphDocument()
    root = doc.bind(BehaviourTree())
    seq = doc.create_child(root, "Sequence")
"""

from btgraph.address import encode_address, decode_address
from btgraph.clipboard import Clipboard, InMemoryClipboard
from btgraph.commands import EditCommands
from btgraph.config import EditorConfig, load_config
from btgraph.document import GraphDocument
from btgraph.domain import BehaviourNode, BehaviourTree, Breakpoint, NodeKind
from btgraph.errors import BtGraphError, NodeTypeError, UndoGroupError
from btgraph.events import PointerAction, PointerEvent, PointerOutcome
from btgraph.focus import FocusStack
from btgraph.graph_node import GraphNode
from btgraph.node_types import NodeTypeRegistry
from btgraph.selection import BoxSelection, Modifiers, SelectionSet
from btgraph.undo import InMemoryUndoHistory, UndoHistory

__all__ = [
    'GraphDocument',
    'GraphNode',
    'EditCommands',
    'SelectionSet',
    'Modifiers',
    'BoxSelection',
    'FocusStack',
    'encode_address',
    'decode_address',
    'BehaviourNode',
    'BehaviourTree',
    'Breakpoint',
    'NodeKind',
    'NodeTypeRegistry',
    'Clipboard',
    'InMemoryClipboard',
    'UndoHistory',
    'InMemoryUndoHistory',
    'EditorConfig',
    'load_config',
    'PointerAction',
    'PointerEvent',
    'PointerOutcome',
    'BtGraphError',
    'NodeTypeError',
    'UndoGroupError',
]
