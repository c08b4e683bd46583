"""
Shared tree builders and lookups for the btgraph tests.
"""

from btgraph.document import GraphDocument
from btgraph.domain import BehaviourNode, BehaviourTree, NodeKind


def make_tree(read_only: bool = False) -> BehaviourTree:
    """
    Root
     └ Selector "Main"
        ├ Sequence "Patrol"   ── Action "Walk", Wait "Pause"
        ├ Inverter "Not"      ── Condition "Enemy"
        ├ NodeGroup "Combat"  ── Sequence "Attack" ── Action "Strike"
        └ Action "Idle"
    """
    patrol = BehaviourNode("Sequence", NodeKind.COMPOSITE, title="Patrol", children=[
        BehaviourNode("Action", NodeKind.LEAF, title="Walk"),
        BehaviourNode("Wait", NodeKind.LEAF, title="Pause"),
    ])
    inverter = BehaviourNode("Inverter", NodeKind.DECORATOR, title="Not", children=[
        BehaviourNode("Condition", NodeKind.LEAF, title="Enemy"),
    ])
    combat = BehaviourNode("NodeGroup", NodeKind.NODE_GROUP, title="Combat", children=[
        BehaviourNode("Sequence", NodeKind.COMPOSITE, title="Attack", children=[
            BehaviourNode("Action", NodeKind.LEAF, title="Strike"),
        ]),
    ])
    main = BehaviourNode("Selector", NodeKind.COMPOSITE, title="Main", children=[
        patrol,
        inverter,
        combat,
        BehaviourNode("Action", NodeKind.LEAF, title="Idle"),
    ])
    root = BehaviourNode("Root", NodeKind.ROOT, children=[main])
    return BehaviourTree(name="Guard", root=root, read_only=read_only)


def find(document: GraphDocument, title: str):
    """Find the first bound node with the given title."""
    for node in document.master_root.walk():
        if node.title == title:
            return node
    raise LookupError(title)


def titles(node):
    return [child.title for child in node.children]
