"""
Tests for the GraphNode wrapper and clipboard payload conversion.
"""

import json

import pytest

from btgraph.conversion import deserialize_node, node_to_dict, serialize_node
from btgraph.domain import BehaviourNode, Breakpoint, NodeKind
from btgraph.graph_node import GraphNode

from tests.helpers import make_tree, titles


@pytest.fixture
def root():
    return GraphNode(make_tree().root)


def by_title(root, title):
    return next(n for n in root.walk() if n.title == title)


class TestStructure:

    def test_wraps_whole_tree(self, root):
        assert [n.title for n in root.walk()][:4] == ["Root", "Main", "Patrol", "Walk"]
        main = by_title(root, "Main")
        assert main.parent is root
        assert titles(main) == ["Patrol", "Not", "Combat", "Idle"]

    def test_insert_child_keeps_trees_in_step(self, root):
        patrol = by_title(root, "Patrol")
        child = patrol.insert_child(BehaviourNode("Action", NodeKind.LEAF, title="Look"), 1)
        assert titles(patrol) == ["Walk", "Look", "Pause"]
        assert [c.title for c in patrol.node.children] == ["Walk", "Look", "Pause"]
        assert child.parent is patrol

    def test_insert_into_full_decorator_fails(self, root):
        inverter = by_title(root, "Not")
        assert inverter.insert_child(BehaviourNode("Action", NodeKind.LEAF)) is None
        assert inverter.child_count == 1

    def test_detach(self, root):
        walk = by_title(root, "Walk")
        patrol = walk.parent

        assert walk.detach() == 0
        assert walk.parent is None
        assert titles(patrol) == ["Pause"]
        assert [c.title for c in patrol.node.children] == ["Pause"]
        assert walk.detach() is None

    def test_is_descendant_of(self, root):
        strike = by_title(root, "Strike")
        assert strike.is_descendant_of(root)
        assert not strike.is_descendant_of(by_title(root, "Patrol"))

    def test_child_index_uses_identity(self, root):
        main = by_title(root, "Main")
        stranger = GraphNode(BehaviourNode("Action", NodeKind.LEAF, title="Idle"))
        assert main.child_index(stranger) == -1
        assert main.child_index(by_title(root, "Idle")) == 3


class TestNodeDrag:

    def test_drag_keeps_pointer_offset(self, root):
        idle = by_title(root, "Idle")
        idle.position = (100, 50)

        idle.begin_drag((110, 60))
        idle.drag((210, 260))
        idle.end_drag()

        assert idle.position == (200.0, 250.0)
        assert not idle.is_dragging

    def test_drag_without_begin_is_ignored(self, root):
        idle = by_title(root, "Idle")
        idle.drag((5, 5))
        assert idle.position == (0.0, 0.0)


class TestConversion:

    def test_serialize_subtree(self, root):
        inverter = by_title(root, "Not")
        inverter.breakpoint = Breakpoint.ENABLED

        node = deserialize_node(serialize_node(inverter.node))

        assert node is not inverter.node
        assert node_to_dict(node) == node_to_dict(inverter.node)
        assert node.children[0].title == "Enemy"

    @pytest.mark.parametrize("payload", [
        "not json",
        json.dumps({"format": "other", "node": {}}),
        json.dumps({"format": "btgraph.node", "node": {"type": "X"}}),
        json.dumps({"format": "btgraph.node", "node": {"type": "X", "kind": "nonsense"}}),
        json.dumps({"format": "btgraph.node", "node": {
            "type": "Inverter", "kind": "decorator",
            "children": [{"type": "A", "kind": "leaf"}, {"type": "B", "kind": "leaf"}],
        }}),
    ])
    def test_malformed_payload(self, payload):
        with pytest.raises(ValueError):
            deserialize_node(payload)
