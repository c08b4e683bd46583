"""
Tests for the undoable editing commands.
"""

import json
from unittest.mock import MagicMock

import pytest

from btgraph.clipboard import InMemoryClipboard
from btgraph.config import EditorConfig
from btgraph.conversion import serialize_node
from btgraph.document import GraphDocument
from btgraph.domain import BehaviourNode, Breakpoint, NodeKind
from btgraph.node_types import NodeTypeRegistry
from btgraph.selection import Modifiers
from btgraph.undo.records import NodeCreated, NodeDeleted, NodeMoved

from tests.helpers import find, make_tree, titles


class TestCreateChild:

    def test_create_records_and_attaches(self, document, history):
        main = find(document, "Main")

        child = document.create_child(main, "Sequence")

        assert child is not None
        assert child.parent is main
        assert titles(main)[-1] == "Sequence"
        assert history.labels == ["Created Sequence"]

    def test_null_arguments_are_ignored(self, document, history):
        assert document.create_child(None, "Sequence") is None
        assert document.create_child(find(document, "Main"), None) is None
        assert not history.can_undo

    def test_rejected_type_records_nothing(self, document, history):
        assert document.create_child(find(document, "Idle"), "Action") is None      # leaf
        assert document.create_child(find(document, "Not"), "Action") is None       # decorator is full
        assert document.create_child(find(document, "Main"), "NoSuchType") is None
        assert not history.can_undo

    def test_undo_and_redo_create(self, document, history):
        main = find(document, "Main")
        document.create_child(main, "Wait")

        history.undo(document)
        assert titles(main) == ["Patrol", "Not", "Combat", "Idle"]

        history.redo(document)
        assert titles(main) == ["Patrol", "Not", "Combat", "Idle", "Wait"]


class TestDeleteNode:

    def test_delete_records_before_detaching(self, document):
        history = MagicMock()
        doc = GraphDocument(history=history, registry=NodeTypeRegistry(), config=EditorConfig())
        doc.bind(make_tree())
        not_node = find(doc, "Not")

        def check_still_attached(entry):
            assert not_node.parent is find(doc, "Main")
        history.record.side_effect = check_still_attached

        assert doc.delete_node(not_node)

        entry = history.record.call_args[0][0]
        assert isinstance(entry, NodeDeleted)
        assert entry.index == 1
        assert not_node.parent is None

    def test_delete_removes_subtree_from_selection(self, document):
        document.selection.select_subtree(find(document, "Main"))
        patrol, walk = find(document, "Patrol"), find(document, "Walk")

        document.delete_node(patrol)

        assert patrol not in document.selection
        assert walk not in document.selection
        assert not walk.is_selected
        assert len(document.selection) == 7

    def test_invalid_targets_are_noops(self, document, history):
        assert not document.delete_node(None)
        assert not document.delete_node(document.master_root)

        patrol = find(document, "Patrol")
        document.delete_node(patrol)
        labels = list(history.labels)
        assert not document.delete_node(patrol)           # already detached
        assert history.labels == labels

    def test_undo_delete_restores_position_and_content(self, document, history):
        main = find(document, "Main")
        find(document, "Walk").breakpoint = Breakpoint.ENABLED
        document.delete_node(find(document, "Patrol"))

        history.undo(document)

        assert titles(main) == ["Patrol", "Not", "Combat", "Idle"]
        restored = find(document, "Patrol")
        assert titles(restored) == ["Walk", "Pause"]
        assert find(document, "Walk").breakpoint == Breakpoint.ENABLED

        history.redo(document)
        assert titles(main) == ["Not", "Combat", "Idle"]


class TestDeleteAllChildren:

    def test_one_transaction_with_sequential_tags(self, document, history):
        main = find(document, "Main")

        assert document.delete_all_children(main) == 4

        assert main.child_count == 0
        assert history.labels == ["Delete children"]
        entries = history.peek().entries
        assert [e.sequence for e in entries] == [0, 1, 2, 3]
        assert [e.index for e in entries] == [0, 0, 0, 0]

    def test_undo_restores_original_count_and_order(self, document, history):
        main = find(document, "Main")
        before = document.to_digraph()

        document.delete_all_children(main)
        history.undo(document)

        assert titles(main) == ["Patrol", "Not", "Combat", "Idle"]
        after = document.to_digraph()
        assert sorted(after.nodes(data="title")) == sorted(before.nodes(data="title"))

    def test_redo_removes_them_again(self, document, history):
        main = find(document, "Main")
        document.delete_all_children(main)
        history.undo(document)
        history.redo(document)
        assert main.child_count == 0

    def test_null_node_is_noop(self, document, history):
        assert document.delete_all_children(None) == 0
        assert not history.can_undo

    def test_childless_node_records_nothing(self, document, history):
        assert document.delete_all_children(find(document, "Idle")) == 0
        assert not history.is_group_open
        assert not history.can_undo


class TestDrag:

    def test_drag_moves_all_selected_nodes_in_one_transaction(self, document, history):
        walk, idle, pause = find(document, "Walk"), find(document, "Idle"), find(document, "Pause")
        walk.position = (0, 0)
        idle.position = (100, 50)
        pause.position = (7, 7)
        document.select_node(walk)
        document.select_node(idle, Modifiers.CTRL)

        assert document.begin_drag(walk, (0, 0))
        document.drag(walk, (5, 5))
        document.drag(walk, (10, 20))
        assert document.end_drag(walk)

        assert walk.position == (10, 20)
        assert idle.position == (110, 70)
        assert pause.position == (7, 7)
        assert history.labels == ["Moved node(s)"]
        entries = history.peek().entries
        assert len(entries) == 2
        assert all(isinstance(e, NodeMoved) for e in entries)

    def test_undo_restores_all_positions_atomically(self, document, history):
        walk, idle = find(document, "Walk"), find(document, "Idle")
        walk.position = (1, 1)
        idle.position = (2, 2)
        document.select_node(walk)
        document.select_node(idle, Modifiers.CTRL)

        document.begin_drag(idle, (2, 2))
        document.drag(idle, (12, 32))
        document.end_drag(idle)

        history.undo(document)
        assert walk.position == (1, 1)
        assert idle.position == (2, 2)

        history.redo(document)
        assert walk.position == (11, 31)
        assert idle.position == (12, 32)

    def test_unselected_anchor_ignores_whole_gesture(self, document, history):
        walk, idle = find(document, "Walk"), find(document, "Idle")
        idle.position = (0, 0)
        document.select_node(walk)

        assert not document.begin_drag(idle, (0, 0))
        assert not document.drag(idle, (50, 50))
        assert not document.end_drag(idle)

        assert idle.position == (0, 0)
        assert not history.can_undo
        assert not history.is_group_open


class TestClipboard:

    def test_copy_requires_node(self, document):
        assert not document.can_copy(None)
        assert not document.copy(None)
        assert document.clipboard.content is None

    def test_copy_serializes_subtree(self, document):
        assert document.copy(find(document, "Patrol"))
        assert document.clipboard.content == serialize_node(find(document, "Patrol").node)

    @pytest.mark.parametrize("title, expected", [
        ("Main", True),      # composite
        ("Patrol", True),    # composite with children
        ("Not", False),      # decorator with its child
        ("Idle", False),     # leaf
        ("Combat", False),   # node group, not the working root
    ])
    def test_paste_legality(self, document, title, expected):
        document.copy(find(document, "Walk"))
        assert document.can_paste(find(document, title)) is expected

    def test_root_is_never_a_paste_target(self, document):
        document.copy(find(document, "Walk"))
        assert not document.can_paste(document.master_root)

    def test_empty_clipboard_blocks_every_destination(self, document):
        for node in document.master_root.walk():
            assert not document.can_paste(node)

    def test_empty_decorator_accepts_paste(self, document):
        document.copy(find(document, "Walk"))
        document.delete_node(find(document, "Enemy"))
        assert document.can_paste(find(document, "Not"))

    def test_node_group_needs_focus_and_no_children(self, document):
        combat = find(document, "Combat")
        document.copy(find(document, "Walk"))

        document.enter_group(combat)
        assert not document.can_paste(combat)       # focused but has a child

        document.delete_node(find(document, "Attack"))
        assert document.can_paste(combat)           # focused and empty

        document.exit_group()
        assert not document.can_paste(combat)       # empty but not focused

    def test_paste_attaches_selects_and_records(self, document, history):
        document.copy(find(document, "Patrol"))
        main = find(document, "Main")

        pasted = document.paste(main)

        assert pasted is not None
        assert titles(main)[-1] == "Patrol"
        assert [n.title for n in document.selection] == ["Patrol", "Walk", "Pause"]
        assert document.selection.nodes[0] is pasted
        assert history.labels == ["Pasted Patrol"]
        entry = history.peek().entries[0]
        assert isinstance(entry, NodeCreated)

    def test_undo_paste_removes_it_from_tree_and_selection(self, document, history):
        document.copy(find(document, "Patrol"))
        main = find(document, "Main")
        document.paste(main)

        history.undo(document)

        assert titles(main) == ["Patrol", "Not", "Combat", "Idle"]
        assert len(document.selection) == 0

    def test_invalid_paste_is_noop(self, document, history):
        document.copy(find(document, "Walk"))
        assert document.paste(find(document, "Idle")) is None
        assert document.paste(None) is None
        assert not history.can_undo

    def test_malformed_clipboard_payload_is_ignored(self, document, history):
        document.clipboard.content = "not a node"
        main = find(document, "Main")
        assert document.can_paste(main)
        assert document.paste(main) is None
        assert main.child_count == 4
        assert not history.can_undo

    @pytest.mark.parametrize("node_data", [
        {"type": "Action", "kind": "leaf", "children": 5},
        {"type": "Action", "kind": "leaf", "children": "abc"},
        {"type": "Action", "kind": "leaf", "children": {"type": "Wait"}},
        {"type": "Sequence", "kind": "composite", "children": [7]},
        ["Action", "leaf"],
        None,
    ])
    def test_payload_with_bad_node_data_is_ignored(self, document, history, node_data):
        document.clipboard.content = json.dumps({"format": "btgraph.node", "node": node_data})
        main = find(document, "Main")

        assert document.paste(main) is None
        assert main.child_count == 4
        assert len(document.selection) == 0
        assert not history.can_undo

    def test_null_children_pastes_a_childless_node(self, document):
        document.clipboard.content = json.dumps({
            "format": "btgraph.node",
            "node": {"type": "Sequence", "kind": "composite", "title": "Empty", "children": None},
        })
        pasted = document.paste(find(document, "Main"))
        assert pasted is not None
        assert pasted.child_count == 0

    def test_clipboard_is_shared_between_documents(self, history):
        clipboard = InMemoryClipboard()
        first = GraphDocument(clipboard=clipboard, registry=NodeTypeRegistry(), config=EditorConfig())
        second = GraphDocument(clipboard=clipboard, registry=NodeTypeRegistry(), config=EditorConfig())
        first.bind(make_tree())
        second.bind(make_tree())

        first.copy(find(first, "Not"))
        pasted = second.paste(find(second, "Main"))

        assert pasted is not None
        assert titles(pasted) == ["Enemy"]


class TestBreakpoints:

    def test_delete_all_breakpoints_is_not_undoable(self, document, history):
        find(document, "Walk").breakpoint = Breakpoint.ENABLED
        find(document, "Strike").breakpoint = Breakpoint.DISABLED
        document.master_root.breakpoint = Breakpoint.ENABLED

        assert document.delete_all_breakpoints() == 3

        assert all(n.breakpoint == Breakpoint.NONE for n in document.master_root.walk())
        assert not history.can_undo


class TestReadOnly:

    @pytest.fixture
    def read_only_document(self, history):
        doc = GraphDocument(history=history, registry=NodeTypeRegistry(), config=EditorConfig())
        doc.bind(make_tree(read_only=True))
        return doc

    def test_mutations_rejected_when_read_only(self, read_only_document, history):
        doc = read_only_document
        main = find(doc, "Main")
        doc.copy(find(doc, "Walk"))

        assert doc.create_child(main, "Action") is None
        assert not doc.delete_node(find(doc, "Idle"))
        assert doc.delete_all_children(main) == 0
        assert doc.paste(main) is None
        doc.select_node(main)
        assert not doc.begin_drag(main, (0, 0))

        assert titles(main) == ["Patrol", "Not", "Combat", "Idle"]
        assert not history.can_undo

    def test_breakpoints_still_clear_when_read_only(self, read_only_document):
        find(read_only_document, "Walk").breakpoint = Breakpoint.ENABLED
        assert read_only_document.delete_all_breakpoints() == 1

    def test_running_tree_is_read_only(self, history):
        running = {"value": True}
        doc = GraphDocument(history=history, registry=NodeTypeRegistry(), config=EditorConfig(),
                            is_running=lambda: running["value"])
        doc.bind(make_tree())
        main = find(doc, "Main")

        assert doc.read_only
        assert doc.create_child(main, "Action") is None

        running["value"] = False
        assert not doc.read_only
        assert doc.create_child(main, "Action") is not None

    def test_enforcement_can_be_disabled(self, history):
        doc = GraphDocument(history=history, registry=NodeTypeRegistry(),
                            config=EditorConfig(enforce_read_only=False))
        doc.bind(make_tree(read_only=True))
        assert doc.read_only
        assert doc.create_child(find(doc, "Main"), "Action") is not None
