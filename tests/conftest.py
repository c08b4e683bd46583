import pytest

from btgraph.config import EditorConfig
from btgraph.document import GraphDocument
from btgraph.node_types import NodeTypeRegistry
from btgraph.undo.history import InMemoryUndoHistory

from tests.helpers import make_tree


@pytest.fixture
def history():
    return InMemoryUndoHistory()


@pytest.fixture
def document(history):
    doc = GraphDocument(
        history=history,
        registry=NodeTypeRegistry(),
        config=EditorConfig(),
    )
    doc.bind(make_tree())
    return doc
