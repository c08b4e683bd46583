"""
Exception types for btgraph.

Editing commands never raise: a command whose preconditions fail is ignored.
These exceptions signal programming errors in the calling layer.
"""


class BtGraphError(Exception):
    """Base class for btgraph errors."""


class UndoGroupError(BtGraphError):
    """Raised when undo transaction brackets are opened twice or closed without being opened."""


class NodeTypeError(BtGraphError, ValueError):
    """Raised when a node type definition registered in code is invalid."""

    def __init__(self, type_name: str, errors):
        self.type_name = type_name
        self.errors = list(errors)
        super().__init__(f"Invalid node type '{type_name}': {'; '.join(self.errors)}")
