"""
Pointer events consumed by the graph document.

The canvas translates raw input into these before calling GraphDocument.handle_pointer():
positions are already in document space. Node clicks, which carry modifier keys,
go to GraphDocument.select_node() instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


PRIMARY_BUTTON = 0      # select
SECONDARY_BUTTON = 1    # context menu


class PointerAction(Enum):
    PRESS = "press"
    DRAG = "drag"
    RELEASE = "release"


class PointerOutcome(Enum):
    IGNORED = "ignored"
    HANDLED = "handled"
    CONTEXT_MENU = "context_menu"


@dataclass(frozen=True)
class PointerEvent:
    """One pointer event on the graph background."""
    action: PointerAction
    position: Tuple[float, float]
    button: int = PRIMARY_BUTTON
    inside: bool = True
