"""
Positional node addresses.

An address is the root-to-node sequence of child indices, each written as an
unsigned LEB128 varint (indices below 128 take a single byte) and rendered as
base64 text. The master root's address is the empty string.

Addresses are positional, not identity based: they resolve to whatever node sits
at that path when decoded, which lets undo records outlive wrapper objects.
"""

import base64
import binascii
from typing import List, Optional

from btgraph.graph_node import GraphNode


def _encode_varint(value: int, out: bytearray) -> None:
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return


def _decode_varints(data: bytes) -> Optional[List[int]]:
    values = []
    value = 0
    shift = 0
    pending = False
    for byte in data:
        value |= (byte & 0x7F) << shift
        if byte & 0x80:
            shift += 7
            pending = True
        else:
            values.append(value)
            value = 0
            shift = 0
            pending = False
    if pending:
        return None
    return values


def node_path(node: GraphNode) -> List[int]:
    """Child indices from the root down to node."""
    path = []
    current = node
    while current is not None:
        parent = current.parent
        if parent is None:
            break
        path.append(parent.child_index(current))
        current = parent
    path.reverse()
    return path


def encode_address(node: GraphNode) -> str:
    out = bytearray()
    for index in node_path(node):
        _encode_varint(index, out)
    return base64.b64encode(bytes(out)).decode("ascii")


def decode_address(address: str, master_root: Optional[GraphNode]) -> Optional[GraphNode]:
    """Resolve address against master_root. Returns None for malformed or dangling addresses."""
    if master_root is None or not isinstance(address, str):
        return None
    try:
        raw = base64.b64decode(address.encode("ascii"), validate=True)
    except (binascii.Error, ValueError):
        return None

    path = _decode_varints(raw)
    if path is None:
        return None

    node = master_root
    for index in path:
        node = node.get_child(index)
        if node is None:
            return None
    return node
