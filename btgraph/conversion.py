from typing import Dict, Any
import json

from btgraph.domain import BehaviourNode, Breakpoint, NodeKind

PAYLOAD_FORMAT = "btgraph.node"


def node_to_dict(node: BehaviourNode) -> Dict[str, Any]:
    """
    Recursively converts a node and its subtree into plain data.

    Format:
    {
      "type": "Sequence",
      "kind": "composite",
      "title": "Sequence",
      "position": [0.0, 0.0],
      "breakpoint": "none",
      "properties": {},
      "children": [ ... ]
    }
    """
    return {
        "type": node.type_name,
        "kind": node.kind.value,
        "title": node.title,
        "position": list(node.position),
        "breakpoint": node.breakpoint.value,
        "properties": dict(node.properties),
        "children": [node_to_dict(child) for child in node.children],
    }


def node_from_dict(data: Dict[str, Any]) -> BehaviourNode:
    """
    Rebuild a node subtree from node_to_dict() output.

    Raises:
        ValueError if the data is not a valid node description.
    """
    if not isinstance(data, dict) or "type" not in data or "kind" not in data:
        raise ValueError("Node data must be an object with 'type' and 'kind'")

    position = data.get("position") or (0.0, 0.0)
    try:
        node = BehaviourNode(
            type_name=str(data["type"]),
            kind=NodeKind(data["kind"]),
            title=data.get("title", ""),
            position=(float(position[0]), float(position[1])),
            breakpoint=Breakpoint(data.get("breakpoint", Breakpoint.NONE.value)),
            properties=dict(data.get("properties") or {}),
        )
    except (TypeError, IndexError, KeyError) as e:
        raise ValueError(f"Malformed node data: {e}") from e

    children = data.get("children")
    if children is None:
        children = []
    elif not isinstance(children, list):
        raise ValueError(f"Node '{node.title}' children must be a list")

    for child_data in children:
        if not node.add_child(node_from_dict(child_data)):
            raise ValueError(f"Node '{node.title}' cannot hold another child")
    return node


def serialize_node(node: BehaviourNode) -> str:
    """Serialize a node subtree into the clipboard payload string."""
    return json.dumps({"format": PAYLOAD_FORMAT, "node": node_to_dict(node)})


def deserialize_node(payload: str) -> BehaviourNode:
    """
    Parse a clipboard payload produced by serialize_node().

    Raises:
        ValueError if the payload is not a serialized node.
    """
    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValueError(f"Clipboard payload is not valid JSON: {e}") from e
    if not isinstance(data, dict) or data.get("format") != PAYLOAD_FORMAT:
        raise ValueError("Clipboard payload is not a serialized node")
    return node_from_dict(data.get("node"))
