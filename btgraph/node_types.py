"""
Node Type Registry for btgraph.

Handles the catalog of behavior tree node types the editor can instantiate.
Built-in types are always available. Custom types are defined by YAML files in
node_types/, one mapping per file or a list of mappings under a `types` key:

    name: MoveTo
    kind: leaf
    title: Move To
    properties:
      speed: 1.0

The registry is the domain-side authority on which child a parent accepts:
create_child() returns None when the parent rejects the type.
"""

import copy
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from btgraph.domain import BehaviourNode, NodeKind
from btgraph.errors import NodeTypeError

logger = logging.getLogger(__name__)

TYPE_NAME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9_]*$')

# Kinds a definition may declare; the root is created with the tree, never from the catalog
CREATABLE_KINDS = frozenset(k.value for k in NodeKind if k != NodeKind.ROOT)


@dataclass
class NodeTypeDef:
    """A node type the editor can create."""
    name: str
    kind: NodeKind
    title: str = ""
    properties: Dict[str, Any] = field(default_factory=dict)
    source: Optional[str] = None

    def display_title(self) -> str:
        if self.title:
            return self.title
        # 'MoveTo' -> 'Move To'
        return re.sub(r'(?<=[a-z0-9])(?=[A-Z])', ' ', self.name).replace('_', ' ')

    def instantiate(self) -> BehaviourNode:
        return BehaviourNode(
            type_name=self.name,
            kind=self.kind,
            title=self.display_title(),
            properties=copy.deepcopy(self.properties),
        )


BUILTIN_TYPES = [
    NodeTypeDef("Sequence", NodeKind.COMPOSITE),
    NodeTypeDef("Selector", NodeKind.COMPOSITE),
    NodeTypeDef("Parallel", NodeKind.COMPOSITE, properties={"success_threshold": 1}),
    NodeTypeDef("Inverter", NodeKind.DECORATOR),
    NodeTypeDef("Repeater", NodeKind.DECORATOR, properties={"count": 0}),
    NodeTypeDef("Succeeder", NodeKind.DECORATOR),
    NodeTypeDef("NodeGroup", NodeKind.NODE_GROUP, title="Node Group"),
    NodeTypeDef("Action", NodeKind.LEAF),
    NodeTypeDef("Condition", NodeKind.LEAF),
    NodeTypeDef("Wait", NodeKind.LEAF, properties={"seconds": 1.0}),
]


def validate_definition(definition: Any, source: str) -> List[str]:
    """Validate a raw type definition. Returns list of error messages."""
    if not isinstance(definition, dict):
        return [f"{source}: definition must be a mapping"]

    errors = []
    name = definition.get('name')
    if not name:
        errors.append(f"{source}: missing required 'name' property")
    elif not isinstance(name, str) or not TYPE_NAME_PATTERN.match(name):
        errors.append(f"{source}: name '{name}' must start with a letter and use only letters, digits, _")

    kind = definition.get('kind')
    if kind is None:
        errors.append(f"{source}: missing required 'kind' property")
    elif not isinstance(kind, str) or kind not in CREATABLE_KINDS:
        errors.append(f"{source}: invalid kind '{kind}' (must be: {', '.join(sorted(CREATABLE_KINDS))})")

    if 'title' in definition and not isinstance(definition['title'], str):
        errors.append(f"{source}: 'title' must be a string")
    if 'properties' in definition and not isinstance(definition['properties'], dict):
        errors.append(f"{source}: 'properties' must be a mapping")

    return errors


class NodeTypeRegistry:
    """
    Catalog of creatable node types.

    Responsibilities:
    - Provide the built-in behavior tree types
    - Load and validate custom definitions from node_types/*.yaml
    - Instantiate children on behalf of a parent, rejecting what the parent cannot hold
    """

    def __init__(self, node_types_dir: Optional[Path] = None, include_builtins: bool = True):
        self.node_types_dir = Path(node_types_dir) if node_types_dir else None
        self._types: Dict[str, NodeTypeDef] = {}
        self.validation_errors: List[str] = []

        if include_builtins:
            for type_def in BUILTIN_TYPES:
                self._types[type_def.name] = type_def
        if self.node_types_dir is not None:
            self.load_directory(self.node_types_dir)

    def list_types(self, kind: Optional[NodeKind] = None) -> List[str]:
        """Return sorted type names, optionally restricted to one kind."""
        return sorted(name for name, t in self._types.items() if kind is None or t.kind == kind)

    def get(self, type_name: str) -> Optional[NodeTypeDef]:
        return self._types.get(type_name)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._types

    def register(self, definition: Dict[str, Any], source: str = "<code>") -> NodeTypeDef:
        """
        Register a type from a raw definition.

        Raises:
            NodeTypeError if the definition is invalid.
        """
        errors = validate_definition(definition, source)
        if errors:
            raise NodeTypeError(str(definition.get('name', '?')) if isinstance(definition, dict) else '?', errors)

        type_def = NodeTypeDef(
            name=definition['name'],
            kind=NodeKind(definition['kind']),
            title=definition.get('title', ''),
            properties=dict(definition.get('properties') or {}),
            source=source,
        )
        if type_def.name in self._types:
            logger.info(f"Node type '{type_def.name}' from {source} overrides an existing definition")
        self._types[type_def.name] = type_def
        return type_def

    def load_directory(self, directory: Path) -> int:
        """
        Load every *.yaml / *.yml definition file in directory.

        Invalid files and definitions are skipped and reported in validation_errors.
        Returns the number of types registered.
        """
        directory = Path(directory)
        if not directory.is_dir():
            return 0

        loaded = 0
        files = sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))
        for path in files:
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    content = yaml.safe_load(f)
            except (yaml.YAMLError, OSError) as e:
                msg = f"Invalid YAML in {path.name}: {e}"
                logger.warning(msg)
                self.validation_errors.append(msg)
                continue

            if isinstance(content, dict) and 'types' in content:
                definitions = content['types'] or []
            else:
                definitions = [content]
            if not isinstance(definitions, list):
                definitions = [definitions]

            for definition in definitions:
                try:
                    self.register(definition, source=path.name)
                    loaded += 1
                except NodeTypeError as e:
                    logger.warning(str(e))
                    self.validation_errors.extend(e.errors)
        return loaded

    def create_node(self, type_name: str) -> Optional[BehaviourNode]:
        type_def = self._types.get(type_name)
        if type_def is None:
            return None
        return type_def.instantiate()

    def create_child(self, parent: BehaviourNode, type_name: str) -> Optional[BehaviourNode]:
        """
        Instantiate a type_name node and attach it as the last child of parent.

        Returns the new node, or None if the type is unknown or parent has no free slot.
        """
        if parent is None or not parent.can_add_child():
            return None
        node = self.create_node(type_name)
        if node is None:
            logger.debug(f"Unknown node type '{type_name}'")
            return None
        if not parent.add_child(node):
            return None
        return node

