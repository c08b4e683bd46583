"""
Where btgraph looks for its external data.

config.json and node_types/ sit in the project root, one level above the btgraph
package. load_config() and BTGRAPH_NODE_TYPES_DIR can point elsewhere.
"""

from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_config_path() -> Path:
    return PROJECT_ROOT / "config.json"


def get_node_types_dir() -> Path:
    """Default directory of custom node type definitions (*.yaml)."""
    return PROJECT_ROOT / "node_types"
