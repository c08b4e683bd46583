"""
Configuration management for btgraph.

Editor settings are stored in config.json next to the executable/project root.
Environment variables take priority over the file:

- BTGRAPH_ENFORCE_READ_ONLY: "0"/"false"/"no" lets commands mutate read-only documents
- BTGRAPH_NODE_TYPES_DIR: directory of custom node type definitions
"""

import json
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from btgraph.paths import get_config_path, get_node_types_dir

logger = logging.getLogger(__name__)

ENV_ENFORCE_READ_ONLY = "BTGRAPH_ENFORCE_READ_ONLY"
ENV_NODE_TYPES_DIR = "BTGRAPH_NODE_TYPES_DIR"

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class EditorConfig:
    """Settings consumed by the editing core."""
    enforce_read_only: bool = True
    node_types_dir: Optional[Path] = None

    def resolved_node_types_dir(self) -> Path:
        return self.node_types_dir or get_node_types_dir()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["node_types_dir"] = str(self.node_types_dir) if self.node_types_dir else None
        return data


def _parse_flag(value) -> bool:
    """Read a boolean from JSON or the environment; strings like "false"/"0" are False."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_VALUES
    return bool(value)


def _read_config_file(config_path: Path) -> dict:
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.warning(f"Ignoring config {config_path}: expected a JSON object")
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
    return {}


def load_config(config_path: Optional[Path] = None) -> EditorConfig:
    """Load configuration from config.json, then apply environment overrides."""
    data = _read_config_file(config_path or get_config_path())

    config = EditorConfig()
    if "enforce_read_only" in data:
        config.enforce_read_only = _parse_flag(data["enforce_read_only"])
    if data.get("node_types_dir"):
        config.node_types_dir = Path(data["node_types_dir"])

    env_enforce = os.environ.get(ENV_ENFORCE_READ_ONLY)
    if env_enforce is not None:
        config.enforce_read_only = _parse_flag(env_enforce)
    env_dir = os.environ.get(ENV_NODE_TYPES_DIR)
    if env_dir:
        config.node_types_dir = Path(env_dir)

    return config


def save_config(config: EditorConfig, config_path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = config_path or get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
