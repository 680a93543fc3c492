# src/harvest/config.py
"""
Planner configuration.

HarvestConfig carries the knobs the planner is constructed with: which
logs count as trunk (optionally one species) and whether to replant. The
scan bounds are exposed for tests and unusual worlds but default to the
values the heuristics were tuned with.

load_harvest_config() reads the "harvest" section of config/harvest.yaml.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from voxels.block_sets import WoodType


# Default config directory; tests monkeypatch this to point at a temp dir.
CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

DEFAULT_CONFIG_FILE = "harvest.yaml"


@dataclass
class HarvestConfig:
    """
    Configuration knobs for TreeHarvestPlanner.

    wood_type:
        Only cut this species. None cuts every log type.
    replant:
        Queue a sapling after felling a single-trunk tree.
    tree_height:
        Exclusive upper bound of the vertical trunk scan above a destination.
    large_tree_min_height:
        A 2x2 trunk counts as a large tree when it is taller than this.
    world_height:
        Upper bound for the large-tree height scan.
    """

    wood_type: Optional[WoodType] = None
    replant: bool = False
    tree_height: int = 7
    large_tree_min_height: int = 3
    world_height: int = 255

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "HarvestConfig":
        wood = data.get("wood_type")
        cfg = cls(
            wood_type=WoodType.parse(str(wood)) if wood else None,
            replant=bool(data.get("replant", False)),
            tree_height=int(data.get("tree_height", 7)),
            large_tree_min_height=int(data.get("large_tree_min_height", 3)),
            world_height=int(data.get("world_height", 255)),
        )
        if cfg.tree_height < 2:
            raise ValueError("tree_height must be at least 2.")
        return cfg


def load_harvest_config(path: Optional[Path] = None) -> HarvestConfig:
    """
    Load HarvestConfig from YAML.

    `path` defaults to CONFIG_DIR/harvest.yaml. A missing file yields the
    defaults; a malformed one raises ValueError.
    """
    if path is None:
        path = CONFIG_DIR / DEFAULT_CONFIG_FILE
    if not path.exists():
        return HarvestConfig()

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return HarvestConfig()
    if not isinstance(data, dict):
        raise ValueError(f"YAML config {path} must be a mapping at top level.")

    section = data.get("harvest", {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'harvest' section in {path} must be a mapping.")
    return HarvestConfig.from_mapping(section)


__all__ = ["HarvestConfig", "load_harvest_config"]
