# src/monitoring/logging_config.py
"""
Central logging configuration for the harvest tools.

Call configure_logging() from your main entrypoint once, for example:

    from monitoring.logging_config import configure_logging
    configure_logging("DEBUG", module_levels={"voxels": "WARNING"})

Planner modules log through logging.getLogger(__name__), so per-package
levels ("harvest", "harvest.large_tree", "voxels") can be tuned here.
"""

from __future__ import annotations

import logging
import sys
from typing import Mapping, Optional, Union

LevelLike = Union[int, str]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _as_level(level: LevelLike) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {level!r}")
    return value


def configure_logging(
    level: LevelLike = logging.INFO,
    module_levels: Optional[Mapping[str, LevelLike]] = None,
) -> None:
    """
    Configure root logging if no handlers are attached yet.

    Args:
        level: root level, as int or name ("INFO", "debug")
        module_levels: optional per-logger overrides, applied every call
    """
    for name, module_level in (module_levels or {}).items():
        logging.getLogger(name).setLevel(_as_level(module_level))

    root = logging.getLogger()

    # Don't duplicate handlers if someone already configured logging.
    if root.handlers:
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(_as_level(level))
