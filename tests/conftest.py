# tests/conftest.py

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for test imports like `import voxels`, `import harvest`.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from voxels.block_sets import StandardBlockSets  # noqa: E402
from voxels.registry import BlockRegistry, load_block_registry  # noqa: E402
from voxels.testing import FakeWorld  # noqa: E402

GROUND_Y = 9


@pytest.fixture
def registry() -> BlockRegistry:
    return load_block_registry()


@pytest.fixture
def block_sets(registry: BlockRegistry) -> StandardBlockSets:
    return StandardBlockSets.from_registry(registry)


@pytest.fixture
def world(registry: BlockRegistry) -> FakeWorld:
    """Flat dirt floor at y=9 spanning x, z in -8..8; air everywhere else."""
    w = FakeWorld(registry)
    w.fill((-8, GROUND_Y, -8), (8, GROUND_Y, 8), "dirt")
    return w
