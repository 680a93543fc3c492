# src/voxels/testing/__init__.py
"""Fakes for unit tests that need a world."""

from __future__ import annotations

from .fakes import FakeWorld

__all__ = ["FakeWorld"]
