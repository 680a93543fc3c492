#tests/test_monitoring_logging_config.py
"""
Tests for monitoring.logging_config.configure_logging.
"""

from __future__ import annotations

import logging

import pytest

from monitoring.logging_config import configure_logging


@pytest.fixture
def restore_loggers():
    names = ("harvest", "voxels")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_module_levels_accept_names_and_ints(restore_loggers):
    configure_logging(
        "INFO",
        module_levels={"harvest": "debug", "voxels": logging.WARNING},
    )

    assert logging.getLogger("harvest").level == logging.DEBUG
    assert logging.getLogger("voxels").level == logging.WARNING


def test_module_levels_apply_when_root_is_already_configured(restore_loggers):
    configure_logging(module_levels={"harvest": "ERROR"})
    configure_logging(module_levels={"harvest": "WARNING"})

    assert logging.getLogger("harvest").level == logging.WARNING


def test_unknown_level_name_raises(restore_loggers):
    with pytest.raises(ValueError):
        configure_logging(module_levels={"harvest": "LOUD"})
