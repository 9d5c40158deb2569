"""Shared fixtures for ldtk_loader tests."""

import logging
from pathlib import Path

import pytest

import ldtk_samples as samples
from ldtk_loader.settings import LoaderSettings
from ldtk_loader.utils.logging_config import CONSOLE_FORMAT, CSVFormatter


@pytest.fixture
def inline_project_path(tmp_path: Path) -> Path:
    """Project storing two levels inline."""
    data = samples.project([samples.level(0), samples.level(1)])
    return samples.write_json(tmp_path / "inline.ldtk", data)


@pytest.fixture
def external_project_path(tmp_path: Path) -> Path:
    """Project with three external level files, stubs in uid order 0, 5, 2."""
    return samples.write_external_project(tmp_path / "game", [0, 5, 2])


@pytest.fixture
def settings(tmp_path: Path) -> LoaderSettings:
    """Settings stored in a throwaway INI file."""
    return LoaderSettings.from_ini(tmp_path / "settings.ini")


@pytest.fixture
def restore_logging():
    """Remove the handlers installed by setup_logging after the test."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        formatter = handler.formatter
        if isinstance(formatter, CSVFormatter) or getattr(formatter, "_fmt", None) == CONSOLE_FORMAT:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
