"""
Settings validation system for ldtk_loader.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, TYPE_CHECKING

from .logging import VALID_LEVELS

if TYPE_CHECKING:
    from .core import LoaderSettings

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "LoaderSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        level = self.settings.logging.console_log_level
        if level.upper() not in VALID_LEVELS:
            errors.append(f"Invalid console log level: {level}")

        # Drop recent projects that no longer exist
        recent = self.settings.paths.recent_projects
        valid_recent: List[str] = []
        for file_path in recent:
            if Path(file_path).is_file():
                valid_recent.append(file_path)
            else:
                warnings.append(f"Recent project no longer exists: {file_path}")

        if len(valid_recent) != len(recent):
            self.settings.paths.set_recent_projects(valid_recent)
            logger.debug(f"Pruned {len(recent) - len(valid_recent)} stale recent project(s)")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
