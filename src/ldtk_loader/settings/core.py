"""
Core settings management for ldtk_loader.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from PySide6.QtCore import QSettings

from ..errors import ConfigError
from .migration import CONFIG_VERSION, SettingsMigrator
from .validation import SettingsValidator, ValidationResult
from .paths import PathSettings
from .logging import LoggingSettings

logger = logging.getLogger(__name__)

ORGANIZATION = "ldtk_loader"
APPLICATION = "ldtk_loader"


class LoaderSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to settings with cross-platform storage
    and validation.
    """

    def __init__(self, profile: str = "default", qsettings: Optional[QSettings] = None):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            qsettings: Storage to use instead of the per-user native one
        """
        self.settings = qsettings if qsettings is not None else QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile

        # Profile acts as a group: ldtk_loader/ldtk_loader/default/...
        self.settings.beginGroup(profile)

        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        self._migrator.ensure_version()
        if self.settings.status() == QSettings.Status.AccessError:
            raise ConfigError(f"Cannot access settings storage: {self.settings.fileName()}")

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    @classmethod
    def from_ini(cls, path: Union[str, Path], profile: str = "default") -> "LoaderSettings":
        """Use an INI file as storage, e.g. for a portable install or tests."""
        return cls(profile, QSettings(str(path), QSettings.Format.IniFormat))

    # === SUBSYSTEM ACCESS ===

    @property
    def paths(self) -> PathSettings:
        """Access path settings subsystem."""
        return self._paths

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def version(self) -> str:
        """Get configuration version."""
        value = self.settings.value("app/version", CONFIG_VERSION)
        return str(value) if value is not None else CONFIG_VERSION

    # === PATH SETTINGS (DELEGATED) ===

    @property
    def recent_projects(self) -> List[str]:
        """Get list of recently loaded projects."""
        return self._paths.recent_projects

    def add_recent_project(self, file_path: Union[str, Path]) -> None:
        """Add project to recent list (max 10 items)."""
        self._paths.add_recent_project(file_path)

    def clear_recent_projects(self) -> None:
        self._paths.clear_recent_projects()

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        return self._logging.console_logging

    @property
    def console_log_level(self) -> str:
        return self._logging.console_log_level

    @property
    def console_use_colors(self) -> bool:
        return self._logging.console_use_colors

    @property
    def file_logging(self) -> bool:
        return self._logging.file_logging

    @property
    def log_file_path(self) -> str:
        return self._logging.log_file_path

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    def get_settings_file_path(self) -> str:
        """Get path to the settings storage."""
        return self.settings.fileName()
