"""
Settings version stamping for ldtk_loader.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

# Layout version of the stored keys
CONFIG_VERSION = "1.0"


class SettingsMigrator:
    """Stamps new configurations and reports ones written by another layout."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        stored_version = str(self.settings.value("app/version", "") or "")

        if not stored_version:
            self.settings.setValue("app/version", CONFIG_VERSION)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif stored_version != CONFIG_VERSION:
            # Keys are read as stored; unknown ones fall back to defaults
            logger.warning(
                f"Configuration version {stored_version} differs from {CONFIG_VERSION}, "
                "leaving it unchanged"
            )
