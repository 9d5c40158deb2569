"""
Settings package for ldtk_loader.

Type-safe configuration stored through Qt's QSettings.

Usage:
    from ldtk_loader.settings import LoaderSettings

    settings = LoaderSettings()
    result = settings.validate()
"""

from .core import LoaderSettings
from .migration import CONFIG_VERSION
from .validation import ValidationResult
from .paths import PathSettings
from .logging import LoggingSettings

__all__ = [
    "LoaderSettings",
    "CONFIG_VERSION",
    "ValidationResult",
    "PathSettings",
    "LoggingSettings",
]
