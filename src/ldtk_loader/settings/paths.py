"""
Path-related settings for ldtk_loader.
"""

from pathlib import Path
from typing import List, Optional, Union, TYPE_CHECKING, cast

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

MAX_RECENT_PROJECTS = 10


class PathSettings:
    """Manages path-related settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """Type-safe list retrieval from settings."""
        if default is None:
            default = []
        value = self.settings.value(key, default)
        if isinstance(value, list):
            return [
                str(item) if item is not None else ""
                for item in cast(list[object], value)
            ]
        # INI storage hands back single-item lists as a plain string
        if isinstance(value, str):
            return [value] if value else []
        return default

    @property
    def recent_projects(self) -> List[str]:
        """Get list of recently loaded project files, most recent first."""
        return self._get_list("paths/recent_projects", [])

    def add_recent_project(self, file_path: Union[str, Path]) -> None:
        """Add project to recent list (max 10 items)."""
        recent = self.recent_projects
        file_str = str(file_path)

        if file_str in recent:
            recent.remove(file_str)

        recent.insert(0, file_str)
        recent = recent[:MAX_RECENT_PROJECTS]

        self.settings.setValue("paths/recent_projects", recent)
        self.settings.sync()

    def set_recent_projects(self, projects: List[str]) -> None:
        """Replace the recent list wholesale."""
        self.settings.setValue("paths/recent_projects", list(projects))
        self.settings.sync()

    def clear_recent_projects(self) -> None:
        """Clear recent projects list."""
        self.settings.remove("paths/recent_projects")
        self.settings.sync()
