"""
Exception types raised while loading LDtk projects and levels.
"""

from pathlib import Path
from typing import Optional, Union


class LdtkError(Exception):
    """Base class for all loader errors."""
    pass


class ResourceNotFoundError(LdtkError, FileNotFoundError):
    """Raised when a project or level file cannot be opened for reading."""

    def __init__(self, location: Union[str, Path], reason: str = "file not found"):
        self.location = Path(location)
        self.reason = reason
        super().__init__(f"Cannot open {self.location}: {reason}")


class DecodeError(LdtkError, ValueError):
    """Raised when content is not valid JSON or does not match the schema.

    Attributes:
        path: JSON path of the offending value (e.g. ``$.levels[0].uid``)
        source: File the document was read from, if known
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        source: Optional[Union[str, Path]] = None,
    ):
        self.message = message
        self.path = path
        self.source = Path(source) if source is not None else None
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.path:
            text = f"{self.path}: {text}"
        if self.source is not None:
            text = f"{text} (in {self.source})"
        return text

    def with_source(self, source: Union[str, Path]) -> "DecodeError":
        """Return a copy of this error annotated with the source file."""
        return DecodeError(self.message, self.path, source)


class MissingExternalPathError(LdtkError):
    """Raised when a level stub has no ``externalRelPath`` to resolve."""

    def __init__(self, level_identifier: str, level_uid: int):
        self.level_identifier = level_identifier
        self.level_uid = level_uid
        super().__init__(
            f"Level '{level_identifier}' (uid {level_uid}) has no externalRelPath "
            "but the project uses external levels"
        )


class ConfigError(LdtkError):
    """Raised when the settings storage cannot be accessed."""
    pass
