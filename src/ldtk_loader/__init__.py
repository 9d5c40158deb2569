"""
ldtk_loader: typed loading of LDtk (Level Designer Toolkit) projects.

Loads a project file, and when it is saved with external levels, every
level file next to it:

    from ldtk_loader import Level, Project

    project = Project.load("world.ldtk")          # project + external levels
    project = Project.load_project("world.ldtk")  # project file only
    level = Level.load("world/Level_0.ldtkl")     # one external level file
"""

__version__ = "0.3.0"

from .errors import (
    ConfigError,
    DecodeError,
    LdtkError,
    MissingExternalPathError,
    ResourceNotFoundError,
)
from .loader import (
    LdtkJson,
    LdtkLoader,
    clear_levels,
    find_level_by_uid,
    load_full_project,
    load_level,
    load_project,
    resolve_external_levels,
)
from .schema import (
    SCHEMA_VERSION,
    Definitions,
    EntityInstance,
    FieldInstance,
    FieldValue,
    LayerInstance,
    LayerType,
    Level,
    LevelState,
    Project,
    ProjectLevelState,
    World,
)

__all__ = [
    "SCHEMA_VERSION",

    # Loading
    "LdtkLoader",
    "load_project",
    "load_full_project",
    "load_level",
    "resolve_external_levels",
    "find_level_by_uid",
    "clear_levels",
    "LdtkJson",

    # Errors
    "LdtkError",
    "ResourceNotFoundError",
    "DecodeError",
    "MissingExternalPathError",
    "ConfigError",

    # Data models
    "Project",
    "Level",
    "World",
    "LevelState",
    "ProjectLevelState",
    "Definitions",
    "LayerType",
    "LayerInstance",
    "EntityInstance",
    "FieldInstance",
    "FieldValue",
]
