"""
Root records of an LDtk document: Project, World and Level.

A Level has two shapes. Inside a project saved with external levels, each
entry of ``Project.levels`` is a stub: it names its file through
``external_rel_path`` and has ``layer_instances`` set to ``None``. Loading
that file yields the full Level. ``Level.state`` makes the difference
explicit, and ``Project.level_state`` summarises it for the whole project.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

import orjson

from ..errors import DecodeError
from .decoding import (
    ROOT,
    JsonObject,
    enum_value,
    get_bool,
    get_float,
    get_float_list,
    get_int,
    get_int_list,
    get_objects,
    get_opt_enum,
    get_opt_int,
    get_opt_object,
    get_opt_objects,
    get_opt_str,
    get_str,
    get_object,
    get_enum,
    get_list,
    to_enum,
    index_path,
    key_path,
)
from .definitions import Definitions
from .fields import FieldInstance
from .layers import LayerInstance

if TYPE_CHECKING:
    from ..loader import LdtkLoader

# Editor JSON version this model mirrors
SCHEMA_VERSION = "1.1.3"


# =============================================================================
# Enumerations
# =============================================================================

class WorldLayout(Enum):
    FREE = "Free"
    GRID_VANIA = "GridVania"
    LINEAR_HORIZONTAL = "LinearHorizontal"
    LINEAR_VERTICAL = "LinearVertical"


class IdentifierStyle(Enum):
    CAPITALIZE = "Capitalize"
    FREE = "Free"
    LOWERCASE = "Lowercase"
    UNCAPITALIZE = "Uncapitalize"


class ImageExportMode(Enum):
    NONE = "None"
    ONE_IMAGE_PER_LAYER = "OneImagePerLayer"
    ONE_IMAGE_PER_LEVEL = "OneImagePerLevel"
    LAYERS_AND_LEVELS = "LayersAndLevels"


class BgPos(Enum):
    CONTAIN = "Contain"
    COVER = "Cover"
    COVER_DIRTY = "CoverDirty"
    UNSCALED = "Unscaled"


class Flag(Enum):
    DISCARD_PRE_CSV_INT_GRID = "DiscardPreCsvIntGrid"
    EXPORT_PRE_CSV_INT_GRID_FORMAT = "ExportPreCsvIntGridFormat"
    IGNORE_BACKUP_SUGGEST = "IgnoreBackupSuggest"
    MULTI_WORLDS = "MultiWorlds"
    PREPEND_INDEX_TO_LEVEL_FILE_NAMES = "PrependIndexToLevelFileNames"
    USE_MULTILINES_TYPE = "UseMultilinesType"


class CommandWhen(Enum):
    AFTER_LOAD = "AfterLoad"
    AFTER_SAVE = "AfterSave"
    BEFORE_SAVE = "BeforeSave"
    MANUAL = "Manual"


class LevelState(Enum):
    """Whether a Level carries its layers or only points at its file."""
    STUB = "stub"
    FULL = "full"


class ProjectLevelState(Enum):
    """Where the levels of a project stand in the loading process.

    INLINE:    levels stored in the project file, fully populated
    STUB_ONLY: external levels not loaded yet (or only partly)
    RESOLVED:  external levels loaded, all entries fully populated
    """
    INLINE = "inline"
    STUB_ONLY = "stub_only"
    RESOLVED = "resolved"


# =============================================================================
# Level
# =============================================================================

@dataclass
class NeighbourLevel:
    level_iid: str
    dir: str
    level_uid: Optional[int] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "NeighbourLevel":
        return cls(
            level_iid=get_str(data, "levelIid", path),
            dir=get_str(data, "dir", path),
            level_uid=get_opt_int(data, "levelUid", path),
        )

    def to_dict(self) -> JsonObject:
        return {"levelIid": self.level_iid, "dir": self.dir, "levelUid": self.level_uid}


@dataclass
class LevelBackgroundPosition:
    """Computed placement of the level background image."""
    crop_rect: list[float]
    scale: list[float]
    top_left_px: list[int]

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "LevelBackgroundPosition":
        return cls(
            crop_rect=get_float_list(data, "cropRect", path),
            scale=get_float_list(data, "scale", path),
            top_left_px=get_int_list(data, "topLeftPx", path),
        )

    def to_dict(self) -> JsonObject:
        return {
            "cropRect": list(self.crop_rect),
            "scale": list(self.scale),
            "topLeftPx": list(self.top_left_px),
        }


@dataclass
class Level:
    """One level of the project.

    ``layer_instances`` is ``None`` when the level is a stub of an external
    level file; ``external_rel_path`` then names that file, relative to the
    project file's directory.
    """
    identifier: str
    iid: str
    uid: int
    world_x: int
    world_y: int
    world_depth: int
    px_wid: int
    px_hei: int
    bg_color: str
    smart_color: str
    use_auto_identifier: bool
    bg_pivot_x: float
    bg_pivot_y: float
    field_instances: list[FieldInstance] = field(default_factory=list)
    layer_instances: Optional[list[LayerInstance]] = None
    neighbours: list[NeighbourLevel] = field(default_factory=list)
    external_rel_path: Optional[str] = None
    bg_color_override: Optional[str] = None
    bg_rel_path: Optional[str] = None
    bg_pos: Optional[BgPos] = None
    bg_pos_info: Optional[LevelBackgroundPosition] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str = ROOT) -> "Level":
        """Decode a level object, stub or full."""
        return cls(
            identifier=get_str(data, "identifier", path),
            iid=get_str(data, "iid", path),
            uid=get_int(data, "uid", path),
            world_x=get_int(data, "worldX", path),
            world_y=get_int(data, "worldY", path),
            world_depth=get_int(data, "worldDepth", path),
            px_wid=get_int(data, "pxWid", path),
            px_hei=get_int(data, "pxHei", path),
            bg_color=get_str(data, "__bgColor", path),
            smart_color=get_str(data, "__smartColor", path),
            use_auto_identifier=get_bool(data, "useAutoIdentifier", path),
            bg_pivot_x=get_float(data, "bgPivotX", path),
            bg_pivot_y=get_float(data, "bgPivotY", path),
            field_instances=get_objects(data, "fieldInstances", path, FieldInstance.from_dict),
            layer_instances=get_opt_objects(
                data, "layerInstances", path, LayerInstance.from_dict
            ),
            neighbours=get_objects(data, "__neighbours", path, NeighbourLevel.from_dict),
            external_rel_path=get_opt_str(data, "externalRelPath", path),
            bg_color_override=get_opt_str(data, "bgColor", path),
            bg_rel_path=get_opt_str(data, "bgRelPath", path),
            bg_pos=get_opt_enum(data, "bgPos", path, BgPos),
            bg_pos_info=get_opt_object(data, "__bgPos", path, LevelBackgroundPosition.from_dict),
        )

    @classmethod
    def load(cls, location: Union[str, Path]) -> "Level":
        """Load a single external level file."""
        return _default_loader().load_level(location)

    @property
    def state(self) -> LevelState:
        return LevelState.STUB if self.layer_instances is None else LevelState.FULL

    @property
    def is_stub(self) -> bool:
        return self.state is LevelState.STUB

    def get_layer(self, identifier: str) -> Optional[LayerInstance]:
        """Return the first layer instance with this identifier."""
        for layer in self.layer_instances or []:
            if layer.identifier == identifier:
                return layer
        return None

    def get_field(self, identifier: str) -> Optional[FieldInstance]:
        for field_instance in self.field_instances:
            if field_instance.identifier == identifier:
                return field_instance
        return None

    def to_dict(self) -> JsonObject:
        return {
            "identifier": self.identifier,
            "iid": self.iid,
            "uid": self.uid,
            "worldX": self.world_x,
            "worldY": self.world_y,
            "worldDepth": self.world_depth,
            "pxWid": self.px_wid,
            "pxHei": self.px_hei,
            "__bgColor": self.bg_color,
            "__smartColor": self.smart_color,
            "useAutoIdentifier": self.use_auto_identifier,
            "bgPivotX": self.bg_pivot_x,
            "bgPivotY": self.bg_pivot_y,
            "fieldInstances": [f.to_dict() for f in self.field_instances],
            "layerInstances": (
                [layer.to_dict() for layer in self.layer_instances]
                if self.layer_instances is not None
                else None
            ),
            "__neighbours": [n.to_dict() for n in self.neighbours],
            "externalRelPath": self.external_rel_path,
            "bgColor": self.bg_color_override,
            "bgRelPath": self.bg_rel_path,
            "bgPos": enum_value(self.bg_pos),
            "__bgPos": self.bg_pos_info.to_dict() if self.bg_pos_info else None,
        }

    def to_json(self, indent: bool = False) -> bytes:
        return _dumps(self.to_dict(), indent)


# =============================================================================
# World
# =============================================================================

@dataclass
class World:
    """Group of levels, only used by projects with the MultiWorlds flag."""
    iid: str
    identifier: str
    world_grid_width: int
    world_grid_height: int
    world_layout: Optional[WorldLayout] = None
    levels: list[Level] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "World":
        return cls(
            iid=get_str(data, "iid", path),
            identifier=get_str(data, "identifier", path),
            world_grid_width=get_int(data, "worldGridWidth", path),
            world_grid_height=get_int(data, "worldGridHeight", path),
            world_layout=get_opt_enum(data, "worldLayout", path, WorldLayout),
            levels=get_objects(data, "levels", path, Level.from_dict),
        )

    def to_dict(self) -> JsonObject:
        return {
            "iid": self.iid,
            "identifier": self.identifier,
            "worldGridWidth": self.world_grid_width,
            "worldGridHeight": self.world_grid_height,
            "worldLayout": enum_value(self.world_layout),
            "levels": [level.to_dict() for level in self.levels],
        }


# =============================================================================
# Project
# =============================================================================

@dataclass
class CustomCommand:
    command: str
    when: CommandWhen

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "CustomCommand":
        return cls(
            command=get_str(data, "command", path),
            when=get_enum(data, "when", path, CommandWhen),
        )

    def to_dict(self) -> JsonObject:
        return {"command": self.command, "when": self.when.value}


@dataclass
class Project:
    """Root of an LDtk project file."""
    iid: str
    json_version: str
    app_build_id: float
    next_uid: int
    identifier_style: IdentifierStyle
    default_pivot_x: float
    default_pivot_y: float
    default_grid_size: int
    bg_color: str
    default_level_bg_color: str
    minify_json: bool
    external_levels: bool
    export_tiles: bool
    simplified_export: bool
    image_export_mode: ImageExportMode
    export_level_bg: bool
    backup_on_save: bool
    backup_limit: int
    level_name_pattern: str
    defs: Definitions
    levels: list[Level] = field(default_factory=list)
    worlds: list[World] = field(default_factory=list)
    flags: list[Flag] = field(default_factory=list)
    custom_commands: list[CustomCommand] = field(default_factory=list)
    world_layout: Optional[WorldLayout] = None
    world_grid_width: Optional[int] = None
    world_grid_height: Optional[int] = None
    default_level_width: Optional[int] = None
    default_level_height: Optional[int] = None
    png_file_pattern: Optional[str] = None
    tutorial_desc: Optional[str] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str = ROOT) -> "Project":
        flags_path = key_path(path, "flags")
        flags = [
            to_enum(raw, index_path(flags_path, i), Flag)
            for i, raw in enumerate(get_list(data, "flags", path))
        ]
        external_levels = get_bool(data, "externalLevels", path)
        levels = get_objects(data, "levels", path, Level.from_dict)
        if not external_levels:
            # Inline projects carry every level in full
            levels_path = key_path(path, "levels")
            for i, level in enumerate(levels):
                if level.is_stub:
                    raise DecodeError(
                        "level has no layerInstances but the project stores levels inline",
                        key_path(index_path(levels_path, i), "layerInstances"),
                    )
        return cls(
            iid=get_str(data, "iid", path),
            json_version=get_str(data, "jsonVersion", path),
            app_build_id=get_float(data, "appBuildId", path),
            next_uid=get_int(data, "nextUid", path),
            identifier_style=get_enum(data, "identifierStyle", path, IdentifierStyle),
            default_pivot_x=get_float(data, "defaultPivotX", path),
            default_pivot_y=get_float(data, "defaultPivotY", path),
            default_grid_size=get_int(data, "defaultGridSize", path),
            bg_color=get_str(data, "bgColor", path),
            default_level_bg_color=get_str(data, "defaultLevelBgColor", path),
            minify_json=get_bool(data, "minifyJson", path),
            external_levels=external_levels,
            export_tiles=get_bool(data, "exportTiles", path),
            simplified_export=get_bool(data, "simplifiedExport", path),
            image_export_mode=get_enum(data, "imageExportMode", path, ImageExportMode),
            export_level_bg=get_bool(data, "exportLevelBg", path),
            backup_on_save=get_bool(data, "backupOnSave", path),
            backup_limit=get_int(data, "backupLimit", path),
            level_name_pattern=get_str(data, "levelNamePattern", path),
            defs=get_object(data, "defs", path, Definitions.from_dict),
            levels=levels,
            worlds=get_objects(data, "worlds", path, World.from_dict),
            flags=flags,
            custom_commands=get_objects(data, "customCommands", path, CustomCommand.from_dict),
            world_layout=get_opt_enum(data, "worldLayout", path, WorldLayout),
            world_grid_width=get_opt_int(data, "worldGridWidth", path),
            world_grid_height=get_opt_int(data, "worldGridHeight", path),
            default_level_width=get_opt_int(data, "defaultLevelWidth", path),
            default_level_height=get_opt_int(data, "defaultLevelHeight", path),
            png_file_pattern=get_opt_str(data, "pngFilePattern", path),
            tutorial_desc=get_opt_str(data, "tutorialDesc", path),
        )

    # === LOADING ===

    @classmethod
    def load(cls, location: Union[str, Path]) -> "Project":
        """Load a project and, if needed, all of its external level files."""
        return _default_loader().load_full_project(location)

    @classmethod
    def load_project(cls, location: Union[str, Path]) -> "Project":
        """Load only the project file, leaving external level stubs as they are."""
        return _default_loader().load_project(location)

    def load_external_levels(self, location: Union[str, Path]) -> None:
        """Replace level stubs with the external level files next to ``location``."""
        _default_loader().resolve_external_levels(self, location)

    # === LEVEL ACCESS ===

    def clear_levels(self) -> None:
        """Drop all levels, e.g. before substituting fully loaded ones."""
        self.levels = []

    def get_level(self, uid: int) -> Optional[Level]:
        """Return the first level with this uid, or None."""
        for level in self.levels:
            if level.uid == uid:
                return level
        return None

    def get_level_by_identifier(self, identifier: str) -> Optional[Level]:
        for level in self.levels:
            if level.identifier == identifier:
                return level
        return None

    @property
    def level_state(self) -> ProjectLevelState:
        if not self.external_levels:
            return ProjectLevelState.INLINE
        if any(level.is_stub for level in self.levels):
            return ProjectLevelState.STUB_ONLY
        return ProjectLevelState.RESOLVED

    # === ENCODING ===

    def to_dict(self) -> JsonObject:
        return {
            "iid": self.iid,
            "jsonVersion": self.json_version,
            "appBuildId": self.app_build_id,
            "nextUid": self.next_uid,
            "identifierStyle": self.identifier_style.value,
            "defaultPivotX": self.default_pivot_x,
            "defaultPivotY": self.default_pivot_y,
            "defaultGridSize": self.default_grid_size,
            "bgColor": self.bg_color,
            "defaultLevelBgColor": self.default_level_bg_color,
            "minifyJson": self.minify_json,
            "externalLevels": self.external_levels,
            "exportTiles": self.export_tiles,
            "simplifiedExport": self.simplified_export,
            "imageExportMode": self.image_export_mode.value,
            "exportLevelBg": self.export_level_bg,
            "backupOnSave": self.backup_on_save,
            "backupLimit": self.backup_limit,
            "levelNamePattern": self.level_name_pattern,
            "defs": self.defs.to_dict(),
            "levels": [level.to_dict() for level in self.levels],
            "worlds": [world.to_dict() for world in self.worlds],
            "flags": [flag.value for flag in self.flags],
            "customCommands": [c.to_dict() for c in self.custom_commands],
            "worldLayout": enum_value(self.world_layout),
            "worldGridWidth": self.world_grid_width,
            "worldGridHeight": self.world_grid_height,
            "defaultLevelWidth": self.default_level_width,
            "defaultLevelHeight": self.default_level_height,
            "pngFilePattern": self.png_file_pattern,
            "tutorialDesc": self.tutorial_desc,
        }

    def to_json(self, indent: bool = False) -> bytes:
        return _dumps(self.to_dict(), indent)


def _dumps(data: JsonObject, indent: bool) -> bytes:
    return orjson.dumps(data, option=orjson.OPT_INDENT_2 if indent else 0)


def _default_loader() -> "LdtkLoader":
    # Deferred: the loader module imports this one
    from ..loader import default_loader

    return default_loader
