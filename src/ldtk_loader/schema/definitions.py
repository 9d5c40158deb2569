"""
Project-wide definitions: layers, entities, enums and tilesets.

Instances reference these records by uid only; use the lookup helpers on
``Definitions`` to follow a reference.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .decoding import (
    JsonObject,
    enum_value,
    get_bool,
    get_enum,
    get_float,
    get_int,
    get_int_list,
    get_list,
    get_objects,
    get_opt_enum,
    get_opt_int,
    get_opt_int_list,
    get_opt_object,
    get_opt_str,
    get_str,
    get_str_list,
)
from .fields import FieldDefinition, TilesetRect
from .layers import LayerType


# =============================================================================
# Layer definitions
# =============================================================================

class Checker(Enum):
    NONE = "None"
    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"


class TileMode(Enum):
    SINGLE = "Single"
    STAMP = "Stamp"


@dataclass
class IntGridValueDefinition:
    value: int
    color: str
    identifier: Optional[str] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "IntGridValueDefinition":
        return cls(
            value=get_int(data, "value", path),
            color=get_str(data, "color", path),
            identifier=get_opt_str(data, "identifier", path),
        )

    def to_dict(self) -> JsonObject:
        return {"value": self.value, "color": self.color, "identifier": self.identifier}


@dataclass
class AutoLayerRuleDefinition:
    """Pattern rule producing tiles in an auto layer."""
    uid: int
    active: bool
    size: int
    tile_ids: list[int]
    chance: float
    break_on_match: bool
    pattern: list[int]
    flip_x: bool
    flip_y: bool
    x_modulo: int
    y_modulo: int
    x_offset: int
    y_offset: int
    checker: Checker
    tile_mode: TileMode
    pivot_x: float
    pivot_y: float
    perlin_active: bool
    perlin_seed: float
    perlin_scale: float
    perlin_octaves: float
    out_of_bounds_value: Optional[int] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "AutoLayerRuleDefinition":
        return cls(
            uid=get_int(data, "uid", path),
            active=get_bool(data, "active", path),
            size=get_int(data, "size", path),
            tile_ids=get_int_list(data, "tileIds", path),
            chance=get_float(data, "chance", path),
            break_on_match=get_bool(data, "breakOnMatch", path),
            pattern=get_int_list(data, "pattern", path),
            flip_x=get_bool(data, "flipX", path),
            flip_y=get_bool(data, "flipY", path),
            x_modulo=get_int(data, "xModulo", path),
            y_modulo=get_int(data, "yModulo", path),
            x_offset=get_int(data, "xOffset", path),
            y_offset=get_int(data, "yOffset", path),
            checker=get_enum(data, "checker", path, Checker),
            tile_mode=get_enum(data, "tileMode", path, TileMode),
            pivot_x=get_float(data, "pivotX", path),
            pivot_y=get_float(data, "pivotY", path),
            perlin_active=get_bool(data, "perlinActive", path),
            perlin_seed=get_float(data, "perlinSeed", path),
            perlin_scale=get_float(data, "perlinScale", path),
            perlin_octaves=get_float(data, "perlinOctaves", path),
            out_of_bounds_value=get_opt_int(data, "outOfBoundsValue", path),
        )

    def to_dict(self) -> JsonObject:
        return {
            "uid": self.uid,
            "active": self.active,
            "size": self.size,
            "tileIds": list(self.tile_ids),
            "chance": self.chance,
            "breakOnMatch": self.break_on_match,
            "pattern": list(self.pattern),
            "flipX": self.flip_x,
            "flipY": self.flip_y,
            "xModulo": self.x_modulo,
            "yModulo": self.y_modulo,
            "xOffset": self.x_offset,
            "yOffset": self.y_offset,
            "checker": enum_value(self.checker),
            "tileMode": enum_value(self.tile_mode),
            "pivotX": self.pivot_x,
            "pivotY": self.pivot_y,
            "perlinActive": self.perlin_active,
            "perlinSeed": self.perlin_seed,
            "perlinScale": self.perlin_scale,
            "perlinOctaves": self.perlin_octaves,
            "outOfBoundsValue": self.out_of_bounds_value,
        }


@dataclass
class AutoLayerRuleGroup:
    uid: int
    name: str
    active: bool
    is_optional: bool
    rules: list[AutoLayerRuleDefinition] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "AutoLayerRuleGroup":
        return cls(
            uid=get_int(data, "uid", path),
            name=get_str(data, "name", path),
            active=get_bool(data, "active", path),
            is_optional=get_bool(data, "isOptional", path),
            rules=get_objects(data, "rules", path, AutoLayerRuleDefinition.from_dict),
        )

    def to_dict(self) -> JsonObject:
        return {
            "uid": self.uid,
            "name": self.name,
            "active": self.active,
            "isOptional": self.is_optional,
            "rules": [r.to_dict() for r in self.rules],
        }


@dataclass
class LayerDefinition:
    identifier: str
    uid: int
    layer_type: LayerType
    grid_size: int
    guide_grid_wid: int
    guide_grid_hei: int
    display_opacity: float
    inactive_opacity: float
    hide_in_list: bool
    hide_fields_when_inactive: bool
    px_offset_x: int
    px_offset_y: int
    parallax_factor_x: float
    parallax_factor_y: float
    parallax_scaling: bool
    tile_pivot_x: float
    tile_pivot_y: float
    int_grid_values: list[IntGridValueDefinition] = field(default_factory=list)
    auto_rule_groups: list[AutoLayerRuleGroup] = field(default_factory=list)
    required_tags: list[str] = field(default_factory=list)
    excluded_tags: list[str] = field(default_factory=list)
    auto_source_layer_def_uid: Optional[int] = None
    auto_tileset_def_uid: Optional[int] = None
    tileset_def_uid: Optional[int] = None
    doc: Optional[str] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "LayerDefinition":
        return cls(
            identifier=get_str(data, "identifier", path),
            uid=get_int(data, "uid", path),
            layer_type=get_enum(data, "__type", path, LayerType),
            grid_size=get_int(data, "gridSize", path),
            guide_grid_wid=get_int(data, "guideGridWid", path),
            guide_grid_hei=get_int(data, "guideGridHei", path),
            display_opacity=get_float(data, "displayOpacity", path),
            inactive_opacity=get_float(data, "inactiveOpacity", path),
            hide_in_list=get_bool(data, "hideInList", path),
            hide_fields_when_inactive=get_bool(data, "hideFieldsWhenInactive", path),
            px_offset_x=get_int(data, "pxOffsetX", path),
            px_offset_y=get_int(data, "pxOffsetY", path),
            parallax_factor_x=get_float(data, "parallaxFactorX", path),
            parallax_factor_y=get_float(data, "parallaxFactorY", path),
            parallax_scaling=get_bool(data, "parallaxScaling", path),
            tile_pivot_x=get_float(data, "tilePivotX", path),
            tile_pivot_y=get_float(data, "tilePivotY", path),
            int_grid_values=get_objects(
                data, "intGridValues", path, IntGridValueDefinition.from_dict
            ),
            auto_rule_groups=get_objects(
                data, "autoRuleGroups", path, AutoLayerRuleGroup.from_dict
            ),
            required_tags=get_str_list(data, "requiredTags", path),
            excluded_tags=get_str_list(data, "excludedTags", path),
            auto_source_layer_def_uid=get_opt_int(data, "autoSourceLayerDefUid", path),
            auto_tileset_def_uid=get_opt_int(data, "autoTilesetDefUid", path),
            tileset_def_uid=get_opt_int(data, "tilesetDefUid", path),
            doc=get_opt_str(data, "doc", path),
        )

    def get_int_grid_value(self, value: int) -> Optional[IntGridValueDefinition]:
        for definition in self.int_grid_values:
            if definition.value == value:
                return definition
        return None

    def to_dict(self) -> JsonObject:
        return {
            "__type": self.layer_type.value,
            "type": self.layer_type.value,
            "identifier": self.identifier,
            "uid": self.uid,
            "gridSize": self.grid_size,
            "guideGridWid": self.guide_grid_wid,
            "guideGridHei": self.guide_grid_hei,
            "displayOpacity": self.display_opacity,
            "inactiveOpacity": self.inactive_opacity,
            "hideInList": self.hide_in_list,
            "hideFieldsWhenInactive": self.hide_fields_when_inactive,
            "pxOffsetX": self.px_offset_x,
            "pxOffsetY": self.px_offset_y,
            "parallaxFactorX": self.parallax_factor_x,
            "parallaxFactorY": self.parallax_factor_y,
            "parallaxScaling": self.parallax_scaling,
            "tilePivotX": self.tile_pivot_x,
            "tilePivotY": self.tile_pivot_y,
            "intGridValues": [v.to_dict() for v in self.int_grid_values],
            "autoRuleGroups": [g.to_dict() for g in self.auto_rule_groups],
            "requiredTags": list(self.required_tags),
            "excludedTags": list(self.excluded_tags),
            "autoSourceLayerDefUid": self.auto_source_layer_def_uid,
            "autoTilesetDefUid": self.auto_tileset_def_uid,
            "tilesetDefUid": self.tileset_def_uid,
            "doc": self.doc,
        }


# =============================================================================
# Entity definitions
# =============================================================================

class RenderMode(Enum):
    CROSS = "Cross"
    ELLIPSE = "Ellipse"
    RECTANGLE = "Rectangle"
    TILE = "Tile"


class TileRenderMode(Enum):
    COVER = "Cover"
    FIT_INSIDE = "FitInside"
    FULL_SIZE_CROPPED = "FullSizeCropped"
    FULL_SIZE_UNCROPPED = "FullSizeUncropped"
    NINE_SLICE = "NineSlice"
    REPEAT = "Repeat"
    STRETCH = "Stretch"


class LimitBehavior(Enum):
    DISCARD_OLD_ONES = "DiscardOldOnes"
    MOVE_LAST_ONE = "MoveLastOne"
    PREVENT_ADDING = "PreventAdding"


class LimitScope(Enum):
    PER_LAYER = "PerLayer"
    PER_LEVEL = "PerLevel"
    PER_WORLD = "PerWorld"


@dataclass
class EntityDefinition:
    identifier: str
    uid: int
    width: int
    height: int
    color: str
    render_mode: RenderMode
    tile_render_mode: TileRenderMode
    tile_opacity: float
    fill_opacity: float
    line_opacity: float
    hollow: bool
    limit_behavior: LimitBehavior
    limit_scope: LimitScope
    max_count: int
    pivot_x: float
    pivot_y: float
    resizable_x: bool
    resizable_y: bool
    keep_aspect_ratio: bool
    show_name: bool
    tags: list[str] = field(default_factory=list)
    nine_slice_borders: list[int] = field(default_factory=list)
    field_defs: list[FieldDefinition] = field(default_factory=list)
    tile_rect: Optional[TilesetRect] = None
    tileset_id: Optional[int] = None
    doc: Optional[str] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "EntityDefinition":
        return cls(
            identifier=get_str(data, "identifier", path),
            uid=get_int(data, "uid", path),
            width=get_int(data, "width", path),
            height=get_int(data, "height", path),
            color=get_str(data, "color", path),
            render_mode=get_enum(data, "renderMode", path, RenderMode),
            tile_render_mode=get_enum(data, "tileRenderMode", path, TileRenderMode),
            tile_opacity=get_float(data, "tileOpacity", path),
            fill_opacity=get_float(data, "fillOpacity", path),
            line_opacity=get_float(data, "lineOpacity", path),
            hollow=get_bool(data, "hollow", path),
            limit_behavior=get_enum(data, "limitBehavior", path, LimitBehavior),
            limit_scope=get_enum(data, "limitScope", path, LimitScope),
            max_count=get_int(data, "maxCount", path),
            pivot_x=get_float(data, "pivotX", path),
            pivot_y=get_float(data, "pivotY", path),
            resizable_x=get_bool(data, "resizableX", path),
            resizable_y=get_bool(data, "resizableY", path),
            keep_aspect_ratio=get_bool(data, "keepAspectRatio", path),
            show_name=get_bool(data, "showName", path),
            tags=get_str_list(data, "tags", path),
            nine_slice_borders=get_int_list(data, "nineSliceBorders", path),
            field_defs=get_objects(data, "fieldDefs", path, FieldDefinition.from_dict),
            tile_rect=get_opt_object(data, "tileRect", path, TilesetRect.from_dict),
            tileset_id=get_opt_int(data, "tilesetId", path),
            doc=get_opt_str(data, "doc", path),
        )

    def get_field_def(self, identifier: str) -> Optional[FieldDefinition]:
        for field_def in self.field_defs:
            if field_def.identifier == identifier:
                return field_def
        return None

    def to_dict(self) -> JsonObject:
        return {
            "identifier": self.identifier,
            "uid": self.uid,
            "width": self.width,
            "height": self.height,
            "color": self.color,
            "renderMode": enum_value(self.render_mode),
            "tileRenderMode": enum_value(self.tile_render_mode),
            "tileOpacity": self.tile_opacity,
            "fillOpacity": self.fill_opacity,
            "lineOpacity": self.line_opacity,
            "hollow": self.hollow,
            "limitBehavior": enum_value(self.limit_behavior),
            "limitScope": enum_value(self.limit_scope),
            "maxCount": self.max_count,
            "pivotX": self.pivot_x,
            "pivotY": self.pivot_y,
            "resizableX": self.resizable_x,
            "resizableY": self.resizable_y,
            "keepAspectRatio": self.keep_aspect_ratio,
            "showName": self.show_name,
            "tags": list(self.tags),
            "nineSliceBorders": list(self.nine_slice_borders),
            "fieldDefs": [f.to_dict() for f in self.field_defs],
            "tileRect": self.tile_rect.to_dict() if self.tile_rect else None,
            "tilesetId": self.tileset_id,
            "doc": self.doc,
        }


# =============================================================================
# Enum definitions
# =============================================================================

@dataclass
class EnumValueDefinition:
    id: str
    color: int
    tile_id: Optional[int] = None
    tile_src_rect: Optional[list[int]] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "EnumValueDefinition":
        return cls(
            id=get_str(data, "id", path),
            color=get_int(data, "color", path),
            tile_id=get_opt_int(data, "tileId", path),
            tile_src_rect=get_opt_int_list(data, "__tileSrcRect", path),
        )

    def to_dict(self) -> JsonObject:
        return {
            "id": self.id,
            "color": self.color,
            "tileId": self.tile_id,
            "__tileSrcRect": (
                list(self.tile_src_rect) if self.tile_src_rect is not None else None
            ),
        }


@dataclass
class EnumDefinition:
    identifier: str
    uid: int
    values: list[EnumValueDefinition] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    icon_tileset_uid: Optional[int] = None
    external_rel_path: Optional[str] = None
    external_file_checksum: Optional[str] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "EnumDefinition":
        return cls(
            identifier=get_str(data, "identifier", path),
            uid=get_int(data, "uid", path),
            values=get_objects(data, "values", path, EnumValueDefinition.from_dict),
            tags=get_str_list(data, "tags", path),
            icon_tileset_uid=get_opt_int(data, "iconTilesetUid", path),
            external_rel_path=get_opt_str(data, "externalRelPath", path),
            external_file_checksum=get_opt_str(data, "externalFileChecksum", path),
        )

    @property
    def value_ids(self) -> list[str]:
        return [v.id for v in self.values]

    def to_dict(self) -> JsonObject:
        return {
            "identifier": self.identifier,
            "uid": self.uid,
            "values": [v.to_dict() for v in self.values],
            "tags": list(self.tags),
            "iconTilesetUid": self.icon_tileset_uid,
            "externalRelPath": self.external_rel_path,
            "externalFileChecksum": self.external_file_checksum,
        }


# =============================================================================
# Tileset definitions
# =============================================================================

class EmbedAtlas(Enum):
    LDTK_ICONS = "LdtkIcons"


@dataclass
class EnumTagValue:
    enum_value_id: str
    tile_ids: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "EnumTagValue":
        return cls(
            enum_value_id=get_str(data, "enumValueId", path),
            tile_ids=get_int_list(data, "tileIds", path),
        )

    def to_dict(self) -> JsonObject:
        return {"enumValueId": self.enum_value_id, "tileIds": list(self.tile_ids)}


@dataclass
class TileCustomMetadata:
    tile_id: int
    data: str

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "TileCustomMetadata":
        return cls(tile_id=get_int(data, "tileId", path), data=get_str(data, "data", path))

    def to_dict(self) -> JsonObject:
        return {"tileId": self.tile_id, "data": self.data}


@dataclass
class TilesetDefinition:
    identifier: str
    uid: int
    px_wid: int
    px_hei: int
    tile_grid_size: int
    spacing: int
    padding: int
    c_wid: int
    c_hei: int
    tags: list[str] = field(default_factory=list)
    enum_tags: list[EnumTagValue] = field(default_factory=list)
    custom_data: list[TileCustomMetadata] = field(default_factory=list)
    saved_selections: list[Any] = field(default_factory=list)
    rel_path: Optional[str] = None
    embed_atlas: Optional[EmbedAtlas] = None
    tags_source_enum_uid: Optional[int] = None
    cached_pixel_data: Optional[JsonObject] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "TilesetDefinition":
        return cls(
            identifier=get_str(data, "identifier", path),
            uid=get_int(data, "uid", path),
            px_wid=get_int(data, "pxWid", path),
            px_hei=get_int(data, "pxHei", path),
            tile_grid_size=get_int(data, "tileGridSize", path),
            spacing=get_int(data, "spacing", path),
            padding=get_int(data, "padding", path),
            c_wid=get_int(data, "__cWid", path),
            c_hei=get_int(data, "__cHei", path),
            tags=get_str_list(data, "tags", path),
            enum_tags=get_objects(data, "enumTags", path, EnumTagValue.from_dict),
            custom_data=get_objects(data, "customData", path, TileCustomMetadata.from_dict),
            saved_selections=list(get_list(data, "savedSelections", path)),
            rel_path=get_opt_str(data, "relPath", path),
            embed_atlas=get_opt_enum(data, "embedAtlas", path, EmbedAtlas),
            tags_source_enum_uid=get_opt_int(data, "tagsSourceEnumUid", path),
            cached_pixel_data=get_opt_object(data, "cachedPixelData", path, lambda d, _p: dict(d)),
        )

    def tile_position(self, tile_id: int) -> tuple[int, int]:
        """Top-left pixel of a tile id inside the tileset image."""
        cx = tile_id % self.c_wid
        cy = tile_id // self.c_wid
        return (
            self.padding + cx * (self.tile_grid_size + self.spacing),
            self.padding + cy * (self.tile_grid_size + self.spacing),
        )

    def get_custom_data(self, tile_id: int) -> Optional[str]:
        for entry in self.custom_data:
            if entry.tile_id == tile_id:
                return entry.data
        return None

    def to_dict(self) -> JsonObject:
        return {
            "identifier": self.identifier,
            "uid": self.uid,
            "pxWid": self.px_wid,
            "pxHei": self.px_hei,
            "tileGridSize": self.tile_grid_size,
            "spacing": self.spacing,
            "padding": self.padding,
            "__cWid": self.c_wid,
            "__cHei": self.c_hei,
            "tags": list(self.tags),
            "enumTags": [t.to_dict() for t in self.enum_tags],
            "customData": [c.to_dict() for c in self.custom_data],
            "savedSelections": list(self.saved_selections),
            "relPath": self.rel_path,
            "embedAtlas": enum_value(self.embed_atlas),
            "tagsSourceEnumUid": self.tags_source_enum_uid,
            "cachedPixelData": self.cached_pixel_data,
        }


# =============================================================================
# Definitions container
# =============================================================================

@dataclass
class Definitions:
    """All definitions of a project, each collection keyed by uid."""
    layers: list[LayerDefinition] = field(default_factory=list)
    entities: list[EntityDefinition] = field(default_factory=list)
    enums: list[EnumDefinition] = field(default_factory=list)
    external_enums: list[EnumDefinition] = field(default_factory=list)
    tilesets: list[TilesetDefinition] = field(default_factory=list)
    level_fields: list[FieldDefinition] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "Definitions":
        return cls(
            layers=get_objects(data, "layers", path, LayerDefinition.from_dict),
            entities=get_objects(data, "entities", path, EntityDefinition.from_dict),
            enums=get_objects(data, "enums", path, EnumDefinition.from_dict),
            external_enums=get_objects(data, "externalEnums", path, EnumDefinition.from_dict),
            tilesets=get_objects(data, "tilesets", path, TilesetDefinition.from_dict),
            level_fields=get_objects(data, "levelFields", path, FieldDefinition.from_dict),
        )

    def get_layer(self, uid: int) -> Optional[LayerDefinition]:
        return next((d for d in self.layers if d.uid == uid), None)

    def get_entity(self, uid: int) -> Optional[EntityDefinition]:
        return next((d for d in self.entities if d.uid == uid), None)

    def get_enum(self, uid: int) -> Optional[EnumDefinition]:
        """Look up an enum in both local and external enums."""
        return next((d for d in self.enums + self.external_enums if d.uid == uid), None)

    def get_enum_by_identifier(self, identifier: str) -> Optional[EnumDefinition]:
        return next(
            (d for d in self.enums + self.external_enums if d.identifier == identifier),
            None,
        )

    def get_tileset(self, uid: int) -> Optional[TilesetDefinition]:
        return next((d for d in self.tilesets if d.uid == uid), None)

    def to_dict(self) -> JsonObject:
        return {
            "layers": [d.to_dict() for d in self.layers],
            "entities": [d.to_dict() for d in self.entities],
            "enums": [d.to_dict() for d in self.enums],
            "externalEnums": [d.to_dict() for d in self.external_enums],
            "tilesets": [d.to_dict() for d in self.tilesets],
            "levelFields": [d.to_dict() for d in self.level_fields],
        }
