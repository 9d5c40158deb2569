"""
Field values attached to levels and entity instances.

A field instance carries a declared type name (``__type``) and a raw value
(``__value``). The type name selects exactly one ``FieldValue`` variant; a
value whose shape does not match its declared type fails to decode.

Supported type names:

- ``Int``, ``Float``, ``Bool``, ``String``, ``Multilines``, ``FilePath``,
  ``Color``, ``Point``, ``Tile``, ``EntityRef``
- ``LocalEnum.<Name>`` and ``ExternEnum.<Name>``
- ``Array<T>`` for any of the above

``null`` is accepted for every type and decodes to ``NullValue``.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, cast

from ..errors import DecodeError
from .decoding import (
    JsonObject,
    enum_value,
    expect_bool,
    expect_float,
    expect_int,
    expect_list,
    expect_object,
    expect_str,
    get_bool,
    get_enum,
    get_int,
    get_list,
    get_opt_float,
    get_opt_int,
    get_opt_object,
    get_opt_str,
    get_opt_str_list,
    get_str,
    get_str_list,
    index_path,
    key_path,
    type_name,
)


# =============================================================================
# Shared records
# =============================================================================

@dataclass(frozen=True)
class TilesetRect:
    """Rectangle of pixels inside a tileset image."""
    tileset_uid: int
    x: int
    y: int
    w: int
    h: int

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "TilesetRect":
        return cls(
            tileset_uid=get_int(data, "tilesetUid", path),
            x=get_int(data, "x", path),
            y=get_int(data, "y", path),
            w=get_int(data, "w", path),
            h=get_int(data, "h", path),
        )

    def to_dict(self) -> JsonObject:
        return {
            "tilesetUid": self.tileset_uid,
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
        }


# =============================================================================
# Field values
# =============================================================================

class FieldValue(ABC):
    """Base class of the field value variants."""

    @abstractmethod
    def to_json(self) -> Any:
        """Encode back to the editor's ``__value`` representation."""

    @property
    def is_null(self) -> bool:
        return False


@dataclass(frozen=True)
class NullValue(FieldValue):
    """Field without a value (nullable field left empty)."""

    def to_json(self) -> Any:
        return None

    @property
    def is_null(self) -> bool:
        return True


@dataclass(frozen=True)
class IntValue(FieldValue):
    value: int

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class FloatValue(FieldValue):
    value: float

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class BoolValue(FieldValue):
    value: bool

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class StringValue(FieldValue):
    """Text value for ``String``, ``Multilines`` and ``FilePath`` fields."""
    value: str

    def to_json(self) -> Any:
        return self.value


_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class ColorValue(FieldValue):
    """Color stored as ``#rrggbb``."""
    value: str

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (
            int(self.value[1:3], 16),
            int(self.value[3:5], 16),
            int(self.value[5:7], 16),
        )

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class PointValue(FieldValue):
    """Grid-based coordinate."""
    cx: int
    cy: int

    def to_json(self) -> Any:
        return {"cx": self.cx, "cy": self.cy}


@dataclass(frozen=True)
class EnumValue(FieldValue):
    """Reference to a value of a local or external enum."""
    enum_name: str
    value: str
    external: bool = False

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class TileValue(FieldValue):
    rect: TilesetRect

    def to_json(self) -> Any:
        return self.rect.to_dict()


@dataclass(frozen=True)
class EntityRefValue(FieldValue):
    """Reference to another entity instance, by iid."""
    entity_iid: str
    layer_iid: str
    level_iid: str
    world_iid: str

    def to_json(self) -> Any:
        return {
            "entityIid": self.entity_iid,
            "layerIid": self.layer_iid,
            "levelIid": self.level_iid,
            "worldIid": self.world_iid,
        }


@dataclass(frozen=True)
class ArrayValue(FieldValue):
    items: tuple[FieldValue, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> FieldValue:
        return self.items[index]

    def to_json(self) -> Any:
        return [item.to_json() for item in self.items]


# =============================================================================
# Type names
# =============================================================================

SCALAR_TYPES = frozenset({
    "Int",
    "Float",
    "Bool",
    "String",
    "Multilines",
    "FilePath",
    "Color",
    "Point",
    "Tile",
    "EntityRef",
})

LOCAL_ENUM_PREFIX = "LocalEnum."
EXTERN_ENUM_PREFIX = "ExternEnum."


@dataclass(frozen=True)
class FieldType:
    """Parsed form of a ``__type`` string."""
    base: str
    is_array: bool = False
    enum_name: Optional[str] = None
    external_enum: bool = False

    @classmethod
    def parse(cls, name: str, path: str) -> "FieldType":
        if name.startswith("Array<") and name.endswith(">"):
            inner = cls.parse(name[len("Array<"):-1], path)
            if inner.is_array:
                raise DecodeError(f"nested array field type '{name}'", path)
            return cls(inner.base, True, inner.enum_name, inner.external_enum)
        for prefix, external in ((LOCAL_ENUM_PREFIX, False), (EXTERN_ENUM_PREFIX, True)):
            if name.startswith(prefix) and len(name) > len(prefix):
                return cls("Enum", False, name[len(prefix):], external)
        if name in SCALAR_TYPES:
            return cls(name)
        raise DecodeError(f"unknown field type '{name}'", path)

    @property
    def element_type(self) -> "FieldType":
        return FieldType(self.base, False, self.enum_name, self.external_enum)


def decode_field_value(type_name_str: str, raw: Any, path: str) -> FieldValue:
    """Decode ``raw`` into the FieldValue variant selected by its type name."""
    field_type = FieldType.parse(type_name_str, path)
    return _decode_value(field_type, raw, path)


def _decode_value(field_type: FieldType, raw: Any, path: str) -> FieldValue:
    if raw is None:
        return NullValue()
    if field_type.is_array:
        element = field_type.element_type
        items = expect_list(raw, path)
        return ArrayValue(tuple(
            _decode_value(element, item, index_path(path, i))
            for i, item in enumerate(items)
        ))
    return _decode_scalar(field_type, raw, path)


def _decode_scalar(field_type: FieldType, raw: Any, path: str) -> FieldValue:
    base = field_type.base
    if base == "Int":
        return IntValue(expect_int(raw, path))
    if base == "Float":
        return FloatValue(expect_float(raw, path))
    if base == "Bool":
        return BoolValue(expect_bool(raw, path))
    if base in ("String", "Multilines", "FilePath"):
        return StringValue(expect_str(raw, path))
    if base == "Color":
        color = expect_str(raw, path)
        if not _COLOR_RE.match(color):
            raise DecodeError(f"expected color '#rrggbb', got '{color}'", path)
        return ColorValue(color)
    if base == "Point":
        point = expect_object(raw, path)
        return PointValue(get_int(point, "cx", path), get_int(point, "cy", path))
    if base == "Enum":
        # FieldType.parse sets enum_name for every Enum base
        enum_name = cast(str, field_type.enum_name)
        return EnumValue(enum_name, expect_str(raw, path), field_type.external_enum)
    if base == "Tile":
        return TileValue(TilesetRect.from_dict(expect_object(raw, path), path))
    if base == "EntityRef":
        ref = expect_object(raw, path)
        return EntityRefValue(
            entity_iid=get_str(ref, "entityIid", path),
            layer_iid=get_str(ref, "layerIid", path),
            level_iid=get_str(ref, "levelIid", path),
            world_iid=get_str(ref, "worldIid", path),
        )
    raise DecodeError(f"unsupported field type '{base}' for {type_name(raw)}", path)


# =============================================================================
# Field instances
# =============================================================================

@dataclass
class FieldInstance:
    """Named, typed value placed on a level or an entity instance."""
    identifier: str
    type_name: str
    value: FieldValue
    def_uid: int
    tile: Optional[TilesetRect] = None
    real_editor_values: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "FieldInstance":
        declared = get_str(data, "__type", path)
        if "__value" not in data:
            raise DecodeError("missing required field '__value'", path)
        return cls(
            identifier=get_str(data, "__identifier", path),
            type_name=declared,
            value=decode_field_value(declared, data["__value"], key_path(path, "__value")),
            def_uid=get_int(data, "defUid", path),
            tile=get_opt_object(data, "__tile", path, TilesetRect.from_dict),
            real_editor_values=list(get_list(data, "realEditorValues", path)),
        )

    @property
    def field_type(self) -> FieldType:
        return FieldType.parse(self.type_name, self.identifier)

    def to_dict(self) -> JsonObject:
        return {
            "__identifier": self.identifier,
            "__type": self.type_name,
            "__value": self.value.to_json(),
            "__tile": self.tile.to_dict() if self.tile else None,
            "defUid": self.def_uid,
            "realEditorValues": list(self.real_editor_values),
        }


# =============================================================================
# Field definitions
# =============================================================================

class EditorDisplayMode(Enum):
    ARRAY_COUNT_NO_LABEL = "ArrayCountNoLabel"
    ARRAY_COUNT_WITH_LABEL = "ArrayCountWithLabel"
    ENTITY_TILE = "EntityTile"
    HIDDEN = "Hidden"
    NAME_AND_VALUE = "NameAndValue"
    POINTS = "Points"
    POINT_PATH = "PointPath"
    POINT_PATH_LOOP = "PointPathLoop"
    POINT_STAR = "PointStar"
    RADIUS_GRID = "RadiusGrid"
    RADIUS_PX = "RadiusPx"
    REF_LINK_BETWEEN_CENTERS = "RefLinkBetweenCenters"
    REF_LINK_BETWEEN_PIVOTS = "RefLinkBetweenPivots"
    VALUE_ONLY = "ValueOnly"


class EditorDisplayPos(Enum):
    ABOVE = "Above"
    BENEATH = "Beneath"
    CENTER = "Center"


class AllowedRefs(Enum):
    ANY = "Any"
    ONLY_SAME = "OnlySame"
    ONLY_TAGS = "OnlyTags"


@dataclass
class FieldDefinition:
    """Declaration of a field on an entity or level."""
    type_name: str
    identifier: str
    uid: int
    internal_type: str
    is_array: bool
    can_be_null: bool
    editor_display_mode: EditorDisplayMode
    editor_display_pos: EditorDisplayPos
    editor_always_show: bool
    editor_cut_long_values: bool
    use_for_smart_color: bool
    symmetrical_ref: bool
    allow_out_of_level_ref: bool
    auto_chain_ref: bool
    allowed_refs: AllowedRefs
    allowed_ref_tags: list[str] = field(default_factory=list)
    array_min_length: Optional[int] = None
    array_max_length: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    regex: Optional[str] = None
    accept_file_types: Optional[list[str]] = None
    default_override: Optional[Any] = None
    editor_text_prefix: Optional[str] = None
    editor_text_suffix: Optional[str] = None
    text_language_mode: Optional[str] = None
    tileset_uid: Optional[int] = None
    doc: Optional[str] = None

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "FieldDefinition":
        return cls(
            type_name=get_str(data, "__type", path),
            identifier=get_str(data, "identifier", path),
            uid=get_int(data, "uid", path),
            internal_type=get_str(data, "type", path),
            is_array=get_bool(data, "isArray", path),
            can_be_null=get_bool(data, "canBeNull", path),
            editor_display_mode=get_enum(data, "editorDisplayMode", path, EditorDisplayMode),
            editor_display_pos=get_enum(data, "editorDisplayPos", path, EditorDisplayPos),
            editor_always_show=get_bool(data, "editorAlwaysShow", path),
            editor_cut_long_values=get_bool(data, "editorCutLongValues", path),
            use_for_smart_color=get_bool(data, "useForSmartColor", path),
            symmetrical_ref=get_bool(data, "symmetricalRef", path),
            allow_out_of_level_ref=get_bool(data, "allowOutOfLevelRef", path),
            auto_chain_ref=get_bool(data, "autoChainRef", path),
            allowed_refs=get_enum(data, "allowedRefs", path, AllowedRefs),
            allowed_ref_tags=get_str_list(data, "allowedRefTags", path),
            array_min_length=get_opt_int(data, "arrayMinLength", path),
            array_max_length=get_opt_int(data, "arrayMaxLength", path),
            min=get_opt_float(data, "min", path),
            max=get_opt_float(data, "max", path),
            regex=get_opt_str(data, "regex", path),
            accept_file_types=get_opt_str_list(data, "acceptFileTypes", path),
            default_override=data.get("defaultOverride"),
            editor_text_prefix=get_opt_str(data, "editorTextPrefix", path),
            editor_text_suffix=get_opt_str(data, "editorTextSuffix", path),
            text_language_mode=get_opt_str(data, "textLanguageMode", path),
            tileset_uid=get_opt_int(data, "tilesetUid", path),
            doc=get_opt_str(data, "doc", path),
        )

    def to_dict(self) -> JsonObject:
        return {
            "__type": self.type_name,
            "identifier": self.identifier,
            "uid": self.uid,
            "type": self.internal_type,
            "isArray": self.is_array,
            "canBeNull": self.can_be_null,
            "editorDisplayMode": enum_value(self.editor_display_mode),
            "editorDisplayPos": enum_value(self.editor_display_pos),
            "editorAlwaysShow": self.editor_always_show,
            "editorCutLongValues": self.editor_cut_long_values,
            "useForSmartColor": self.use_for_smart_color,
            "symmetricalRef": self.symmetrical_ref,
            "allowOutOfLevelRef": self.allow_out_of_level_ref,
            "autoChainRef": self.auto_chain_ref,
            "allowedRefs": enum_value(self.allowed_refs),
            "allowedRefTags": list(self.allowed_ref_tags),
            "arrayMinLength": self.array_min_length,
            "arrayMaxLength": self.array_max_length,
            "min": self.min,
            "max": self.max,
            "regex": self.regex,
            "acceptFileTypes": (
                list(self.accept_file_types) if self.accept_file_types is not None else None
            ),
            "defaultOverride": self.default_override,
            "editorTextPrefix": self.editor_text_prefix,
            "editorTextSuffix": self.editor_text_suffix,
            "textLanguageMode": self.text_language_mode,
            "tilesetUid": self.tileset_uid,
            "doc": self.doc,
        }
