"""
Layer instances placed inside a level.

The editor writes every layer with the same set of keys; the ``__type``
string tells which payload is meaningful. Each type maps to its own class:

- ``IntGrid``   -> IntGridLayer (int grid values plus optional auto tiles)
- ``Entities``  -> EntityLayer
- ``Tiles``     -> TileLayer
- ``AutoLayer`` -> AutoLayer

Decoding type-checks all four payload arrays and rejects a non-empty one
that does not belong to the variant. Encoding writes all of them again,
leaving the foreign ones empty.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional

from ..errors import DecodeError
from .decoding import (
    JsonObject,
    get_enum,
    get_float,
    get_float_pair,
    get_int,
    get_int_list,
    get_int_pair,
    get_objects,
    get_opt_int,
    get_opt_object,
    get_opt_str,
    get_str,
    get_str_list,
    get_bool,
    key_path,
)
from .fields import FieldInstance, TilesetRect


class LayerType(Enum):
    INT_GRID = "IntGrid"
    ENTITIES = "Entities"
    TILES = "Tiles"
    AUTO_LAYER = "AutoLayer"


PAYLOAD_KEYS = ("intGridCsv", "autoLayerTiles", "gridTiles", "entityInstances")


# =============================================================================
# Layer contents
# =============================================================================

@dataclass
class TileInstance:
    """Single tile placed in a Tiles or auto layer.

    ``flip`` holds the flip bits: bit 0 is X flip, bit 1 is Y flip.
    """
    px: tuple[int, int]
    src: tuple[int, int]
    flip: int
    tile_id: int
    d: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "TileInstance":
        return cls(
            px=get_int_pair(data, "px", path),
            src=get_int_pair(data, "src", path),
            flip=get_int(data, "f", path),
            tile_id=get_int(data, "t", path),
            d=get_int_list(data, "d", path),
        )

    @property
    def flip_x(self) -> bool:
        return bool(self.flip & 1)

    @property
    def flip_y(self) -> bool:
        return bool(self.flip & 2)

    def to_dict(self) -> JsonObject:
        return {
            "px": list(self.px),
            "src": list(self.src),
            "f": self.flip,
            "t": self.tile_id,
            "d": list(self.d),
        }


@dataclass
class EntityInstance:
    """Entity placed in an Entities layer."""
    identifier: str
    iid: str
    def_uid: int
    grid: tuple[int, int]
    pivot: tuple[float, float]
    smart_color: str
    width: int
    height: int
    px: tuple[int, int]
    tags: list[str] = field(default_factory=list)
    tile: Optional[TilesetRect] = None
    field_instances: list[FieldInstance] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "EntityInstance":
        return cls(
            identifier=get_str(data, "__identifier", path),
            iid=get_str(data, "iid", path),
            def_uid=get_int(data, "defUid", path),
            grid=get_int_pair(data, "__grid", path),
            pivot=get_float_pair(data, "__pivot", path),
            smart_color=get_str(data, "__smartColor", path),
            width=get_int(data, "width", path),
            height=get_int(data, "height", path),
            px=get_int_pair(data, "px", path),
            tags=get_str_list(data, "__tags", path),
            tile=get_opt_object(data, "__tile", path, TilesetRect.from_dict),
            field_instances=get_objects(data, "fieldInstances", path, FieldInstance.from_dict),
        )

    def get_field(self, identifier: str) -> Optional[FieldInstance]:
        """Return the first field instance with this identifier."""
        for field_instance in self.field_instances:
            if field_instance.identifier == identifier:
                return field_instance
        return None

    def to_dict(self) -> JsonObject:
        return {
            "__identifier": self.identifier,
            "__grid": list(self.grid),
            "__pivot": list(self.pivot),
            "__smartColor": self.smart_color,
            "__tags": list(self.tags),
            "__tile": self.tile.to_dict() if self.tile else None,
            "defUid": self.def_uid,
            "iid": self.iid,
            "width": self.width,
            "height": self.height,
            "px": list(self.px),
            "fieldInstances": [f.to_dict() for f in self.field_instances],
        }


# =============================================================================
# Layer instances
# =============================================================================

@dataclass
class LayerInstance:
    """Fields shared by every layer variant.

    Use ``LayerInstance.from_dict`` to decode: it reads ``__type`` and
    returns the matching subclass.
    """
    identifier: str
    iid: str
    level_id: int
    layer_def_uid: int
    c_wid: int
    c_hei: int
    grid_size: int
    opacity: float
    px_total_offset_x: int
    px_total_offset_y: int
    px_offset_x: int
    px_offset_y: int
    visible: bool
    seed: int
    optional_rules: list[int] = field(default_factory=list)
    tileset_def_uid: Optional[int] = None
    tileset_rel_path: Optional[str] = None
    override_tileset_uid: Optional[int] = None

    layer_type: ClassVar[LayerType]
    payload_keys: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_dict(cls, data: JsonObject, path: str) -> "LayerInstance":
        layer_type = get_enum(data, "__type", path, LayerType)
        layer_cls = LAYER_CLASSES[layer_type]
        if cls is not LayerInstance and layer_cls is not cls:
            raise DecodeError(
                f"expected {cls.layer_type.value} layer, got {layer_type.value}", path
            )
        payloads = _decode_payloads(data, path)
        for key, items in payloads.items():
            if items and key not in layer_cls.payload_keys:
                raise DecodeError(
                    f"{layer_type.value} layer cannot hold {key}", key_path(path, key)
                )
        return layer_cls(**_common_fields(data, path), **layer_cls._payload_fields(payloads))

    @classmethod
    def _payload_fields(cls, payloads: dict[str, list[Any]]) -> dict[str, Any]:
        return {}

    def _payload_to_dict(self) -> JsonObject:
        return {}

    @property
    def tiles(self) -> list[TileInstance]:
        """Tiles to draw for this layer (empty for entity layers)."""
        return []

    @property
    def px_wid(self) -> int:
        return self.c_wid * self.grid_size

    @property
    def px_hei(self) -> int:
        return self.c_hei * self.grid_size

    def to_dict(self) -> JsonObject:
        data: JsonObject = {
            "__identifier": self.identifier,
            "__type": self.layer_type.value,
            "__cWid": self.c_wid,
            "__cHei": self.c_hei,
            "__gridSize": self.grid_size,
            "__opacity": self.opacity,
            "__pxTotalOffsetX": self.px_total_offset_x,
            "__pxTotalOffsetY": self.px_total_offset_y,
            "__tilesetDefUid": self.tileset_def_uid,
            "__tilesetRelPath": self.tileset_rel_path,
            "iid": self.iid,
            "levelId": self.level_id,
            "layerDefUid": self.layer_def_uid,
            "pxOffsetX": self.px_offset_x,
            "pxOffsetY": self.px_offset_y,
            "visible": self.visible,
            "optionalRules": list(self.optional_rules),
            "seed": self.seed,
            "overrideTilesetUid": self.override_tileset_uid,
        }
        for key in PAYLOAD_KEYS:
            data[key] = []
        data.update(self._payload_to_dict())
        return data


def _common_fields(data: JsonObject, path: str) -> dict[str, Any]:
    return {
        "identifier": get_str(data, "__identifier", path),
        "iid": get_str(data, "iid", path),
        "level_id": get_int(data, "levelId", path),
        "layer_def_uid": get_int(data, "layerDefUid", path),
        "c_wid": get_int(data, "__cWid", path),
        "c_hei": get_int(data, "__cHei", path),
        "grid_size": get_int(data, "__gridSize", path),
        "opacity": get_float(data, "__opacity", path),
        "px_total_offset_x": get_int(data, "__pxTotalOffsetX", path),
        "px_total_offset_y": get_int(data, "__pxTotalOffsetY", path),
        "px_offset_x": get_int(data, "pxOffsetX", path),
        "px_offset_y": get_int(data, "pxOffsetY", path),
        "visible": get_bool(data, "visible", path),
        "seed": get_int(data, "seed", path),
        "optional_rules": get_int_list(data, "optionalRules", path),
        "tileset_def_uid": get_opt_int(data, "__tilesetDefUid", path),
        "tileset_rel_path": get_opt_str(data, "__tilesetRelPath", path),
        "override_tileset_uid": get_opt_int(data, "overrideTilesetUid", path),
    }


def _decode_payloads(data: JsonObject, path: str) -> dict[str, list[Any]]:
    """Decode all payload arrays; the editor writes every one of them."""
    return {
        "intGridCsv": get_int_list(data, "intGridCsv", path),
        "autoLayerTiles": get_objects(data, "autoLayerTiles", path, TileInstance.from_dict),
        "gridTiles": get_objects(data, "gridTiles", path, TileInstance.from_dict),
        "entityInstances": get_objects(data, "entityInstances", path, EntityInstance.from_dict),
    }


@dataclass
class IntGridLayer(LayerInstance):
    """Integer grid, stored row by row. ``0`` means an empty cell.

    IntGrid layers can also carry auto-layer rules, whose output lands in
    ``auto_layer_tiles``.
    """
    int_grid_csv: list[int] = field(default_factory=list)
    auto_layer_tiles: list[TileInstance] = field(default_factory=list)

    layer_type: ClassVar[LayerType] = LayerType.INT_GRID
    payload_keys: ClassVar[tuple[str, ...]] = ("intGridCsv", "autoLayerTiles")

    @classmethod
    def _payload_fields(cls, payloads: dict[str, list[Any]]) -> dict[str, Any]:
        return {
            "int_grid_csv": payloads["intGridCsv"],
            "auto_layer_tiles": payloads["autoLayerTiles"],
        }

    def _payload_to_dict(self) -> JsonObject:
        return {
            "intGridCsv": list(self.int_grid_csv),
            "autoLayerTiles": [t.to_dict() for t in self.auto_layer_tiles],
        }

    @property
    def tiles(self) -> list[TileInstance]:
        return self.auto_layer_tiles

    def value_at(self, cx: int, cy: int) -> int:
        """IntGrid value at grid coordinates (cx, cy)."""
        if not (0 <= cx < self.c_wid and 0 <= cy < self.c_hei):
            raise IndexError(f"cell ({cx}, {cy}) outside {self.c_wid}x{self.c_hei} grid")
        return self.int_grid_csv[cy * self.c_wid + cx]


@dataclass
class EntityLayer(LayerInstance):
    entity_instances: list[EntityInstance] = field(default_factory=list)

    layer_type: ClassVar[LayerType] = LayerType.ENTITIES
    payload_keys: ClassVar[tuple[str, ...]] = ("entityInstances",)

    @classmethod
    def _payload_fields(cls, payloads: dict[str, list[Any]]) -> dict[str, Any]:
        return {"entity_instances": payloads["entityInstances"]}

    def _payload_to_dict(self) -> JsonObject:
        return {"entityInstances": [e.to_dict() for e in self.entity_instances]}

    def get_entities(self, identifier: str) -> list[EntityInstance]:
        """All entity instances with this identifier, in layer order."""
        return [e for e in self.entity_instances if e.identifier == identifier]


@dataclass
class TileLayer(LayerInstance):
    grid_tiles: list[TileInstance] = field(default_factory=list)

    layer_type: ClassVar[LayerType] = LayerType.TILES
    payload_keys: ClassVar[tuple[str, ...]] = ("gridTiles",)

    @classmethod
    def _payload_fields(cls, payloads: dict[str, list[Any]]) -> dict[str, Any]:
        return {"grid_tiles": payloads["gridTiles"]}

    def _payload_to_dict(self) -> JsonObject:
        return {"gridTiles": [t.to_dict() for t in self.grid_tiles]}

    @property
    def tiles(self) -> list[TileInstance]:
        return self.grid_tiles


@dataclass
class AutoLayer(LayerInstance):
    auto_layer_tiles: list[TileInstance] = field(default_factory=list)

    layer_type: ClassVar[LayerType] = LayerType.AUTO_LAYER
    payload_keys: ClassVar[tuple[str, ...]] = ("autoLayerTiles",)

    @classmethod
    def _payload_fields(cls, payloads: dict[str, list[Any]]) -> dict[str, Any]:
        return {"auto_layer_tiles": payloads["autoLayerTiles"]}

    def _payload_to_dict(self) -> JsonObject:
        return {"autoLayerTiles": [t.to_dict() for t in self.auto_layer_tiles]}

    @property
    def tiles(self) -> list[TileInstance]:
        return self.auto_layer_tiles


LAYER_CLASSES: dict[LayerType, type[LayerInstance]] = {
    LayerType.INT_GRID: IntGridLayer,
    LayerType.ENTITIES: EntityLayer,
    LayerType.TILES: TileLayer,
    LayerType.AUTO_LAYER: AutoLayer,
}
