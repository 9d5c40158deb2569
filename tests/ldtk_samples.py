"""Builders for LDtk documents shaped like editor 1.1.3 output."""

from pathlib import Path
from typing import Any, Optional

import orjson

TILESET_UID = 1
INT_GRID_LAYER_UID = 10
ENTITY_LAYER_UID = 11
TILE_LAYER_UID = 12
AUTO_LAYER_UID = 13
PLAYER_DEF_UID = 20
ITEM_ENUM_UID = 30
LEVEL_FIELD_UID = 40


def tileset_rect(x: int = 0, y: int = 0) -> dict[str, Any]:
    return {"tilesetUid": TILESET_UID, "x": x, "y": y, "w": 16, "h": 16}


def field_definition(identifier: str, uid: int, type_name: str, internal: str) -> dict[str, Any]:
    return {
        "__type": type_name,
        "identifier": identifier,
        "uid": uid,
        "type": internal,
        "isArray": type_name.startswith("Array<"),
        "canBeNull": True,
        "arrayMinLength": None,
        "arrayMaxLength": None,
        "editorDisplayMode": "ValueOnly",
        "editorDisplayPos": "Above",
        "editorAlwaysShow": False,
        "editorCutLongValues": True,
        "editorTextPrefix": None,
        "editorTextSuffix": None,
        "textLanguageMode": None,
        "useForSmartColor": False,
        "symmetricalRef": False,
        "allowOutOfLevelRef": True,
        "autoChainRef": True,
        "allowedRefs": "OnlySame",
        "allowedRefTags": [],
        "tilesetUid": None,
        "min": None,
        "max": None,
        "regex": None,
        "acceptFileTypes": None,
        "defaultOverride": None,
    }


def field_instance(identifier: str, type_name: str, value: Any, def_uid: int = 100) -> dict[str, Any]:
    return {
        "__identifier": identifier,
        "__type": type_name,
        "__value": value,
        "__tile": None,
        "defUid": def_uid,
        "realEditorValues": [],
    }


def definitions() -> dict[str, Any]:
    return {
        "layers": [
            _layer_definition("Collisions", INT_GRID_LAYER_UID, "IntGrid"),
            _layer_definition("Entities", ENTITY_LAYER_UID, "Entities"),
            _layer_definition("Tiles", TILE_LAYER_UID, "Tiles", tileset_uid=TILESET_UID),
            _layer_definition("Decoration", AUTO_LAYER_UID, "AutoLayer", tileset_uid=TILESET_UID),
        ],
        "entities": [
            {
                "identifier": "Player",
                "uid": PLAYER_DEF_UID,
                "width": 16,
                "height": 16,
                "color": "#94D9B3",
                "renderMode": "Tile",
                "tileRenderMode": "FitInside",
                "tileOpacity": 1,
                "fillOpacity": 0.08,
                "lineOpacity": 0,
                "hollow": False,
                "limitBehavior": "MoveLastOne",
                "limitScope": "PerLevel",
                "maxCount": 1,
                "pivotX": 0.5,
                "pivotY": 1,
                "resizableX": False,
                "resizableY": False,
                "keepAspectRatio": False,
                "showName": True,
                "tags": ["actor"],
                "nineSliceBorders": [],
                "fieldDefs": [
                    field_definition("hp", 100, "Int", "F_Int"),
                    field_definition("inventory", 101, "Array<LocalEnum.Item>", "F_Enum(30)"),
                ],
                "tileRect": tileset_rect(),
                "tilesetId": TILESET_UID,
                "doc": None,
            }
        ],
        "enums": [
            {
                "identifier": "Item",
                "uid": ITEM_ENUM_UID,
                "values": [
                    {"id": "Sword", "tileId": 3, "color": 16711680, "__tileSrcRect": [48, 0, 16, 16]},
                    {"id": "Shield", "tileId": None, "color": 255, "__tileSrcRect": None},
                ],
                "iconTilesetUid": TILESET_UID,
                "externalRelPath": None,
                "externalFileChecksum": None,
                "tags": [],
            }
        ],
        "externalEnums": [],
        "tilesets": [
            {
                "identifier": "World_tiles",
                "uid": TILESET_UID,
                "relPath": "atlas/tiles.png",
                "embedAtlas": None,
                "pxWid": 128,
                "pxHei": 64,
                "tileGridSize": 16,
                "spacing": 0,
                "padding": 0,
                "__cWid": 8,
                "__cHei": 4,
                "tags": [],
                "tagsSourceEnumUid": ITEM_ENUM_UID,
                "enumTags": [{"enumValueId": "Sword", "tileIds": [3]}],
                "customData": [{"tileId": 5, "data": "solid"}],
                "savedSelections": [],
                "cachedPixelData": {"opaqueTiles": "0110", "averageColors": "f000"},
            }
        ],
        "levelFields": [field_definition("music", LEVEL_FIELD_UID, "String", "F_String")],
    }


def _layer_definition(
    identifier: str, uid: int, layer_type: str, tileset_uid: Optional[int] = None
) -> dict[str, Any]:
    auto_rule_groups: list[dict[str, Any]] = []
    if layer_type in ("IntGrid", "AutoLayer"):
        auto_rule_groups = [
            {
                "uid": uid * 100,
                "name": "Walls",
                "active": True,
                "isOptional": False,
                "rules": [
                    {
                        "uid": uid * 100 + 1,
                        "active": True,
                        "size": 3,
                        "tileIds": [1, 2],
                        "chance": 1,
                        "breakOnMatch": True,
                        "pattern": [0, 0, 0, 0, 1, 0, 0, 0, 0],
                        "flipX": False,
                        "flipY": False,
                        "xModulo": 1,
                        "yModulo": 1,
                        "xOffset": 0,
                        "yOffset": 0,
                        "checker": "None",
                        "tileMode": "Single",
                        "pivotX": 0,
                        "pivotY": 0,
                        "outOfBoundsValue": None,
                        "perlinActive": False,
                        "perlinSeed": 2405364,
                        "perlinScale": 0.2,
                        "perlinOctaves": 2,
                    }
                ],
            }
        ]
    return {
        "__type": layer_type,
        "identifier": identifier,
        "type": layer_type,
        "uid": uid,
        "gridSize": 16,
        "guideGridWid": 0,
        "guideGridHei": 0,
        "displayOpacity": 1,
        "inactiveOpacity": 0.6,
        "hideInList": False,
        "hideFieldsWhenInactive": True,
        "pxOffsetX": 0,
        "pxOffsetY": 0,
        "parallaxFactorX": 0,
        "parallaxFactorY": 0,
        "parallaxScaling": True,
        "requiredTags": [],
        "excludedTags": [],
        "intGridValues": (
            [{"value": 1, "identifier": "wall", "color": "#000000"}]
            if layer_type == "IntGrid"
            else []
        ),
        "autoRuleGroups": auto_rule_groups,
        "autoSourceLayerDefUid": INT_GRID_LAYER_UID if layer_type == "AutoLayer" else None,
        "tilesetDefUid": tileset_uid,
        "tilePivotX": 0,
        "tilePivotY": 0,
    }


def tile(px: tuple[int, int], tile_id: int, flip: int = 0) -> dict[str, Any]:
    return {"px": list(px), "src": [tile_id * 16, 0], "f": flip, "t": tile_id, "d": [px[1] // 16 * 4 + px[0] // 16]}


def layer_instance(
    identifier: str, layer_type: str, layer_def_uid: int, level_uid: int, **payload: Any
) -> dict[str, Any]:
    layer: dict[str, Any] = {
        "__identifier": identifier,
        "__type": layer_type,
        "__cWid": 4,
        "__cHei": 2,
        "__gridSize": 16,
        "__opacity": 1,
        "__pxTotalOffsetX": 0,
        "__pxTotalOffsetY": 0,
        "__tilesetDefUid": TILESET_UID if layer_type in ("Tiles", "AutoLayer") else None,
        "__tilesetRelPath": "atlas/tiles.png" if layer_type in ("Tiles", "AutoLayer") else None,
        "iid": f"layer-{level_uid}-{layer_def_uid}",
        "levelId": level_uid,
        "layerDefUid": layer_def_uid,
        "pxOffsetX": 0,
        "pxOffsetY": 0,
        "visible": True,
        "optionalRules": [],
        "intGridCsv": [],
        "autoLayerTiles": [],
        "seed": 8512371,
        "overrideTilesetUid": None,
        "gridTiles": [],
        "entityInstances": [],
    }
    layer.update(payload)
    return layer


def player_entity(level_uid: int) -> dict[str, Any]:
    return {
        "__identifier": "Player",
        "__grid": [1, 1],
        "__pivot": [0.5, 1],
        "__tags": ["actor"],
        "__tile": tileset_rect(),
        "__smartColor": "#94D9B3",
        "iid": f"player-{level_uid}",
        "width": 16,
        "height": 16,
        "defUid": PLAYER_DEF_UID,
        "px": [24, 32],
        "fieldInstances": [
            field_instance("hp", "Int", 10, 100),
            field_instance("inventory", "Array<LocalEnum.Item>", ["Sword", "Shield"], 101),
        ],
    }


def layer_instances(level_uid: int) -> list[dict[str, Any]]:
    return [
        layer_instance(
            "Entities", "Entities", ENTITY_LAYER_UID, level_uid,
            entityInstances=[player_entity(level_uid)],
        ),
        layer_instance(
            "Tiles", "Tiles", TILE_LAYER_UID, level_uid,
            gridTiles=[tile((0, 0), 1), tile((16, 0), 2, flip=1)],
        ),
        layer_instance(
            "Decoration", "AutoLayer", AUTO_LAYER_UID, level_uid,
            autoLayerTiles=[tile((0, 16), 4, flip=3)],
        ),
        layer_instance(
            "Collisions", "IntGrid", INT_GRID_LAYER_UID, level_uid,
            intGridCsv=[1, 1, 1, 1, 0, 0, 0, 1],
            autoLayerTiles=[tile((0, 0), 1)],
        ),
    ]


def level(
    uid: int,
    identifier: Optional[str] = None,
    stub: bool = False,
    rel_path: Optional[str] = None,
) -> dict[str, Any]:
    """Level object; ``stub`` leaves layerInstances null as in a project
    saved with external levels."""
    identifier = identifier or f"Level_{uid}"
    return {
        "identifier": identifier,
        "iid": f"level-iid-{uid}",
        "uid": uid,
        "worldX": uid * 64,
        "worldY": 0,
        "worldDepth": 0,
        "pxWid": 64,
        "pxHei": 32,
        "__bgColor": "#696A79",
        "bgColor": None,
        "useAutoIdentifier": True,
        "bgRelPath": None,
        "bgPos": None,
        "bgPivotX": 0.5,
        "bgPivotY": 0.5,
        "__smartColor": "#ADADB5",
        "__bgPos": None,
        "externalRelPath": rel_path,
        "fieldInstances": [field_instance("music", "String", f"track_{uid}.ogg", LEVEL_FIELD_UID)],
        "layerInstances": None if stub else layer_instances(uid),
        "__neighbours": [{"levelIid": f"level-iid-{uid + 1}", "dir": "e"}],
    }


def project(levels: list[dict[str, Any]], external_levels: bool = False) -> dict[str, Any]:
    return {
        "__header__": {
            "fileType": "LDtk Project JSON",
            "app": "LDtk",
            "doc": "https://ldtk.io/json",
            "schema": "https://ldtk.io/files/JSON_SCHEMA.json",
            "appAuthor": "Sebastien 'deepnight' Benard",
            "appVersion": "1.1.3",
            "url": "https://ldtk.io",
        },
        "iid": "project-iid",
        "jsonVersion": "1.1.3",
        "appBuildId": 463456,
        "nextUid": 200,
        "identifierStyle": "Capitalize",
        "worldLayout": "Free",
        "worldGridWidth": 256,
        "worldGridHeight": 256,
        "defaultLevelWidth": 256,
        "defaultLevelHeight": 256,
        "defaultPivotX": 0,
        "defaultPivotY": 0,
        "defaultGridSize": 16,
        "bgColor": "#40465B",
        "defaultLevelBgColor": "#696A79",
        "minifyJson": False,
        "externalLevels": external_levels,
        "exportTiles": False,
        "simplifiedExport": False,
        "imageExportMode": "None",
        "exportLevelBg": True,
        "pngFilePattern": None,
        "backupOnSave": False,
        "backupLimit": 10,
        "levelNamePattern": "Level_%idx",
        "tutorialDesc": None,
        "customCommands": [],
        "flags": ["PrependIndexToLevelFileNames"],
        "defs": definitions(),
        "levels": levels,
        "worlds": [],
    }


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
    return path


def write_external_project(
    root: Path, uids: list[int], name: str = "world.ldtk"
) -> Path:
    """Write a project with external levels under ``root``, one file per uid."""
    project_dir_name = Path(name).stem
    stubs = []
    for uid in uids:
        rel_path = f"{project_dir_name}/Level_{uid}.ldtkl"
        stubs.append(level(uid, stub=True, rel_path=rel_path))
        write_json(root / rel_path, level(uid))
    return write_json(root / name, project(stubs, external_levels=True))
