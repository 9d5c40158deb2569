"""
Data model for LDtk project and level files (editor JSON version 1.1.3).

Records decode strictly from the editor's JSON (``from_dict``) and encode
back to it (``to_dict``). See ``project`` for the root records.
"""

from .decoding import JsonObject
from .fields import (
    ArrayValue,
    BoolValue,
    ColorValue,
    EntityRefValue,
    EnumValue,
    FieldDefinition,
    FieldInstance,
    FieldType,
    FieldValue,
    FloatValue,
    IntValue,
    NullValue,
    PointValue,
    StringValue,
    TilesetRect,
    TileValue,
    decode_field_value,
)
from .layers import (
    AutoLayer,
    EntityInstance,
    EntityLayer,
    IntGridLayer,
    LayerInstance,
    LayerType,
    TileInstance,
    TileLayer,
)
from .definitions import (
    AutoLayerRuleDefinition,
    AutoLayerRuleGroup,
    Definitions,
    EntityDefinition,
    EnumDefinition,
    EnumValueDefinition,
    IntGridValueDefinition,
    LayerDefinition,
    TilesetDefinition,
)
from .project import (
    SCHEMA_VERSION,
    Level,
    LevelState,
    Project,
    ProjectLevelState,
    World,
)

__all__ = [
    "SCHEMA_VERSION",
    "JsonObject",

    # Root records
    "Project",
    "Level",
    "World",
    "LevelState",
    "ProjectLevelState",

    # Definitions
    "Definitions",
    "LayerDefinition",
    "IntGridValueDefinition",
    "AutoLayerRuleGroup",
    "AutoLayerRuleDefinition",
    "EntityDefinition",
    "EnumDefinition",
    "EnumValueDefinition",
    "TilesetDefinition",
    "FieldDefinition",

    # Layers
    "LayerType",
    "LayerInstance",
    "IntGridLayer",
    "EntityLayer",
    "TileLayer",
    "AutoLayer",
    "TileInstance",
    "EntityInstance",

    # Fields
    "FieldInstance",
    "FieldType",
    "FieldValue",
    "NullValue",
    "IntValue",
    "FloatValue",
    "BoolValue",
    "StringValue",
    "ColorValue",
    "PointValue",
    "EnumValue",
    "TileValue",
    "EntityRefValue",
    "ArrayValue",
    "TilesetRect",
    "decode_field_value",
]
