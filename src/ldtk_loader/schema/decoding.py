"""
Strict typed accessors for decoded JSON objects.

Every accessor takes the object, the key and the JSON path of the object so
that errors can point at the exact offending value. Nothing here coerces:
a string is never turned into an int, a missing required key is never
defaulted. The only widening allowed is int -> float, since JSON itself does
not distinguish ``1`` from ``1.0``.
"""

from enum import Enum
from typing import Any, Callable, Optional, TypeVar, cast

from ..errors import DecodeError

JsonObject = dict[str, Any]

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

ROOT = "$"

_MISSING = object()


def key_path(path: str, key: str) -> str:
    return f"{path}.{key}"


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def type_name(value: Any) -> str:
    """JSON name of a decoded value's type, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def is_int(value: Any) -> bool:
    # bool is an int subclass in Python but never in JSON
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    return is_int(value) or isinstance(value, float)


def expect_object(value: Any, path: str) -> JsonObject:
    if not isinstance(value, dict):
        raise DecodeError(f"expected object, got {type_name(value)}", path)
    return cast(JsonObject, value)


def expect_int(value: Any, path: str) -> int:
    if not is_int(value):
        raise DecodeError(f"expected integer, got {type_name(value)}", path)
    return cast(int, value)


def expect_float(value: Any, path: str) -> float:
    if not is_number(value):
        raise DecodeError(f"expected number, got {type_name(value)}", path)
    return float(value)


def expect_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"expected boolean, got {type_name(value)}", path)
    return value


def expect_str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"expected string, got {type_name(value)}", path)
    return value


def expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise DecodeError(f"expected array, got {type_name(value)}", path)
    return cast(list[Any], value)


def _required(data: JsonObject, key: str, path: str) -> Any:
    value = data.get(key, _MISSING)
    if value is _MISSING:
        raise DecodeError(f"missing required field '{key}'", path)
    return value


# === REQUIRED SCALARS ===

def get_raw(data: JsonObject, key: str, path: str) -> Any:
    """Required value of any JSON type, returned as decoded."""
    return _required(data, key, path)


def get_int(data: JsonObject, key: str, path: str) -> int:
    return expect_int(_required(data, key, path), key_path(path, key))


def get_float(data: JsonObject, key: str, path: str) -> float:
    return expect_float(_required(data, key, path), key_path(path, key))


def get_bool(data: JsonObject, key: str, path: str) -> bool:
    return expect_bool(_required(data, key, path), key_path(path, key))


def get_str(data: JsonObject, key: str, path: str) -> str:
    return expect_str(_required(data, key, path), key_path(path, key))


def get_enum(data: JsonObject, key: str, path: str, enum_cls: type[E]) -> E:
    return to_enum(_required(data, key, path), key_path(path, key), enum_cls)


def to_enum(value: Any, path: str, enum_cls: type[E]) -> E:
    raw = expect_str(value, path)
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise DecodeError(
            f"unknown {enum_cls.__name__} value '{raw}' (expected one of: {allowed})",
            path,
        ) from None


# === OPTIONAL (NULLABLE) SCALARS ===

def get_opt_int(data: JsonObject, key: str, path: str) -> Optional[int]:
    value = data.get(key)
    return None if value is None else expect_int(value, key_path(path, key))


def get_opt_float(data: JsonObject, key: str, path: str) -> Optional[float]:
    value = data.get(key)
    return None if value is None else expect_float(value, key_path(path, key))


def get_opt_bool(data: JsonObject, key: str, path: str) -> Optional[bool]:
    value = data.get(key)
    return None if value is None else expect_bool(value, key_path(path, key))


def get_opt_str(data: JsonObject, key: str, path: str) -> Optional[str]:
    value = data.get(key)
    return None if value is None else expect_str(value, key_path(path, key))


def get_opt_enum(
    data: JsonObject, key: str, path: str, enum_cls: type[E]
) -> Optional[E]:
    value = data.get(key)
    return None if value is None else to_enum(value, key_path(path, key), enum_cls)


# === ARRAYS ===

def get_list(data: JsonObject, key: str, path: str) -> list[Any]:
    return expect_list(_required(data, key, path), key_path(path, key))


def get_int_list(data: JsonObject, key: str, path: str) -> list[int]:
    items_path = key_path(path, key)
    items = get_list(data, key, path)
    return [expect_int(item, index_path(items_path, i)) for i, item in enumerate(items)]


def get_float_list(data: JsonObject, key: str, path: str) -> list[float]:
    items_path = key_path(path, key)
    items = get_list(data, key, path)
    return [expect_float(item, index_path(items_path, i)) for i, item in enumerate(items)]


def get_str_list(data: JsonObject, key: str, path: str) -> list[str]:
    items_path = key_path(path, key)
    items = get_list(data, key, path)
    return [expect_str(item, index_path(items_path, i)) for i, item in enumerate(items)]


def get_opt_str_list(data: JsonObject, key: str, path: str) -> Optional[list[str]]:
    if data.get(key) is None:
        return None
    return get_str_list(data, key, path)


def get_opt_int_list(data: JsonObject, key: str, path: str) -> Optional[list[int]]:
    if data.get(key) is None:
        return None
    return get_int_list(data, key, path)


def get_int_pair(data: JsonObject, key: str, path: str) -> tuple[int, int]:
    """Two-element integer array such as ``px`` or ``__grid``."""
    values = get_int_list(data, key, path)
    if len(values) != 2:
        raise DecodeError(
            f"expected 2 integers, got {len(values)}", key_path(path, key)
        )
    return values[0], values[1]


def get_float_pair(data: JsonObject, key: str, path: str) -> tuple[float, float]:
    values = get_float_list(data, key, path)
    if len(values) != 2:
        raise DecodeError(
            f"expected 2 numbers, got {len(values)}", key_path(path, key)
        )
    return values[0], values[1]


# === NESTED RECORDS ===

def get_objects(
    data: JsonObject,
    key: str,
    path: str,
    factory: Callable[[JsonObject, str], T],
) -> list[T]:
    """Decode a required array of objects with ``factory(obj, path)``."""
    items_path = key_path(path, key)
    items = get_list(data, key, path)
    result: list[T] = []
    for i, item in enumerate(items):
        item_path = index_path(items_path, i)
        result.append(factory(expect_object(item, item_path), item_path))
    return result


def get_opt_objects(
    data: JsonObject,
    key: str,
    path: str,
    factory: Callable[[JsonObject, str], T],
) -> Optional[list[T]]:
    if data.get(key) is None:
        return None
    return get_objects(data, key, path, factory)


def get_object(
    data: JsonObject,
    key: str,
    path: str,
    factory: Callable[[JsonObject, str], T],
) -> T:
    value_path = key_path(path, key)
    return factory(expect_object(_required(data, key, path), value_path), value_path)


def get_opt_object(
    data: JsonObject,
    key: str,
    path: str,
    factory: Callable[[JsonObject, str], T],
) -> Optional[T]:
    value = data.get(key)
    if value is None:
        return None
    value_path = key_path(path, key)
    return factory(expect_object(value, value_path), value_path)


# === ENCODING ===

def enum_value(member: Optional[Enum]) -> Optional[str]:
    return None if member is None else member.value
