"""
Value model for JSON documents.

Documents are plain Python trees: ``dict`` for objects, ``list`` for arrays and
``str``/``int``/``float``/``bool``/``None`` for scalars. The helpers here are
the only place that branch on container type; everything above them works in
terms of string keys and lets this module reinterpret them for arrays.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Union

Json = Union[None, bool, int, float, str, List["Json"], Dict[str, "Json"]]

APPEND_MARKER = "-"

_INDEX_PATTERN = re.compile(r"^(0|[1-9][0-9]*)$")


class ValueKind(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


def kind_of(value: Any) -> ValueKind:
    # bool is a subclass of int, so it has to be checked first
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def type_name(value: Any) -> str:
    return kind_of(value).value


def is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def parse_index(token: Union[str, int]) -> int:
    """
    Interpret an array token as a non-negative index.

    Tokens follow the RFC 6901 array-index grammar: ``0`` or a digit string
    without leading zeros. Raises ``KeyError`` for anything else.
    """
    if isinstance(token, bool):
        raise KeyError(token)
    if isinstance(token, int):
        if token < 0:
            raise KeyError(token)
        return token
    if not isinstance(token, str) or not _INDEX_PATTERN.match(token):
        raise KeyError(token)
    return int(token)


def _checked_index(container: List[Any], key: Union[str, int], *, allow_end: bool = False) -> int:
    idx = parse_index(key)
    upper = len(container) + 1 if allow_end else len(container)
    if idx >= upper:
        raise KeyError(key)
    return idx


def get(container: Any, key: Union[str, int]) -> Any:
    if isinstance(container, dict):
        if not isinstance(key, str):
            raise KeyError(key)
        return container[key]
    if isinstance(container, list):
        return container[_checked_index(container, key)]
    raise KeyError(key)


def contains(container: Any, key: Union[str, int]) -> bool:
    if isinstance(container, dict):
        return isinstance(key, str) and key in container
    if isinstance(container, list):
        try:
            _checked_index(container, key)
        except KeyError:
            return False
        return True
    return False


def insert(container: Any, key: Union[str, int], value: Any) -> None:
    """Set an object member or insert into an array (``-`` appends)."""
    if isinstance(container, dict):
        if not isinstance(key, str):
            raise KeyError(key)
        container[key] = value
    elif isinstance(container, list):
        if key == APPEND_MARKER:
            container.append(value)
        else:
            container.insert(_checked_index(container, key, allow_end=True), value)
    else:
        raise KeyError(key)


def assign(container: Any, key: Union[str, int], value: Any) -> None:
    """Overwrite an existing member or element in place."""
    if isinstance(container, dict):
        if not isinstance(key, str) or key not in container:
            raise KeyError(key)
        container[key] = value
    elif isinstance(container, list):
        container[_checked_index(container, key)] = value
    else:
        raise KeyError(key)


def delete(container: Any, key: Union[str, int]) -> Any:
    if isinstance(container, dict):
        if not isinstance(key, str):
            raise KeyError(key)
        return container.pop(key)
    if isinstance(container, list):
        return container.pop(_checked_index(container, key))
    raise KeyError(key)


def deep_copy(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: deep_copy(v) for k, v in value.items()}
    if isinstance(value, list):
        return [deep_copy(v) for v in value]
    return value


def equals(left: Any, right: Any) -> bool:
    """Structural equality; booleans never compare equal to numbers."""
    left_kind, right_kind = kind_of(left), kind_of(right)
    if left_kind is not right_kind:
        return False
    if left_kind is ValueKind.OBJECT:
        if left.keys() != right.keys():
            return False
        return all(equals(v, right[k]) for k, v in left.items())
    if left_kind is ValueKind.ARRAY:
        if len(left) != len(right):
            return False
        return all(equals(a, b) for a, b in zip(left, right))
    return left == right


__all__ = [
    "APPEND_MARKER",
    "Json",
    "ValueKind",
    "assign",
    "contains",
    "deep_copy",
    "delete",
    "equals",
    "get",
    "insert",
    "is_container",
    "kind_of",
    "parse_index",
    "type_name",
]
