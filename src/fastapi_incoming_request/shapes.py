"""Shape validation and copy helpers for the parameter bags."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fastapi_incoming_request.exceptions import ShapeViolation


def _child_path(path: str, key: str) -> str:
    return f"{path}[{key}]" if path else key


def _require_mapping(value: Any, label: str) -> Mapping[Any, Any]:
    if not isinstance(value, Mapping):
        raise ShapeViolation(
            f"{label} must be a mapping, got {type(value).__name__}"
        )
    return value


def validate_params(value: Any, *, max_depth: int, label: str) -> dict[str, Any]:
    """Validate a cookie or query tree and return a detached copy.

    Keys must be strings and values strings or mappings of the same shape,
    at most ``max_depth`` mappings deep.
    """
    return _copy_params(_require_mapping(value, label), "", 0, max_depth)


def _copy_params(
    mapping: Mapping[Any, Any], path: str, depth: int, max_depth: int
) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, item in mapping.items():
        if not isinstance(key, str):
            raise ShapeViolation(f"key {key!r} is not a string", path=path)
        item_path = _child_path(path, key)
        if isinstance(item, str):
            result[key] = item
        elif isinstance(item, Mapping):
            if depth >= max_depth:
                raise ShapeViolation(
                    f"nested deeper than {max_depth} levels", path=item_path
                )
            result[key] = _copy_params(item, item_path, depth + 1, max_depth)
        else:
            raise ShapeViolation(
                f"{type(item).__name__} is not a string or mapping", path=item_path
            )
    return result


def validate_keys(value: Any, *, label: str) -> dict[str, Any]:
    """Validate that ``value`` is a mapping with string keys; shallow copy it."""
    mapping = _require_mapping(value, label)
    for key in mapping:
        if not isinstance(key, str):
            raise ShapeViolation(f"{label} key {key!r} is not a string")
    return dict(mapping)


def validate_server_params(value: Any) -> dict[str, Any]:
    mapping = validate_keys(value, label="server params")
    for key, item in mapping.items():
        if not isinstance(item, (str, int, float)):
            raise ShapeViolation(
                f"{type(item).__name__} is not a string or number", path=key
            )
    return mapping


def validate_file_tree(
    value: Any, leaf_type: type, *, path: str = ""
) -> dict[str, Any]:
    """Validate an upload tree whose leaves are ``leaf_type`` instances."""
    mapping = _require_mapping(value, "file params")
    result: dict[str, Any] = {}
    for key, item in mapping.items():
        if not isinstance(key, str):
            raise ShapeViolation(f"key {key!r} is not a string", path=path)
        item_path = _child_path(path, key)
        if isinstance(item, leaf_type):
            result[key] = item
        elif isinstance(item, Mapping):
            result[key] = validate_file_tree(item, leaf_type, path=item_path)
        else:
            raise ShapeViolation(
                f"{type(item).__name__} is not an uploaded file", path=item_path
            )
    return result


def copy_tree(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-copy nested mappings into plain dicts; leaves are shared."""
    return {
        key: copy_tree(item) if isinstance(item, Mapping) else item
        for key, item in mapping.items()
    }


def freeze(mapping: Mapping[str, Any]) -> MappingProxyType[str, Any]:
    """Return a read-only view over a private copy of ``mapping``."""
    return MappingProxyType(
        {
            key: freeze(item) if isinstance(item, Mapping) else item
            for key, item in mapping.items()
        }
    )
