"""Dotted field-path helpers for nested observation records.

A field path joins the keys leading to a leaf with "." — ``auton.fuelScored``.
Leaves are any non-mapping values; lists are treated as opaque leaves and are
never descended into.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping, MutableMapping
from typing import Any

from pydantic import BaseModel


def iter_field_paths(record: Mapping[str, Any], prefix: str = "") -> list[str]:
    """Return the dotted path of every leaf in ``record``, in key order.

    Args:
        record: A nested mapping of primitive leaves (e.g. a dumped Observation).
        prefix: Path of ``record`` itself within an enclosing record; empty at the root.

    Returns:
        List of dotted path strings, depth-first, one per leaf.
    """
    paths: list[str] = []
    for key, value in record.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            paths.extend(iter_field_paths(value, path))
        else:
            paths.append(path)
    return paths


@functools.cache
def schema_field_paths(model: type[BaseModel], prefix: str = "") -> tuple[str, ...]:
    """Derive the leaf field paths of a pydantic model class from its schema.

    Produces the same strings, in the same order, as ``iter_field_paths`` on an
    instance dumped with ``by_alias=True``, without needing an instance.
    """
    paths: list[str] = []
    for name, info in model.model_fields.items():
        key = info.alias or name
        path = f"{prefix}.{key}" if prefix else key
        annotation = info.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            paths.extend(schema_field_paths(annotation, path))
        else:
            paths.append(path)
    return tuple(paths)


def get_nested(record: Any, path: str) -> Any:
    """Read the value at ``path``; ``None`` when any segment is missing."""
    current = record
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def set_nested(record: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate mappings as needed."""
    keys = path.split(".")
    current = record
    for key in keys[:-1]:
        child = current.get(key)
        if not isinstance(child, MutableMapping):
            child = {}
            current[key] = child
        current = child
    current[keys[-1]] = value
