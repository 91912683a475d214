# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/schema/attribute.py
"""
Attribute declarations and config validation for resources and data sources.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..core.exceptions import ConfigError
from ..core.utils import string_set

STRING = "string"
BOOL = "bool"
INT = "int"
FLOAT = "float"
SET = "set"
LIST = "list"
MAP = "map"

_TYPES = (STRING, BOOL, INT, FLOAT, SET, LIST, MAP)

_ZERO: Dict[str, Any] = {
    STRING: "",
    BOOL: False,
    INT: 0,
    FLOAT: 0.0,
    SET: [],
    LIST: [],
    MAP: {},
}


@dataclass(frozen=True)
class Attribute:
    """
    One schema attribute.

    ``set`` attributes hold strings and are normalized to a sorted unique
    list. ``list`` attributes keep order and may hold maps (``elem`` is then
    the nested schema). ``state_func`` normalizes a configured value before
    it is compared with or stored in state.
    """
    type: str = STRING
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None
    description: str = ""
    exactly_one_of: Tuple[str, ...] = ()
    conflicts_with: Tuple[str, ...] = ()
    choices: Tuple[Any, ...] = ()
    elem: Optional[Mapping[str, "Attribute"]] = None
    max_items: int = 0
    state_func: Optional[Callable[[Any], Any]] = None
    validate: Optional[Callable[[Any], Optional[str]]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.type not in _TYPES:
            raise ValueError(f"unknown attribute type {self.type!r}")

    @property
    def configurable(self) -> bool:
        return self.required or self.optional

    def zero(self) -> Any:
        z = _ZERO[self.type]
        return list(z) if isinstance(z, list) else (dict(z) if isinstance(z, dict) else z)

    def empty_value(self) -> Any:
        return self.default if self.default is not None else self.zero()

    def normalize(self, value: Any) -> Any:
        """Shape a stored or API value the way state keeps it (no validation)."""
        if value is None:
            return None
        if self.type == SET:
            return string_set(value)
        if self.type == LIST:
            items = list(value) if isinstance(value, (list, tuple)) else [value]
            if self.elem is not None:
                return [normalize_map(self.elem, dict(i)) for i in items if isinstance(i, Mapping)]
            return items
        if self.type == MAP:
            return dict(value)
        if self.state_func is not None:
            return self.state_func(value)
        return value


def normalize_map(schema: Mapping[str, Attribute], values: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, a in schema.items():
        v = values.get(k)
        out[k] = a.normalize(v) if v is not None else a.empty_value()
    return out


def is_set(value: Any) -> bool:
    """True for values that count as configured (non-None, non-empty)."""
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) > 0
    return True


def _coerce(name: str, a: Attribute, value: Any, where: str) -> Any:
    t = a.type
    try:
        if t == STRING:
            if isinstance(value, (dict, list, tuple, set)):
                raise TypeError(f"expected a string, got {type(value).__name__}")
            return str(value)
        if t == BOOL:
            if isinstance(value, bool):
                return value
            raise TypeError(f"expected a bool, got {value!r}")
        if t == INT:
            if isinstance(value, bool):
                raise TypeError(f"expected an int, got {value!r}")
            return int(value)
        if t == FLOAT:
            if isinstance(value, bool):
                raise TypeError(f"expected a number, got {value!r}")
            return float(value)
        if t == SET:
            if isinstance(value, (str, Mapping)) or not hasattr(value, "__iter__"):
                raise TypeError(f"expected a list of strings, got {type(value).__name__}")
            return string_set(value)
        if t == LIST:
            if isinstance(value, Mapping) and a.elem is not None and a.max_items == 1:
                value = [value]
            if isinstance(value, (str, Mapping)) or not hasattr(value, "__iter__"):
                raise TypeError(f"expected a list, got {type(value).__name__}")
            items = list(value)
            if a.max_items and len(items) > a.max_items:
                raise TypeError(f"at most {a.max_items} item(s) allowed, got {len(items)}")
            if a.elem is not None:
                return [validate_config(a.elem, i, f"{where}.{name}[{n}]") for n, i in enumerate(items)]
            return items
        if t == MAP:
            if not isinstance(value, Mapping):
                raise TypeError(f"expected a mapping, got {type(value).__name__}")
            return dict(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(msg=f"{where}: attribute {name!r}: {e}", cause=e)
    return value


def validate_config(schema: Mapping[str, Attribute], config: Any, where: str) -> Dict[str, Any]:
    """
    Validate a config block against ``schema``.

    Returns the normalized config containing every configurable attribute
    (unset ones as None, defaults applied). Raises ConfigError on the first
    problem found.
    """
    if config is None:
        config = {}
    if not isinstance(config, Mapping):
        raise ConfigError(msg=f"{where}: config must be a mapping, got {type(config).__name__}")

    unknown = sorted(k for k in config if k not in schema)
    if unknown:
        raise ConfigError(msg=f"{where}: unsupported attribute(s): {', '.join(unknown)}")

    out: Dict[str, Any] = {}
    for name, a in schema.items():
        raw = config.get(name)
        if raw is not None and not a.configurable:
            raise ConfigError(msg=f"{where}: attribute {name!r} is computed and cannot be set")
        if raw is None:
            out[name] = a.default if a.configurable else None
            continue
        v = _coerce(name, a, raw, where)
        if a.choices and v not in a.choices:
            raise ConfigError(msg=f"{where}: attribute {name!r} must be one of {list(a.choices)}, got {v!r}")
        if a.validate is not None:
            problem = a.validate(v)
            if problem:
                raise ConfigError(msg=f"{where}: attribute {name!r}: {problem}")
        if a.state_func is not None:
            v = a.state_func(v)
        out[name] = v

    for name, a in schema.items():
        if a.required and not is_set(out.get(name)):
            raise ConfigError(msg=f"{where}: attribute {name!r} is required")

        if a.exactly_one_of:
            group = (name,) + tuple(a.exactly_one_of)
            present = [g for g in group if is_set(out.get(g))]
            if len(present) != 1:
                raise ConfigError(
                    msg=f"{where}: exactly one of {', '.join(repr(g) for g in group)} must be set"
                    + (f" (got {', '.join(present)})" if present else "")
                )

        if a.conflicts_with and is_set(out.get(name)):
            clash = [c for c in a.conflicts_with if is_set(out.get(c))]
            if clash:
                raise ConfigError(msg=f"{where}: attribute {name!r} conflicts with {', '.join(repr(c) for c in clash)}")

    return out
