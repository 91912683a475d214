# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/schema/__init__.py
from __future__ import annotations

from .attribute import (
    BOOL,
    FLOAT,
    INT,
    LIST,
    MAP,
    SET,
    STRING,
    Attribute,
    is_set,
    normalize_map,
    validate_config,
)
from .resource import DataSource, Resource
from .resource_data import ResourceData

__all__ = [
    "BOOL",
    "FLOAT",
    "INT",
    "LIST",
    "MAP",
    "SET",
    "STRING",
    "Attribute",
    "DataSource",
    "Resource",
    "ResourceData",
    "is_set",
    "normalize_map",
    "validate_config",
]
