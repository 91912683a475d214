# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/cli/args/__init__.py
"""
Argument parser modules for the vsphere-provider CLI.
"""
from __future__ import annotations

from .builder import HelpFormatter, _build_epilog
from .groups import COMMANDS, DEFAULT_STATE_FILE
from .helpers import _merged_cmd, _merged_get, _require, connection_settings
from .parser import _build_preparser, _load_merged_config, build_parser, parse_args_with_config
from .validators import validate_args

__all__ = [
    "COMMANDS",
    "DEFAULT_STATE_FILE",
    "HelpFormatter",
    "_build_epilog",
    "_build_preparser",
    "_load_merged_config",
    "_merged_cmd",
    "_merged_get",
    "_require",
    "build_parser",
    "connection_settings",
    "parse_args_with_config",
    "validate_args",
]
