# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/cli/args/validators.py
from __future__ import annotations

import argparse
from typing import Any, Dict

from ...core.exceptions import ConfigError
from ...engine.runner import parse_declarations
from .groups import COMMANDS
from .helpers import _merged_cmd, _merged_get, _require


def _validate_declarations(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    parse_declarations(conf.get("resources"), "resources")
    parse_declarations(conf.get("data_sources"), "data_sources")


def _validate_cmd_import(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    missing = [f"--{k.split('_', 1)[1]}" for k in ("import_type", "import_name", "import_id") if not _require(_merged_get(args, conf, k))]
    if missing:
        raise ConfigError(msg=f"import requires {', '.join(missing)}")


def _validate_cmd_resolve_host(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    if not _require(_merged_get(args, conf, "host")):
        raise ConfigError(msg="resolve-host requires --host (managed object ID or hostname)")


def _validate_cmd_maintenance(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    _validate_cmd_resolve_host(args, conf)
    if _merged_get(args, conf, "maintenance") not in ("enter", "exit"):
        raise ConfigError(msg="maintenance requires --maintenance enter|exit")
    timeout = _merged_get(args, conf, "maintenance_timeout")
    if timeout is not None and int(timeout) <= 0:
        raise ConfigError(msg=f"invalid --maintenance-timeout: {timeout}")


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    """
    YAML or the positional argument selects the operation; flags override YAML.
    No side effects here.
    """
    cmd = _merged_cmd(args, conf)
    if not _require(cmd):
        raise ConfigError(msg=f"Missing operation: pass one of {', '.join(COMMANDS)} or set YAML `cmd:`")
    if cmd not in COMMANDS:
        raise ConfigError(msg=f"Unknown operation {cmd!r}; expected one of {', '.join(COMMANDS)}")

    _validate_declarations(args, conf)

    validators = {
        "import": _validate_cmd_import,
        "resolve-host": _validate_cmd_resolve_host,
        "maintenance": _validate_cmd_maintenance,
    }
    fn = validators.get(cmd)
    if fn is not None:
        fn(args, conf)

    args.cmd = cmd
