# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/cli/args/helpers.py
from __future__ import annotations

import argparse
from typing import Any, Dict, Optional

CONNECTION_KEYS = (
    "vsphere_server",
    "vsphere_user",
    "vsphere_password",
    "vsphere_password_env",
    "vsphere_port",
    "allow_unverified_ssl",
    "api_timeout",
    "api_retries",
)


def _require(v: Any) -> bool:
    """True if v is meaningfully present (treats empty/whitespace-only strings as missing)."""
    if v is None:
        return False
    if isinstance(v, str):
        return v.strip() != ""
    return True


def _merged_get(args: argparse.Namespace, conf: Dict[str, Any], key: str) -> Any:
    """
    Prefer CLI override if present (non-empty), else config.
    Supports both snake_case keys in conf and argparse dest keys.
    """
    v = getattr(args, key, None)
    if _require(v):
        return v
    return conf.get(key)


def _merged_cmd(args: argparse.Namespace, conf: Dict[str, Any]) -> Optional[str]:
    v = getattr(args, "cmd", None)
    if _require(v):
        return str(v).strip().lower()
    for key in ("cmd", "command"):
        v = conf.get(key, None)
        if _require(v):
            return str(v).strip().lower()
    return None


def connection_settings(args: argparse.Namespace, conf: Dict[str, Any]) -> Dict[str, Any]:
    """Connection keys merged CLI-over-config, ready for ProviderConfig.resolve."""
    return {k: _merged_get(args, conf, k) for k in CONNECTION_KEYS}
