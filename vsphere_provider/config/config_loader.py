# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/config/config_loader.py
from __future__ import annotations

import argparse
import glob
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..core.utils import U


def deep_merge_dict(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries recursively.

    Behavior:
        - Dict values are merged recursively
        - Lists and scalars are replaced (override wins)

    Example:
        >>> deep_merge_dict({"a": {"b": 1, "c": 2}, "d": 3}, {"a": {"c": 99}, "e": 4})
        {'a': {'b': 1, 'c': 99}, 'd': 3, 'e': 4}
    """
    out: Dict[str, Any] = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = deep_merge_dict(out[k], v)
        else:
            out[k] = v
    return out


class Config:
    """
    YAML/JSON config files for the CLI.

    Keys use argparse dest names (snake_case); dashed keys are accepted and
    normalized. Resource declarations live under ``resources`` and
    ``data_sources``.
    """

    @staticmethod
    def expand_configs(logger: logging.Logger, cfgs: List[str]) -> List[str]:
        """Expand ``~``, env vars and globs; keep order, drop duplicates."""
        out: List[str] = []
        for raw in cfgs:
            p = os.path.expandvars(os.path.expanduser(str(raw)))
            matches = sorted(glob.glob(p)) if any(ch in p for ch in "*?[") else [p]
            if not matches:
                U.die(logger, f"Config glob matched nothing: {raw}", 2)
            for m in matches:
                if m not in out:
                    out.append(m)
        logger.debug("Config files: %s", out)
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: str) -> Dict[str, Any]:
        p = Path(path)
        if not p.is_file():
            U.die(logger, f"Config file not found: {path}", 2)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as e:
            U.die(logger, f"Cannot read config {path}: {e}", 2)

        try:
            if p.suffix.lower() == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (yaml.YAMLError, ValueError) as e:
            U.die(logger, f"Invalid config {path}: {e}", 2)

        if not isinstance(data, dict):
            U.die(logger, f"Config {path} must be a mapping at top level (got {type(data).__name__})", 2)
        return Config.normalize_keys(data)

    @staticmethod
    def normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
        # Only top-level keys map onto argparse dests; resource configs keep their keys.
        return {str(k).replace("-", "_"): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: List[str]) -> Dict[str, Any]:
        conf: Dict[str, Any] = {}
        for path in paths:
            one = Config.load_one(logger, path)
            logger.debug("Loaded config %s (%d keys)", path, len(one))
            conf = deep_merge_dict(conf, one)
        return conf

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """Apply config values as parser defaults so CLI flags still win."""
        dests = {a.dest for a in parser._actions}
        known = {k: v for k, v in conf.items() if k in dests}
        unknown = sorted(k for k in conf if k not in dests)
        if unknown:
            logger.debug("Config keys without CLI flags (kept in merged config): %s", unknown)
        if known:
            parser.set_defaults(**known)
