# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/engine/state.py
"""
JSON state file.

Layout::

    {
      "version": 1,
      "serial": 7,
      "updated": "2026-01-01T00:00:00+00:00",
      "resources": {
        "vsphere_vcenter_dns.main": {
          "type": "vsphere_vcenter_dns",
          "name": "main",
          "attributes": {"id": "vcenter-dns", "servers": ["10.0.0.2"]}
        }
      }
    }

Every save bumps ``serial`` and is atomic (temp file + os.replace).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.exceptions import Fatal
from ..core.utils import U

STATE_VERSION = 1


def address(type_name: str, name: str) -> str:
    return f"{type_name}.{name}"


class StateStore:
    def __init__(self, logger: logging.Logger, path: Path) -> None:
        self.logger = logger
        self.path = Path(path)
        self._data: Dict[str, Any] = {"version": STATE_VERSION, "serial": 0, "resources": {}}

    def load(self) -> "StateStore":
        if not self.path.exists():
            self.logger.debug("No state file at %s; starting empty", self.path)
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise Fatal(40, f"cannot read state file {self.path}: {e}")
        if not isinstance(data, dict) or not isinstance(data.get("resources", {}), dict):
            raise Fatal(40, f"state file {self.path} is malformed")
        version = int(data.get("version", STATE_VERSION))
        if version > STATE_VERSION:
            raise Fatal(40, f"state file {self.path} has version {version}; this tool understands {STATE_VERSION}")
        data.setdefault("resources", {})
        data.setdefault("serial", 0)
        data["version"] = STATE_VERSION
        self._data = data
        self.logger.debug("Loaded state %s (serial %s, %d resources)", self.path, data["serial"], len(data["resources"]))
        return self

    def save(self) -> None:
        self._data["serial"] = int(self._data.get("serial", 0)) + 1
        self._data["updated"] = U.utc_iso()
        U.atomic_write_text(self.path, U.json_dump(self._data) + "\n")
        self.logger.debug("Saved state %s (serial %s)", self.path, self._data["serial"])

    @property
    def serial(self) -> int:
        return int(self._data.get("serial", 0))

    def addresses(self) -> List[str]:
        return list(self._data["resources"].keys())

    def get(self, addr: str) -> Optional[Dict[str, Any]]:
        entry = self._data["resources"].get(addr)
        return dict(entry["attributes"]) if entry else None

    def type_of(self, addr: str) -> str:
        return str(self._data["resources"][addr]["type"])

    def put(self, type_name: str, name: str, attributes: Dict[str, Any]) -> None:
        self._data["resources"][address(type_name, name)] = {
            "type": type_name,
            "name": name,
            "attributes": attributes,
        }

    def remove(self, addr: str) -> None:
        self._data["resources"].pop(addr, None)

    def to_dict(self) -> Dict[str, Any]:
        return json.loads(json.dumps(self._data, default=str))
