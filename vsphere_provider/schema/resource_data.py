# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/schema/resource_data.py
from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional, Tuple

from .attribute import Attribute, is_set


class ResourceData:
    """
    Attribute view handed to resource operations.

    Three layers, highest priority first:
      - values written during the current operation (``set``)
      - the desired config (absent for refresh/import/destroy)
      - the prior state

    Configurable, non-computed attributes follow the config when one is
    present, even when it leaves them unset. Computed attributes fall back to
    prior state when the config does not pin them.
    """

    def __init__(
        self,
        schema: Mapping[str, Attribute],
        *,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[Mapping[str, Any]] = None,
        id: str = "",
    ) -> None:
        self.schema = schema
        self._config: Optional[Dict[str, Any]] = dict(config) if config is not None else None
        st = dict(state or {})
        self._id = str(id or st.pop("id", "") or "")
        self._state: Dict[str, Any] = st
        self._written: Dict[str, Any] = {}

    # Identity

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: Optional[str]) -> None:
        """An empty id marks the object as gone."""
        self._id = str(value or "")

    @property
    def has_config(self) -> bool:
        return self._config is not None

    # Reads

    def _attr(self, key: str) -> Attribute:
        try:
            return self.schema[key]
        except KeyError:
            raise KeyError(f"unknown attribute {key!r}") from None

    def _desired(self, key: str) -> Any:
        a = self._attr(key)
        if self._config is not None and a.configurable:
            v = self._config.get(key)
            if v is not None and (not a.computed or is_set(v)):
                return v
            if not a.computed:
                return a.empty_value()
        v = self._state.get(key)
        return v if v is not None else a.empty_value()

    def get(self, key: str) -> Any:
        if key in self._written:
            return copy.deepcopy(self._written[key])
        return copy.deepcopy(self._desired(key))

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        v = self.get(key)
        return v, is_set(v) and not (isinstance(v, (bool, int, float)) and not v)

    def get_change(self, key: str) -> Tuple[Any, Any]:
        """(old, new): prior state value versus desired value."""
        a = self._attr(key)
        old = self._state.get(key)
        if old is None:
            old = a.empty_value()
        return copy.deepcopy(old), self.get(key)

    def has_change(self, key: str) -> bool:
        if self._config is None:
            return False
        a = self._attr(key)
        if not a.configurable:
            return False
        if a.computed and not is_set(self._config.get(key)):
            return False
        old, new = self.get_change(key)
        return a.normalize(old) != a.normalize(new)

    def has_changes(self, *keys: str) -> bool:
        return any(self.has_change(k) for k in keys)

    # Writes

    def set(self, key: str, value: Any) -> None:
        a = self._attr(key)
        self._written[key] = a.normalize(value) if value is not None else a.empty_value()

    # Export

    def to_state(self) -> Dict[str, Any]:
        """Flattened attribute map (plus ``id``) for the state file."""
        out: Dict[str, Any] = {"id": self._id}
        for k, a in self.schema.items():
            v = self.get(k)
            out[k] = a.normalize(v) if v is not None else a.empty_value()
        return out
