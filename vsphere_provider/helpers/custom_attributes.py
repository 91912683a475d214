# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/helpers/custom_attributes.py
"""Custom attribute values on managed entities (vCenter only)."""
from __future__ import annotations

from typing import Any, Dict, Mapping

from ..core.exceptions import ConfigError, VSphereError, wrap_vsphere
from ..vsphere.viapi import call, moref


def read(client: Any, entity: Any) -> Dict[str, str]:
    """Custom field key (as a string) to value for every value set on ``entity``."""
    values = call("read custom values", lambda: entity.customValue) or []
    return {str(v.key): str(getattr(v, "value", "") or "") for v in values}


def apply_diff(client: Any, entity: Any, old: Mapping[str, Any], new: Mapping[str, Any]) -> None:
    """
    Set changed or added keys and blank out removed ones.

    Keys are custom field keys from the fields manager; a non-numeric key is
    a configuration error.
    """
    mgr = client.content.customFieldsManager
    changes: Dict[str, str] = {k: "" for k in old if k not in new}
    changes.update({k: str(v) for k, v in new.items() if k not in old or str(old[k]) != str(v)})

    for key in sorted(changes):
        try:
            field_key = int(key)
        except ValueError:
            raise ConfigError(msg=f"custom attribute key {key!r} is not a numeric field key") from None
        client.logger.info("Setting custom attribute %s on %s", key, moref(entity))
        try:
            call(f"set custom field {key}", mgr.SetField, entity=entity, key=field_key, value=changes[key])
        except VSphereError as e:
            raise wrap_vsphere(f"could not set custom attribute {key!r} on {moref(entity)}", e)
