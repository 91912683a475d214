# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/helpers/advanced_options.py
"""Host advanced settings (``configManager.advancedOption``)."""
from __future__ import annotations

from typing import Any, Dict

from pyVmomi import vim

from ..core.exceptions import VSphereError, wrap_vsphere
from ..vsphere.viapi import call
from .hostsystem import properties as host_properties


def option_manager(client: Any, host: Any) -> Any:
    return host_properties(client, host).config_manager.advancedOption


def query_option(client: Any, host: Any, key: str) -> Any:
    """Current value of one advanced option."""
    mgr = option_manager(client, host)
    try:
        values = call(f"query option {key}", mgr.QueryOptions, name=key) or []
    except VSphereError as e:
        raise wrap_vsphere(f"error reading advanced option {key!r} on host '{client.object_name(host)}'", e)
    for v in values:
        if v.key == key:
            return v.value
    raise VSphereError(msg=f"advanced option {key!r} not found on host '{client.object_name(host)}'")


def update_options(client: Any, host: Any, changes: Dict[str, Any]) -> None:
    if not changes:
        return
    mgr = option_manager(client, host)
    values = [vim.option.OptionValue(key=k, value=v) for k, v in sorted(changes.items())]
    client.logger.info("Updating advanced options on host %r: %s", client.object_name(host), sorted(changes))
    try:
        call("update options", mgr.UpdateOptions, changedValue=values)
    except VSphereError as e:
        raise wrap_vsphere(f"error updating advanced options on host '{client.object_name(host)}'", e)
