# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/host.py
from __future__ import annotations

from typing import Any

from ..core.exceptions import VSphereError
from ..helpers import hostsystem
from ..schema import BOOL, STRING, Attribute, DataSource, ResourceData
from ..vsphere.viapi import moref


class Host(DataSource):
    """
    Look up a host by name inside a datacenter. On a direct ESXi connection,
    or when vCenter manages a single host, ``name`` may be left empty.
    """

    type_name = "vsphere_host"
    schema = {
        "name": Attribute(STRING, optional=True, description="Host name as shown in inventory."),
        "datacenter": Attribute(STRING, optional=True, description="Datacenter name; required on vCenter with several."),
        "hostname": Attribute(STRING, computed=True),
        "connection_state": Attribute(STRING, computed=True),
        "maintenance_mode": Attribute(BOOL, computed=True),
        "resource_pool_id": Attribute(STRING, computed=True),
    }

    def _datacenter(self, client: Any, name: str) -> Any:
        dcs = client.datacenters()
        if name:
            for dc in dcs:
                if client.object_name(dc) == name:
                    return dc
            raise VSphereError(msg=f"datacenter {name!r} not found")
        if client.is_vcenter and len(dcs) > 1:
            raise VSphereError(msg="several datacenters found; set 'datacenter'")
        return dcs[0] if dcs else None

    def read(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        dc = self._datacenter(client, d.get("datacenter"))
        host = hostsystem.system_or_default(client, d.get("name"), dc)
        props = hostsystem.properties(client, host)

        d.set_id(moref(host))
        d.set("hostname", props.name)
        d.set("connection_state", str(props.runtime.connectionState))
        d.set("maintenance_mode", bool(props.runtime.inMaintenanceMode))
        d.set("resource_pool_id", moref(hostsystem.resource_pool(client, host)))
