# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/host_snmp.py
from __future__ import annotations

from typing import Any, Dict, List

from pyVmomi import vim

from ..core.exceptions import VSphereError, wrap_vsphere
from ..helpers import hostsystem
from ..schema import BOOL, INT, LIST, SET, STRING, Attribute, Resource, ResourceData
from ..vsphere.viapi import call
from .common import host_identity_schema, resolve_import_host

DEFAULT_SNMP_PORT = 161
DEFAULT_TRAP_PORT = 162


def _port(v: int) -> str:
    return "" if 1 <= int(v) <= 65535 else f"port {v} is out of range"


TRAP_TARGET_SCHEMA = {
    "hostname": Attribute(STRING, required=True),
    "port": Attribute(INT, optional=True, default=DEFAULT_TRAP_PORT, validate=_port),
    "community": Attribute(STRING, required=True),
}


def _snmp_system(client: Any, host: Any) -> Any:
    return hostsystem.properties(client, host).config_manager.snmpSystem


class HostSnmp(Resource):
    """SNMP agent settings of a host."""

    type_name = "vsphere_host_snmp"
    schema = {
        **host_identity_schema("configure snmp on"),
        "enabled": Attribute(BOOL, optional=True, default=True),
        "port": Attribute(INT, optional=True, default=DEFAULT_SNMP_PORT, validate=_port),
        "read_only_communities": Attribute(SET, optional=True),
        "trap_targets": Attribute(LIST, optional=True, elem=TRAP_TARGET_SCHEMA),
    }

    def _spec(self, d: ResourceData, *, enabled: bool) -> Any:
        targets: List[Dict[str, Any]] = d.get("trap_targets") or []
        return vim.host.SnmpSystem.SnmpConfigSpec(
            enabled=enabled,
            port=int(d.get("port") or DEFAULT_SNMP_PORT),
            readOnlyCommunities=list(d.get("read_only_communities") or []),
            trapTargets=[
                vim.host.SnmpSystem.SnmpConfigSpec.Destination(
                    hostName=t["hostname"], port=int(t["port"]), community=t["community"]
                )
                for t in targets
            ],
        )

    def _reconfigure(self, meta: Any, d: ResourceData, spec: Any) -> str:
        client = meta.vim
        host, hr = hostsystem.from_hostname_or_id(client, d)
        name = client.object_name(host)
        client.logger.info("Reconfiguring SNMP agent on host %r (enabled: %s)", name, spec.enabled)
        try:
            call("reconfigure snmp agent", _snmp_system(client, host).ReconfigureSnmpAgent, spec=spec)
        except VSphereError as e:
            raise wrap_vsphere(f"error configuring snmp on host '{name}'", e)
        return hr.value

    def create(self, meta: Any, d: ResourceData) -> None:
        d.set_id(self._reconfigure(meta, d, self._spec(d, enabled=bool(d.get("enabled")))))
        self.read(meta, d)

    def read(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        host, hr = hostsystem.from_hostname_or_id(client, d)
        snmp = _snmp_system(client, host)
        try:
            cfg = call("read snmp configuration", lambda: snmp.configuration)
        except VSphereError as e:
            raise wrap_vsphere(f"error reading snmp configuration of host '{client.object_name(host)}'", e)

        d.set_id(hr.value)
        d.set("enabled", bool(cfg.enabled))
        d.set("port", int(cfg.port or DEFAULT_SNMP_PORT))
        d.set("read_only_communities", list(cfg.readOnlyCommunities or []))
        d.set(
            "trap_targets",
            [{"hostname": t.hostName, "port": int(t.port), "community": t.community} for t in (cfg.trapTargets or [])],
        )

    def update(self, meta: Any, d: ResourceData) -> None:
        self._reconfigure(meta, d, self._spec(d, enabled=bool(d.get("enabled"))))
        self.read(meta, d)

    def delete(self, meta: Any, d: ResourceData) -> None:
        spec = vim.host.SnmpSystem.SnmpConfigSpec(
            enabled=False,
            port=DEFAULT_SNMP_PORT,
            readOnlyCommunities=[],
            trapTargets=[],
        )
        self._reconfigure(meta, d, spec)

    def import_state(self, meta: Any, d: ResourceData) -> None:
        _, hr = resolve_import_host(meta, d, d.id)
        d.set_id(hr.value)
