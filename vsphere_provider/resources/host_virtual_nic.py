# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/host_virtual_nic.py
from __future__ import annotations

from typing import Any, Dict, Tuple

from ..core.exceptions import ConfigError, VSphereError, wrap_vsphere
from ..helpers import hostsystem, network
from ..schema import BOOL, INT, LIST, SET, STRING, Attribute, Resource, ResourceData
from .common import resolve_import_host, host_identity_schema

IMPORT_SHAPE = "<host_system_id | hostname>_<vmkN>"

IPV4_SCHEMA = {
    "dhcp": Attribute(BOOL, optional=True, default=False),
    "ip": Attribute(STRING, optional=True),
    "netmask": Attribute(STRING, optional=True),
    "gw": Attribute(STRING, optional=True),
}


def _unknown_services(values: Any) -> str:
    bad = sorted(set(values) - set(network.SERVICE_TYPES))
    return f"unsupported service(s): {', '.join(bad)}" if bad else ""


def split_vnic_id(value: str) -> Tuple[str, str]:
    host_part, sep, device = str(value or "").rpartition("_")
    if not sep or not host_part or not device.startswith("vmk"):
        raise ConfigError(msg=f"invalid virtual nic id {value!r}. Format should be {IMPORT_SHAPE}")
    return host_part, device


class HostVirtualNic(Resource):
    """VMkernel network adapter on a standard or distributed switch."""

    type_name = "vsphere_host_virtual_nic"
    schema = {
        **host_identity_schema("create the virtual nic on"),
        "portgroup": Attribute(
            STRING,
            optional=True,
            exactly_one_of=("distributed_switch_port",),
            description="Standard switch port group to attach to.",
        ),
        "distributed_switch_port": Attribute(
            STRING,
            optional=True,
            description="UUID of the distributed switch to attach to.",
        ),
        "distributed_port_group": Attribute(
            STRING,
            optional=True,
            description="Key of the distributed port group to attach to.",
        ),
        "ipv4": Attribute(LIST, required=True, elem=IPV4_SCHEMA, max_items=1),
        "mtu": Attribute(INT, optional=True, default=1500),
        "netstack": Attribute(STRING, optional=True, force_new=True, default=network.DEFAULT_NETSTACK),
        "services": Attribute(SET, optional=True, validate=_unknown_services),
        "mac": Attribute(STRING, computed=True),
        "device": Attribute(STRING, computed=True),
    }

    def validate(self, config: Any, where: str) -> Dict[str, Any]:
        out = super().validate(config, where)
        if out.get("distributed_switch_port") and not out.get("distributed_port_group"):
            raise ConfigError(msg=f"{where}: 'distributed_port_group' is required with 'distributed_switch_port'")
        ipv4 = out["ipv4"][0]
        if not ipv4.get("dhcp") and not (ipv4.get("ip") and ipv4.get("netmask")):
            raise ConfigError(msg=f"{where}: ipv4 needs either dhcp = true or both 'ip' and 'netmask'")
        return out

    def create(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        host, hr = hostsystem.from_hostname_or_id(client, d)
        spec = network.build_vnic_spec(d, include_netstack=True)
        device = network.add_vnic(client, host, d.get("portgroup"), spec)
        client.logger.info("Created virtual nic %s on host %r", device, client.object_name(host))
        d.set_id(f"{hr.value}_{device}")

        services = d.get("services")
        if services:
            network.set_vnic_services(client, host, device, [], services)

        self.read(meta, d)

    def read(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        _, device = split_vnic_id(d.id)
        host, _ = hostsystem.from_hostname_or_id(client, d)

        nic = network.find_vnic(client, host, device)
        if nic is None:
            client.logger.info("Virtual nic %s is gone; dropping it from state", device)
            d.set_id("")
            return

        spec = nic.spec
        d.set("device", device)
        d.set("portgroup", nic.portgroup or "")
        d.set("mac", spec.mac or "")
        d.set("mtu", int(spec.mtu or 0))
        d.set("netstack", spec.netStackInstanceKey or network.DEFAULT_NETSTACK)

        dvp = getattr(spec, "distributedVirtualPort", None)
        d.set("distributed_switch_port", getattr(dvp, "switchUuid", "") or "")
        d.set("distributed_port_group", getattr(dvp, "portgroupKey", "") or "")

        ip = spec.ip
        route = getattr(getattr(spec, "ipRouteSpec", None), "ipRouteConfig", None)
        d.set(
            "ipv4",
            [
                {
                    "dhcp": bool(ip.dhcp),
                    "ip": "" if ip.dhcp else (ip.ipAddress or ""),
                    "netmask": "" if ip.dhcp else (ip.subnetMask or ""),
                    "gw": getattr(route, "defaultGateway", "") or "",
                }
            ],
        )
        d.set("services", network.vnic_services(client, host, device))

    def update(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        _, device = split_vnic_id(d.id)
        host, _ = hostsystem.from_hostname_or_id(client, d)

        if d.has_changes("portgroup", "distributed_switch_port", "distributed_port_group", "ipv4", "mtu"):
            spec = network.build_vnic_spec(d, include_netstack=False)
            if d.get("portgroup"):
                spec.portgroup = d.get("portgroup")
            network.update_vnic(client, host, device, spec)

        if d.has_change("services"):
            old, new = d.get_change("services")
            network.set_vnic_services(client, host, device, old, new)

        self.read(meta, d)

    def delete(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        _, device = split_vnic_id(d.id)
        host, _ = hostsystem.from_hostname_or_id(client, d)
        network.remove_vnic(client, host, device)

    def import_state(self, meta: Any, d: ResourceData) -> None:
        host_part, device = split_vnic_id(d.id)
        try:
            host, hr = resolve_import_host(meta, d, host_part)
        except VSphereError as e:
            raise wrap_vsphere("error retrieving host for virtual nic import", e)
        if network.find_vnic(meta.vim, host, device) is None:
            raise VSphereError(msg=f"virtual nic {device!r} not found on host '{hr.value}'")
        d.set_id(f"{hr.value}_{device}")
