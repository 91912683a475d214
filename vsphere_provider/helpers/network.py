# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/helpers/network.py
from __future__ import annotations

from typing import Any, List, Optional

from pyVmomi import vim

from ..core.exceptions import VSphereError, wrap_vsphere
from ..vsphere.viapi import call
from .hostsystem import properties as host_properties

DEFAULT_NETSTACK = "defaultTcpipStack"

SERVICE_TYPES = (
    "vmotion",
    "management",
    "vsan",
    "vSphereReplication",
    "vSphereReplicationNFC",
    "vSphereProvisioning",
    "faultToleranceLogging",
    "vsanWitness",
    "ptp",
)


def network_system(client: Any, host: Any) -> Any:
    return host_properties(client, host).config_manager.networkSystem


def virtual_nic_manager(client: Any, host: Any) -> Any:
    return host_properties(client, host).config_manager.virtualNicManager


def find_vnic(client: Any, host: Any, device: str) -> Optional[Any]:
    """The HostVirtualNic named ``device`` (``vmk1``), or None."""
    ns = network_system(client, host)
    info = call("read network info", lambda: ns.networkInfo)
    for nic in getattr(info, "vnic", None) or []:
        if nic.device == device:
            return nic
    return None


def build_vnic_spec(d: Any, *, include_netstack: bool) -> Any:
    spec = vim.host.VirtualNic.Specification()

    ipv4 = (d.get("ipv4") or [{}])[0]
    ip = vim.host.IpConfig()
    if ipv4.get("dhcp"):
        ip.dhcp = True
    else:
        ip.dhcp = False
        ip.ipAddress = ipv4.get("ip") or ""
        ip.subnetMask = ipv4.get("netmask") or ""
        if ipv4.get("gw"):
            spec.ipRouteSpec = vim.host.VirtualNic.IpRouteSpec(
                ipRouteConfig=vim.host.IpRouteConfig(defaultGateway=ipv4["gw"])
            )
    spec.ip = ip

    mtu = d.get("mtu")
    if mtu:
        spec.mtu = int(mtu)

    dvs = d.get("distributed_switch_port")
    if dvs:
        spec.distributedVirtualPort = vim.dvs.PortConnection(
            switchUuid=dvs,
            portgroupKey=d.get("distributed_port_group"),
        )

    if include_netstack:
        spec.netStackInstanceKey = d.get("netstack") or DEFAULT_NETSTACK
    return spec


def add_vnic(client: Any, host: Any, portgroup: str, spec: Any) -> str:
    ns = network_system(client, host)
    try:
        return str(call("add virtual nic", ns.AddVirtualNic, portgroup=portgroup or "", nic=spec))
    except VSphereError as e:
        raise wrap_vsphere("error adding virtual nic", e)


def update_vnic(client: Any, host: Any, device: str, spec: Any) -> None:
    ns = network_system(client, host)
    try:
        call("update virtual nic", ns.UpdateVirtualNic, device=device, nic=spec)
    except VSphereError as e:
        raise wrap_vsphere(f"error updating virtual nic {device}", e)


def remove_vnic(client: Any, host: Any, device: str) -> None:
    ns = network_system(client, host)
    try:
        call("remove virtual nic", ns.RemoveVirtualNic, device=device)
    except VSphereError as e:
        raise wrap_vsphere(f"error removing virtual nic {device}", e)


def vnic_services(client: Any, host: Any, device: str) -> List[str]:
    """NIC types (vmotion, management, ...) the device is selected for."""
    mgr = virtual_nic_manager(client, host)
    out: List[str] = []
    for nic_type in SERVICE_TYPES:
        try:
            cfg = call(f"query net config {nic_type}", mgr.QueryNetConfig, nicType=nic_type)
        except VSphereError as e:
            client.logger.debug("QueryNetConfig(%s) failed: %s", nic_type, e)
            continue
        if cfg is None:
            continue
        selected = set(getattr(cfg, "selectedVnic", None) or [])
        for cand in getattr(cfg, "candidateVnic", None) or []:
            if cand.device == device and cand.key in selected:
                out.append(nic_type)
                break
    return sorted(out)


def set_vnic_services(client: Any, host: Any, device: str, old: List[str], new: List[str]) -> None:
    mgr = virtual_nic_manager(client, host)
    for nic_type in sorted(set(old) - set(new)):
        client.logger.info("Deselecting %s for service %s", device, nic_type)
        call(f"deselect {nic_type}", mgr.DeselectVnicForNicType, nicType=nic_type, device=device)
    for nic_type in sorted(set(new) - set(old)):
        client.logger.info("Selecting %s for service %s", device, nic_type)
        call(f"select {nic_type}", mgr.SelectVnicForNicType, nicType=nic_type, device=device)
