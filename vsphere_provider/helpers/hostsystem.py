# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/helpers/hostsystem.py
"""
HostSystem lookup helpers.

vSphere hands a host a new managed object ID every time it is removed from
and re-added to inventory, which breaks every resource that stored the old
ID. Resources may therefore address a host either by ``host_system_id`` or by
``hostname``; the helpers below resolve both and report back which flavour
was used so callers can persist it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..core.exceptions import (
    AmbiguousHostnameError,
    HostIdentityMissingError,
    HostLookupError,
    HostnameNotFoundError,
    HostnameOrIDNotFoundError,
    VSphereError,
    wrap_vsphere,
)
from ..vsphere.client import API_TYPE_ESXI, API_TYPE_VCENTER
from ..vsphere.viapi import call, is_managed_object_not_found_error, moref, validate_virtual_center

HOST_SYSTEM_ID = "host_system_id"
HOSTNAME = "hostname"


@dataclass(frozen=True)
class HostReturn:
    """Which identifier produced a host, and the value to persist under it."""
    id_name: str
    value: str


@dataclass(frozen=True)
class HostProperties:
    name: str
    runtime: Any
    config_manager: Any
    parent: Any


@dataclass(frozen=True)
class StorageSystemProperties:
    system: Any
    device_info: Any


def from_id(client: Any, host_id: str) -> Any:
    """Locate a HostSystem by managed object ID. Raises ManagedObjectNotFoundError."""
    client.logger.debug("Locating host system ID %s", host_id)
    host = client.host_by_id(host_id)
    client.logger.debug("Host system found: %s", moref(host))
    return host


def from_hostname(client: Any, hostname: str) -> Any:
    """
    Locate a HostSystem by exact name across every datacenter the session can see.

    A second match anywhere raises AmbiguousHostnameError straight away; no
    match raises HostnameNotFoundError.
    """
    client.logger.debug("Locating host system with hostname %s", hostname)
    found: Optional[Any] = None

    for dc in client.datacenters():
        for h, name in client.host_names_in(dc):
            if name != hostname:
                continue
            if found is not None:
                raise AmbiguousHostnameError(
                    msg=f"more than one host with hostname '{hostname}' was found",
                    context={"hostname": hostname},
                )
            found = h

    if found is None:
        raise HostnameNotFoundError(
            msg=f"could not find host with hostname '{hostname}'",
            context={"hostname": hostname},
        )
    return found


def from_hostname_or_id(client: Any, d: Any) -> Tuple[Any, HostReturn]:
    """
    Resolve the host a resource is configured against.

    ``d`` is anything with ``.get`` (ResourceData or a plain dict). The
    returned HostReturn names the attribute that was configured.
    """
    host_id = d.get(HOST_SYSTEM_ID)
    if host_id:
        return from_id(client, str(host_id)), HostReturn(HOST_SYSTEM_ID, str(host_id))

    hostname = d.get(HOSTNAME)
    if hostname:
        return from_hostname(client, str(hostname)), HostReturn(HOSTNAME, str(hostname))

    raise HostIdentityMissingError(
        msg="no valid host id attribute passed; one of 'host_system_id', 'hostname' is required"
    )


def check_if_hostname_or_id(client: Any, value: str) -> Tuple[Any, HostReturn]:
    """
    Resolve ``value`` as a managed object ID first, then as a hostname.

    Only a managed-object-not-found failure triggers the hostname attempt;
    ambiguity and transport errors propagate as-is.
    """
    try:
        host = from_id(client, value)
    except VSphereError as e:
        if not is_managed_object_not_found_error(e):
            raise
        try:
            host = from_hostname(client, value)
        except HostnameNotFoundError as e2:
            raise HostnameOrIDNotFoundError(
                msg=f"could not find host based off of id or hostname '{value}'",
                cause=e2,
                context={"value": value},
            )
        return host, HostReturn(HOSTNAME, client.object_name(host))

    return host, HostReturn(HOST_SYSTEM_ID, moref(host))


def system_or_default(client: Any, name: str = "", datacenter: Any = None) -> Any:
    """
    On ESXi return the only host. On vCenter return ``name`` from the
    datacenter, or its only host when no name is given.
    """
    api_type = client.api_type
    if api_type == API_TYPE_ESXI:
        return _default_host(client, datacenter)
    if api_type == API_TYPE_VCENTER:
        if not name:
            return _default_host(client, datacenter)
        matches = [h for h, n in client.host_names_in(datacenter) if n == name]
        if not matches:
            raise HostLookupError(msg=f"host '{name}' not found", context={"name": name})
        if len(matches) > 1:
            raise AmbiguousHostnameError(msg=f"path '{name}' resolves to multiple hosts", context={"name": name})
        return matches[0]
    raise VSphereError(msg=f"unsupported ApiType: {api_type}")


def _default_host(client: Any, datacenter: Any) -> Any:
    hosts = client.hosts_in(datacenter)
    if not hosts:
        raise HostLookupError(msg="no host found")
    if len(hosts) > 1:
        raise AmbiguousHostnameError(msg="default host resolves to multiple instances, please specify a name")
    return hosts[0]


def properties(client: Any, host: Any) -> HostProperties:
    name = client.object_name(host)
    try:
        return HostProperties(
            name=name,
            runtime=call("read host runtime", lambda: host.runtime),
            config_manager=call("read host configManager", lambda: host.configManager),
            parent=call("read host parent", lambda: host.parent),
        )
    except VSphereError as e:
        raise wrap_vsphere(f"error trying to retrieve host system properties for host '{name}'", e, host=moref(host))


def storage_system(client: Any, host: Any) -> Any:
    return properties(client, host).config_manager.storageSystem


def storage_system_properties(client: Any, host: Any) -> StorageSystemProperties:
    hss = storage_system(client, host)
    try:
        info = call("read storageDeviceInfo", lambda: hss.storageDeviceInfo)
    except VSphereError as e:
        name = client.object_name(host)
        raise wrap_vsphere(f"error trying to retrieve host storage system properties for host '{name}'", e, host=moref(host))
    return StorageSystemProperties(system=hss, device_info=info)


def resource_pool(client: Any, host: Any) -> Any:
    """Root resource pool of the host's compute resource."""
    parent = properties(client, host).parent
    return call("read resource pool", lambda: parent.resourcePool)


def name_or_id(client: Any, host_id: str) -> str:
    """Host name for friendly messages; the ID itself when the lookup fails."""
    try:
        return client.object_name(from_id(client, host_id))
    except VSphereError:
        return host_id


def host_in_maintenance(client: Any, host: Any) -> bool:
    return bool(properties(client, host).runtime.inMaintenanceMode)


def connection_state(client: Any, host: Any) -> str:
    return str(properties(client, host).runtime.connectionState)


def enter_maintenance_mode(client: Any, host: Any, timeout: float, evacuate: bool = False) -> None:
    """
    Put a host into maintenance mode. ``evacuate`` only applies on vCenter and
    is ignored on a direct ESXi connection. No-op when already in maintenance.
    """
    try:
        validate_virtual_center(client)
    except VSphereError:
        evacuate = False

    name = client.object_name(host)
    if host_in_maintenance(client, host):
        client.logger.debug("Host %r is already in maintenance mode", name)
        return

    client.logger.info("Host %r is entering maintenance mode (evacuate: %s)", name, evacuate)
    task = call(
        "enter maintenance mode",
        host.EnterMaintenanceMode_Task,
        timeout=int(timeout),
        evacuatePoweredOffVms=evacuate,
    )
    try:
        client.wait_for_task(task, timeout=timeout, description=f"enter maintenance mode on {name}")
    except VSphereError as e:
        raise wrap_vsphere(f"error while putting host({moref(host)}) in maintenance mode", e, host=name)


def exit_maintenance_mode(client: Any, host: Any, timeout: float) -> None:
    """Take a host out of maintenance mode. No-op when not in maintenance."""
    name = client.object_name(host)
    if not host_in_maintenance(client, host):
        client.logger.debug("Host %r is already not in maintenance mode", name)
        return

    client.logger.info("Host %r is exiting maintenance mode", name)
    task = call("exit maintenance mode", host.ExitMaintenanceMode_Task, timeout=int(timeout))
    try:
        client.wait_for_task(task, timeout=timeout, description=f"exit maintenance mode on {name}")
    except VSphereError as e:
        raise wrap_vsphere(f"error while getting host({moref(host)}) out of maintenance mode", e, host=name)
