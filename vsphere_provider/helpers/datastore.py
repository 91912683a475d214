# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/helpers/datastore.py
"""
Datastore helpers: lookup, properties, folder moves, and the NAS mount
processor that mounts/unmounts one NFS export across a set of hosts.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from pyVmomi import vim

from ..core.exceptions import VSphereError, wrap_vsphere
from ..core.utils import string_set
from ..vsphere.viapi import call, moref
from . import folder as folder_helper
from .hostsystem import check_if_hostname_or_id, name_or_id

NAS_TYPES = ("NFS", "NFS41", "CIFS")


@dataclass(frozen=True)
class DatastoreProperties:
    name: str
    summary: Any
    info: Any
    host: List[Any]
    parent: Any


def from_id(client: Any, ds_id: str) -> Any:
    client.logger.debug("Locating datastore with ID %s", ds_id)
    return client.datastore_by_id(ds_id)


def properties(client: Any, ds: Any) -> DatastoreProperties:
    try:
        return DatastoreProperties(
            name=client.object_name(ds),
            summary=call("read datastore summary", lambda: ds.summary),
            info=call("read datastore info", lambda: ds.info),
            host=list(call("read datastore host mounts", lambda: ds.host) or []),
            parent=call("read datastore parent", lambda: ds.parent),
        )
    except VSphereError as e:
        raise wrap_vsphere(f"could not get properties for datastore {moref(ds)}", e)


def is_nas_volume(fs_type: Any) -> bool:
    return str(fs_type or "") in NAS_TYPES


def move_to_folder(client: Any, ds: Any, target: Any) -> None:
    """Move ``ds`` into a folder or datastore cluster (both are folders to the API)."""
    name = client.object_name(ds)
    client.logger.info("Moving datastore %r into %s", name, moref(target))
    task = call("move datastore", target.MoveIntoFolder_Task, list=[ds])
    client.wait_for_task(task, description=f"move datastore {name}")


def expand_nas_volume_spec(d: Any) -> Any:
    remote_hosts = list(d.get("remote_hosts") or [])
    return vim.host.NasVolume.Specification(
        remoteHost=remote_hosts[0] if remote_hosts else "",
        remoteHostNames=remote_hosts,
        remotePath=d.get("remote_path"),
        localPath=d.get("name"),
        accessMode=d.get("access_mode"),
        type=d.get("type"),
        securityType=d.get("security_type") or None,
    )


def flatten_nas_volume(d: Any, nas: Any) -> None:
    hosts = list(getattr(nas, "remoteHostNames", None) or [])
    if not hosts and getattr(nas, "remoteHost", None):
        hosts = [nas.remoteHost]
    d.set("remote_hosts", hosts)
    d.set("remote_path", getattr(nas, "remotePath", "") or "")
    d.set("security_type", getattr(nas, "securityType", "") or "")
    if getattr(nas, "type", None):
        d.set("type", nas.type)
    d.set("protocol_endpoint", getattr(nas, "protocolEndpoint", "") or "")


def flatten_datastore_summary(d: Any, summary: Any) -> None:
    d.set("name", summary.name)
    d.set("accessible", bool(summary.accessible))
    d.set("capacity", int(summary.capacity or 0) // (1024 * 1024))
    d.set("free_space", int(summary.freeSpace or 0) // (1024 * 1024))
    d.set("maintenance_mode", summary.maintenanceMode or "")
    d.set("multiple_host_access", bool(summary.multipleHostAccess))
    d.set("uncommitted_space", int(summary.uncommitted or 0) // (1024 * 1024))
    d.set("url", summary.url or "")


@dataclass
class NasMountProcessor:
    """
    Reconciles the hosts a NAS datastore is mounted on.

    Hosts are given as managed object IDs or hostnames. The first mount of a
    new datastore creates it; every later mount must resolve to the same
    datastore. Unmounting the last host deletes the datastore.
    """
    client: Any
    old_hosts: List[str] = field(default_factory=list)
    new_hosts: List[str] = field(default_factory=list)
    vol_spec: Any = None
    ds: Optional[Any] = None

    def _to_add(self) -> List[str]:
        old = set(string_set(self.old_hosts))
        return [h for h in string_set(self.new_hosts) if h not in old]

    def _to_remove(self) -> List[str]:
        new = set(string_set(self.new_hosts))
        return [h for h in string_set(self.old_hosts) if h not in new]

    def _datastore_system(self, host: Any) -> Any:
        cm = call("read host configManager", lambda: host.configManager)
        return cm.datastoreSystem

    def process_mount_operations(self) -> Optional[Any]:
        for hs in self._to_add():
            host, _ = check_if_hostname_or_id(self.client, hs)
            dss = self._datastore_system(host)
            self.client.logger.info("Mounting NAS datastore %r on host %r", self.vol_spec.localPath, hs)
            try:
                mounted = call("create NAS datastore", dss.CreateNasDatastore, spec=self.vol_spec)
            except VSphereError as e:
                raise wrap_vsphere(f"host {name_or_id(self.client, hs)!r}", e)

            if self.ds is None:
                self.ds = mounted
                continue
            if moref(mounted) != moref(self.ds):
                # Undo the stray mount before failing so the host is left clean.
                try:
                    call("remove stray datastore", dss.RemoveDatastore, datastore=mounted)
                except VSphereError as e:
                    self.client.logger.warning("Could not remove stray datastore %s from %r: %s", moref(mounted), hs, e)
                raise VSphereError(
                    msg=(
                        f"datastore {moref(mounted)!r} mounted on host {hs!r} does not match "
                        f"datastore {moref(self.ds)!r} mounted on other hosts"
                    )
                )
        return self.ds

    def process_unmount_operations(self) -> None:
        if self.ds is None:
            return
        for hs in self._to_remove():
            host, _ = check_if_hostname_or_id(self.client, hs)
            dss = self._datastore_system(host)
            self.client.logger.info("Unmounting datastore %s from host %r", moref(self.ds), hs)
            try:
                call("remove datastore", dss.RemoveDatastore, datastore=self.ds)
            except VSphereError as e:
                raise wrap_vsphere(f"host {name_or_id(self.client, hs)!r}", e)


def target_for_folder_or_cluster(client: Any, reference: Any, folder: str, cluster_id: str) -> Optional[Any]:
    """
    Where the datastore should live: the datastore cluster when configured,
    else the folder (relative to the datacenter datastore root), else None.
    """
    if cluster_id:
        return client.storage_pod_by_id(cluster_id)
    if not folder_helper.path_is_empty(folder):
        return folder_helper.datastore_folder_from_relative_path(client, reference, folder)
    return None


def read_folder_or_cluster(client: Any, d: Any, parent: Any) -> None:
    if folder_helper.kind(parent) == "StoragePod":
        d.set("datastore_cluster_id", moref(parent))
        d.set("folder", "")
        return
    d.set("datastore_cluster_id", "")
    d.set("folder", folder_helper.relative_datastore_folder(client, parent))
