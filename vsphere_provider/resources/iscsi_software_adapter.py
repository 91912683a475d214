# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/iscsi_software_adapter.py
from __future__ import annotations

from typing import Any

from ..core.exceptions import VSphereError, wrap_vsphere
from ..helpers import hostsystem, iscsi
from ..schema import STRING, Attribute, DataSource, Resource, ResourceData
from .common import host_identity_schema, resolve_import_host, split_import_id

IMPORT_SHAPE = "<host_system_id | hostname>:<adapter_name>"


def _read(meta: Any, d: ResourceData, *, data_source: bool) -> None:
    client = meta.vim
    try:
        host, hr = hostsystem.from_hostname_or_id(client, d)
    except VSphereError as e:
        raise wrap_vsphere("error retrieving host for iscsi read", e)
    name = client.object_name(host)

    props = hostsystem.storage_system_properties(client, host)
    if props.device_info.softwareInternetScsiEnabled:
        adapter = iscsi.software_adapter(props.device_info, name)
        d.set("iscsi_name", adapter.iScsiName)
        d.set("adapter_id", adapter.device)
        if data_source:
            d.set_id(f"{hr.value}:{adapter.device}")
        return

    if data_source:
        raise VSphereError(msg=f"iscsi software adapter is not enabled for host '{name}'")
    client.logger.info("Software iscsi adapter is disabled on host %r; dropping it from state", name)
    d.set_id("")


class IscsiSoftwareAdapter(Resource):
    """Software iSCSI adapter of one ESXi host."""

    type_name = "vsphere_iscsi_software_adapter"
    schema = {
        **host_identity_schema("enable the iscsi software adapter on"),
        "iscsi_name": Attribute(
            STRING,
            optional=True,
            computed=True,
            description="IQN of the adapter. Generated by vSphere when left blank.",
        ),
        "adapter_id": Attribute(STRING, computed=True, description="Adapter device name (vmhbaNN)."),
    }

    def create(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        try:
            host, hr = hostsystem.from_hostname_or_id(client, d)
        except VSphereError as e:
            raise wrap_vsphere("error retrieving host for iscsi", e)
        name = client.object_name(host)

        hss = hostsystem.storage_system(client, host)
        iscsi.update_software_internet_scsi(client, hss, name, True)
        iscsi.rescan_all_hba(client, hss, name)

        props = hostsystem.storage_system_properties(client, host)
        adapter = iscsi.software_adapter(props.device_info, name)

        d.set_id(f"{hr.value}:{adapter.device}")
        d.set("adapter_id", adapter.device)

        wanted, ok = d.get_ok("iscsi_name")
        if ok:
            iscsi.update_iscsi_name(client, hss, name, adapter.device, wanted)
            d.set("iscsi_name", wanted)
        else:
            d.set("iscsi_name", adapter.iScsiName)

        self.read(meta, d)

    def read(self, meta: Any, d: ResourceData) -> None:
        _read(meta, d, data_source=False)

    def update(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        try:
            host, _ = hostsystem.from_hostname_or_id(client, d)
        except VSphereError as e:
            raise wrap_vsphere("error retrieving host for iscsi update", e)
        name = client.object_name(host)

        if d.has_change("iscsi_name"):
            _, new_name = d.get_change("iscsi_name")
            props = hostsystem.storage_system_properties(client, host)
            adapter = iscsi.software_adapter(props.device_info, name)
            iscsi.update_iscsi_name(client, props.system, name, adapter.device, new_name)

    def delete(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        try:
            host, _ = hostsystem.from_hostname_or_id(client, d)
        except VSphereError as e:
            raise wrap_vsphere("error retrieving host for iscsi delete", e)
        name = client.object_name(host)
        iscsi.update_software_internet_scsi(client, hostsystem.storage_system(client, host), name, False)

    def import_state(self, meta: Any, d: ResourceData) -> None:
        host_part, _ = split_import_id(d.id, ":", IMPORT_SHAPE)
        try:
            host, hr = resolve_import_host(meta, d, host_part)
        except VSphereError as e:
            raise wrap_vsphere("error retrieving host for iscsi import", e)

        client = meta.vim
        name = client.object_name(host)
        props = hostsystem.storage_system_properties(client, host)
        adapter = iscsi.software_adapter(props.device_info, name)
        d.set_id(f"{hr.value}:{adapter.device}")


class IscsiSoftwareAdapterData(DataSource):
    type_name = "vsphere_iscsi_software_adapter"
    schema = {
        **host_identity_schema("read the iscsi software adapter of", force_new=False),
        "iscsi_name": Attribute(STRING, computed=True),
        "adapter_id": Attribute(STRING, computed=True),
    }

    def read(self, meta: Any, d: ResourceData) -> None:
        _read(meta, d, data_source=True)
