# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/nas_datastore.py
from __future__ import annotations

from typing import Any, List

from ..core.exceptions import ConfigError, ManagedObjectNotFoundError, VSphereError, wrap_vsphere
from ..helpers import custom_attributes
from ..helpers import datastore as ds_helper
from ..helpers import folder as folder_helper
from ..helpers import tags as tag_helper
from ..helpers.hostsystem import check_if_hostname_or_id
from ..schema import BOOL, INT, MAP, SET, STRING, Attribute, Resource, ResourceData
from ..vsphere.viapi import moref, rename_object, validate_virtual_center

HOST_SYSTEM_IDS = "host_system_ids"
HOSTNAMES = "hostnames"


def _host_attr(d: ResourceData) -> str:
    return HOST_SYSTEM_IDS if d.get(HOST_SYSTEM_IDS) else HOSTNAMES


class NasDatastore(Resource):
    """NFS datastore mounted on one or more hosts."""

    type_name = "vsphere_nas_datastore"
    schema = {
        "name": Attribute(STRING, required=True, description="The name of the datastore."),
        HOST_SYSTEM_IDS: Attribute(
            SET,
            optional=True,
            exactly_one_of=(HOSTNAMES,),
            description="The managed object IDs of the hosts to mount the datastore on.",
        ),
        HOSTNAMES: Attribute(SET, optional=True, description="The hostnames of the hosts to mount the datastore on."),
        "folder": Attribute(
            STRING,
            optional=True,
            conflicts_with=("datastore_cluster_id",),
            state_func=folder_helper.normalize_path,
            description="The path to the datastore folder to put the datastore in.",
        ),
        "datastore_cluster_id": Attribute(
            STRING,
            optional=True,
            conflicts_with=("folder",),
            description="The managed object ID of the datastore cluster to place the datastore in.",
        ),
        # NAS volume spec
        "type": Attribute(STRING, optional=True, force_new=True, default="NFS", choices=("NFS", "NFS41")),
        "remote_hosts": Attribute(SET, required=True, force_new=True),
        "remote_path": Attribute(STRING, required=True, force_new=True),
        "access_mode": Attribute(
            STRING,
            optional=True,
            force_new=True,
            default="readWrite",
            choices=("readOnly", "readWrite"),
        ),
        "security_type": Attribute(
            STRING,
            optional=True,
            force_new=True,
            choices=("AUTH_SYS", "SEC_KRB5", "SEC_KRB5I"),
        ),
        "protocol_endpoint": Attribute(STRING, computed=True),
        # Summary
        "accessible": Attribute(BOOL, computed=True),
        "capacity": Attribute(INT, computed=True, description="Maximum capacity in MB."),
        "free_space": Attribute(INT, computed=True, description="Available space in MB."),
        "maintenance_mode": Attribute(STRING, computed=True),
        "multiple_host_access": Attribute(BOOL, computed=True),
        "uncommitted_space": Attribute(INT, computed=True, description="Uncommitted storage in MB."),
        "url": Attribute(STRING, computed=True),
        "tags": Attribute(SET, optional=True, description="The IDs of any tags to attach to this resource."),
        "custom_attributes": Attribute(
            MAP, optional=True, description="A map of custom attribute IDs to string values for this resource."
        ),
    }

    def _target(self, meta: Any, d: ResourceData, reference: Any) -> Any:
        return ds_helper.target_for_folder_or_cluster(
            meta.vim, reference, d.get("folder"), d.get("datastore_cluster_id")
        )

    def _check_vcenter_extras(self, meta: Any, d: ResourceData) -> None:
        # Tags and custom attributes only exist on vCenter.
        if d.get("tags") or d.get("custom_attributes"):
            try:
                validate_virtual_center(meta.vim)
            except VSphereError as e:
                raise wrap_vsphere("tags and custom_attributes require vCenter", e)

    def _apply_vcenter_extras(self, meta: Any, d: ResourceData, ds: Any) -> None:
        if d.has_change("tags"):
            old, new = d.get_change("tags")
            tag_helper.apply_tag_diff(meta.rest, meta.logger, ds, old, new)
        if d.has_change("custom_attributes"):
            old, new = d.get_change("custom_attributes")
            custom_attributes.apply_diff(meta.vim, ds, old, new)

    def create(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        hosts: List[str] = d.get(_host_attr(d))
        self._check_vcenter_extras(meta, d)

        p = ds_helper.NasMountProcessor(
            client=client,
            old_hosts=[],
            new_hosts=hosts,
            vol_spec=ds_helper.expand_nas_volume_spec(d),
        )
        try:
            ds = p.process_mount_operations()
        except VSphereError as e:
            if p.ds is not None:
                d.set_id(moref(p.ds))
            raise wrap_vsphere("error mounting datastore", e)
        d.set_id(moref(ds))

        target = self._target(meta, d, check_if_hostname_or_id(client, hosts[0])[0])
        if target is not None:
            try:
                ds_helper.move_to_folder(client, ds, target)
            except VSphereError as e:
                raise wrap_vsphere("error moving datastore to folder", e)

        self._apply_vcenter_extras(meta, d, ds)
        self.read(meta, d)

    def read(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        try:
            ds = ds_helper.from_id(client, d.id)
        except ManagedObjectNotFoundError:
            client.logger.info("Datastore %s no longer exists; dropping it from state", d.id)
            d.set_id("")
            return

        props = ds_helper.properties(client, ds)
        ds_helper.flatten_datastore_summary(d, props.summary)
        ds_helper.read_folder_or_cluster(client, d, props.parent)

        nas = getattr(props.info, "nas", None)
        if nas is None:
            raise VSphereError(msg=f"datastore {d.id!r} is not a NAS datastore")
        ds_helper.flatten_nas_volume(d, nas)

        attr = _host_attr(d)
        mounted: List[str] = []
        for mount in props.host:
            host_id = moref(mount.key)
            if attr == HOST_SYSTEM_IDS:
                mounted.append(host_id)
            else:
                try:
                    host, _ = check_if_hostname_or_id(client, host_id)
                except VSphereError as e:
                    raise wrap_vsphere("error finding host for datastore", e)
                mounted.append(client.object_name(host))
        d.set(attr, mounted)

        if client.is_vcenter:
            d.set("tags", tag_helper.list_attached_tags(meta.rest, ds))
            d.set("custom_attributes", custom_attributes.read(client, ds))

    def update(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        self._check_vcenter_extras(meta, d)
        try:
            ds = ds_helper.from_id(client, d.id)
        except VSphereError as e:
            raise wrap_vsphere("cannot find datastore", e)

        if d.has_change("name"):
            rename_object(client, ds, d.get("name"))

        if d.has_changes("folder", "datastore_cluster_id"):
            target = self._target(meta, d, ds)
            if target is None:
                target = folder_helper.datastore_folder_from_relative_path(client, ds, "")
            try:
                ds_helper.move_to_folder(client, ds, target)
            except VSphereError as e:
                raise wrap_vsphere(f"could not move datastore to folder {d.get('folder')!r}", e)

        attr = _host_attr(d)
        old, new = d.get_change(attr)
        p = ds_helper.NasMountProcessor(
            client=client,
            old_hosts=old,
            new_hosts=new,
            vol_spec=ds_helper.expand_nas_volume_spec(d),
            ds=ds,
        )
        try:
            p.process_unmount_operations()
        except VSphereError as e:
            raise wrap_vsphere("error unmounting hosts", e)
        try:
            p.process_mount_operations()
        except VSphereError as e:
            raise wrap_vsphere("error mounting hosts", e)

        self._apply_vcenter_extras(meta, d, ds)
        self.read(meta, d)

    def delete(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        try:
            ds = ds_helper.from_id(client, d.id)
        except VSphereError as e:
            raise wrap_vsphere("cannot find datastore", e)

        # Unmounting the last host removes the datastore.
        p = ds_helper.NasMountProcessor(
            client=client,
            old_hosts=d.get(_host_attr(d)),
            new_hosts=[],
            vol_spec=ds_helper.expand_nas_volume_spec(d),
            ds=ds,
        )
        try:
            p.process_unmount_operations()
        except VSphereError as e:
            raise wrap_vsphere("error unmounting hosts", e)

    def import_state(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        try:
            ds = ds_helper.from_id(client, d.id)
        except VSphereError as e:
            raise wrap_vsphere("cannot find datastore", e)
        props = ds_helper.properties(client, ds)

        fs_type = str(getattr(props.summary, "type", "") or "")
        if not ds_helper.is_nas_volume(fs_type):
            raise ConfigError(msg=f"datastore ID {d.id!r} is not a NAS datastore")

        access_mode = ""
        for mount in props.host:
            mode = str(mount.mountInfo.accessMode)
            if not access_mode:
                access_mode = mode
            elif access_mode != mode:
                raise VSphereError(msg="access_mode is inconsistent across configured hosts")

        d.set("access_mode", access_mode)
        d.set("type", fs_type)
        d.set(HOST_SYSTEM_IDS, [moref(m.key) for m in props.host])
