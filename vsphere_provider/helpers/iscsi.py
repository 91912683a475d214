# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/helpers/iscsi.py
from __future__ import annotations

from typing import Any

from ..core.exceptions import VSphereError, wrap_vsphere
from ..vsphere.viapi import call


def update_software_internet_scsi(client: Any, hss: Any, host_name: str, enabled: bool) -> None:
    """Enable or disable the software iSCSI adapter on a host storage system."""
    verb = "enable" if enabled else "disable"
    client.logger.info("Trying to %s software iscsi adapter on host %r", verb, host_name)
    try:
        call("update software iscsi", hss.UpdateSoftwareInternetScsiEnabled, enabled=enabled)
    except VSphereError as e:
        raise wrap_vsphere(f"error trying to {verb} software iscsi adapter for host '{host_name}'", e)


def rescan_all_hba(client: Any, hss: Any, host_name: str) -> None:
    try:
        call("rescan all hba", hss.RescanAllHba)
    except VSphereError as e:
        raise wrap_vsphere(
            f"error trying to rescan storage adapters after enabling iscsi software adapter for host '{host_name}'",
            e,
        )


def software_adapter(device_info: Any, host_name: str) -> Any:
    """The software-based iSCSI HBA of a host (``storageDeviceInfo.hostBusAdapter``)."""
    for hba in getattr(device_info, "hostBusAdapter", None) or []:
        if getattr(hba, "isSoftwareBased", False) and getattr(hba, "iScsiName", None) is not None:
            return hba
    raise VSphereError(msg=f"could not find software iscsi adapter for host '{host_name}'")


def update_iscsi_name(client: Any, hss: Any, host_name: str, device: str, name: str) -> None:
    client.logger.info("Setting iscsi name of %s on host %r to %r", device, host_name, name)
    try:
        call("update iscsi name", hss.UpdateInternetScsiName, iScsiHbaDevice=device, iScsiName=name)
    except VSphereError as e:
        raise wrap_vsphere(f"error updating iscsi name for adapter '{device}' on host '{host_name}'", e)
