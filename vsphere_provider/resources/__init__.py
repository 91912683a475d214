# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/__init__.py
from __future__ import annotations

from typing import Dict, Type

from ..schema import DataSource, Resource
from .host import Host
from .host_config_date_time import HostConfigDateTime
from .host_config_syslog import HostConfigSyslog, HostConfigSyslogData
from .host_snmp import HostSnmp
from .host_virtual_nic import HostVirtualNic
from .iscsi_software_adapter import IscsiSoftwareAdapter, IscsiSoftwareAdapterData
from .nas_datastore import NasDatastore
from .vcenter_dns import VcenterDns

RESOURCES: Dict[str, Type[Resource]] = {
    cls.type_name: cls
    for cls in (
        IscsiSoftwareAdapter,
        NasDatastore,
        VcenterDns,
        HostConfigSyslog,
        HostSnmp,
        HostVirtualNic,
    )
}

DATA_SOURCES: Dict[str, Type[DataSource]] = {
    cls.type_name: cls
    for cls in (
        IscsiSoftwareAdapterData,
        HostConfigDateTime,
        HostConfigSyslogData,
        Host,
    )
}

__all__ = ["DATA_SOURCES", "RESOURCES"]
