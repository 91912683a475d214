# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory stand-ins for the pyVmomi objects and client the helpers touch."""
from __future__ import annotations

from types import SimpleNamespace
from unittest import mock

from vsphere_provider.core.exceptions import ManagedObjectNotFoundError
from vsphere_provider.vsphere.client import API_TYPE_ESXI, API_TYPE_VCENTER


class FakeManagedObject:
    _wsdlName = "ManagedEntity"

    def __init__(self, moid, name, parent=None):
        self._moId = moid
        self.name = name
        self.parent = parent


class FakeDatacenter(FakeManagedObject):
    _wsdlName = "Datacenter"


class FakeFolder(FakeManagedObject):
    _wsdlName = "Folder"


class FakeStoragePod(FakeManagedObject):
    _wsdlName = "StoragePod"


class FakeHost(FakeManagedObject):
    _wsdlName = "HostSystem"

    def __init__(self, moid, name, parent=None, *, maintenance=False):
        super().__init__(moid, name, parent)
        self.runtime = SimpleNamespace(inMaintenanceMode=maintenance, connectionState="connected")
        self.configManager = SimpleNamespace(
            storageSystem=mock.MagicMock(name=f"{moid}-storage"),
            datastoreSystem=mock.MagicMock(name=f"{moid}-datastores"),
            advancedOption=mock.MagicMock(name=f"{moid}-options"),
            snmpSystem=mock.MagicMock(name=f"{moid}-snmp"),
            networkSystem=mock.MagicMock(name=f"{moid}-network"),
            virtualNicManager=mock.MagicMock(name=f"{moid}-vnicmgr"),
            dateTimeSystem=mock.MagicMock(name=f"{moid}-datetime"),
        )
        self.EnterMaintenanceMode_Task = mock.MagicMock(side_effect=self._enter)
        self.ExitMaintenanceMode_Task = mock.MagicMock(side_effect=self._exit)

    def _enter(self, **_kw):
        self.runtime.inMaintenanceMode = True
        return "task-enter"

    def _exit(self, **_kw):
        self.runtime.inMaintenanceMode = False
        return "task-exit"


class FakeClient:
    """Subset of VSphereClient used by the helpers and resources."""

    def __init__(self, logger, datacenters=None, *, api_type=API_TYPE_VCENTER):
        self.logger = logger
        self.api_type = api_type
        self._dcs = dict(datacenters or {})
        self.tasks = []
        self.inventory = {}
        self.datastores = {}
        self.content = SimpleNamespace(customFieldsManager=mock.MagicMock(name="custom-fields"))

    @property
    def is_vcenter(self):
        return self.api_type == API_TYPE_VCENTER

    def datacenters(self):
        return list(self._dcs)

    def hosts_in(self, container=None):
        if container is None:
            return [h for hosts in self._dcs.values() for h in hosts]
        return list(self._dcs.get(container, []))

    def host_names_in(self, container=None):
        return [(h, h.name) for h in self.hosts_in(container)]

    def object_name(self, obj):
        return obj.name

    def host_by_id(self, host_id):
        for h in self.hosts_in():
            if h._moId == host_id:
                return h
        raise ManagedObjectNotFoundError(msg=f"managed object {host_id} not found", moref=host_id)

    def find_by_inventory_path(self, path):
        return self.inventory.get(path)

    def datastore_by_id(self, ds_id):
        if ds_id not in self.datastores:
            raise ManagedObjectNotFoundError(msg=f"managed object {ds_id} not found", moref=ds_id)
        return self.datastores[ds_id]

    def wait_for_task(self, task, *, timeout=None, description=""):
        self.tasks.append((task, timeout, description))


class FakeMeta:
    """Provider stand-in handed to resource operations."""

    def __init__(self, logger, vim=None, rest=None):
        self.logger = logger
        self.vim = vim
        self.rest = rest


def esxi_client(logger, *hosts):
    dc = FakeDatacenter("ha-datacenter", "ha-datacenter")
    return FakeClient(logger, {dc: list(hosts)}, api_type=API_TYPE_ESXI)


def vcenter_client(logger, layout):
    """``layout`` maps datacenter name to a list of FakeHost."""
    dcs = {FakeDatacenter(f"datacenter-{n}", name): hosts for n, (name, hosts) in enumerate(layout.items())}
    return FakeClient(logger, dcs, api_type=API_TYPE_VCENTER)
