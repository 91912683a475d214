# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

from types import SimpleNamespace

import pytest

from fakes.fake_vsphere import FakeDatacenter, FakeFolder, FakeHost, FakeManagedObject, FakeStoragePod, vcenter_client
from vsphere_provider.core.exceptions import VSphereError
from vsphere_provider.helpers import datastore, folder


@pytest.fixture
def tree():
    root = FakeFolder("group-d1", "Datacenters")
    dc = FakeDatacenter("datacenter-1", "dc1", root)
    ds_root = FakeFolder("group-s5", "datastore", dc)
    prod = FakeFolder("group-s7", "prod", ds_root)
    nfs = FakeFolder("group-s9", "nfs", prod)
    return SimpleNamespace(root=root, dc=dc, ds_root=ds_root, prod=prod, nfs=nfs)


@pytest.fixture
def client(fake_logger, tree):
    c = vcenter_client(fake_logger, {})
    c.inventory = {
        "/dc1/datastore": tree.ds_root,
        "/dc1/datastore/prod": tree.prod,
        "/dc1/datastore/prod/nfs": tree.nfs,
    }
    return c


@pytest.mark.unit
class TestFolderPaths:
    @pytest.mark.parametrize("raw,norm", [("/prod/nfs/", "prod/nfs"), (None, ""), ("  ", ""), ("a", "a")])
    def test_normalize_path(self, raw, norm):
        assert folder.normalize_path(raw) == norm

    def test_inventory_path_excludes_root(self, client, tree):
        assert folder.inventory_path(client, tree.nfs) == "/dc1/datastore/prod/nfs"

    def test_relative_datastore_folder(self, client, tree):
        assert folder.relative_datastore_folder(client, tree.nfs) == "prod/nfs"
        assert folder.relative_datastore_folder(client, tree.ds_root) == ""

    def test_folder_from_relative_path(self, client, tree):
        ds = FakeManagedObject("datastore-3", "nfs01", tree.prod)
        assert folder.datastore_folder_from_relative_path(client, ds, "/prod/nfs") is tree.nfs

    def test_folder_missing(self, client, tree):
        ds = FakeManagedObject("datastore-3", "nfs01", tree.prod)
        with pytest.raises(VSphereError):
            folder.datastore_folder_from_relative_path(client, ds, "does/not/exist")

    def test_not_a_datacenter_child(self, client):
        orphan = FakeFolder("group-x", "x", None)
        with pytest.raises(VSphereError):
            folder.datacenter_of(client, orphan)


@pytest.mark.unit
class TestFolderOrCluster:
    def test_cluster_parent(self, client, tree):
        pod = FakeStoragePod("group-p3", "pod", tree.ds_root)
        d = {}
        datastore.read_folder_or_cluster(client, SimpleNamespace(set=d.__setitem__), pod)
        assert d == {"datastore_cluster_id": "group-p3", "folder": ""}

    def test_folder_parent(self, client, tree):
        d = {}
        datastore.read_folder_or_cluster(client, SimpleNamespace(set=d.__setitem__), tree.prod)
        assert d == {"datastore_cluster_id": "", "folder": "prod"}

    def test_no_target(self, client, tree):
        assert datastore.target_for_folder_or_cluster(client, tree.prod, "", "") is None


@pytest.mark.unit
class TestNasMountProcessor:
    def _hosts(self):
        return FakeHost("host-10", "esx1"), FakeHost("host-20", "esx2")

    def test_mounts_same_datastore_everywhere(self, fake_logger):
        esx1, esx2 = self._hosts()
        ds = FakeManagedObject("datastore-1", "nfs01")
        for h in (esx1, esx2):
            h.configManager.datastoreSystem.CreateNasDatastore.return_value = ds
        client = vcenter_client(fake_logger, {"dc1": [esx1, esx2]})

        p = datastore.NasMountProcessor(client, [], ["host-20", "esx1"], SimpleNamespace(localPath="nfs01"))

        assert p.process_mount_operations() is ds
        esx1.configManager.datastoreSystem.CreateNasDatastore.assert_called_once()
        esx2.configManager.datastoreSystem.CreateNasDatastore.assert_called_once()

    def test_mismatched_datastore_is_rolled_back(self, fake_logger):
        esx1, esx2 = self._hosts()
        first = FakeManagedObject("datastore-1", "nfs01")
        stray = FakeManagedObject("datastore-2", "nfs01")
        esx1.configManager.datastoreSystem.CreateNasDatastore.return_value = first
        esx2.configManager.datastoreSystem.CreateNasDatastore.return_value = stray
        client = vcenter_client(fake_logger, {"dc1": [esx1, esx2]})

        p = datastore.NasMountProcessor(client, [], ["host-10", "host-20"], SimpleNamespace(localPath="nfs01"))

        with pytest.raises(VSphereError) as ei:
            p.process_mount_operations()
        assert "does not match" in ei.value.msg
        esx2.configManager.datastoreSystem.RemoveDatastore.assert_called_once_with(datastore=stray)

    def test_unmount_only_removed_hosts(self, fake_logger):
        esx1, esx2 = self._hosts()
        ds = FakeManagedObject("datastore-1", "nfs01")
        client = vcenter_client(fake_logger, {"dc1": [esx1, esx2]})

        p = datastore.NasMountProcessor(client, ["host-10", "host-20"], ["host-10"], None, ds)
        p.process_unmount_operations()

        esx1.configManager.datastoreSystem.RemoveDatastore.assert_not_called()
        esx2.configManager.datastoreSystem.RemoveDatastore.assert_called_once_with(datastore=ds)


@pytest.mark.unit
def test_flatten_datastore_summary_reports_megabytes():
    summary = SimpleNamespace(
        name="nfs01",
        accessible=True,
        capacity=10 * 1024 * 1024 * 1024,
        freeSpace=3 * 1024 * 1024 * 1024,
        maintenanceMode="normal",
        multipleHostAccess=True,
        uncommitted=None,
        url="ds:///vmfs/volumes/abc/",
    )
    d = {}
    datastore.flatten_datastore_summary(SimpleNamespace(set=d.__setitem__), summary)

    assert d["capacity"] == 10240
    assert d["free_space"] == 3072
    assert d["uncommitted_space"] == 0
    assert d["url"] == "ds:///vmfs/volumes/abc/"
