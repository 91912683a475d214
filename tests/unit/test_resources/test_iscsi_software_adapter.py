# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

from types import SimpleNamespace

import pytest

from fakes.fake_vsphere import FakeHost, FakeMeta, vcenter_client
from vsphere_provider.core.exceptions import ConfigError, HostnameOrIDNotFoundError, VSphereError
from vsphere_provider.resources.iscsi_software_adapter import IscsiSoftwareAdapter, IscsiSoftwareAdapterData


@pytest.fixture
def esx1():
    host = FakeHost("host-10", "esx1")
    adapter = SimpleNamespace(device="vmhba65", isSoftwareBased=True, iScsiName="iqn.1998-01.com.vmware:esx1-default")
    hss = host.configManager.storageSystem
    hss.storageDeviceInfo = SimpleNamespace(softwareInternetScsiEnabled=False, hostBusAdapter=[adapter])

    def enable(enabled):
        hss.storageDeviceInfo.softwareInternetScsiEnabled = enabled

    def rename(iScsiHbaDevice, iScsiName):
        adapter.iScsiName = iScsiName

    hss.UpdateSoftwareInternetScsiEnabled.side_effect = enable
    hss.UpdateInternetScsiName.side_effect = rename
    return host


@pytest.fixture
def meta(fake_logger, esx1):
    return FakeMeta(fake_logger, vim=vcenter_client(fake_logger, {"dc1": [esx1]}))


@pytest.mark.unit
class TestIscsiSoftwareAdapter:
    def test_create_with_generated_name(self, meta, esx1):
        res = IscsiSoftwareAdapter()
        d = res.new_data(config=res.validate({"host_system_id": "host-10"}, "x"))

        res.create(meta, d)

        assert d.id == "host-10:vmhba65"
        assert d.get("adapter_id") == "vmhba65"
        assert d.get("iscsi_name") == "iqn.1998-01.com.vmware:esx1-default"
        esx1.configManager.storageSystem.RescanAllHba.assert_called_once()
        esx1.configManager.storageSystem.UpdateInternetScsiName.assert_not_called()

    def test_create_with_custom_name_by_hostname(self, meta, esx1):
        res = IscsiSoftwareAdapter()
        d = res.new_data(config=res.validate({"hostname": "esx1", "iscsi_name": "iqn.2024-01.lab:esx1"}, "x"))

        res.create(meta, d)

        assert d.id == "esx1:vmhba65"
        assert d.get("iscsi_name") == "iqn.2024-01.lab:esx1"
        esx1.configManager.storageSystem.UpdateInternetScsiName.assert_called_once_with(
            iScsiHbaDevice="vmhba65", iScsiName="iqn.2024-01.lab:esx1"
        )

    def test_read_disabled_adapter_clears_id(self, meta, esx1):
        res = IscsiSoftwareAdapter()
        d = res.new_data(state={"id": "host-10:vmhba65", "host_system_id": "host-10"})

        res.read(meta, d)

        assert d.id == ""

    def test_update_renames(self, meta, esx1):
        esx1.configManager.storageSystem.storageDeviceInfo.softwareInternetScsiEnabled = True
        res = IscsiSoftwareAdapter()
        d = res.new_data(
            config=res.validate({"host_system_id": "host-10", "iscsi_name": "iqn.new"}, "x"),
            state={"id": "host-10:vmhba65", "host_system_id": "host-10", "iscsi_name": "iqn.old"},
        )

        res.update(meta, d)

        esx1.configManager.storageSystem.UpdateInternetScsiName.assert_called_once_with(
            iScsiHbaDevice="vmhba65", iScsiName="iqn.new"
        )

    def test_delete_disables(self, meta, esx1):
        res = IscsiSoftwareAdapter()
        res.delete(meta, res.new_data(state={"id": "host-10:vmhba65", "host_system_id": "host-10"}))
        esx1.configManager.storageSystem.UpdateSoftwareInternetScsiEnabled.assert_called_once_with(enabled=False)

    def test_import_by_hostname(self, meta, esx1):
        esx1.configManager.storageSystem.storageDeviceInfo.softwareInternetScsiEnabled = True
        res = IscsiSoftwareAdapter()
        d = res.new_data(id="esx1:vmhba65")

        res.import_state(meta, d)

        assert d.id == "esx1:vmhba65"
        assert d.get("hostname") == "esx1"
        assert d.get("host_system_id") == ""

    @pytest.mark.parametrize("bad", ["host-10", "host-10:", ":vmhba65", "a:b:c"])
    def test_import_bad_format(self, meta, bad):
        res = IscsiSoftwareAdapter()
        with pytest.raises(ConfigError):
            res.import_state(meta, res.new_data(id=bad))

    def test_import_unknown_host(self, meta):
        res = IscsiSoftwareAdapter()
        with pytest.raises(HostnameOrIDNotFoundError):
            res.import_state(meta, res.new_data(id="ghost:vmhba65"))


@pytest.mark.unit
class TestIscsiSoftwareAdapterData:
    def test_read(self, meta, esx1):
        esx1.configManager.storageSystem.storageDeviceInfo.softwareInternetScsiEnabled = True
        ds = IscsiSoftwareAdapterData()
        d = ds.new_data(config=ds.validate({"hostname": "esx1"}, "x"))

        ds.read(meta, d)

        assert d.id == "esx1:vmhba65"
        assert d.get("adapter_id") == "vmhba65"

    def test_read_disabled_fails(self, meta):
        ds = IscsiSoftwareAdapterData()
        with pytest.raises(VSphereError) as ei:
            ds.read(meta, ds.new_data(config=ds.validate({"hostname": "esx1"}, "x")))
        assert "not enabled" in ei.value.msg
