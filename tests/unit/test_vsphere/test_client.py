# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

from types import SimpleNamespace
from unittest import mock

import pytest
from pyVmomi import vim

from vsphere_provider.vsphere.client import VSphereClient


def _page(objects, token=None):
    return SimpleNamespace(
        objects=[SimpleNamespace(obj=o, propSet=[SimpleNamespace(name="name", val=n)]) for o, n in objects],
        token=token,
    )


@pytest.fixture
def client(fake_logger):
    c = VSphereClient(fake_logger, "vc.lab.local", "admin", "secret")
    c.si = mock.MagicMock()
    c.si.content.viewManager.CreateContainerView.return_value = vim.view.ContainerView("session-view-1")
    return c


@pytest.mark.unit
class TestHostNames:
    def test_single_retrieve_with_continuation(self, client):
        pc = client.si.content.propertyCollector
        pc.RetrievePropertiesEx.return_value = _page([("h1", "esx1")], token="more")
        pc.ContinueRetrievePropertiesEx.return_value = _page([("h2", "esx2")])

        assert client.host_names_in("dc") == [("h1", "esx1"), ("h2", "esx2")]

        pc.RetrievePropertiesEx.assert_called_once()
        pc.ContinueRetrievePropertiesEx.assert_called_once_with(token="more")
        spec = pc.RetrievePropertiesEx.call_args.kwargs["specSet"][0]
        assert list(spec.propSet[0].pathSet) == ["name"]
        client.si.content.viewManager.CreateContainerView.assert_called_once_with("dc", [vim.HostSystem], True)

    def test_empty_result(self, client):
        client.si.content.propertyCollector.RetrievePropertiesEx.return_value = None
        assert client.host_names_in() == []
