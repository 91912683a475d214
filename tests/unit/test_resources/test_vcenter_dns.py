# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

from unittest import mock

import pytest

from fakes.fake_vsphere import FakeMeta
from vsphere_provider.core.exceptions import ConfigError, RestError, TransportError, VSphereError
from vsphere_provider.resources.vcenter_dns import DNS_SERVERS_PATH, VCENTER_DNS_ID, VcenterDns


@pytest.fixture
def rest():
    return mock.Mock()


@pytest.fixture
def meta(fake_logger, rest):
    return FakeMeta(fake_logger, rest=rest)


@pytest.mark.unit
class TestVcenterDns:
    def test_create_uses_wrapped_payload(self, meta, rest):
        res = VcenterDns()
        d = res.new_data(config=res.validate({"servers": ["10.0.0.3", "10.0.0.2"]}, "x"))

        res.create(meta, d)

        assert d.id == VCENTER_DNS_ID
        rest.update_request.assert_called_once_with(
            "PUT", DNS_SERVERS_PATH, {"config": {"mode": "is_static", "servers": ["10.0.0.2", "10.0.0.3"]}}
        )

    def test_falls_back_to_flat_payload(self, meta, rest):
        rest.update_request.side_effect = [RestError(msg="HTTP 400", status=400), None]
        res = VcenterDns()
        d = res.new_data(config=res.validate({"servers": ["10.0.0.2"]}, "x"), state={"id": VCENTER_DNS_ID})

        res.update(meta, d)

        assert rest.update_request.call_args_list[1] == mock.call(
            "PUT", DNS_SERVERS_PATH, {"mode": "is_static", "servers": ["10.0.0.2"]}
        )

    def test_both_payloads_rejected(self, meta, rest):
        rest.update_request.side_effect = RestError(msg="HTTP 400", status=400)
        res = VcenterDns()
        with pytest.raises(VSphereError) as ei:
            res.create(meta, res.new_data(config={"servers": ["10.0.0.2"]}))
        assert "error making update request" in ei.value.msg

    def test_transport_error_not_retried_with_flat_payload(self, meta, rest):
        rest.update_request.side_effect = TransportError(msg="connection reset")
        res = VcenterDns()
        with pytest.raises(TransportError):
            res.create(meta, res.new_data(config={"servers": ["10.0.0.2"]}))
        assert rest.update_request.call_count == 1

    def test_read(self, meta, rest):
        rest.get_body.return_value = {"mode": "is_static", "servers": ["10.0.0.9", "10.0.0.2"]}
        res = VcenterDns()
        d = res.new_data(state={"id": VCENTER_DNS_ID, "servers": ["10.0.0.2"]})

        res.read(meta, d)

        assert d.get("servers") == ["10.0.0.2", "10.0.0.9"]
        rest.get_body.assert_called_once_with(DNS_SERVERS_PATH)

    def test_delete_clears_servers(self, meta, rest):
        res = VcenterDns()
        res.delete(meta, res.new_data(state={"id": VCENTER_DNS_ID}))
        rest.update_request.assert_called_once_with(
            "PUT", DNS_SERVERS_PATH, {"config": {"mode": "is_static", "servers": []}}
        )

    def test_delete_on_flat_payload_appliance(self, meta, rest):
        def put(method, path, body):
            if "config" in body:
                raise RestError(msg="HTTP 400", status=400)

        rest.update_request.side_effect = put
        res = VcenterDns()
        d = res.new_data(config=res.validate({"servers": ["10.0.0.2"]}, "x"))
        res.create(meta, d)

        res.delete(meta, res.new_data(state={"id": VCENTER_DNS_ID, "servers": ["10.0.0.2"]}))

        assert rest.update_request.call_args == mock.call("PUT", DNS_SERVERS_PATH, {"mode": "is_static", "servers": []})

    def test_delete_rejected(self, meta, rest):
        rest.update_request.side_effect = RestError(msg="HTTP 400", status=400)
        res = VcenterDns()
        with pytest.raises(VSphereError) as ei:
            res.delete(meta, res.new_data(state={"id": VCENTER_DNS_ID}))
        assert "error deleting dns server config" in ei.value.msg

    def test_import(self, meta, rest):
        rest.get_body.return_value = {"servers": ["10.0.0.2"]}
        res = VcenterDns()
        d = res.new_data(id="anything")

        res.import_state(meta, d)

        assert d.id == VCENTER_DNS_ID
        assert d.get("servers") == ["10.0.0.2"]

    def test_servers_required(self):
        with pytest.raises(ConfigError):
            VcenterDns().validate({}, "vsphere_vcenter_dns.main")
