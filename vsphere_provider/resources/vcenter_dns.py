# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/vcenter_dns.py
from __future__ import annotations

from typing import Any, List

from ..core.exceptions import RestError, VSphereError, wrap_vsphere
from ..schema import SET, Attribute, Resource, ResourceData

VCENTER_DNS_ID = "vcenter-dns"
DNS_SERVERS_PATH = "/appliance/networking/dns/servers"


def _put_servers(meta: Any, servers: List[str], what: str = "error making update request for dns server config") -> None:
    rest = meta.rest
    # Older appliances take the wrapped payload, newer ones the flat one.
    try:
        rest.update_request("PUT", DNS_SERVERS_PATH, {"config": {"mode": "is_static", "servers": servers}})
        return
    except RestError as e:
        meta.logger.debug("Wrapped DNS payload rejected (%s); retrying with flat payload", e)
    try:
        rest.update_request("PUT", DNS_SERVERS_PATH, {"mode": "is_static", "servers": servers})
    except VSphereError as e:
        raise wrap_vsphere(what, e)


class VcenterDns(Resource):
    """Static DNS servers of the vCenter appliance."""

    type_name = "vsphere_vcenter_dns"
    schema = {
        "servers": Attribute(SET, required=True, description="List of the DNS servers to use."),
    }

    def create(self, meta: Any, d: ResourceData) -> None:
        _put_servers(meta, d.get("servers"))
        d.set_id(VCENTER_DNS_ID)

    def read(self, meta: Any, d: ResourceData) -> None:
        try:
            body = meta.rest.get_body(DNS_SERVERS_PATH)
        except VSphereError as e:
            raise wrap_vsphere("error retrieving dns servers response", e)
        d.set("servers", (body or {}).get("servers") or [])

    def update(self, meta: Any, d: ResourceData) -> None:
        _put_servers(meta, d.get("servers"))

    def delete(self, meta: Any, d: ResourceData) -> None:
        _put_servers(meta, [], "error deleting dns server config")

    def import_state(self, meta: Any, d: ResourceData) -> None:
        self.read(meta, d)
        d.set_id(VCENTER_DNS_ID)
