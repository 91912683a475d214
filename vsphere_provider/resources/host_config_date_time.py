# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/host_config_date_time.py
from __future__ import annotations

from typing import Any

from ..core.exceptions import VSphereError, wrap_vsphere
from ..helpers import hostsystem
from ..schema import BOOL, SET, STRING, Attribute, DataSource, ResourceData
from ..vsphere.viapi import call
from .common import host_identity_schema


class HostConfigDateTime(DataSource):
    """NTP / clock configuration of a host."""

    type_name = "vsphere_host_config_date_time"
    schema = {
        **host_identity_schema("gather ntp info from", force_new=False),
        "ntp_servers": Attribute(SET, computed=True, description="NTP servers set for the host."),
        "protocol": Attribute(STRING, computed=True, description="Network time configuration of the clock."),
        "events_disabled": Attribute(BOOL, computed=True),
        "fallback_disabled": Attribute(BOOL, computed=True),
    }

    def read(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        try:
            host, hr = hostsystem.from_hostname_or_id(client, d)
        except VSphereError as e:
            raise wrap_vsphere(f"error retrieving host for '{self.type_name}' on data source read", e)
        name = client.object_name(host)

        client.logger.info("Reading date time configuration on host %r", name)
        try:
            dts = hostsystem.properties(client, host).config_manager.dateTimeSystem
            info = call("read dateTimeInfo", lambda: dts.dateTimeInfo)
        except VSphereError as e:
            raise wrap_vsphere(f"error trying to gather datetime properties from host '{name}'", e)

        d.set_id(hr.value)
        d.set(hr.id_name, hr.value)
        d.set("protocol", getattr(info, "systemClockProtocol", "") or "")
        d.set("events_disabled", bool(getattr(info, "disableEvents", False)))
        d.set("fallback_disabled", bool(getattr(info, "disableFallback", False)))
        ntp = getattr(info, "ntpConfig", None)
        d.set("ntp_servers", list(getattr(ntp, "server", None) or []))
