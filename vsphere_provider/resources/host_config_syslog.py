# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/host_config_syslog.py
from __future__ import annotations

from typing import Any

from ..core.exceptions import VSphereError, wrap_vsphere
from ..helpers import hostsystem
from ..helpers.advanced_options import query_option, update_options
from ..schema import STRING, Attribute, DataSource, Resource, ResourceData
from .common import host_identity_schema, resolve_import_host

LOG_HOST_KEY = "Syslog.global.logHost"
LOG_LEVEL_KEY = "Config.HostAgent.log.level"
DEFAULT_LOG_LEVEL = "info"

LOG_LEVELS = ("none", "quiet", "panic", "error", "warning", "info", "verbose", "trivia")


def _read(meta: Any, d: ResourceData) -> None:
    client = meta.vim
    try:
        host, hr = hostsystem.from_hostname_or_id(client, d)
    except VSphereError as e:
        raise wrap_vsphere("error retrieving host for syslog read", e)
    d.set_id(hr.value)
    d.set("log_host", str(query_option(client, host, LOG_HOST_KEY) or ""))
    d.set("log_level", str(query_option(client, host, LOG_LEVEL_KEY) or DEFAULT_LOG_LEVEL))


class HostConfigSyslog(Resource):
    """Remote syslog target and host agent log level."""

    type_name = "vsphere_host_config_syslog"
    schema = {
        **host_identity_schema("configure syslog on"),
        "log_host": Attribute(STRING, optional=True, description="Remote syslog host(s), e.g. udp://10.0.0.5:514."),
        "log_level": Attribute(STRING, optional=True, default=DEFAULT_LOG_LEVEL, choices=LOG_LEVELS),
    }

    def _apply(self, meta: Any, d: ResourceData, *, only_changed: bool) -> None:
        client = meta.vim
        host, hr = hostsystem.from_hostname_or_id(client, d)
        changes = {}
        if not only_changed or d.has_change("log_host"):
            changes[LOG_HOST_KEY] = d.get("log_host") or ""
        if not only_changed or d.has_change("log_level"):
            changes[LOG_LEVEL_KEY] = d.get("log_level") or DEFAULT_LOG_LEVEL
        update_options(client, host, changes)
        d.set_id(hr.value)

    def create(self, meta: Any, d: ResourceData) -> None:
        self._apply(meta, d, only_changed=False)
        self.read(meta, d)

    def read(self, meta: Any, d: ResourceData) -> None:
        _read(meta, d)

    def update(self, meta: Any, d: ResourceData) -> None:
        self._apply(meta, d, only_changed=True)
        self.read(meta, d)

    def delete(self, meta: Any, d: ResourceData) -> None:
        client = meta.vim
        host, _ = hostsystem.from_hostname_or_id(client, d)
        update_options(client, host, {LOG_HOST_KEY: "", LOG_LEVEL_KEY: DEFAULT_LOG_LEVEL})

    def import_state(self, meta: Any, d: ResourceData) -> None:
        _, hr = resolve_import_host(meta, d, d.id)
        d.set_id(hr.value)


class HostConfigSyslogData(DataSource):
    type_name = "vsphere_host_config_syslog"
    schema = {
        **host_identity_schema("read syslog settings from", force_new=False),
        "log_host": Attribute(STRING, computed=True),
        "log_level": Attribute(STRING, computed=True),
    }

    def read(self, meta: Any, d: ResourceData) -> None:
        _read(meta, d)
