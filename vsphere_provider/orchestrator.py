# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/orchestrator.py
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .cli.args import DEFAULT_STATE_FILE, connection_settings
from .cli.args.helpers import _merged_get
from .config.provider_config import ProviderConfig
from .core.logger import Log
from .core.utils import U
from .engine import render
from .engine.runner import Runner, parse_declarations
from .engine.state import StateStore
from .helpers import hostsystem
from .provider import Provider


class Orchestrator:
    """
    Runs one CLI operation against the configured vSphere endpoint.
    """

    def __init__(
        self,
        logger: logging.Logger,
        args: argparse.Namespace,
        conf: Optional[Dict[str, Any]] = None,
        *,
        provider: Optional[Provider] = None,
        console: Any = None,
    ) -> None:
        self.logger = logger
        self.args = args
        self.conf = conf or {}
        self._provider = provider
        self.console = console

        logger.debug("Orchestrator init: cmd=%r state_file=%r", getattr(args, "cmd", None), getattr(args, "state_file", None))

    # Setup

    def _provider_or_new(self) -> Provider:
        if self._provider is None:
            cfg = ProviderConfig.resolve(connection_settings(self.args, self.conf))
            self.logger.debug("Connection: %s", cfg.redacted())
            self._provider = Provider(self.logger, cfg)
        return self._provider

    def _store(self) -> StateStore:
        path = _merged_get(self.args, self.conf, "state_file") or DEFAULT_STATE_FILE
        return StateStore(self.logger, Path(str(path)).expanduser()).load()

    def _runner(self, store: Optional[StateStore] = None) -> Runner:
        return Runner(
            self.logger,
            self._provider_or_new(),
            store or self._store(),
            parse_declarations(self.conf.get("resources"), "resources"),
            parse_declarations(self.conf.get("data_sources"), "data_sources"),
        )

    def _emit(self, title: str, payload: Any) -> None:
        if getattr(self.args, "json_output", False):
            print(U.json_dump(payload))
            return
        if isinstance(payload, dict) and payload and all(isinstance(v, dict) for v in payload.values()):
            for k, v in payload.items():
                render.render_attributes(k, v, self.console)
        elif isinstance(payload, dict):
            render.render_attributes(title, payload, self.console)
        else:
            self.console.print(payload) if self.console else print(payload)

    def _emit_changes(self, changes) -> None:
        if getattr(self.args, "json_output", False):
            print(json.dumps([{"address": c.address, "action": c.action, "attributes": c.attributes} for c in changes], indent=2))
            return
        render.render_plan(changes, self.console)

    # Commands

    def _cmd_plan(self) -> int:
        changes = self._runner().plan(refresh=not getattr(self.args, "no_refresh", False))
        self._emit_changes(changes)
        return 0

    def _cmd_apply(self) -> int:
        runner = self._runner()
        changes = runner.plan(refresh=not getattr(self.args, "no_refresh", False))
        applied = runner.apply(changes)
        self._emit_changes(applied)
        Log.ok(self.logger, f"Apply complete: {len(applied)} change(s)")
        return 0

    def _cmd_destroy(self) -> int:
        applied = self._runner().destroy()
        self._emit_changes(applied)
        Log.ok(self.logger, f"Destroy complete: {len(applied)} resource(s) deleted")
        return 0

    def _cmd_refresh(self) -> int:
        rows = self._runner().refresh()
        if getattr(self.args, "json_output", False):
            print(U.json_dump(rows))
        else:
            render.render_status("Refresh", rows, self.console)
        return 0

    def _cmd_import(self) -> int:
        attrs = self._runner().import_resource(
            str(_merged_get(self.args, self.conf, "import_type")),
            str(_merged_get(self.args, self.conf, "import_name")),
            str(_merged_get(self.args, self.conf, "import_id")),
        )
        self._emit(f"{self.args.import_type}.{self.args.import_name}", attrs)
        return 0

    def _cmd_read(self) -> int:
        self._emit("Data sources", self._runner().read_data_sources())
        return 0

    def _cmd_resolve_host(self) -> int:
        client = self._provider_or_new().vim
        value = str(_merged_get(self.args, self.conf, "host"))
        host, hr = hostsystem.check_if_hostname_or_id(client, value)
        props = hostsystem.properties(client, host)
        self._emit(
            value,
            {
                "id_name": hr.id_name,
                "value": hr.value,
                "host_system_id": getattr(host, "_moId", ""),
                "hostname": props.name,
                "connection_state": hostsystem.connection_state(client, host),
                "maintenance_mode": bool(props.runtime.inMaintenanceMode),
            },
        )
        return 0

    def _cmd_maintenance(self) -> int:
        client = self._provider_or_new().vim
        value = str(_merged_get(self.args, self.conf, "host"))
        host, _ = hostsystem.check_if_hostname_or_id(client, value)
        timeout = int(_merged_get(self.args, self.conf, "maintenance_timeout") or 600)
        if _merged_get(self.args, self.conf, "maintenance") == "enter":
            hostsystem.enter_maintenance_mode(client, host, timeout, bool(getattr(self.args, "evacuate", False)))
        else:
            hostsystem.exit_maintenance_mode(client, host, timeout)
        Log.ok(self.logger, f"Host {value!r}: maintenance mode = {hostsystem.host_in_maintenance(client, host)}")
        return 0

    def run(self) -> int:
        cmd = self.args.cmd
        handlers = {
            "plan": self._cmd_plan,
            "apply": self._cmd_apply,
            "destroy": self._cmd_destroy,
            "refresh": self._cmd_refresh,
            "import": self._cmd_import,
            "read": self._cmd_read,
            "resolve-host": self._cmd_resolve_host,
            "maintenance": self._cmd_maintenance,
        }
        Log.step(self.logger, f"Mode: {cmd}")
        try:
            return handlers[cmd]()
        finally:
            if self._provider is not None:
                self._provider.close()
