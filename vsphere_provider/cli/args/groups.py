# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/cli/args/groups.py
from __future__ import annotations

import argparse

DEFAULT_STATE_FILE = "./vsphere-provider.state.json"
DEFAULT_MAINTENANCE_TIMEOUT = 600

COMMANDS = (
    "plan",
    "apply",
    "destroy",
    "refresh",
    "import",
    "read",
    "resolve-host",
    "maintenance",
)


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged normalized config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv, -vvv")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Less output: -q warnings only, -qq errors only.")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit logs as NDJSON on stderr.")


def _add_project_control(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Operation (positional, or YAML `cmd:`)
    # ------------------------------------------------------------------
    p.add_argument(
        "cmd",
        nargs="?",
        default=None,
        help=f"Operation (or YAML `cmd:`): {', '.join(COMMANDS)}",
    )
    p.add_argument("--json", dest="json_output", action="store_true", help="Print results as JSON instead of tables.")


def _add_vsphere_connection(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # vSphere / vCenter connection (env: VSPHERE_SERVER, VSPHERE_USER, ...)
    # ------------------------------------------------------------------
    p.add_argument("--vsphere-server", dest="vsphere_server", default=None, help="vCenter/ESXi hostname or IP")
    p.add_argument("--vsphere-user", dest="vsphere_user", default=None, help="vSphere username")
    p.add_argument(
        "--vsphere-password",
        dest="vsphere_password",
        default=None,
        help="vSphere password (or use --vsphere-password-env)",
    )
    p.add_argument(
        "--vsphere-password-env",
        dest="vsphere_password_env",
        default=None,
        help="Env var containing the vSphere password",
    )
    p.add_argument("--vsphere-port", dest="vsphere_port", type=int, default=None, help="HTTPS port (default: 443)")
    p.add_argument(
        "--allow-unverified-ssl",
        dest="allow_unverified_ssl",
        action="store_const",
        const=True,
        default=None,
        help="Disable TLS verification (self-signed lab certificates only).",
    )
    p.add_argument("--api-timeout", dest="api_timeout", type=float, default=None, help="Seconds per API call / task wait (default: 300)")
    p.add_argument("--api-retries", dest="api_retries", type=int, default=None, help="Retries on network errors (default: 0)")


def _add_state_flags(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # State / planning
    # ------------------------------------------------------------------
    p.add_argument("--state-file", dest="state_file", default=DEFAULT_STATE_FILE, help="JSON state file.")
    p.add_argument(
        "--no-refresh",
        dest="no_refresh",
        action="store_true",
        help="plan/apply: compare against stored state without re-reading vSphere first.",
    )


def _add_import_knobs(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # import
    # ------------------------------------------------------------------
    p.add_argument("--type", dest="import_type", default=None, help="import: resource type, e.g. vsphere_nas_datastore")
    p.add_argument("--name", dest="import_name", default=None, help="import: resource name in state")
    p.add_argument("--id", dest="import_id", default=None, help="import: remote id, e.g. datastore-12 or host-42:vmhba65")


def _add_host_knobs(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # resolve-host / maintenance
    # ------------------------------------------------------------------
    p.add_argument("--host", dest="host", default=None, help="Host managed object ID (host-42) or hostname")
    p.add_argument(
        "--maintenance",
        dest="maintenance",
        default=None,
        choices=["enter", "exit"],
        help="maintenance: enter or exit maintenance mode",
    )
    p.add_argument(
        "--evacuate",
        dest="evacuate",
        action="store_true",
        help="maintenance enter: evacuate powered-off VMs (vCenter only)",
    )
    p.add_argument(
        "--maintenance-timeout",
        dest="maintenance_timeout",
        type=int,
        default=DEFAULT_MAINTENANCE_TIMEOUT,
        help="maintenance: seconds to wait for the task",
    )
