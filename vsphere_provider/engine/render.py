# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/engine/render.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .runner import CREATE, DELETE, NOOP, REPLACE, UPDATE, Change

_ACTION_STYLE = {
    CREATE: ("+", "green"),
    UPDATE: ("~", "yellow"),
    REPLACE: ("-/+", "magenta"),
    DELETE: ("-", "red"),
    NOOP: ("=", "dim"),
}


def _console(console: Optional[Console]) -> Console:
    return console or Console(stderr=False)


def _fmt(v: Any) -> str:
    if isinstance(v, (list, dict)):
        return json.dumps(v, sort_keys=True)
    return "" if v is None else str(v)


def summarize(changes: List[Change]) -> Dict[str, int]:
    out = {CREATE: 0, UPDATE: 0, REPLACE: 0, DELETE: 0, NOOP: 0}
    for ch in changes:
        out[ch.action] += 1
    return out


def render_plan(changes: List[Change], console: Optional[Console] = None) -> None:
    con = _console(console)
    table = Table(title="Plan", title_justify="left", expand=True)
    table.add_column("", width=3)
    table.add_column("Address", style="bold")
    table.add_column("Action")
    table.add_column("Attributes")

    for ch in changes:
        sym, style = _ACTION_STYLE[ch.action]
        table.add_row(f"[{style}]{sym}[/{style}]", ch.address, f"[{style}]{ch.action}[/{style}]", ", ".join(ch.attributes))
    con.print(table)

    s = summarize(changes)
    con.print(
        Panel(
            f"{s[CREATE]} to create, {s[UPDATE]} to update, {s[REPLACE]} to replace, {s[DELETE]} to delete",
            title="Summary",
            title_align="left",
            expand=True,
            style="cyan",
        )
    )


def render_attributes(title: str, attrs: Dict[str, Any], console: Optional[Console] = None) -> None:
    con = _console(console)
    table = Table(title=title, title_justify="left", expand=True)
    table.add_column("Attribute", style="bold")
    table.add_column("Value")
    for k in sorted(attrs):
        table.add_row(k, _fmt(attrs[k]))
    con.print(table)


def render_status(title: str, rows: Dict[str, str], console: Optional[Console] = None) -> None:
    con = _console(console)
    table = Table(title=title, title_justify="left", expand=True)
    table.add_column("Address", style="bold")
    table.add_column("Status")
    for k, v in rows.items():
        table.add_row(k, v)
    con.print(table)
