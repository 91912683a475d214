# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/engine/runner.py
"""
Drives resources from declared config to live objects.

Plan compares each declared resource's config with its (refreshed) state:

  - no state          -> create
  - no changes        -> noop
  - ForceNew changed,
    or no update op   -> replace (delete, then create)
  - otherwise         -> update
  - state not declared-> delete

Apply runs deletes first, then replacements, updates and creates, saving
state after every step so a failure leaves an accurate record behind.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..core.exceptions import ConfigError, ProviderError
from ..core.logger import Log
from ..schema import Resource
from .state import StateStore, address

CREATE = "create"
UPDATE = "update"
REPLACE = "replace"
DELETE = "delete"
NOOP = "noop"

_ORDER = {DELETE: 0, REPLACE: 1, UPDATE: 2, CREATE: 3, NOOP: 4}


@dataclass
class Declared:
    type: str
    name: str
    config: Dict[str, Any]

    @property
    def address(self) -> str:
        return address(self.type, self.name)


@dataclass
class Change:
    address: str
    type: str
    name: str
    action: str
    attributes: List[str] = field(default_factory=list)
    config: Optional[Dict[str, Any]] = None
    prior: Optional[Dict[str, Any]] = None


def parse_declarations(items: Any, kind: str) -> List[Declared]:
    """Turn ``resources:`` / ``data_sources:`` config entries into Declared records."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise ConfigError(msg=f"'{kind}' must be a list")
    out: List[Declared] = []
    seen = set()
    for n, item in enumerate(items):
        if not isinstance(item, dict):
            raise ConfigError(msg=f"{kind}[{n}] must be a mapping")
        t, name = item.get("type"), item.get("name")
        if not t or not name:
            raise ConfigError(msg=f"{kind}[{n}] needs 'type' and 'name'")
        extra = sorted(set(item) - {"type", "name", "config"})
        if extra:
            raise ConfigError(msg=f"{kind}[{n}] has unsupported key(s): {', '.join(extra)}")
        decl = Declared(type=str(t), name=str(name), config=dict(item.get("config") or {}))
        if decl.address in seen:
            raise ConfigError(msg=f"{kind}: duplicate declaration {decl.address}")
        seen.add(decl.address)
        out.append(decl)
    return out


class Runner:
    def __init__(
        self,
        logger: logging.Logger,
        provider: Any,
        store: StateStore,
        resources: Sequence[Declared] = (),
        data_sources: Sequence[Declared] = (),
    ) -> None:
        self.logger = logger
        self.provider = provider
        self.store = store
        self.resources = list(resources)
        self.data_sources = list(data_sources)

    # Helpers

    def _validated(self, decl: Declared, res: Any) -> Dict[str, Any]:
        return res.validate(decl.config, decl.address)

    def _read(self, res: Resource, attrs: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Refresh one state entry; None when the object is gone."""
        d = res.new_data(state=attrs)
        res.read(self.provider, d)
        return d.to_state() if d.id else None

    # Plan

    def plan(self, *, refresh: bool = True) -> List[Change]:
        changes: List[Change] = []
        declared = set()

        for decl in self.resources:
            declared.add(decl.address)
            res = self.provider.resource(decl.type)
            cfg = self._validated(decl, res)
            prior = self.store.get(decl.address)

            if prior is not None and refresh:
                prior = self._read(res, prior)

            if prior is None:
                changes.append(Change(decl.address, decl.type, decl.name, CREATE, sorted(k for k, v in cfg.items() if v is not None), cfg, None))
                continue

            d = res.new_data(config=cfg, state=prior)
            changed = [k for k in res.schema if d.has_change(k)]
            if not changed:
                action = NOOP
            elif any(res.schema[k].force_new for k in changed) or not res.updatable:
                action = REPLACE
            else:
                action = UPDATE
            changes.append(Change(decl.address, decl.type, decl.name, action, changed, cfg, prior))

        for addr in self.store.addresses():
            if addr in declared:
                continue
            t = self.store.type_of(addr)
            name = addr[len(t) + 1:]
            changes.append(Change(addr, t, name, DELETE, [], None, self.store.get(addr)))

        changes.sort(key=lambda c: _ORDER[c.action])
        return changes

    # Apply

    def _create(self, ch: Change, log: Any) -> None:
        res = self.provider.resource(ch.type)
        d = res.new_data(config=ch.config)
        try:
            res.create(self.provider, d)
        except ProviderError:
            if d.id:
                Log.warn(log, f"create failed after {d.id} was created; keeping it in state")
            raise
        finally:
            # Keep partially created objects (id already set) in state.
            if d.id:
                self.store.put(ch.type, ch.name, d.to_state())
                self.store.save()

    def _update(self, ch: Change) -> None:
        res = self.provider.resource(ch.type)
        d = res.new_data(config=ch.config, state=ch.prior)
        res.update(self.provider, d)
        self.store.put(ch.type, ch.name, d.to_state())
        self.store.save()

    def _delete(self, ch: Change) -> None:
        res = self.provider.resource(ch.type)
        d = res.new_data(state=ch.prior)
        res.delete(self.provider, d)
        self.store.remove(ch.address)
        self.store.save()

    def apply(self, changes: Optional[List[Change]] = None) -> List[Change]:
        """Execute a plan (computed here when not given). Returns the changes applied."""
        if changes is None:
            changes = self.plan()
        applied: List[Change] = []
        for ch in changes:
            if ch.action == NOOP:
                continue
            log = Log.bind(self.logger, address=ch.address, action=ch.action)
            log.info("%s: %s", ch.address, ch.action)
            try:
                if ch.action == CREATE:
                    self._create(ch, log)
                elif ch.action == UPDATE:
                    self._update(ch)
                elif ch.action == DELETE:
                    self._delete(ch)
                elif ch.action == REPLACE:
                    self._delete(ch)
                    self._create(ch, log)
            except ProviderError as e:
                Log.fail(log, f"{ch.address}: {ch.action} failed")
                raise e.with_context(address=ch.address, action=ch.action)
            applied.append(ch)
        return applied

    def destroy(self) -> List[Change]:
        """Delete everything in state, newest first."""
        changes = []
        for addr in reversed(self.store.addresses()):
            t = self.store.type_of(addr)
            changes.append(Change(addr, t, addr[len(t) + 1:], DELETE, [], None, self.store.get(addr)))
        return self.apply(changes)

    def refresh(self) -> Dict[str, str]:
        """Re-read every object in state. Returns address -> 'refreshed' | 'gone'."""
        out: Dict[str, str] = {}
        for addr in self.store.addresses():
            t = self.store.type_of(addr)
            res = self.provider.resource(t)
            attrs = self._read(res, self.store.get(addr) or {})
            if attrs is None:
                self.logger.warning("%s no longer exists; removing from state", addr)
                self.store.remove(addr)
                out[addr] = "gone"
            else:
                self.store.put(t, addr[len(t) + 1:], attrs)
                out[addr] = "refreshed"
        self.store.save()
        return out

    def import_resource(self, type_name: str, name: str, import_id: str) -> Dict[str, Any]:
        addr = address(type_name, name)
        if self.store.get(addr) is not None:
            raise ConfigError(msg=f"{addr} is already managed; remove it from state before importing")
        res = self.provider.resource(type_name)
        if not res.importable:
            raise ConfigError(msg=f"{type_name} does not support import")

        d = res.new_data(id=import_id)
        res.import_state(self.provider, d)
        if not d.id:
            raise ConfigError(msg=f"import of {addr} from {import_id!r} produced no id")

        attrs = self._read(res, d.to_state())
        if attrs is None:
            raise ConfigError(msg=f"cannot import non-existent remote object {import_id!r}")
        self.store.put(type_name, name, attrs)
        self.store.save()
        self.logger.info("Imported %s from %r", addr, import_id)
        return attrs

    def read_data_sources(self) -> Dict[str, Dict[str, Any]]:
        out: Dict[str, Dict[str, Any]] = {}
        for decl in self.data_sources:
            ds = self.provider.data_source(decl.type)
            cfg = self._validated(decl, ds)
            d = ds.new_data(config=cfg)
            try:
                ds.read(self.provider, d)
            except ProviderError as e:
                raise e.with_context(address=f"data.{decl.address}")
            out[f"data.{decl.address}"] = d.to_state()
        return out
