# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import argparse
import json

import pytest

from fakes.fake_vsphere import FakeHost, esxi_client
from vsphere_provider.orchestrator import Orchestrator
from vsphere_provider.schema import INT, STRING, Attribute, Resource


class Counter(Resource):
    type_name = "test_counter"
    schema = {"name": Attribute(STRING, required=True), "value": Attribute(INT, optional=True, default=0)}
    store = {}

    def create(self, meta, d):
        self.store[d.get("name")] = d.get("value")
        d.set_id(d.get("name"))

    def read(self, meta, d):
        if d.id not in self.store:
            d.set_id("")
            return
        d.set("name", d.id)
        d.set("value", self.store[d.id])

    def update(self, meta, d):
        self.store[d.id] = d.get("value")

    def delete(self, meta, d):
        self.store.pop(d.id, None)


class FakeProvider:
    def __init__(self, vim=None):
        self.vim = vim
        self.closed = 0

    def resource(self, type_name):
        return Counter()

    def data_source(self, type_name):
        raise AssertionError("no data sources declared")

    def close(self):
        self.closed += 1


@pytest.fixture(autouse=True)
def _reset_counter():
    Counter.store = {}


def _args(tmp_path, cmd, **kw):
    base = dict(cmd=cmd, state_file=str(tmp_path / "state.json"), json_output=True, no_refresh=False)
    base.update(kw)
    return argparse.Namespace(**base)


CONF = {"resources": [{"type": "test_counter", "name": "a", "config": {"name": "a", "value": 3}}]}


@pytest.mark.unit
class TestOrchestrator:
    def test_apply_then_plan_is_clean(self, tmp_path, fake_logger, capsys):
        provider = FakeProvider()

        assert Orchestrator(fake_logger, _args(tmp_path, "apply"), CONF, provider=provider).run() == 0
        applied = json.loads(capsys.readouterr().out)
        assert [(c["address"], c["action"]) for c in applied] == [("test_counter.a", "create")]
        assert Counter.store == {"a": 3}
        assert provider.closed == 1

        state = json.loads((tmp_path / "state.json").read_text())
        assert "test_counter.a" in json.dumps(state)

        Orchestrator(fake_logger, _args(tmp_path, "plan"), CONF, provider=provider).run()
        planned = json.loads(capsys.readouterr().out)
        assert [c["action"] for c in planned] == ["noop"]

    def test_destroy(self, tmp_path, fake_logger, capsys):
        provider = FakeProvider()
        Orchestrator(fake_logger, _args(tmp_path, "apply"), CONF, provider=provider).run()
        capsys.readouterr()

        Orchestrator(fake_logger, _args(tmp_path, "destroy"), CONF, provider=provider).run()

        assert Counter.store == {}
        assert any("Destroy complete" in m for m in fake_logger.messages("info"))

    def test_resolve_host(self, tmp_path, fake_logger, capsys):
        client = esxi_client(fake_logger, FakeHost("ha-host", "esx1.lab"))
        orch = Orchestrator(fake_logger, _args(tmp_path, "resolve-host", host="esx1.lab"), {}, provider=FakeProvider(client))

        assert orch.run() == 0

        out = json.loads(capsys.readouterr().out)
        assert out["id_name"] == "hostname"
        assert out["host_system_id"] == "ha-host"
        assert out["maintenance_mode"] is False
        assert out["connection_state"] == "connected"

    def test_maintenance_enter(self, tmp_path, fake_logger):
        host = FakeHost("ha-host", "esx1.lab")
        client = esxi_client(fake_logger, host)
        args = _args(tmp_path, "maintenance", host="ha-host", maintenance="enter", maintenance_timeout=60, evacuate=False)

        Orchestrator(fake_logger, args, {}, provider=FakeProvider(client)).run()

        assert host.runtime.inMaintenanceMode is True
        assert client.tasks[-1][1] == 60
