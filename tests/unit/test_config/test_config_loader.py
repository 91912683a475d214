# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import argparse
import json

import pytest

from vsphere_provider.config.config_loader import Config, deep_merge_dict
from vsphere_provider.core.exceptions import Fatal


@pytest.mark.unit
def test_deep_merge_dict():
    out = deep_merge_dict({"a": {"b": 1, "c": 2}, "d": [1]}, {"a": {"c": 99}, "d": [2], "e": 4})
    assert out == {"a": {"b": 1, "c": 99}, "d": [2], "e": 4}


@pytest.mark.unit
class TestLoading:
    def test_yaml_and_json_merge_in_order(self, tmp_path, fake_logger):
        (tmp_path / "a.yaml").write_text("vsphere-server: vc01\nstate_file: a.json\n", encoding="utf-8")
        (tmp_path / "b.json").write_text(json.dumps({"state_file": "b.json"}), encoding="utf-8")

        paths = Config.expand_configs(fake_logger, [str(tmp_path / "a.yaml"), str(tmp_path / "b.json")])
        conf = Config.load_many(fake_logger, paths)

        assert conf == {"vsphere_server": "vc01", "state_file": "b.json"}

    def test_glob_expansion_dedupes(self, tmp_path, fake_logger):
        for n in ("10-base.yaml", "20-site.yaml"):
            (tmp_path / n).write_text("{}\n", encoding="utf-8")
        paths = Config.expand_configs(fake_logger, [str(tmp_path / "*.yaml"), str(tmp_path / "10-base.yaml")])

        assert [p.rsplit("/", 1)[-1] for p in paths] == ["10-base.yaml", "20-site.yaml"]

    def test_glob_matching_nothing(self, tmp_path, fake_logger):
        with pytest.raises(Fatal) as ei:
            Config.expand_configs(fake_logger, [str(tmp_path / "*.yaml")])
        assert ei.value.code == 2

    def test_missing_file(self, tmp_path, fake_logger):
        with pytest.raises(Fatal):
            Config.load_one(fake_logger, str(tmp_path / "nope.yaml"))

    def test_non_mapping_rejected(self, tmp_path, fake_logger):
        p = tmp_path / "list.yaml"
        p.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(Fatal) as ei:
            Config.load_one(fake_logger, str(p))
        assert "mapping" in ei.value.msg

    def test_invalid_yaml(self, tmp_path, fake_logger):
        p = tmp_path / "bad.yaml"
        p.write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(Fatal):
            Config.load_one(fake_logger, str(p))

    def test_resource_keys_not_normalized(self, tmp_path, fake_logger):
        p = tmp_path / "r.yaml"
        p.write_text("resources:\n  - type: t\n    name: n\n    config: {log-host: x}\n", encoding="utf-8")
        conf = Config.load_one(fake_logger, str(p))
        assert conf["resources"][0]["config"] == {"log-host": "x"}


@pytest.mark.unit
def test_apply_as_defaults_only_known_dests(fake_logger):
    parser = argparse.ArgumentParser()
    parser.add_argument("--state-file", dest="state_file", default="x")

    Config.apply_as_defaults(fake_logger, parser, {"state_file": "from-config", "resources": []})

    assert parser.parse_args([]).state_file == "from-config"
    assert parser.parse_args(["--state-file", "cli"]).state_file == "cli"
