# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest

from vsphere_provider.config.provider_config import DEFAULT_API_TIMEOUT_S, ProviderConfig
from vsphere_provider.core.exceptions import ConfigError

BASE = {"vsphere_server": "vc01.example.com", "vsphere_user": "admin", "vsphere_password": "s3cret"}


@pytest.mark.unit
class TestResolve:
    def test_defaults(self):
        cfg = ProviderConfig.resolve(BASE, env={})

        assert cfg.server == "vc01.example.com"
        assert cfg.port == 443
        assert cfg.allow_unverified_ssl is False
        assert cfg.api_timeout == DEFAULT_API_TIMEOUT_S
        assert cfg.api_retries == 0

    def test_environment_fallback(self):
        env = {
            "VSPHERE_SERVER": "vc02",
            "VSPHERE_USER": "ops",
            "VSPHERE_PASSWORD": "pw",
            "VSPHERE_ALLOW_UNVERIFIED_SSL": "true",
        }
        cfg = ProviderConfig.resolve({}, env=env)

        assert (cfg.server, cfg.user, cfg.password) == ("vc02", "ops", "pw")
        assert cfg.allow_unverified_ssl is True

    def test_settings_win_over_environment(self):
        cfg = ProviderConfig.resolve(BASE, env={"VSPHERE_SERVER": "other"})
        assert cfg.server == "vc01.example.com"

    def test_password_env_indirection(self):
        settings = {k: v for k, v in BASE.items() if k != "vsphere_password"}
        settings["vsphere_password_env"] = "MY_VC_PASS"

        cfg = ProviderConfig.resolve(settings, env={"MY_VC_PASS": "from-env", "VSPHERE_PASSWORD": "ignored"})

        assert cfg.password == "from-env"

    def test_missing_settings_listed(self):
        with pytest.raises(ConfigError) as ei:
            ProviderConfig.resolve({"vsphere_server": "  "}, env={})
        assert "vsphere_server" in ei.value.msg
        assert "vsphere_user" in ei.value.msg
        assert "vsphere_password" in ei.value.msg

    @pytest.mark.parametrize(
        "key,value",
        [("vsphere_port", 70000), ("vsphere_port", "abc"), ("api_timeout", -1), ("api_retries", -2)],
    )
    def test_invalid_numbers(self, key, value):
        with pytest.raises(ConfigError):
            ProviderConfig.resolve({**BASE, key: value}, env={})

    def test_redacted_hides_password(self):
        cfg = ProviderConfig.resolve(BASE, env={})
        assert cfg.redacted()["password"] == "***REDACTED***"
        assert "s3cret" not in str(cfg.redacted())
