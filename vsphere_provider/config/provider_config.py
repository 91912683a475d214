# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/config/provider_config.py
"""
Connection settings for the provider.

Resolution order for every field: CLI flag, then config file, then the
environment variable of the same meaning. Passwords can also be indirected
through ``vsphere_password_env`` (the *name* of an environment variable).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..core.exceptions import ConfigError
from ..core.utils import boolish

DEFAULT_API_TIMEOUT_S = 300.0

ENV_SERVER = "VSPHERE_SERVER"
ENV_USER = "VSPHERE_USER"
ENV_PASSWORD = "VSPHERE_PASSWORD"
ENV_INSECURE = "VSPHERE_ALLOW_UNVERIFIED_SSL"


def _present(v: Any) -> bool:
    """True if v is meaningfully present (treats empty/whitespace-only strings as missing)."""
    if v is None:
        return False
    if isinstance(v, str):
        return v.strip() != ""
    return True


@dataclass
class ProviderConfig:
    server: str
    user: str
    password: str
    port: int = 443
    allow_unverified_ssl: bool = False
    api_timeout: float = DEFAULT_API_TIMEOUT_S
    api_retries: int = 0

    def redacted(self) -> Dict[str, Any]:
        return {
            "server": self.server,
            "user": self.user,
            "password": "***REDACTED***" if self.password else "",
            "port": self.port,
            "allow_unverified_ssl": self.allow_unverified_ssl,
            "api_timeout": self.api_timeout,
            "api_retries": self.api_retries,
        }

    @classmethod
    def resolve(
        cls,
        settings: Mapping[str, Any],
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> "ProviderConfig":
        """
        Build from a merged settings mapping (argparse namespace vars + config file).
        """
        env = os.environ if env is None else env

        def pick(key: str, env_key: Optional[str] = None) -> Any:
            v = settings.get(key)
            if _present(v):
                return v
            if env_key and _present(env.get(env_key)):
                return env.get(env_key)
            return None

        server = pick("vsphere_server", ENV_SERVER)
        user = pick("vsphere_user", ENV_USER)

        password = settings.get("vsphere_password")
        if not _present(password):
            envname = settings.get("vsphere_password_env")
            password = env.get(str(envname)) if _present(envname) else env.get(ENV_PASSWORD)

        missing = [k for k, v in (("vsphere_server", server), ("vsphere_user", user), ("vsphere_password", password)) if not _present(v)]
        if missing:
            raise ConfigError(msg=f"missing provider settings: {', '.join(missing)}")

        insecure = pick("allow_unverified_ssl", ENV_INSECURE)

        try:
            port = int(settings.get("vsphere_port") or 443)
            api_timeout = float(settings.get("api_timeout") or DEFAULT_API_TIMEOUT_S)
            api_retries = int(settings.get("api_retries") or 0)
        except (TypeError, ValueError) as e:
            raise ConfigError(msg=f"invalid provider setting: {e}", cause=e)

        if not 1 <= port <= 65535:
            raise ConfigError(msg=f"invalid vsphere_port: {port}")
        if api_timeout <= 0:
            raise ConfigError(msg=f"invalid api_timeout: {api_timeout}")
        if api_retries < 0:
            raise ConfigError(msg=f"invalid api_retries: {api_retries}")

        return cls(
            server=str(server).strip(),
            user=str(user).strip(),
            password=str(password),
            port=port,
            allow_unverified_ssl=boolish(insecure),
            api_timeout=api_timeout,
            api_retries=api_retries,
        )
