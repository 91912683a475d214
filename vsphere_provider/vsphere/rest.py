# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/vsphere/rest.py
"""
vCenter appliance REST client.

Newer appliances serve ``/api/...`` and answer session creation with a bare
JSON string token. Older ones only serve ``/rest/...``; there the session call
lives at ``/rest/com/vmware/cis/session`` and every body is wrapped as
``{"value": ...}``. The client detects which flavour it is talking to at login
and hides the difference from callers.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests
import requests.adapters
import urllib3

from ..config.provider_config import ProviderConfig
from ..core.exceptions import RestError, TransportError
from ..core.retry import retry_operation

SESSION_HEADER = "vmware-api-session-id"

API_PREFIX = "/api"
LEGACY_PREFIX = "/rest"
LEGACY_SESSION_PATH = "/rest/com/vmware/cis/session"


class RestClient:
    def __init__(
        self,
        logger: logging.Logger,
        host: str,
        user: str,
        password: str,
        *,
        port: int = 443,
        insecure: bool = False,
        timeout: Optional[float] = None,
        api_retries: int = 0,
        http_client: Optional[Any] = None,  # For testing/mocking
    ) -> None:
        if not host:
            raise ValueError("Host cannot be empty")
        if not 1 <= port <= 65535:
            raise ValueError(f"Invalid port: {port}")

        self.logger = logger
        self.host = host.strip()
        self.user = user
        self.password = password
        self.port = port
        self.insecure = insecure
        self.timeout = timeout
        self.api_retries = max(0, int(api_retries))

        self.prefix = API_PREFIX
        self.token: Optional[str] = None

        self._session_pool: Optional[Any] = None
        self._http_client = http_client or requests

        self._disable_tls_warnings()

    @classmethod
    def from_config(cls, logger: logging.Logger, cfg: ProviderConfig) -> "RestClient":
        return cls(
            logger,
            cfg.server,
            cfg.user,
            cfg.password,
            port=cfg.port,
            insecure=cfg.allow_unverified_ssl,
            timeout=cfg.api_timeout,
            api_retries=cfg.api_retries,
        )

    def _disable_tls_warnings(self) -> None:
        if self.insecure:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @property
    def legacy(self) -> bool:
        return self.prefix == LEGACY_PREFIX

    @property
    def base_url(self) -> str:
        return f"https://{self.host}:{self.port}"

    @property
    def session(self) -> Any:
        if self._session_pool is None:
            self._session_pool = self._create_session()
        return self._session_pool

    def _create_session(self) -> Any:
        session = self._http_client.Session()
        session.verify = not self.insecure

        adapter = self._http_client.adapters.HTTPAdapter(
            pool_connections=2,
            pool_maxsize=4,
            max_retries=0,
            pool_block=False,
        )
        session.mount("https://", adapter)
        session.headers.update({"Accept": "application/json"})
        return session

    # Transport

    def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        what = f"{method} {url}"

        def once() -> Any:
            try:
                return self.session.request(method, url, timeout=self.timeout, **kwargs)
            except requests.RequestException as e:
                raise TransportError(msg=f"{what}: {e}", cause=e)

        return retry_operation(
            once,
            max_attempts=self.api_retries + 1,
            base_backoff_s=1.0,
            max_backoff_s=30.0,
            exceptions=TransportError,
            operation_name=what,
            logger=self.logger,
        )

    @staticmethod
    def _decode(resp: Any) -> Any:
        raw = getattr(resp, "content", b"") or b""
        if not raw.strip():
            return None
        try:
            return resp.json()
        except ValueError:
            return raw.decode("utf-8", errors="replace")

    @staticmethod
    def _error_detail(resp: Any) -> str:
        body = RestClient._decode(resp)
        if isinstance(body, dict):
            value = body.get("value", body)
            messages = value.get("messages") if isinstance(value, dict) else None
            if messages:
                return "; ".join(str(m.get("default_message", m)) for m in messages if m)
            return json.dumps(body, sort_keys=True)
        return str(body or getattr(resp, "reason", "") or "")

    def _check(self, what: str, resp: Any) -> Any:
        status = int(getattr(resp, "status_code", 0) or 0)
        if status >= 400:
            raise RestError(
                msg=f"{what}: HTTP {status}: {self._error_detail(resp)}",
                status=status,
            )
        return self._decode(resp)

    # Session

    def login(self) -> None:
        if self.token:
            return
        auth = (self.user, self.password)

        resp = self._send("POST", f"{self.base_url}{API_PREFIX}/session", auth=auth)
        if int(getattr(resp, "status_code", 0) or 0) == 404:
            self.logger.debug("vCenter has no %s/session; using legacy %s", API_PREFIX, LEGACY_SESSION_PATH)
            resp = self._send("POST", f"{self.base_url}{LEGACY_SESSION_PATH}", auth=auth)
            body = self._check("create session", resp)
            token = body.get("value") if isinstance(body, dict) else body
            self.prefix = LEGACY_PREFIX
        else:
            token = self._check("create session", resp)
            self.prefix = API_PREFIX

        if not token or not isinstance(token, str):
            raise RestError(msg=f"create session: unexpected response {token!r}")

        self.token = token
        self.session.headers[SESSION_HEADER] = token
        self.logger.info("REST session established with %s (%s)", self.host, self.prefix)

    def logout(self) -> None:
        if not self.token:
            return
        path = LEGACY_SESSION_PATH if self.legacy else f"{API_PREFIX}/session"
        try:
            self._send("DELETE", f"{self.base_url}{path}")
        except TransportError as e:
            self.logger.warning("Error during REST logout: %s", e)
        finally:
            self.token = None
            self.session.headers.pop(SESSION_HEADER, None)

    def __enter__(self) -> "RestClient":
        self.login()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.logout()
        return False

    # Calls

    def url(self, path: str) -> str:
        return f"{self.base_url}{self.prefix}/{path.lstrip('/')}"

    def _unwrap(self, body: Any) -> Any:
        if self.legacy and isinstance(body, dict) and "value" in body:
            return body["value"]
        return body

    def get_body(self, path: str) -> Any:
        """GET ``path`` and return the decoded body (legacy ``value`` wrapper removed)."""
        self.login()
        resp = self._send("GET", self.url(path))
        return self._unwrap(self._check(f"GET {path}", resp))

    def update_request(self, method: str, path: str, body: Any) -> Any:
        """Send a mutating request (PUT, PATCH, POST) with a JSON body."""
        self.login()
        resp = self._send(method.upper(), self.url(path), json=body)
        return self._unwrap(self._check(f"{method.upper()} {path}", resp))
