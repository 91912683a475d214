# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/provider.py
from __future__ import annotations

import logging
from typing import Any, Optional, Type

from .config.provider_config import ProviderConfig
from .core.exceptions import ConfigError
from .resources import DATA_SOURCES, RESOURCES
from .schema import DataSource, Resource
from .vsphere.client import VSphereClient
from .vsphere.rest import RestClient


class Provider:
    """
    Resource/data-source registry plus the clients operations run against.

    Clients are created on first use, so a plan that only touches REST
    resources never opens a SOAP session and vice versa.
    """

    def __init__(
        self,
        logger: logging.Logger,
        cfg: Optional[ProviderConfig],
        *,
        vim_client: Any = None,
        rest_client: Any = None,
    ) -> None:
        self.logger = logger
        self.cfg = cfg
        self._vim = vim_client
        self._rest = rest_client
        self._owns_vim = vim_client is None
        self._owns_rest = rest_client is None

    # Registry

    def resource(self, type_name: str) -> Resource:
        cls: Optional[Type[Resource]] = RESOURCES.get(type_name)
        if cls is None:
            raise ConfigError(msg=f"unknown resource type {type_name!r} (known: {', '.join(sorted(RESOURCES))})")
        return cls()

    def data_source(self, type_name: str) -> DataSource:
        cls: Optional[Type[DataSource]] = DATA_SOURCES.get(type_name)
        if cls is None:
            raise ConfigError(msg=f"unknown data source type {type_name!r} (known: {', '.join(sorted(DATA_SOURCES))})")
        return cls()

    # Clients

    def _require_cfg(self) -> ProviderConfig:
        if self.cfg is None:
            raise ConfigError(msg="vSphere connection settings are required for this command")
        return self.cfg

    @property
    def vim(self) -> Any:
        if self._vim is None:
            client = VSphereClient.from_config(self.logger, self._require_cfg())
            client.connect()
            self._vim = client
        return self._vim

    @property
    def rest(self) -> Any:
        if self._rest is None:
            self._rest = RestClient.from_config(self.logger, self._require_cfg())
        return self._rest

    def close(self) -> None:
        if self._rest is not None and self._owns_rest:
            self._rest.logout()
            self._rest = None
        if self._vim is not None and self._owns_vim:
            self._vim.disconnect()
            self._vim = None

    def __enter__(self) -> "Provider":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
