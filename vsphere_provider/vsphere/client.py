# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/vsphere/client.py
"""
vSphere / vCenter SOAP client (pyVmomi).
"""
from __future__ import annotations

import logging
import socket
import ssl
import time
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Tuple

from pyVim.connect import Disconnect, SmartConnect
from pyVmomi import vim

from ..config.provider_config import DEFAULT_API_TIMEOUT_S, ProviderConfig
from ..core.exceptions import VSphereError
from .viapi import call, translate_fault

API_TYPE_ESXI = "HostAgent"
API_TYPE_VCENTER = "VirtualCenter"


class VSphereClient:
    """
    Session against a vCenter Server or a standalone ESXi host.

    Lookups return live pyVmomi managed objects; failures are translated into
    the project error hierarchy (see viapi.translate_fault).
    """

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
        api_timeout: float = DEFAULT_API_TIMEOUT_S,
    ) -> None:
        self.logger = logger
        self.host = (host or "").strip()
        self.user = (user or "").strip()
        self.password = password or ""
        self.port = int(port)
        self.insecure = bool(insecure)
        self.timeout = timeout
        self.api_timeout = float(api_timeout)

        self.si: Any = None

    @classmethod
    def from_config(cls, logger: logging.Logger, cfg: ProviderConfig) -> "VSphereClient":
        return cls(
            logger,
            cfg.server,
            cfg.user,
            cfg.password,
            port=cfg.port,
            insecure=cfg.allow_unverified_ssl,
            timeout=cfg.api_timeout,
            api_timeout=cfg.api_timeout,
        )

    # Context managers

    def __enter__(self) -> "VSphereClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        try:
            self.disconnect()
        finally:
            if exc_type is not None:
                self.logger.debug("Exception in context: %s: %s", getattr(exc_type, "__name__", exc_type), exc_val)
        return False

    # Connection

    def _ssl_context(self) -> ssl.SSLContext:
        """
        Create SSL context for vSphere connections.

        SECURITY WARNING: When insecure=True, TLS certificate verification is completely
        disabled. Only use it against hosts with self-signed certificates on trusted networks.
        """
        if self.insecure:
            self.logger.warning(
                "TLS certificate verification is DISABLED (allow_unverified_ssl=True). "
                "Connections are vulnerable to Man-in-the-Middle attacks."
            )
            ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
            return ctx
        return ssl.create_default_context()

    def connect(self) -> None:
        if self.si is not None:
            return
        ctx = self._ssl_context()
        old_timeout = socket.getdefaulttimeout()
        try:
            if self.timeout is not None:
                socket.setdefaulttimeout(self.timeout)
            self.si = SmartConnect(
                host=self.host,
                user=self.user,
                pwd=self.password,
                port=self.port,
                sslContext=ctx,
            )
        except Exception as e:
            self.si = None
            raise translate_fault(e, f"failed to connect to vSphere {self.host}:{self.port}") from e
        finally:
            socket.setdefaulttimeout(old_timeout)

        self.logger.info("Connected to vSphere: %s:%s (%s)", self.host, self.port, self.api_type)

    def disconnect(self) -> None:
        try:
            if self.si is not None:
                Disconnect(self.si)
        except Exception as e:
            self.logger.warning("Error during disconnect: %s", e)
        finally:
            self.si = None

    @property
    def content(self) -> Any:
        if self.si is None:
            raise VSphereError(msg="Not connected")
        return self.si.content

    @property
    def stub(self) -> Any:
        if self.si is None:
            raise VSphereError(msg="Not connected")
        return self.si._stub

    @property
    def api_type(self) -> str:
        return str(self.content.about.apiType)

    @property
    def is_vcenter(self) -> bool:
        return self.api_type == API_TYPE_VCENTER

    # Inventory

    @contextmanager
    def _container_view(self, container: Any, vim_type: Any) -> Iterator[Any]:
        view = call(
            "create container view",
            self.content.viewManager.CreateContainerView,
            container,
            [vim_type],
            True,
        )
        try:
            yield view
        finally:
            try:
                view.DestroyView()
            except Exception as e:
                self.logger.debug("DestroyView failed (non-fatal): %s", e)

    def _container_objects(self, container: Any, vim_type: Any) -> List[Any]:
        with self._container_view(container, vim_type) as view:
            return list(call("list container view", lambda: view.view))

    def _container_names(self, container: Any, vim_type: Any) -> List[Tuple[Any, str]]:
        """
        (object, name) for every object of ``vim_type`` under ``container``,
        fetched with one PropertyCollector retrieve instead of a call per object.
        """
        pc = self.content.propertyCollector
        with self._container_view(container, vim_type) as view:
            spec = vim.PropertyCollector.FilterSpec(
                objectSet=[
                    vim.PropertyCollector.ObjectSpec(
                        obj=view,
                        skip=True,
                        selectSet=[
                            vim.PropertyCollector.TraversalSpec(
                                name="traverseView",
                                type=vim.view.ContainerView,
                                path="view",
                                skip=False,
                            )
                        ],
                    )
                ],
                propSet=[vim.PropertyCollector.PropertySpec(type=vim_type, pathSet=["name"], all=False)],
            )
            result = call(
                "retrieve object names",
                pc.RetrievePropertiesEx,
                specSet=[spec],
                options=vim.PropertyCollector.RetrieveOptions(),
            )
            out: List[Tuple[Any, str]] = []
            while result is not None:
                for oc in result.objects or []:
                    props = {p.name: p.val for p in (oc.propSet or [])}
                    out.append((oc.obj, str(props.get("name", ""))))
                if not result.token:
                    break
                result = call("continue retrieve object names", pc.ContinueRetrievePropertiesEx, token=result.token)
            return out

    def datacenters(self) -> List[Any]:
        return self._container_objects(self.content.rootFolder, vim.Datacenter)

    def hosts_in(self, container: Any = None) -> List[Any]:
        return self._container_objects(container or self.content.rootFolder, vim.HostSystem)

    def host_names_in(self, container: Any = None) -> List[Tuple[Any, str]]:
        return self._container_names(container or self.content.rootFolder, vim.HostSystem)

    def object_name(self, obj: Any) -> str:
        return str(call(f"read name of {getattr(obj, '_moId', obj)}", lambda: obj.name))

    def managed_object(self, vim_type: Any, moref: str) -> Any:
        """
        Bind a managed object reference and prove it exists by fetching its name.
        Raises ManagedObjectNotFoundError when the server does not know ``moref``.
        """
        obj = vim_type(moref, self.stub)
        self.object_name(obj)
        return obj

    def host_by_id(self, moref: str) -> Any:
        return self.managed_object(vim.HostSystem, moref)

    def datastore_by_id(self, moref: str) -> Any:
        return self.managed_object(vim.Datastore, moref)

    def storage_pod_by_id(self, moref: str) -> Any:
        return self.managed_object(vim.StoragePod, moref)

    def find_by_inventory_path(self, path: str) -> Any:
        return call(
            f"find inventory path {path!r}",
            self.content.searchIndex.FindByInventoryPath,
            inventoryPath=path,
        )

    # Tasks

    def wait_for_task(self, task: Any, *, timeout: Optional[float] = None, description: str = "task") -> Any:
        """
        Poll a vim.Task until it succeeds, fails, or the API timeout elapses.
        Returns task.info.result on success.
        """
        deadline = time.monotonic() + float(timeout if timeout is not None else self.api_timeout)
        delay = 0.5
        while True:
            info = call(f"{description}: read task info", lambda: task.info)
            state = str(info.state)
            if state == vim.TaskInfo.State.success:
                return info.result
            if state == vim.TaskInfo.State.error:
                err = info.error
                detail = getattr(err, "msg", None) or getattr(err, "localizedMessage", None) or str(err)
                raise VSphereError(msg=f"{description} failed: {detail}", cause=err if isinstance(err, BaseException) else None)
            if time.monotonic() >= deadline:
                raise VSphereError(msg=f"{description} did not finish within {timeout or self.api_timeout:.0f}s")
            time.sleep(delay)
            delay = min(delay * 2, 5.0)
