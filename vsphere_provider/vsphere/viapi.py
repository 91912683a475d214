# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/vsphere/viapi.py
"""
Thin helpers around the vSphere API: fault classification and translation,
plus a few operations shared by several resources.
"""
from __future__ import annotations

import http.client
import socket
import ssl
from typing import Any, Callable, Optional, TypeVar

from pyVmomi import vim, vmodl

from ..core.exceptions import (
    ManagedObjectNotFoundError,
    ProviderError,
    TransportError,
    VSphereError,
)

T = TypeVar("T")

_TRANSPORT_EXC = (
    socket.timeout,
    TimeoutError,
    ConnectionError,
    ssl.SSLError,
    http.client.HTTPException,
)


def is_managed_object_not_found_error(exc: Optional[BaseException]) -> bool:
    """
    True when ``exc`` (or anything it wraps) says a managed object reference
    points at nothing. Only this classification allows a hostname fallback.
    """
    seen = 0
    while exc is not None and seen < 8:
        if isinstance(exc, ManagedObjectNotFoundError):
            return True
        if isinstance(exc, vmodl.fault.ManagedObjectNotFound):
            return True
        exc = getattr(exc, "cause", None) or exc.__cause__
        seen += 1
    return False


def _fault_message(fault: BaseException) -> str:
    msg = getattr(fault, "msg", None) or getattr(fault, "localizedMessage", None)
    return str(msg) if msg else type(fault).__name__


def translate_fault(exc: BaseException, what: str) -> ProviderError:
    """Map a pyVmomi / socket failure onto the project error hierarchy."""
    if isinstance(exc, ProviderError):
        return exc
    if isinstance(exc, vmodl.fault.ManagedObjectNotFound):
        obj = getattr(exc, "obj", None)
        moref = getattr(obj, "_moId", None)
        return ManagedObjectNotFoundError(
            msg=f"{what}: managed object {moref or '?'} not found",
            cause=exc,
            moref=moref,
        )
    if isinstance(exc, (vim.fault.InvalidLogin, vim.fault.NotAuthenticated, vim.fault.NoPermission)):
        return VSphereError(code=10, msg=f"{what}: {_fault_message(exc)}", cause=exc)
    if isinstance(exc, vmodl.MethodFault):
        return VSphereError(msg=f"{what}: {_fault_message(exc)}", cause=exc)
    if isinstance(exc, _TRANSPORT_EXC) or (isinstance(exc, OSError) and exc.errno is not None):
        return TransportError(msg=f"{what}: {exc}", cause=exc)
    return VSphereError(msg=f"{what}: {type(exc).__name__}: {exc}", cause=exc)


def call(what: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Invoke a vSphere API callable, translating failures into project errors."""
    try:
        return fn(*args, **kwargs)
    except ProviderError:
        raise
    except Exception as e:
        raise translate_fault(e, what) from e


def validate_virtual_center(client: Any) -> None:
    """Raise unless the session is connected to vCenter (not a standalone ESXi host)."""
    if not client.is_vcenter:
        raise VSphereError(msg=f"this operation is only supported on vCenter (connected to {client.api_type})")


def rename_object(client: Any, obj: Any, new_name: str) -> None:
    client.logger.info("Renaming %s to %r", getattr(obj, "_moId", obj), new_name)
    task = call("rename", obj.Rename_Task, newName=new_name)
    client.wait_for_task(task, description=f"rename {getattr(obj, '_moId', obj)}")


def moref(obj: Any) -> str:
    """Managed object reference value (``host-42``) of a pyVmomi object."""
    return str(getattr(obj, "_moId", "") or "")
