# SPDX-License-Identifier: LGPL-3.0-or-later
# vsphere_provider/vsphere/errors.py
# -*- coding: utf-8 -*-
"""Error classification and exit code handling for vSphere operations"""
from __future__ import annotations

import errno
import socket
from enum import IntEnum

from ..core.exceptions import (
    AmbiguousHostnameError,
    ConfigError,
    HostLookupError,
    ManagedObjectNotFoundError,
    ProviderError,
    RestError,
    TransportError,
    VSphereError,
)


class VsphereExitCode(IntEnum):
    OK = 0
    UNKNOWN = 1
    USAGE = 2

    AUTH = 10
    NOT_FOUND = 11
    NETWORK = 12
    AMBIGUOUS = 14

    VSPHERE_API = 30
    LOCAL_IO = 40

    INTERRUPTED = 130


def _is_auth_error(e: BaseException) -> bool:
    if isinstance(e, RestError) and e.status in (401, 403):
        return True
    msg = str(e).lower()
    needles = [
        "not authenticated",
        "authentication",
        "unauthorized",
        "forbidden",
        "invalid login",
        "incorrect user name or password",
        "no permission",
        "access denied",
        "permission denied",
    ]
    return any(n in msg for n in needles)


def _is_network_error(e: BaseException) -> bool:
    if isinstance(e, TransportError):
        return True
    if isinstance(e, (socket.timeout, TimeoutError, ConnectionError)):
        return True
    if isinstance(e, OSError) and e.errno in (
        errno.ECONNREFUSED,
        errno.ETIMEDOUT,
        errno.EHOSTUNREACH,
        errno.ENETUNREACH,
        errno.ECONNRESET,
    ):
        return True
    return False


def _is_local_io_error(e: BaseException) -> bool:
    return isinstance(e, OSError) and e.errno in (
        errno.EACCES,
        errno.EPERM,
        errno.ENOSPC,
        errno.EROFS,
        errno.EDQUOT,
    )


def classify_exit_code(e: BaseException) -> VsphereExitCode:
    if isinstance(e, KeyboardInterrupt):
        return VsphereExitCode.INTERRUPTED

    if isinstance(e, ConfigError):
        return VsphereExitCode.USAGE

    if isinstance(e, VSphereError):
        if isinstance(e, AmbiguousHostnameError):
            return VsphereExitCode.AMBIGUOUS
        if isinstance(e, (HostLookupError, ManagedObjectNotFoundError)):
            return VsphereExitCode.NOT_FOUND
        if _is_network_error(e):
            return VsphereExitCode.NETWORK
        if _is_auth_error(e):
            return VsphereExitCode.AUTH
        return VsphereExitCode.VSPHERE_API

    if isinstance(e, ProviderError):
        return VsphereExitCode(e.code) if e.code in VsphereExitCode._value2member_map_ else VsphereExitCode.UNKNOWN

    if _is_local_io_error(e):
        return VsphereExitCode.LOCAL_IO
    if _is_network_error(e):
        return VsphereExitCode.NETWORK

    return VsphereExitCode.UNKNOWN
