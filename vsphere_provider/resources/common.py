# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/resources/common.py
"""Schema fragments and id helpers shared by host-scoped resources."""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..core.exceptions import ConfigError
from ..helpers.hostsystem import HOST_SYSTEM_ID, HOSTNAME, HostReturn, check_if_hostname_or_id
from ..schema import STRING, Attribute


def host_identity_schema(what: str, *, force_new: bool = True) -> Dict[str, Attribute]:
    return {
        HOST_SYSTEM_ID: Attribute(
            STRING,
            optional=True,
            force_new=force_new,
            exactly_one_of=(HOSTNAME,),
            description=f"Managed object ID of the host to {what}.",
        ),
        HOSTNAME: Attribute(
            STRING,
            optional=True,
            force_new=force_new,
            description=f"Hostname of the host to {what}.",
        ),
    }


def split_import_id(value: str, sep: str, shape: str, parts: int = 2) -> List[str]:
    pieces = str(value or "").split(sep)
    if len(pieces) != parts or not all(pieces):
        raise ConfigError(msg=f"invalid import format {value!r}. Format should be {shape}")
    return pieces


def resolve_import_host(meta: Any, d: Any, value: str) -> Tuple[Any, HostReturn]:
    """Resolve the host part of an import id and persist the flavour it matched."""
    host, hr = check_if_hostname_or_id(meta.vim, value)
    d.set(hr.id_name, hr.value)
    return host, hr
