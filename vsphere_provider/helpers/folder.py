# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/helpers/folder.py
"""
Inventory folder paths.

Datastore folders are configured relative to the datacenter's ``datastore``
folder, e.g. ``prod/nfs`` for ``/dc1/datastore/prod/nfs``.
"""
from __future__ import annotations

from typing import Any, List, Optional

from ..core.exceptions import VSphereError
from ..vsphere.viapi import call

DATASTORE_ROOT = "datastore"


def kind(obj: Any) -> str:
    """vSphere type name of a managed object (``Folder``, ``StoragePod``, ...)."""
    return str(getattr(obj, "_wsdlName", "") or type(obj).__name__)


def normalize_path(path: Any) -> str:
    """Strip surrounding slashes so equal folders compare equal."""
    return str(path or "").strip().strip("/")


def path_is_empty(path: Any) -> bool:
    return normalize_path(path) == ""


def _parents(client: Any, obj: Any) -> List[Any]:
    chain: List[Any] = []
    cur: Optional[Any] = obj
    while cur is not None and len(chain) < 64:
        chain.append(cur)
        cur = call("read parent", lambda o=cur: getattr(o, "parent", None))
    return chain


def datacenter_of(client: Any, obj: Any) -> Any:
    for o in _parents(client, obj):
        if kind(o) == "Datacenter":
            return o
    raise VSphereError(msg=f"could not find datacenter for {getattr(obj, '_moId', obj)}")


def inventory_path(client: Any, obj: Any) -> str:
    """Absolute inventory path (``/dc1/datastore/prod``), without the root folder."""
    chain = _parents(client, obj)
    names = [client.object_name(o) for o in chain[:-1]]
    return "/" + "/".join(reversed(names))


def datastore_root_path(client: Any, obj: Any) -> str:
    return f"{inventory_path(client, datacenter_of(client, obj))}/{DATASTORE_ROOT}"


def relative_datastore_folder(client: Any, folder: Any) -> str:
    """Path of ``folder`` relative to its datacenter's datastore root."""
    full = inventory_path(client, folder)
    root = datastore_root_path(client, folder)
    if full == root:
        return ""
    if not full.startswith(root + "/"):
        raise VSphereError(msg=f"folder {full!r} is not under {root!r}")
    return normalize_path(full[len(root):])


def datastore_folder_from_relative_path(client: Any, reference: Any, relative: str) -> Any:
    """Resolve ``relative`` under the datastore root of the datacenter holding ``reference``."""
    root = datastore_root_path(client, reference)
    rel = normalize_path(relative)
    path = f"{root}/{rel}" if rel else root
    found = client.find_by_inventory_path(path)
    if found is None:
        raise VSphereError(msg=f"could not find datastore folder {path!r}")
    if kind(found) != "Folder":
        raise VSphereError(msg=f"{path!r} is a {kind(found)}, not a folder")
    return found
