# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/helpers/tags.py
"""
vCenter tag associations over the appliance REST API.

Tag IDs are opaque ``urn:vmomi:InventoryServiceTag:...`` strings; the object
side is identified by managed object type and ID.
"""
from __future__ import annotations

from typing import Any, Dict, List

from ..core.exceptions import VSphereError, wrap_vsphere
from ..core.utils import string_set
from ..vsphere.viapi import moref

TAG_ASSOCIATION_PATH = "cis/tagging/tag-association"
LEGACY_TAG_ASSOCIATION_PATH = "com/vmware/cis/tagging/tag-association"


def object_id(obj: Any) -> Dict[str, str]:
    return {"id": moref(obj), "type": str(getattr(obj, "_wsdlName", "") or "")}


def _action_path(rest: Any, action: str, tag_id: str = "") -> str:
    if rest.legacy:
        base = LEGACY_TAG_ASSOCIATION_PATH + (f"/id:{tag_id}" if tag_id else "")
        return f"{base}?~action={action}"
    base = TAG_ASSOCIATION_PATH + (f"/{tag_id}" if tag_id else "")
    return f"{base}?action={action}"


def list_attached_tags(rest: Any, obj: Any) -> List[str]:
    try:
        body = rest.update_request("POST", _action_path(rest, "list-attached-tags"), {"object_id": object_id(obj)})
    except VSphereError as e:
        raise wrap_vsphere(f"error retrieving tag attachments for {moref(obj)}", e)
    return string_set(body or [])


def apply_tag_diff(rest: Any, logger: Any, obj: Any, old: List[str], new: List[str]) -> None:
    """Detach tags no longer wanted, then attach the new ones."""
    old_set, new_set = set(string_set(old)), set(string_set(new))
    body = {"object_id": object_id(obj)}
    for tag_id in sorted(old_set - new_set):
        logger.info("Detaching tag %s from %s", tag_id, moref(obj))
        try:
            rest.update_request("POST", _action_path(rest, "detach", tag_id), body)
        except VSphereError as e:
            raise wrap_vsphere(f"could not detach tag {tag_id!r} from {moref(obj)}", e)
    for tag_id in sorted(new_set - old_set):
        logger.info("Attaching tag %s to %s", tag_id, moref(obj))
        try:
            rest.update_request("POST", _action_path(rest, "attach", tag_id), body)
        except VSphereError as e:
            raise wrap_vsphere(f"could not attach tag {tag_id!r} to {moref(obj)}", e)
