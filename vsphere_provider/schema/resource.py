# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/schema/resource.py
from __future__ import annotations

from typing import Any, Dict, Mapping

from .attribute import Attribute, validate_config
from .resource_data import ResourceData


class Resource:
    """
    Base class for managed resources.

    Subclasses set ``type_name`` and ``schema`` and implement create / read /
    delete, plus update when any non-ForceNew attribute can change in place.
    ``meta`` is the Provider: ``meta.vim`` (pyVmomi) and ``meta.rest``
    (appliance REST) clients, ``meta.logger``.
    """

    type_name: str = ""
    schema: Dict[str, Attribute] = {}
    importable: bool = True

    def validate(self, config: Any, where: str) -> Dict[str, Any]:
        return validate_config(self.schema, config, where)

    def new_data(self, *, config: Mapping[str, Any] = None, state: Mapping[str, Any] = None, id: str = "") -> ResourceData:
        return ResourceData(self.schema, config=config, state=state, id=id)

    @property
    def updatable(self) -> bool:
        return type(self).update is not Resource.update

    def create(self, meta: Any, d: ResourceData) -> None:
        raise NotImplementedError

    def read(self, meta: Any, d: ResourceData) -> None:
        raise NotImplementedError

    def update(self, meta: Any, d: ResourceData) -> None:
        raise NotImplementedError

    def delete(self, meta: Any, d: ResourceData) -> None:
        raise NotImplementedError

    def import_state(self, meta: Any, d: ResourceData) -> None:
        """Turn the user-supplied import id in ``d.id`` into a readable state."""
        pass


class DataSource:
    """Read-only query; ``read`` fills computed attributes and sets the id."""

    type_name: str = ""
    schema: Dict[str, Attribute] = {}

    def validate(self, config: Any, where: str) -> Dict[str, Any]:
        return validate_config(self.schema, config, where)

    def new_data(self, *, config: Mapping[str, Any] = None) -> ResourceData:
        return ResourceData(self.schema, config=config)

    def read(self, meta: Any, d: ResourceData) -> None:
        raise NotImplementedError
