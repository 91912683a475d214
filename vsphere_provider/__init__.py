# SPDX-License-Identifier: LGPL-3.0-or-later
"""
vsphere-provider: declarative configuration of vSphere hosts, NAS datastores,
host networking and vCenter appliance settings.
"""

__version__ = "0.1.0"
