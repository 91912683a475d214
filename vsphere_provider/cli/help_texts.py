# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/cli/help_texts.py
from __future__ import annotations

# NOTE:
# This module is pure help/documentation text used by argparse epilog rendering.
# Keep it "copy/paste runnable" and avoid importing heavy dependencies here.

YAML_EXAMPLE = r"""# vsphere-provider configuration example (YAML)
#
# Run:
#   vsphere-provider --config site.yaml plan
#   vsphere-provider --config site.yaml apply
#
# Merge multiple configs (later overrides earlier, nested maps are merged):
#   vsphere-provider --config base.yaml --config secrets.yaml apply
#
# Connection (CLI flags and VSPHERE_* env vars also work):
vsphere_server: vcenter.example.com
vsphere_user: administrator@vsphere.local
vsphere_password_env: VC_PASSWORD     # name of the env var holding the password
allow_unverified_ssl: false
api_timeout: 300                      # seconds per API call / task wait
api_retries: 2                        # retries on network errors (REST)
state_file: ./vsphere-provider.state.json

cmd: plan                             # plan | apply | destroy | refresh | import | read | resolve-host | maintenance

resources:
  - type: vsphere_vcenter_dns
    name: main
    config:
      servers: [10.0.0.2, 10.0.0.3]

  - type: vsphere_iscsi_software_adapter
    name: esxi1
    config:
      hostname: esxi1.example.com     # or host_system_id: host-42
      iscsi_name: iqn.1998-01.com.vmware:esxi1

  - type: vsphere_nas_datastore
    name: nfs01
    config:
      name: nfs01
      hostnames: [esxi1.example.com, esxi2.example.com]
      remote_hosts: [nas.example.com]
      remote_path: /exports/nfs01
      folder: prod/nfs

  - type: vsphere_host_config_syslog
    name: esxi1
    config:
      host_system_id: host-42
      log_host: udp://10.0.0.5:514

data_sources:
  - type: vsphere_host_config_date_time
    name: esxi1
    config:
      hostname: esxi1.example.com
"""

FEATURE_SUMMARY = r"""
  plan          compare declared resources with state (refreshed from vSphere)
  apply         create / update / replace / delete to match the declaration
  destroy       delete every resource recorded in state
  refresh       re-read every resource in state; drop vanished ones
  import        adopt an existing object: --type T --name N --id ID
  read          evaluate data_sources and print them
  resolve-host  resolve --host (managed object ID or hostname) to a host
  maintenance   --host H --maintenance enter|exit [--evacuate]

  Hosts can be addressed by host_system_id (host-42) or hostname; vSphere
  assigns a new ID when a host is re-added to inventory, hostnames survive.
"""
