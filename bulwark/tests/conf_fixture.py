# Copyright 2026 The Bulwark Authors.
# All Rights Reserved.
#
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

from bulwark.blockstorage.drivers.aws import options  # noqa
from bulwark.common import config

CONF = config.CONF


def set_defaults(conf):
    _safe_set_of_opts(conf, 'aws_max_retries', 1)
    _safe_set_of_opts(conf, 'ebs_volume_wait_min', 0.001)
    _safe_set_of_opts(conf, 'ebs_volume_wait_max', 0.01)
    _safe_set_of_opts(conf, 'ebs_snapshot_wait_min', 0.001)
    _safe_set_of_opts(conf, 'ebs_snapshot_wait_max', 0.01)
    _safe_set_of_opts(conf, 'efs_wait_min', 0.001)
    _safe_set_of_opts(conf, 'efs_wait_max', 0.01)
    _safe_set_of_opts(conf, 'efs_backup_vault_name', 'fake_vault')


def _safe_set_of_opts(conf, *args, **kwargs):
    try:
        conf.set_default(*args, **kwargs)
    except config.cfg.NoSuchOptError:
        # Assumed that opt is not imported and not used
        pass
