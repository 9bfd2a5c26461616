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

"""Process-wide configuration.

Every module registers its own option list on the global ``CONF``
object. This module registers the logging options and the options that
do not belong to a single backend.

"""

from oslo_config import cfg
from oslo_log import log

CONF = cfg.CONF
log.register_options(CONF)

global_opts = [
    cfg.DictOpt('default_resource_tags',
                default={},
                help='Bookkeeping tags attached to every volume and '
                     'snapshot created by bulwark. Tags passed by the '
                     'caller take precedence over these.'),
]

CONF.register_opts(global_opts)
