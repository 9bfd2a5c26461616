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

__all__ = [
    'list_opts'
]

import copy
import itertools

import oslo_log._options

import bulwark.blockstorage.drivers.aws.options
import bulwark.common.config
import bulwark.exception


# List of *all* options in [DEFAULT] namespace of bulwark.
# Any new option list or option needs to be registered here.
_global_opt_lists = [
    # Keep list alphabetically sorted
    bulwark.blockstorage.drivers.aws.options.aws_client_opts,
    bulwark.blockstorage.drivers.aws.options.ebs_opts,
    bulwark.blockstorage.drivers.aws.options.efs_opts,
    bulwark.common.config.global_opts,
    bulwark.exception.exc_log_opts,
]

_opts = [
    (None, list(itertools.chain(*_global_opt_lists))),
]

_opts.extend(oslo_log._options.list_opts())


def list_opts():
    """Return a list of oslo.config options available in Bulwark."""
    return [(m, copy.deepcopy(o)) for m, o in _opts]
