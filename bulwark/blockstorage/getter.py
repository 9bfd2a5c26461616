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

"""Factory returning the provider for a storage type.

Add new backends to ``PROVIDER_REGISTRY``, no other code changes are
required.
"""

from oslo_log import log
from oslo_utils import importutils

from bulwark.common import constants
from bulwark import exception
from bulwark.i18n import _

LOG = log.getLogger(__name__)

AWS_DRIVER_PATH = 'bulwark.blockstorage.drivers.aws'

PROVIDER_REGISTRY = {
    constants.TYPE_EBS: AWS_DRIVER_PATH + '.ebs.EBSProvider',
    constants.TYPE_EFS: AWS_DRIVER_PATH + '.efs.EFSProvider',
}


def register_provider(storage_type, class_path):
    PROVIDER_REGISTRY[storage_type] = class_path


def get_provider(storage_type, config, **kwargs):
    """Instantiate the provider registered for ``storage_type``.

    :param storage_type: one of the registered storage type names.
    :param config: mapping of string settings such as the region and
        credentials, handed to the provider unchanged.
    """
    provider_loc = PROVIDER_REGISTRY.get(storage_type)
    if provider_loc is None:
        raise exception.InvalidInput(
            reason=_('Storage type %s is not supported.') % storage_type)

    provider = importutils.import_object(provider_loc, config, **kwargs)
    LOG.debug('Loaded provider %(loc)s for storage type %(type)s.',
              {'loc': provider_loc, 'type': storage_type})
    return provider
