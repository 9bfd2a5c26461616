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

"""Tag merging and the mount target tag encoding.

Backup recovery points only keep opaque string tags, so the network
placement of a file system (its mount targets) is stored as tags:

    key   = MOUNT_TARGET_KEY_PREFIX + <mount target id>
    value = <subnet id> + SEPARATOR + <security group id> + SEPARATOR + ...

A mount target without security groups is encoded as ``<subnet id>+``.

"""

from oslo_log import log

from bulwark.blockstorage import models
from bulwark.common import config
from bulwark import exception
from bulwark.i18n import _

LOG = log.getLogger(__name__)

CONF = config.CONF

MOUNT_TARGET_KEY_PREFIX = 'bulwark.io/aws-mount-target/'
SECURITY_GROUP_SEPARATOR = '+'


def union(first, second):
    """Merge two tag dicts; on duplicate keys the value in ``first`` wins."""
    result = dict(second or {})
    result.update(first or {})
    return result


def get_tags(tags):
    """Return caller tags merged over the configured bookkeeping tags."""
    return union(tags, CONF.default_resource_tags)


def mount_target_key(mount_target_id):
    return MOUNT_TARGET_KEY_PREFIX + mount_target_id


def mount_target_value(subnet_id, security_groups):
    return (subnet_id + SECURITY_GROUP_SEPARATOR +
            SECURITY_GROUP_SEPARATOR.join(security_groups))


def is_mount_target_key(key):
    return key.startswith(MOUNT_TARGET_KEY_PREFIX)


def parse_mount_target_key(key):
    if not is_mount_target_key(key):
        raise exception.InvalidInput(
            reason=_("Malformed string for mount target key: %s") % key)
    return key[len(MOUNT_TARGET_KEY_PREFIX):]


def parse_mount_target_value(value):
    tokens = value.split(SECURITY_GROUP_SEPARATOR)
    if len(tokens) <= 1 or not tokens[0]:
        raise exception.InvalidInput(
            reason=_("Malformed string for mount target value: %s") % value)
    security_groups = [group for group in tokens[1:] if group]
    return models.MountTarget(subnet_id=tokens[0],
                              security_groups=security_groups)


def encode_mount_targets(mount_targets):
    """Turn ``{mount target id: MountTarget}`` into tags."""
    return {mount_target_key(mt_id): mount_target_value(mt.subnet_id,
                                                        mt.security_groups)
            for mt_id, mt in mount_targets.items()}


def filter_and_get_mount_targets(tags):
    """Split tags into ordinary tags and decoded mount targets.

    :returns: a tuple of the tags without any mount target entries and a
        dict mapping mount target id to MountTarget.
    """
    filtered_tags = {}
    mount_targets = {}
    for key, value in tags.items():
        if is_mount_target_key(key):
            mount_targets[parse_mount_target_key(key)] = (
                parse_mount_target_value(value))
        else:
            filtered_tags[key] = value
    LOG.debug("Found %(count)d mount target(s) in tags.",
              {'count': len(mount_targets)})
    return filtered_tags, mount_targets
