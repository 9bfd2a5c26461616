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

"""Storage provider contract.

A provider wraps one storage family behind volume and snapshot
lifecycle calls. Every call takes a
:class:`bulwark.context.RequestContext` first and blocks until the
backend reaches the state the call promises.

"""

import abc

from bulwark.blockstorage import models
from bulwark import exception
from bulwark.i18n import _


class Provider(object, metaclass=abc.ABCMeta):
    """Subclasses implement one storage backend."""

    @abc.abstractmethod
    def type(self):
        """Return the storage type constant served by this provider."""

    @abc.abstractmethod
    def volume_create(self, context, volume):
        """Create a volume shaped like ``volume`` and wait until ready.

        :param volume: models.Volume carrying the requested placement,
            volume type, size, encryption and tags.
        :returns: models.Volume describing the new resource.
        """

    @abc.abstractmethod
    def volume_get(self, context, volume_id, zone):
        """Describe exactly one volume, or raise VolumeNotFound."""

    @abc.abstractmethod
    def volumes_list(self, context, tags, zone):
        """List volumes carrying every key/value pair in ``tags``."""

    @abc.abstractmethod
    def volume_delete(self, context, volume):
        """Delete a volume. Deleting a missing volume succeeds."""

    @abc.abstractmethod
    def volume_create_from_snapshot(self, context, snapshot, tags):
        """Restore a snapshot into a new volume.

        Tags recorded on the snapshot's source volume are added to
        ``tags`` without overriding keys the caller provided.
        """

    @abc.abstractmethod
    def snapshot_create(self, context, volume, tags):
        """Request a snapshot of ``volume``; does not wait for completion."""

    @abc.abstractmethod
    def snapshot_create_wait_for_completion(self, context, snapshot):
        """Block until the snapshot reaches its completed state."""

    @abc.abstractmethod
    def snapshot_copy(self, context, from_snapshot, to_snapshot):
        """Copy a snapshot into the region named by ``to_snapshot``."""

    @abc.abstractmethod
    def snapshot_delete(self, context, snapshot):
        """Delete a snapshot. Deleting a missing snapshot succeeds."""

    @abc.abstractmethod
    def snapshot_get(self, context, snapshot_id):
        """Describe one snapshot."""

    @abc.abstractmethod
    def snapshots_list(self, context, tags):
        """List snapshots carrying every key/value pair in ``tags``."""

    @abc.abstractmethod
    def set_volume_tags(self, context, volume, tags):
        """Add or overwrite tags on a volume."""

    @abc.abstractmethod
    def set_snapshot_tags(self, context, snapshot, tags):
        """Add or overwrite tags on a snapshot."""

    def set_tags(self, context, resource, tags):
        if isinstance(resource, models.Volume):
            return self.set_volume_tags(context, resource, tags)
        if isinstance(resource, models.Snapshot):
            return self.set_snapshot_tags(context, resource, tags)
        raise exception.InvalidResourceType(resource=resource)


def validate_volume_type_iops(volume_type, iops, provisioned_types):
    """Check that IOPS is given exactly when the volume type requires it."""
    if volume_type in provisioned_types:
        if not iops:
            raise exception.InvalidInput(
                reason=_("volume type %s requires provisioned "
                         "IOPS") % volume_type)
    elif iops:
        raise exception.InvalidInput(
            reason=_("volume type %s does not accept provisioned "
                     "IOPS") % volume_type)
