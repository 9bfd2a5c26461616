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

from unittest import mock

import ddt

from bulwark.blockstorage import provider
from bulwark.common import constants
from bulwark import exception
from bulwark import test
from bulwark.tests import fake_storage


class FakeProvider(provider.Provider):

    def __init__(self):
        self.calls = mock.Mock()

    def type(self):
        return 'FAKE'

    def volume_create(self, context, volume):
        return self.calls.volume_create(context, volume)

    def volume_get(self, context, volume_id, zone):
        return self.calls.volume_get(context, volume_id, zone)

    def volumes_list(self, context, tags, zone):
        return self.calls.volumes_list(context, tags, zone)

    def volume_delete(self, context, volume):
        return self.calls.volume_delete(context, volume)

    def volume_create_from_snapshot(self, context, snapshot, tags):
        return self.calls.volume_create_from_snapshot(context, snapshot,
                                                      tags)

    def snapshot_create(self, context, volume, tags):
        return self.calls.snapshot_create(context, volume, tags)

    def snapshot_create_wait_for_completion(self, context, snapshot):
        return self.calls.snapshot_create_wait_for_completion(context,
                                                              snapshot)

    def snapshot_copy(self, context, from_snapshot, to_snapshot):
        return self.calls.snapshot_copy(context, from_snapshot, to_snapshot)

    def snapshot_delete(self, context, snapshot):
        return self.calls.snapshot_delete(context, snapshot)

    def snapshot_get(self, context, snapshot_id):
        return self.calls.snapshot_get(context, snapshot_id)

    def snapshots_list(self, context, tags):
        return self.calls.snapshots_list(context, tags)

    def set_volume_tags(self, context, volume, tags):
        return self.calls.set_volume_tags(context, volume, tags)

    def set_snapshot_tags(self, context, snapshot, tags):
        return self.calls.set_snapshot_tags(context, snapshot, tags)


@ddt.ddt
class ProviderTestCase(test.TestCase):

    def setUp(self):
        super(ProviderTestCase, self).setUp()
        self.provider = FakeProvider()
        self.context = mock.Mock()

    def test_abstract(self):
        self.assertRaises(TypeError, provider.Provider)

    def test_set_tags_volume(self):
        volume = fake_storage.fake_volume()

        self.provider.set_tags(self.context, volume, {'a': 'b'})

        self.provider.calls.set_volume_tags.assert_called_once_with(
            self.context, volume, {'a': 'b'})
        self.provider.calls.set_snapshot_tags.assert_not_called()

    def test_set_tags_snapshot(self):
        snapshot = fake_storage.fake_snapshot()

        self.provider.set_tags(self.context, snapshot, {'a': 'b'})

        self.provider.calls.set_snapshot_tags.assert_called_once_with(
            self.context, snapshot, {'a': 'b'})
        self.provider.calls.set_volume_tags.assert_not_called()

    @ddt.data('vol-1', None, {'id': 'vol-1'})
    def test_set_tags_unknown_resource(self, resource):
        self.assertRaises(exception.InvalidResourceType,
                          self.provider.set_tags, self.context, resource,
                          {'a': 'b'})

    @ddt.data(('io1', 100), ('io2', 3000), ('gp2', None), ('gp3', 0),
              ('standard', None))
    @ddt.unpack
    def test_validate_volume_type_iops(self, volume_type, iops):
        provider.validate_volume_type_iops(
            volume_type, iops, constants.PROVISIONED_IOPS_VOLUME_TYPES)

    @ddt.data(('io1', None), ('io2', 0), ('gp2', 100), ('sc1', 50))
    @ddt.unpack
    def test_validate_volume_type_iops_invalid(self, volume_type, iops):
        self.assertRaises(exception.InvalidInput,
                          provider.validate_volume_type_iops,
                          volume_type, iops,
                          constants.PROVISIONED_IOPS_VOLUME_TYPES)
