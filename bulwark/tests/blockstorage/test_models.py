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

from bulwark.blockstorage import models
from bulwark import test
from bulwark.tests import fake_storage


class ModelsTestCase(test.TestCase):

    def test_unknown_field(self):
        self.assertRaises(TypeError, models.Volume, id='vol-1', bogus=True)

    def test_missing_fields_default_to_none(self):
        volume = models.Volume(id='vol-1')

        self.assertIsNone(volume.az)
        self.assertIsNone(volume.tags)
        self.assertFalse(volume.encrypted)

    def test_tags_are_unique_and_sorted(self):
        volume = models.Volume(tags=[models.KeyValue(key='b', value='1'),
                                     models.KeyValue(key='a', value='2'),
                                     models.KeyValue(key='b', value='3')])

        self.assertEqual([models.KeyValue(key='a', value='2'),
                          models.KeyValue(key='b', value='3')], volume.tags)

    def test_equality(self):
        self.assertEqual(fake_storage.fake_snapshot(),
                         fake_storage.fake_snapshot())
        self.assertNotEqual(fake_storage.fake_snapshot(),
                            fake_storage.fake_snapshot(id='snap-other'))
        self.assertNotEqual(fake_storage.fake_volume(), 'vol-fake')

    def test_to_dict(self):
        kv = models.KeyValue(key='k', value='v')

        self.assertEqual({'key': 'k', 'value': 'v'}, kv.to_dict())

    def test_repr(self):
        kv = models.KeyValue(key='k', value='v')

        self.assertEqual("KeyValue(key='k', value='v')", repr(kv))

    def test_mount_target_security_groups(self):
        self.assertEqual([], models.MountTarget(subnet_id='s').security_groups)
        self.assertEqual(['sg-1'], models.MountTarget(
            subnet_id='s', security_groups=('sg-1',)).security_groups)

    def test_object_reference(self):
        ref = models.ObjectReference(kind='Secret', name='creds',
                                     namespace='ns')

        self.assertIsNone(ref.api_version)
        self.assertEqual('creds', ref.name)

    def test_key_value_round_trip(self):
        tags = {'b': '2', 'a': '1'}

        key_values = models.map_to_key_value(tags)

        self.assertEqual(['a', 'b'], [kv.key for kv in key_values])
        self.assertEqual(tags, models.key_value_to_map(key_values))

    def test_key_value_helpers_accept_none(self):
        self.assertEqual({}, models.key_value_to_map(None))
        self.assertEqual([], models.map_to_key_value(None))
