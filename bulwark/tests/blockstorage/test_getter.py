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

from oslo_utils import importutils

from bulwark.blockstorage import getter
from bulwark.common import constants
from bulwark import exception
from bulwark import test


class GetterTestCase(test.TestCase):

    def setUp(self):
        super(GetterTestCase, self).setUp()
        self.mock_import = self.mock_object(importutils, 'import_object')

    def test_get_ebs_provider(self):
        config = {'region': 'us-west-2'}

        result = getter.get_provider(constants.TYPE_EBS, config)

        self.assertEqual(self.mock_import.return_value, result)
        self.mock_import.assert_called_once_with(
            'bulwark.blockstorage.drivers.aws.ebs.EBSProvider', config)

    def test_get_efs_provider_with_kwargs(self):
        config = {'region': 'us-west-2'}

        getter.get_provider(constants.TYPE_EFS, config, rng='fake_rng')

        self.mock_import.assert_called_once_with(
            'bulwark.blockstorage.drivers.aws.efs.EFSProvider', config,
            rng='fake_rng')

    def test_unknown_storage_type(self):
        self.assertRaises(exception.InvalidInput, getter.get_provider,
                          'GPD', {})
        self.mock_import.assert_not_called()

    def test_register_provider(self):
        self.mock_object(getter, 'PROVIDER_REGISTRY',
                         dict(getter.PROVIDER_REGISTRY))

        getter.register_provider('FAKE', 'fake.module.FakeProvider')
        getter.get_provider('FAKE', {})

        self.mock_import.assert_called_once_with('fake.module.FakeProvider',
                                                 {})

    def test_registry_covers_storage_types(self):
        self.assertEqual(set(constants.STORAGE_TYPES),
                         set(getter.PROVIDER_REGISTRY))
