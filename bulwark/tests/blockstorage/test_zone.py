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

from bulwark.blockstorage import zone
from bulwark import exception
from bulwark import test


@ddt.ddt
class StaticRegionZonesTestCase(test.TestCase):

    @ddt.data(*sorted(zone.REGION_ZONES))
    def test_zones_belong_to_region(self, region):
        zones = zone.static_region_to_zones(region)

        self.assertTrue(zones)
        for name in zones:
            self.assertTrue(name.startswith(region))
            self.assertIn(name[len(region):], 'abcdef')

    def test_returns_copy(self):
        zones = zone.static_region_to_zones('us-east-2')
        zones.append('bogus')

        self.assertEqual(['us-east-2a', 'us-east-2b', 'us-east-2c'],
                         zone.static_region_to_zones('us-east-2'))

    @ddt.data('mars-north-1', '', 'US-EAST-1')
    def test_unknown_region(self, region):
        exc = self.assertRaises(exception.RegionZonesNotFound,
                                zone.static_region_to_zones, region)
        self.assertIn('Cannot get availability zones', exc.msg)


class FromSourceRegionZoneTestCase(test.TestCase):

    def setUp(self):
        super(FromSourceRegionZoneTestCase, self).setUp()
        self.mapper = mock.Mock()
        self.mapper.from_region.side_effect = (
            lambda ctxt, region: zone.static_region_to_zones(region))
        self.context = mock.Mock()

    def test_source_zone_kept(self):
        result = zone.from_source_region_zone(self.context, self.mapper,
                                              'us-east-1', 'us-east-1d')

        self.assertEqual(['us-east-1d'], result)
        self.mapper.from_region.assert_called_once_with(self.context,
                                                        'us-east-1')

    def test_other_region_is_deterministic(self):
        first = zone.from_source_region_zone(self.context, self.mapper,
                                             'eu-west-1', 'us-east-1d')
        second = zone.from_source_region_zone(self.context, self.mapper,
                                              'eu-west-1', 'us-east-1d')

        self.assertEqual(1, len(first))
        self.assertIn(first[0], zone.REGION_ZONES['eu-west-1'])
        self.assertEqual(first, second)

    def test_no_zones(self):
        self.mapper.from_region.side_effect = None
        self.mapper.from_region.return_value = []

        self.assertRaises(exception.RegionZonesNotFound,
                          zone.from_source_region_zone, self.context,
                          self.mapper, 'us-east-1', 'us-east-1a')

    def test_unknown_region(self):
        self.assertRaises(exception.RegionZonesNotFound,
                          zone.from_source_region_zone, self.context,
                          self.mapper, 'mars-north-1', 'us-east-1a')
