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

"""Availability zone and region mapping."""

import abc
import zlib

from oslo_log import log

from bulwark import exception

LOG = log.getLogger(__name__)

# Zones known to accept EBS volumes. The IAM policy granted to the EBS
# driver may not include zone enumeration.
REGION_ZONES = {
    'ap-northeast-1': ('ap-northeast-1a', 'ap-northeast-1c',
                       'ap-northeast-1d'),
    'ap-northeast-2': ('ap-northeast-2a', 'ap-northeast-2c'),
    'ap-south-1': ('ap-south-1a', 'ap-south-1b'),
    'ap-southeast-1': ('ap-southeast-1a', 'ap-southeast-1b',
                       'ap-southeast-1c'),
    'ap-southeast-2': ('ap-southeast-2a', 'ap-southeast-2b',
                       'ap-southeast-2c'),
    'ca-central-1': ('ca-central-1a', 'ca-central-1b'),
    'eu-central-1': ('eu-central-1a', 'eu-central-1b', 'eu-central-1c'),
    'eu-north-1': ('eu-north-1a', 'eu-north-1b', 'eu-north-1c'),
    'eu-west-1': ('eu-west-1a', 'eu-west-1b', 'eu-west-1c'),
    'eu-west-2': ('eu-west-2a', 'eu-west-2b', 'eu-west-2c'),
    'eu-west-3': ('eu-west-3a', 'eu-west-3b', 'eu-west-3c'),
    'sa-east-1': ('sa-east-1a', 'sa-east-1c'),
    'us-east-1': ('us-east-1a', 'us-east-1b', 'us-east-1c', 'us-east-1d',
                  'us-east-1e', 'us-east-1f'),
    'us-east-2': ('us-east-2a', 'us-east-2b', 'us-east-2c'),
    'us-west-1': ('us-west-1a', 'us-west-1b'),
    'us-west-2': ('us-west-2a', 'us-west-2b', 'us-west-2c'),
}


class ZoneMapper(object, metaclass=abc.ABCMeta):
    """Zone and region introspection offered by zonal backends."""

    @abc.abstractmethod
    def from_region(self, context, region):
        """Return the list of zones usable in ``region``."""

    @abc.abstractmethod
    def zone_to_region(self, context, zone):
        """Return the region that contains ``zone``."""

    @abc.abstractmethod
    def snapshot_restore_targets(self, context, snapshot):
        """Return ``(global, {region: [zone, ...]})`` for a snapshot.

        ``global`` is True when the snapshot may be restored in any
        region. Otherwise the mapping names every region and zone the
        snapshot may be restored into.
        """


def static_region_to_zones(region):
    try:
        return list(REGION_ZONES[region])
    except KeyError:
        raise exception.RegionZonesNotFound(region=region)



def from_source_region_zone(context, mapper, region, zone):
    """Pick the zone a snapshot taken in ``zone`` is restored into.

    The source zone is reused when ``region`` still offers it. Otherwise
    one zone of ``region`` is chosen by hashing the source zone name, so
    repeated restores of the same snapshot land in the same place.

    :returns: a list holding exactly one zone name.
    """
    zones = mapper.from_region(context, region)
    if not zones:
        raise exception.RegionZonesNotFound(region=region)
    if zone in zones:
        return [zone]
    zones = sorted(zones)
    chosen = zones[zlib.crc32(zone.encode('utf-8')) % len(zones)]
    LOG.debug("Zone %(zone)s is not available in region %(region)s, "
              "using %(chosen)s.",
              {'zone': zone, 'region': region, 'chosen': chosen})
    return [chosen]
