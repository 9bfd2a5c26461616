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

"""Amazon EBS storage provider.

Volumes map to EBS volumes and snapshots to EBS snapshots. All calls
go to the region named in the provider configuration except snapshot
copies, which are issued from the destination region.

"""

import math

from oslo_config import cfg
from oslo_log import log
from oslo_utils import units

from bulwark.blockstorage.drivers.aws import client
from bulwark.blockstorage import models
from bulwark.blockstorage import provider
from bulwark.blockstorage import tags as bulwark_tags
from bulwark.blockstorage import zone
from bulwark.common import constants
from bulwark import exception
from bulwark.i18n import _
from bulwark import utils

CONF = cfg.CONF
LOG = log.getLogger(__name__)


def bytes_to_gib(size):
    return int(math.ceil(float(size) / units.Gi))


class EBSProvider(provider.Provider, zone.ZoneMapper):
    """Provider for Amazon Elastic Block Store."""

    def __init__(self, config):
        self.config = config
        self.session, self.region = client.get_session(config,
                                                       constants.TYPE_EBS)
        self.ec2 = client.get_client(self.session, 'ec2', self.region)
        self.dry_run = CONF.aws_dry_run

    def type(self):
        return constants.TYPE_EBS

    def _ec2_for_region(self, region):
        if region == self.region:
            return self.ec2
        return client.get_client(self.session, 'ec2', region)

    def volume_create(self, context, volume):
        if not volume.az:
            raise exception.InvalidInput(
                reason=_('availability zone is required'))
        if not volume.volume_type:
            raise exception.InvalidInput(reason=_('volume type is required'))
        if not volume.size:
            raise exception.InvalidInput(reason=_('volume size is required'))
        provider.validate_volume_type_iops(
            volume.volume_type, volume.iops,
            constants.PROVISIONED_IOPS_VOLUME_TYPES)

        params = {
            'AvailabilityZone': volume.az,
            'VolumeType': volume.volume_type,
            'Encrypted': volume.encrypted,
            'Size': bytes_to_gib(volume.size),
        }
        if volume.volume_type in constants.PROVISIONED_IOPS_VOLUME_TYPES:
            params['Iops'] = volume.iops
        tags = bulwark_tags.get_tags(models.key_value_to_map(volume.tags))

        volume_id = self._create_volume(context, params, tags)
        if not volume_id:
            return self._dry_run_volume(params, tags)
        return self.volume_get(context, volume_id, volume.az)

    def _create_volume(self, context, params, tags):
        """Issue a create request and wait until the volume is available.

        :returns: the new volume ID, or an empty string in dry-run mode.
        """
        params = dict(params, DryRun=self.dry_run)
        if tags:
            params['TagSpecifications'] = [
                {'ResourceType': 'volume', 'Tags': client.to_aws_tags(tags)}]
        try:
            vol = self.ec2.create_volume(**params)
        except client.ClientError as e:
            if client.is_dry_run(e):
                LOG.info("Dry run: volume creation in %s would succeed.",
                         params['AvailabilityZone'])
                return ''
            LOG.error("Failed to create volume in %(az)s: %(err)s",
                      {'az': params['AvailabilityZone'], 'err': e})
            raise client.backend_error('create_volume',
                                       params['AvailabilityZone'], e)

        self._wait_on_volume(context, vol['VolumeId'])
        return vol['VolumeId']

    def _dry_run_volume(self, params, tags):
        size = params.get('Size')
        return models.Volume(type=constants.TYPE_EBS,
                             id='',
                             az=params['AvailabilityZone'],
                             region=self.region,
                             size=size * units.Gi if size else None,
                             encrypted=params.get('Encrypted'),
                             volume_type=params['VolumeType'],
                             iops=params.get('Iops'),
                             tags=models.map_to_key_value(tags))

    def _wait_on_volume(self, context, volume_id):
        backoff = utils.Backoff(CONF.ebs_volume_wait_min,
                                CONF.ebs_volume_wait_max,
                                CONF.aws_wait_backoff_factor)

        def _volume_available(context):
            try:
                vol = self._describe_volume(volume_id)
            except exception.VolumeNotFound:
                LOG.debug("Volume %s is not visible yet.", volume_id)
                return False
            state = vol.get('State')
            if state == constants.VOLUME_STATE_ERROR:
                raise exception.StorageStateError(resource_id=volume_id,
                                                  state=state)
            if state == constants.VOLUME_STATE_AVAILABLE:
                LOG.info("Volume %s complete.", volume_id)
                return True
            LOG.info("Volume %(id)s state: %(state)s.",
                     {'id': volume_id, 'state': state})
            return False

        utils.wait_with_backoff(context, backoff, _volume_available)

    def _describe_volume(self, volume_id):
        try:
            resp = self.ec2.describe_volumes(VolumeIds=[volume_id])
        except client.ClientError as e:
            if client.error_code(e) in client.VOLUME_NOT_FOUND_CODES:
                raise exception.VolumeNotFound(volume_id=volume_id)
            LOG.error("Failed to get volume %(id)s: %(err)s",
                      {'id': volume_id, 'err': e})
            raise client.backend_error('describe_volumes', volume_id, e)
        vols = resp.get('Volumes', [])
        if len(vols) != 1:
            LOG.error("Found an unexpected number of volumes: volume_id="
                      "%(id)s result_count=%(count)d",
                      {'id': volume_id, 'count': len(vols)})
            raise exception.VolumeNotFound(volume_id=volume_id)
        return vols[0]

    def volume_get(self, context, volume_id, zone):
        return self._volume_parse(self._describe_volume(volume_id))

    def _volume_parse(self, vol):
        volume_type = vol.get('VolumeType')
        iops = None
        if volume_type in constants.PROVISIONED_IOPS_VOLUME_TYPES:
            iops = vol.get('Iops')
        return models.Volume(
            type=constants.TYPE_EBS,
            id=vol['VolumeId'],
            az=vol.get('AvailabilityZone'),
            region=self.region,
            size=vol.get('Size', 0) * units.Gi,
            encrypted=vol.get('Encrypted', False),
            volume_type=volume_type,
            iops=iops,
            creation_time=vol.get('CreateTime'),
            tags=models.map_to_key_value(client.from_aws_tags(
                vol.get('Tags'))))

    def volumes_list(self, context, tags, zone):
        filters = tag_filters(tags)
        if zone:
            filters.append({'Name': 'availability-zone', 'Values': [zone]})
        paginator = self.ec2.get_paginator('describe_volumes')
        volumes = []
        try:
            for page in paginator.paginate(Filters=filters):
                volumes.extend(self._volume_parse(vol)
                               for vol in page.get('Volumes', []))
        except client.ClientError as e:
            raise client.backend_error('describe_volumes', tags, e)
        return volumes

    def volume_delete(self, context, volume):
        LOG.info("Deleting EBS volume %s.", volume.id)
        try:
            self.ec2.delete_volume(VolumeId=volume.id, DryRun=self.dry_run)
        except client.ClientError as e:
            if client.error_code(e) in client.VOLUME_NOT_FOUND_CODES:
                LOG.debug("Volume %s already deleted.", volume.id)
                return
            if client.is_dry_run(e):
                return
            raise client.backend_error('delete_volume', volume.id, e)

    def _check_snapshot_volume(self, snapshot):
        volume = snapshot.volume
        if volume is None:
            raise exception.InvalidSnapshot(
                reason=_('snapshot volume information not available'))
        if not volume.volume_type or not volume.az or volume.tags is None:
            raise exception.InvalidSnapshot(
                reason=_('required volume fields not available, volume '
                         'type: %(type)s, availability zone: %(az)s, volume '
                         'tags: %(tags)s') % {'type': volume.volume_type,
                                              'az': volume.az,
                                              'tags': volume.tags})
        try:
            provider.validate_volume_type_iops(
                volume.volume_type, volume.iops,
                constants.PROVISIONED_IOPS_VOLUME_TYPES)
        except exception.InvalidInput as e:
            raise exception.InvalidSnapshot(reason=e.kwargs['reason'])

    def volume_create_from_snapshot(self, context, snapshot, tags):
        self._check_snapshot_volume(snapshot)
        zones = zone.from_source_region_zone(context, self, snapshot.region,
                                             snapshot.volume.az)
        if len(zones) != 1:
            raise exception.InvalidInput(
                reason=_('expected exactly one restore zone, got '
                         '%d') % len(zones))

        params = {
            'AvailabilityZone': zones[0],
            'SnapshotId': snapshot.id,
            'VolumeType': snapshot.volume.volume_type,
        }
        if (snapshot.volume.volume_type in
                constants.PROVISIONED_IOPS_VOLUME_TYPES):
            params['Iops'] = snapshot.volume.iops
        # Caller tags take precedence over tags of the source volume.
        tags = bulwark_tags.union(
            tags, models.key_value_to_map(snapshot.volume.tags))
        tags = bulwark_tags.get_tags(tags)

        volume_id = self._create_volume(context, params, tags)
        if not volume_id:
            return self._dry_run_volume(params, tags)
        return self.volume_get(context, volume_id, zones[0])

    def snapshot_create(self, context, volume, tags):
        tags = bulwark_tags.get_tags(tags)
        params = {'VolumeId': volume.id, 'DryRun': self.dry_run}
        if tags:
            params['TagSpecifications'] = [
                {'ResourceType': 'snapshot',
                 'Tags': client.to_aws_tags(tags)}]
        LOG.info("Snapshotting EBS volume %s.", volume.id)
        try:
            snap = self.ec2.create_snapshot(**params)
        except client.ClientError as e:
            if not client.is_dry_run(e):
                raise client.backend_error('create_snapshot', volume.id, e)
            LOG.info("Dry run: snapshot of volume %s would succeed.",
                     volume.id)
            snap = {'SnapshotId': '',
                    'VolumeId': volume.id,
                    'Encrypted': volume.encrypted,
                    'Tags': client.to_aws_tags(tags)}

        region = self.region
        if volume.az:
            region = self.zone_to_region(context, volume.az)
        snapshot = self._snapshot_parse(snap, region)
        if not snap.get('VolumeSize'):
            snapshot.size = volume.size
        snapshot.volume = volume
        return snapshot

    def snapshot_create_wait_for_completion(self, context, snapshot):
        if self.dry_run:
            return
        self._wait_on_snapshot(context, self.ec2, snapshot.id)

    def _wait_on_snapshot(self, context, ec2, snapshot_id):
        backoff = utils.Backoff(CONF.ebs_snapshot_wait_min,
                                CONF.ebs_snapshot_wait_max,
                                CONF.aws_wait_backoff_factor)

        def _snapshot_completed(context):
            try:
                snap = self._describe_snapshot(ec2, snapshot_id)
            except exception.SnapshotNotFound:
                LOG.debug("Snapshot %s is not visible yet.", snapshot_id)
                return False
            state = snap.get('State')
            if state == constants.SNAPSHOT_STATE_ERROR:
                raise exception.StorageStateError(resource_id=snapshot_id,
                                                  state=state)
            if state == constants.SNAPSHOT_STATE_COMPLETED:
                LOG.info("Snapshot %s completed.", snapshot_id)
                return True
            LOG.debug("Snapshot %(id)s progress: %(progress)s.",
                      {'id': snapshot_id, 'progress': snap.get('Progress')})
            return False

        utils.wait_with_backoff(context, backoff, _snapshot_completed)

    def _describe_snapshot(self, ec2, snapshot_id):
        try:
            resp = ec2.describe_snapshots(SnapshotIds=[snapshot_id])
        except client.ClientError as e:
            if client.error_code(e) in client.SNAPSHOT_NOT_FOUND_CODES:
                raise exception.SnapshotNotFound(snapshot_id=snapshot_id)
            raise client.backend_error('describe_snapshots', snapshot_id, e)
        snaps = resp.get('Snapshots', [])
        if len(snaps) != 1:
            LOG.error("Found an unexpected number of snapshots: "
                      "snapshot_id=%(id)s result_count=%(count)d",
                      {'id': snapshot_id, 'count': len(snaps)})
            raise exception.SnapshotNotFound(snapshot_id=snapshot_id)
        return snaps[0]

    def _snapshot_parse(self, snap, region):
        return models.Snapshot(
            type=constants.TYPE_EBS,
            id=snap.get('SnapshotId', ''),
            region=region,
            size=snap.get('VolumeSize', 0) * units.Gi,
            encrypted=snap.get('Encrypted', False),
            creation_time=snap.get('StartTime'),
            tags=models.map_to_key_value(client.from_aws_tags(
                snap.get('Tags'))),
            volume=models.Volume(type=constants.TYPE_EBS,
                                 id=snap.get('VolumeId', '')))

    @client.translate_client_error('copy_snapshot')
    def snapshot_copy(self, context, from_snapshot, to_snapshot):
        """Copy ``from_snapshot`` into ``to_snapshot.region``.

        An encrypted source always yields an encrypted copy; an
        unencrypted source is encrypted when ``to_snapshot`` asks for it.
        EBS attaches copies to a placeholder volume, so the returned
        snapshot carries the volume and size of ``from_snapshot``.
        """
        if not to_snapshot.region:
            raise exception.InvalidInput(
                reason=_('destination snapshot region must be specified'))
        if to_snapshot.id:
            raise exception.InvalidInput(
                reason=_('destination snapshot ID must be empty, got '
                         '%s') % to_snapshot.id)

        # Copies must be initiated from the destination region.
        dest_ec2 = self._ec2_for_region(to_snapshot.region)
        params = {
            'Description': 'Copy of %s' % from_snapshot.id,
            'SourceSnapshotId': from_snapshot.id,
            'SourceRegion': from_snapshot.region,
            'DestinationRegion': to_snapshot.region,
        }
        if from_snapshot.encrypted or to_snapshot.encrypted:
            params['Encrypted'] = True
        if to_snapshot.region != from_snapshot.region:
            params['PresignedUrl'] = self._presign_copy(from_snapshot,
                                                        to_snapshot.region)

        resp = dest_ec2.copy_snapshot(**params)
        snapshot_id = resp['SnapshotId']
        LOG.info("Copying snapshot %(from)s to %(to)s in %(region)s.",
                 {'from': from_snapshot.id, 'to': snapshot_id,
                  'region': to_snapshot.region})

        tags = bulwark_tags.get_tags(
            models.key_value_to_map(from_snapshot.tags))
        self._set_resource_tags(dest_ec2, snapshot_id, tags)
        self._wait_on_snapshot(context, dest_ec2, snapshot_id)

        snapshot = self._snapshot_parse(
            self._describe_snapshot(dest_ec2, snapshot_id),
            to_snapshot.region)
        snapshot.volume = from_snapshot.volume
        snapshot.size = from_snapshot.size
        snapshot.region = to_snapshot.region
        return snapshot

    def _presign_copy(self, from_snapshot, dest_region):
        """Presign a copy request with credentials of the source region."""
        source_ec2 = self._ec2_for_region(from_snapshot.region)
        return source_ec2.generate_presigned_url(
            'copy_snapshot',
            Params={'SourceSnapshotId': from_snapshot.id,
                    'SourceRegion': from_snapshot.region,
                    'DestinationRegion': dest_region},
            ExpiresIn=CONF.ebs_copy_presign_expiry)

    def snapshot_delete(self, context, snapshot):
        LOG.info("Deleting EBS snapshot %s.", snapshot.id)
        try:
            self.ec2.delete_snapshot(SnapshotId=snapshot.id,
                                     DryRun=self.dry_run)
        except client.ClientError as e:
            if client.error_code(e) in client.SNAPSHOT_NOT_FOUND_CODES:
                LOG.debug("Snapshot %s already deleted.", snapshot.id)
                return
            if client.is_dry_run(e):
                return
            raise client.backend_error('delete_snapshot', snapshot.id, e)

    def snapshot_get(self, context, snapshot_id):
        return self._snapshot_parse(
            self._describe_snapshot(self.ec2, snapshot_id), self.region)

    def snapshots_list(self, context, tags):
        paginator = self.ec2.get_paginator('describe_snapshots')
        snapshots = []
        try:
            for page in paginator.paginate(OwnerIds=['self'],
                                           Filters=tag_filters(tags)):
                snapshots.extend(self._snapshot_parse(snap, self.region)
                                 for snap in page.get('Snapshots', []))
        except client.ClientError as e:
            raise client.backend_error('describe_snapshots', tags, e)
        return snapshots

    def set_volume_tags(self, context, volume, tags):
        self._set_resource_tags(self.ec2, volume.id, tags)

    def set_snapshot_tags(self, context, snapshot, tags):
        self._set_resource_tags(self.ec2, snapshot.id, tags)

    def _set_resource_tags(self, ec2, resource_id, tags):
        try:
            ec2.create_tags(Resources=[resource_id],
                            Tags=client.to_aws_tags(tags),
                            DryRun=self.dry_run)
        except client.ClientError as e:
            if client.is_dry_run(e):
                return
            LOG.error("Failed to set tags on %(id)s: %(err)s",
                      {'id': resource_id, 'err': e})
            raise client.backend_error('create_tags', resource_id, e)

    def from_region(self, context, region):
        if CONF.ebs_live_zone_lookup:
            return self.query_region_to_zones(context, region)
        return zone.static_region_to_zones(region)

    def query_region_to_zones(self, context, region):
        """Ask EC2 for the availability zones of ``region``."""
        ec2 = self._ec2_for_region(region)
        try:
            resp = ec2.describe_availability_zones()
        except client.ClientError as e:
            raise client.backend_error('describe_availability_zones',
                                       region, e)
        zones = [az['ZoneName'] for az in resp.get('AvailabilityZones', [])
                 if az.get('ZoneName')]
        if not zones:
            raise exception.RegionZonesNotFound(region=region)
        return zones

    def zone_to_region(self, context, zone):
        try:
            resp = self.ec2.describe_availability_zones(ZoneNames=[zone])
        except client.ClientError as e:
            LOG.error("Could not determine region for availability zone "
                      "%(zone)s: %(err)s", {'zone': zone, 'err': e})
            raise client.backend_error('describe_availability_zones',
                                       zone, e)
        zones = resp.get('AvailabilityZones', [])
        if not zones:
            raise exception.AvailabilityZoneNotFound(zone=zone)
        return zones[0]['RegionName']

    def snapshot_restore_targets(self, context, snapshot):
        self._check_snapshot_volume(snapshot)
        # EBS snapshots can only be restored in their own region.
        return False, {snapshot.region: self.from_region(context,
                                                         snapshot.region)}


def tag_filters(tags):
    """Build EC2 describe filters matching every key/value in ``tags``."""
    return [{'Name': 'tag:%s' % key, 'Values': [value]}
            for key, value in sorted((tags or {}).items())]
