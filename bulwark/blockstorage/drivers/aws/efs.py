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

"""Amazon EFS storage provider.

EFS has no file system snapshots of its own. Snapshots are AWS Backup
recovery points kept in a dedicated vault, and restores are AWS Backup
restore jobs that create a new file system. Recovery points only carry
opaque tags, so the mount targets of the source file system are
recorded as tags (see :mod:`bulwark.blockstorage.tags`) and recreated
after a restore.

"""

import random

from oslo_config import cfg
from oslo_log import log

from bulwark.blockstorage.drivers.aws import client
from bulwark.blockstorage import models
from bulwark.blockstorage import provider
from bulwark.blockstorage import tags as bulwark_tags
from bulwark.common import constants
from bulwark import exception
from bulwark.i18n import _
from bulwark import utils

CONF = cfg.CONF
LOG = log.getLogger(__name__)

BACKUP_RESOURCE_TYPE = 'EFS'
DUMMY_MARKER = ''


def paginate_with_marker(call, response_key, request_key, **params):
    """Yield every page of a marker based AWS listing call.

    The first page is always fetched. Further pages are requested while
    the previous response carries ``response_key``.
    """
    resp = {response_key: DUMMY_MARKER}
    while resp.get(response_key) is not None:
        resp = call(**params)
        yield resp
        params[request_key] = resp.get(response_key)


def filter_available(descriptions):
    return [desc for desc in descriptions
            if desc.get('LifeCycleState') == constants.EFS_STATE_AVAILABLE]


def filter_with_tags(descriptions, tags):
    """Keep file systems carrying every key/value pair in ``tags``."""
    tags = tags or {}
    result = []
    for desc in descriptions:
        fs_tags = client.from_aws_tags(desc.get('Tags'))
        if all(fs_tags.get(k) == v for k, v in tags.items()):
            result.append(desc)
    return result


def efs_restore_tags(rng):
    """Restore metadata asking AWS Backup for a brand new file system."""
    return {
        'newFileSystem': 'true',
        'CreationToken': utils.generate_token(rng),
        'Encrypted': 'false',
        'PerformanceMode': constants.EFS_PERFORMANCE_MODE_GENERAL_PURPOSE,
    }


class EFSProvider(provider.Provider):
    """Provider for Amazon Elastic File System backed by AWS Backup."""

    def __init__(self, config, rng=None):
        self.config = config
        self.session, self.region = client.get_session(config,
                                                       constants.TYPE_EFS)
        self.efs = client.get_client(self.session, 'efs', self.region)
        self.backup = client.get_client(self.session, 'backup', self.region)
        self.account_id = client.get_account_id(self.session, self.region)
        self.vault_name = CONF.efs_backup_vault_name
        self.rng = rng or random.SystemRandom()

    def type(self):
        return constants.TYPE_EFS

    def _backoff(self):
        return utils.Backoff(CONF.efs_wait_min, CONF.efs_wait_max,
                             CONF.aws_wait_backoff_factor)

    def _backup_role_arn(self):
        return client.backup_role_arn(self.account_id, CONF.efs_backup_role)

    def volume_create(self, context, volume):
        """Create a file system and wait until it is available.

        ``volume.volume_type`` selects the performance mode and defaults
        to general purpose.
        """
        performance_mode = (volume.volume_type or
                            constants.EFS_PERFORMANCE_MODE_GENERAL_PURPOSE)
        if performance_mode not in constants.EFS_PERFORMANCE_MODES:
            raise exception.InvalidInput(
                reason=_('unsupported EFS performance mode %s') %
                performance_mode)
        provider.validate_volume_type_iops(performance_mode, volume.iops, ())

        tags = bulwark_tags.get_tags(models.key_value_to_map(volume.tags))
        creation_token = utils.generate_uuid(self.rng)
        params = {
            'CreationToken': creation_token,
            'PerformanceMode': performance_mode,
            'ThroughputMode': constants.EFS_THROUGHPUT_MODE_BURSTING,
            'Encrypted': volume.encrypted,
        }
        if tags:
            params['Tags'] = client.to_aws_tags(tags)
        try:
            fs = self.efs.create_file_system(**params)
        except client.ClientError as e:
            LOG.error("Failed to create EFS instance: %s", e)
            raise client.backend_error('create_file_system',
                                       creation_token, e)

        fs_id = fs['FileSystemId']
        self._wait_until_file_system_available(context, fs_id)
        return self.volume_get(context, fs_id, volume.az)

    def _describe_file_systems(self, fs_id):
        try:
            resp = self.efs.describe_file_systems(FileSystemId=fs_id)
        except client.ClientError as e:
            if client.error_code(e) in client.FILE_SYSTEM_NOT_FOUND_CODES:
                raise exception.VolumeNotFound(volume_id=fs_id)
            raise client.backend_error('describe_file_systems', fs_id, e)
        return resp.get('FileSystems', [])

    def _get_file_system(self, fs_id):
        availables = filter_available(self._describe_file_systems(fs_id))
        if len(availables) != 1:
            LOG.error("Found %(count)d available file systems with ID "
                      "%(id)s.", {'count': len(availables), 'id': fs_id})
            raise exception.VolumeNotFound(volume_id=fs_id)
        return availables[0]

    def _wait_until_file_system_available(self, context, fs_id):
        def _file_system_available(context):
            try:
                descs = self._describe_file_systems(fs_id)
            except exception.VolumeNotFound:
                return False
            if not descs:
                return False
            state = descs[0].get('LifeCycleState')
            if state == constants.EFS_STATE_ERROR:
                raise exception.StorageStateError(resource_id=fs_id,
                                                  state=state)
            LOG.debug("File system %(id)s state: %(state)s.",
                      {'id': fs_id, 'state': state})
            return state == constants.EFS_STATE_AVAILABLE

        utils.wait_with_backoff(context, self._backoff(),
                                _file_system_available)

    def _volume_from_description(self, desc, zone):
        return models.Volume(
            type=constants.TYPE_EFS,
            id=desc['FileSystemId'],
            az=zone,
            region=self.region,
            size=desc.get('SizeInBytes', {}).get('Value'),
            encrypted=desc.get('Encrypted', False),
            volume_type=desc.get('PerformanceMode'),
            creation_time=desc.get('CreationTime'),
            tags=models.map_to_key_value(client.from_aws_tags(
                desc.get('Tags'))))

    def volume_get(self, context, volume_id, zone):
        return self._volume_from_description(
            self._get_file_system(volume_id), zone)

    @client.translate_client_error('describe_file_systems')
    def volumes_list(self, context, tags, zone):
        result = []
        for page in paginate_with_marker(self.efs.describe_file_systems,
                                         'NextMarker', 'Marker'):
            availables = filter_available(
                filter_with_tags(page.get('FileSystems', []), tags))
            result.extend(self._volume_from_description(desc, zone)
                          for desc in availables)
        return result

    def volume_delete(self, context, volume):
        LOG.info("Deleting EFS file system %s.", volume.id)
        try:
            self.efs.delete_file_system(FileSystemId=volume.id)
        except client.ClientError as e:
            if client.error_code(e) in client.FILE_SYSTEM_NOT_FOUND_CODES:
                LOG.debug("File system %s already deleted.", volume.id)
                return
            raise client.backend_error('delete_file_system', volume.id, e)

    def volume_create_from_snapshot(self, context, snapshot, tags):
        """Restore a recovery point into a new file system.

        Restore metadata is the union of the metadata recorded on the
        recovery point and its current tags. Mount target tags are
        removed from it and the mount targets are recreated on the new
        file system once the restore job completes.
        """
        rp_tags = bulwark_tags.union(self._get_restore_metadata(snapshot.id),
                                     self._get_backup_tags(snapshot.id))
        filtered_tags, mount_targets = (
            bulwark_tags.filter_and_get_mount_targets(rp_tags))
        metadata = bulwark_tags.union(efs_restore_tags(self.rng),
                                      filtered_tags)

        restore_id = self._start_restore_job(snapshot.id, metadata)
        self._wait_until_restore_complete(context, restore_id)

        job = self._describe_restore_job(restore_id)
        fs_id = client.efs_id_from_resource_arn(job['CreatedResourceArn'])
        self._create_mount_targets(context, fs_id, mount_targets)

        tags = bulwark_tags.get_tags(tags)
        if tags:
            self._set_efs_tags(fs_id, tags)
        return self.volume_get(context, fs_id, '')

    def _get_restore_metadata(self, rp_arn):
        try:
            resp = self.backup.get_recovery_point_restore_metadata(
                BackupVaultName=self.vault_name, RecoveryPointArn=rp_arn)
        except client.ClientError as e:
            if client.error_code(e) in client.RESOURCE_NOT_FOUND_CODES:
                raise exception.SnapshotNotFound(snapshot_id=rp_arn)
            raise client.backend_error('get_recovery_point_restore_metadata',
                                       rp_arn, e)
        return resp.get('RestoreMetadata', {})

    def _start_restore_job(self, rp_arn, metadata):
        try:
            resp = self.backup.start_restore_job(
                RecoveryPointArn=rp_arn,
                Metadata=metadata,
                IamRoleArn=self._backup_role_arn(),
                ResourceType=BACKUP_RESOURCE_TYPE)
        except client.ClientError as e:
            LOG.error("Failed to start restore job for %(rp)s: %(err)s",
                      {'rp': rp_arn, 'err': e})
            raise client.backend_error('start_restore_job', rp_arn, e)
        restore_id = resp.get('RestoreJobId')
        if not restore_id:
            raise exception.BackendError(
                operation='start_restore_job', resource=rp_arn,
                reason=_('empty restore job ID'))
        LOG.info("Started restore job %(job)s for %(rp)s.",
                 {'job': restore_id, 'rp': rp_arn})
        return restore_id

    def _describe_restore_job(self, restore_id):
        try:
            return self.backup.describe_restore_job(RestoreJobId=restore_id)
        except client.ClientError as e:
            raise client.backend_error('describe_restore_job', restore_id, e)

    def _wait_until_restore_complete(self, context, restore_id):
        def _restore_complete(context):
            job = self._describe_restore_job(restore_id)
            status = job.get('Status')
            if status in constants.RESTORE_JOB_FAILURE_STATES:
                raise exception.StorageStateError(resource_id=restore_id,
                                                  state=status)
            LOG.debug("Restore job %(id)s status: %(status)s.",
                      {'id': restore_id, 'status': status})
            return status == constants.RESTORE_JOB_COMPLETED

        utils.wait_with_backoff(context, self._backoff(), _restore_complete)

    def _create_mount_targets(self, context, fs_id, mount_targets):
        """Create mount targets one by one, then wait for all of them."""
        created = []
        for mt_id in sorted(mount_targets):
            mt = mount_targets[mt_id]
            params = {'FileSystemId': fs_id, 'SubnetId': mt.subnet_id}
            if mt.security_groups:
                params['SecurityGroups'] = mt.security_groups
            try:
                desc = self.efs.create_mount_target(**params)
            except client.ClientError as e:
                LOG.error("Failed to create mount target in %(subnet)s on "
                          "%(fs)s: %(err)s", {'subnet': mt.subnet_id,
                                              'fs': fs_id, 'err': e})
                raise client.backend_error('create_mount_target', fs_id, e)
            LOG.debug("Created mount target %(new)s on %(fs)s in place of "
                      "%(old)s.", {'new': desc['MountTargetId'],
                                   'fs': fs_id, 'old': mt_id})
            created.append(desc['MountTargetId'])

        for mt_id in created:
            self._wait_until_mount_target_ready(context, mt_id)

    def _wait_until_mount_target_ready(self, context, mt_id):
        def _mount_target_ready(context):
            try:
                resp = self.efs.describe_mount_targets(MountTargetId=mt_id)
            except client.ClientError as e:
                raise client.backend_error('describe_mount_targets', mt_id, e)
            targets = resp.get('MountTargets', [])
            if not targets:
                return False
            state = targets[0].get('LifeCycleState')
            if state == constants.EFS_STATE_ERROR:
                raise exception.StorageStateError(resource_id=mt_id,
                                                  state=state)
            return state == constants.EFS_STATE_AVAILABLE

        utils.wait_with_backoff(context, self._backoff(), _mount_target_ready)

    def _get_backup_tags(self, arn):
        result = {}
        try:
            for page in paginate_with_marker(self.backup.list_tags,
                                             'NextToken', 'NextToken',
                                             ResourceArn=arn):
                result = bulwark_tags.union(result, page.get('Tags', {}))
        except client.ClientError as e:
            if client.error_code(e) in client.RESOURCE_NOT_FOUND_CODES:
                raise exception.SnapshotNotFound(snapshot_id=arn)
            raise client.backend_error('list_tags', arn, e)
        return result

    def _get_mount_target_tags(self, fs_id):
        mount_targets = {}
        try:
            for page in paginate_with_marker(self.efs.describe_mount_targets,
                                             'NextMarker', 'Marker',
                                             FileSystemId=fs_id):
                for desc in page.get('MountTargets', []):
                    mt_id = desc.get('MountTargetId')
                    if not mt_id or not desc.get('SubnetId'):
                        raise exception.BackendError(
                            operation='describe_mount_targets',
                            resource=fs_id,
                            reason=_('mount target entry without ID or '
                                     'subnet'))
                    mount_targets[mt_id] = models.MountTarget(
                        subnet_id=desc['SubnetId'],
                        security_groups=self._get_security_groups(mt_id))
        except client.ClientError as e:
            raise client.backend_error('describe_mount_targets', fs_id, e)
        return bulwark_tags.encode_mount_targets(mount_targets)

    def _get_security_groups(self, mt_id):
        try:
            resp = self.efs.describe_mount_target_security_groups(
                MountTargetId=mt_id)
        except client.ClientError as e:
            raise client.backend_error(
                'describe_mount_target_security_groups', mt_id, e)
        return resp.get('SecurityGroups', [])

    def create_backup_vault(self):
        try:
            self.backup.create_backup_vault(BackupVaultName=self.vault_name)
        except client.ClientError as e:
            if client.error_code(e) in client.ALREADY_EXISTS_CODES:
                raise exception.BackupVaultAlreadyExists(
                    vault=self.vault_name)
            raise client.backend_error('create_backup_vault',
                                       self.vault_name, e)
        LOG.info("Created backup vault %s.", self.vault_name)

    def ensure_backup_vault(self):
        try:
            self.create_backup_vault()
        except exception.BackupVaultAlreadyExists:
            LOG.debug("Backup vault %s already exists.", self.vault_name)

    def snapshot_create(self, context, volume, tags):
        """Start a backup job for the file system behind ``volume``.

        The mount targets of the file system are stored as tags of the
        recovery point.
        """
        self.ensure_backup_vault()
        desc = self._get_file_system(volume.id)
        infra_tags = self._get_mount_target_tags(volume.id)
        all_tags = bulwark_tags.union(bulwark_tags.get_tags(tags),
                                      infra_tags)

        try:
            resp = self.backup.start_backup_job(
                BackupVaultName=self.vault_name,
                IamRoleArn=self._backup_role_arn(),
                ResourceArn=client.efs_resource_arn(
                    self.region, desc['OwnerId'], desc['FileSystemId']),
                RecoveryPointTags=all_tags)
        except client.ClientError as e:
            LOG.error("Failed to start backup job for %(id)s: %(err)s",
                      {'id': volume.id, 'err': e})
            raise client.backend_error('start_backup_job', volume.id, e)
        rp_arn = resp['RecoveryPointArn']
        self._wait_until_recovery_point_visible(context, rp_arn)
        if infra_tags:
            self._set_backup_tags(rp_arn, infra_tags)

        return models.Snapshot(type=constants.TYPE_EFS,
                               id=rp_arn,
                               region=self.region,
                               size=volume.size,
                               encrypted=volume.encrypted,
                               creation_time=resp.get('CreationDate'),
                               tags=models.map_to_key_value(all_tags),
                               volume=volume)

    def _describe_recovery_point(self, rp_arn):
        try:
            return self.backup.describe_recovery_point(
                BackupVaultName=self.vault_name, RecoveryPointArn=rp_arn)
        except client.ClientError as e:
            if client.error_code(e) in client.RESOURCE_NOT_FOUND_CODES:
                raise exception.SnapshotNotFound(snapshot_id=rp_arn)
            raise client.backend_error('describe_recovery_point', rp_arn, e)

    def _wait_until_recovery_point_visible(self, context, rp_arn):
        def _recovery_point_visible(context):
            try:
                self._describe_recovery_point(rp_arn)
            except exception.SnapshotNotFound:
                return False
            return True

        utils.wait_with_backoff(context, self._backoff(),
                                _recovery_point_visible)

    def snapshot_create_wait_for_completion(self, context, snapshot):
        def _recovery_point_completed(context):
            try:
                rp = self._describe_recovery_point(snapshot.id)
            except exception.SnapshotNotFound:
                return False
            status = rp.get('Status')
            if status in constants.RECOVERY_POINT_FAILURE_STATES:
                raise exception.StorageStateError(resource_id=snapshot.id,
                                                  state=status)
            LOG.debug("Recovery point %(id)s status: %(status)s.",
                      {'id': snapshot.id, 'status': status})
            return status == constants.RECOVERY_POINT_COMPLETED

        utils.wait_with_backoff(context, self._backoff(),
                                _recovery_point_completed)

    def snapshot_copy(self, context, from_snapshot, to_snapshot):
        raise exception.OperationNotSupported(
            operation='snapshot_copy', storage_type=constants.TYPE_EFS)

    def snapshot_delete(self, context, snapshot):
        LOG.info("Deleting recovery point %s.", snapshot.id)
        try:
            self.backup.delete_recovery_point(
                BackupVaultName=self.vault_name,
                RecoveryPointArn=snapshot.id)
        except client.ClientError as e:
            if client.error_code(e) in client.RESOURCE_NOT_FOUND_CODES:
                LOG.debug("Recovery point %s already deleted.", snapshot.id)
                return
            raise client.backend_error('delete_recovery_point',
                                       snapshot.id, e)

    def snapshot_get(self, context, snapshot_id):
        rp = self._describe_recovery_point(snapshot_id)
        if not rp.get('ResourceArn'):
            raise exception.BackendError(
                operation='describe_recovery_point', resource=snapshot_id,
                reason=_('resource ARN in recovery point is empty'))
        volume_id = client.efs_id_from_resource_arn(rp['ResourceArn'])
        volume = self.volume_get(context, volume_id, '')
        return models.Snapshot(
            type=constants.TYPE_EFS,
            id=snapshot_id,
            region=self.region,
            size=rp.get('BackupSizeInBytes'),
            encrypted=rp.get('IsEncrypted', False),
            creation_time=rp.get('CreationDate'),
            tags=models.map_to_key_value(self._get_backup_tags(snapshot_id)),
            volume=volume)

    def snapshots_list(self, context, tags):
        raise exception.OperationNotSupported(
            operation='snapshots_list', storage_type=constants.TYPE_EFS)

    def set_volume_tags(self, context, volume, tags):
        self._set_efs_tags(volume.id, tags)

    def set_snapshot_tags(self, context, snapshot, tags):
        self._set_backup_tags(snapshot.id, tags)

    def _set_efs_tags(self, fs_id, tags):
        try:
            self.efs.tag_resource(ResourceId=fs_id,
                                  Tags=client.to_aws_tags(tags))
        except client.ClientError as e:
            raise client.backend_error('tag_resource', fs_id, e)

    def _set_backup_tags(self, arn, tags):
        try:
            self.backup.tag_resource(ResourceArn=arn, Tags=tags)
        except client.ClientError as e:
            raise client.backend_error('tag_resource', arn, e)
