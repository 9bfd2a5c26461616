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

"""Configuration options shared by the AWS storage providers."""

from oslo_config import cfg

aws_client_opts = [
    cfg.IntOpt('aws_max_retries',
               default=10,
               min=0,
               help='Maximum number of attempts botocore makes for a '
                    'single AWS API call before giving up.'),
    cfg.FloatOpt('aws_wait_backoff_factor',
                 default=2.0,
                 min=1.0,
                 help='Multiplier applied to the polling interval after '
                      'each check of a pending AWS resource.'),
]

ebs_opts = [
    cfg.BoolOpt('aws_dry_run',
                default=False,
                help='Validate EBS requests without creating, tagging or '
                     'deleting anything.'),
    cfg.IntOpt('ebs_copy_presign_expiry',
               default=7200,
               min=1,
               help='Lifetime in seconds of the presigned URL used to '
                    'authorize a cross-region snapshot copy.'),
    cfg.FloatOpt('ebs_volume_wait_min',
                 default=0.01,
                 help='Initial interval in seconds between checks of a '
                      'volume being created.'),
    cfg.FloatOpt('ebs_volume_wait_max',
                 default=10.0,
                 help='Maximum interval in seconds between checks of a '
                      'volume being created.'),
    cfg.FloatOpt('ebs_snapshot_wait_min',
                 default=1.0,
                 help='Initial interval in seconds between checks of a '
                      'pending snapshot.'),
    cfg.FloatOpt('ebs_snapshot_wait_max',
                 default=10.0,
                 help='Maximum interval in seconds between checks of a '
                      'pending snapshot.'),
    cfg.BoolOpt('ebs_live_zone_lookup',
                default=False,
                help='Ask EC2 for the availability zones of a region '
                     'instead of using the built-in zone table. Requires '
                     'the ec2:DescribeAvailabilityZones permission.'),
]

efs_opts = [
    cfg.StrOpt('efs_backup_vault_name',
               default='bulwarkvault',
               help='AWS Backup vault holding EFS recovery points. The '
                    'vault is created on first use.'),
    cfg.StrOpt('efs_backup_role',
               default='service-role/AWSBackupDefaultServiceRole',
               help='IAM role, relative to the account, that AWS Backup '
                    'assumes for backup and restore jobs.'),
    cfg.FloatOpt('efs_wait_min',
                 default=1.0,
                 help='Initial interval in seconds between checks of a '
                      'file system, recovery point or restore job.'),
    cfg.FloatOpt('efs_wait_max',
                 default=10.0,
                 help='Maximum interval in seconds between checks of a '
                      'file system, recovery point or restore job.'),
]

CONF = cfg.CONF
CONF.register_opts(aws_client_opts)
CONF.register_opts(ebs_opts)
CONF.register_opts(efs_opts)
