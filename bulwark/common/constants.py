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

# STORAGE TYPES
TYPE_EBS = 'EBS'
TYPE_EFS = 'EFS'

STORAGE_TYPES = (TYPE_EBS, TYPE_EFS)

# EBS VOLUME STATES
VOLUME_STATE_CREATING = 'creating'
VOLUME_STATE_AVAILABLE = 'available'
VOLUME_STATE_ERROR = 'error'

# EBS SNAPSHOT STATES
SNAPSHOT_STATE_PENDING = 'pending'
SNAPSHOT_STATE_COMPLETED = 'completed'
SNAPSHOT_STATE_ERROR = 'error'

# EBS volume types which require provisioned IOPS
PROVISIONED_IOPS_VOLUME_TYPES = ('io1', 'io2')

# EFS LIFECYCLE STATES
EFS_STATE_CREATING = 'creating'
EFS_STATE_AVAILABLE = 'available'
EFS_STATE_ERROR = 'error'
EFS_STATE_DELETING = 'deleting'
EFS_STATE_DELETED = 'deleted'

EFS_PERFORMANCE_MODE_GENERAL_PURPOSE = 'generalPurpose'
EFS_PERFORMANCE_MODE_MAX_IO = 'maxIO'
EFS_PERFORMANCE_MODES = (EFS_PERFORMANCE_MODE_GENERAL_PURPOSE,
                         EFS_PERFORMANCE_MODE_MAX_IO)
EFS_THROUGHPUT_MODE_BURSTING = 'bursting'

# AWS BACKUP RESTORE JOB STATES
RESTORE_JOB_PENDING = 'PENDING'
RESTORE_JOB_RUNNING = 'RUNNING'
RESTORE_JOB_COMPLETED = 'COMPLETED'
RESTORE_JOB_ABORTED = 'ABORTED'
RESTORE_JOB_FAILED = 'FAILED'
RESTORE_JOB_FAILURE_STATES = (RESTORE_JOB_ABORTED, RESTORE_JOB_FAILED)

# AWS BACKUP RECOVERY POINT STATES
RECOVERY_POINT_COMPLETED = 'COMPLETED'
RECOVERY_POINT_PARTIAL = 'PARTIAL'
RECOVERY_POINT_DELETING = 'DELETING'
RECOVERY_POINT_EXPIRED = 'EXPIRED'
RECOVERY_POINT_FAILURE_STATES = (RECOVERY_POINT_PARTIAL,
                                 RECOVERY_POINT_DELETING,
                                 RECOVERY_POINT_EXPIRED)
