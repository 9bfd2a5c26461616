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

"""Bulwark base exception handling.

Every failure raised by the storage layer is a subclass of
BulwarkException. The classes are grouped by kind: invalid input,
missing resources, conflicts, backend state failures, backend call
failures and unsupported operations.

"""
import re

from oslo_config import cfg
from oslo_log import log

from bulwark.i18n import _

LOG = log.getLogger(__name__)

exc_log_opts = [
    cfg.BoolOpt('fatal_exception_format_errors',
                default=False,
                help='Whether to make exception message format errors fatal.'),
]

CONF = cfg.CONF
CONF.register_opts(exc_log_opts)


class BulwarkException(Exception):
    """Base Bulwark Exception

    To correctly use this class, inherit from it and define
    a 'message' property. That message will get printf'd
    with the keyword arguments provided to the constructor.

    """
    message = _("An unknown exception occurred.")
    code = 500

    def __init__(self, message=None, **kwargs):
        self.kwargs = kwargs

        if 'code' not in self.kwargs:
            self.kwargs['code'] = self.code
        for k, v in self.kwargs.items():
            if isinstance(v, Exception):
                self.kwargs[k] = str(v)

        if not message:
            try:
                message = self.message % kwargs

            except Exception:
                # kwargs doesn't match a variable in the message
                # log the issue and the kwargs
                LOG.exception('Exception in string format operation.')
                for name, value in kwargs.items():
                    LOG.error("%(name)s: %(value)s", {
                        'name': name, 'value': value})
                if CONF.fatal_exception_format_errors:
                    raise
                else:
                    # at least get the core message out if something happened
                    message = self.message
        elif isinstance(message, Exception):
            message = str(message)

        if re.match(r'.*[^\.]\.\.$', message):
            message = message[:-1]
        self.msg = message
        super(BulwarkException, self).__init__(message)


class Invalid(BulwarkException):
    message = _("Unacceptable parameters.")
    code = 400


class InvalidInput(Invalid):
    message = _("Invalid input received: %(reason)s.")


class MissingConfigValue(Invalid):
    message = _("%(key)s required for storage type %(storage_type)s.")


class InvalidResourceType(Invalid):
    message = _("Unknown resource type: %(resource)s.")


class InvalidSnapshot(Invalid):
    message = _("Invalid snapshot: %(reason)s.")


class NotFound(BulwarkException):
    message = _("Resource could not be found.")
    code = 404


class VolumeNotFound(NotFound):
    message = _("Volume %(volume_id)s could not be found.")


class SnapshotNotFound(NotFound):
    message = _("Snapshot %(snapshot_id)s could not be found.")


class AvailabilityZoneNotFound(NotFound):
    message = _("Region unavailable for availability zone %(zone)s.")


class RegionZonesNotFound(NotFound):
    message = _("Cannot get availability zones for region %(region)s.")


class Conflict(BulwarkException):
    message = _("Resource %(resource)s already exists.")
    code = 409


class BackupVaultAlreadyExists(Conflict):
    message = _("Backup vault %(vault)s already exists.")


class StorageStateError(BulwarkException):
    message = _("Resource %(resource_id)s entered terminal state "
                "%(state)s.")


class BackendError(BulwarkException):
    message = _("%(operation)s failed for %(resource)s: %(reason)s")

    def __init__(self, message=None, error_code=None, **kwargs):
        self.error_code = error_code
        super(BackendError, self).__init__(message, **kwargs)


class OperationNotSupported(BulwarkException):
    message = _("Operation %(operation)s is not implemented for storage "
                "type %(storage_type)s.")
    code = 501


class OperationCancelled(BulwarkException):
    message = _("Operation cancelled: %(reason)s")
