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

"""
Credentials, boto3 clients and error translation for AWS providers.
"""

import functools

import boto3
from botocore import config as botocore_config
from botocore import exceptions as botocore_exceptions
from botocore import utils as botocore_utils
from oslo_config import cfg
from oslo_log import log

from bulwark.blockstorage.drivers.aws import options  # noqa
from bulwark import exception
from bulwark.i18n import _
from bulwark import utils

CONF = cfg.CONF
LOG = log.getLogger(__name__)

CONFIG_REGION = 'region'
ACCESS_KEY_ID = 'AWS_ACCESS_KEY_ID'
SECRET_ACCESS_KEY = 'AWS_SECRET_ACCESS_KEY'
SESSION_TOKEN = 'AWS_SESSION_TOKEN'
CONFIG_ROLE = 'role'

REQUIRED_KEYS = (CONFIG_REGION, ACCESS_KEY_ID, SECRET_ACCESS_KEY)

ROLE_SESSION_NAME = 'bulwark'
METADATA_TIMEOUT = 2

DRY_RUN_CODES = ('DryRunOperation',)
VOLUME_NOT_FOUND_CODES = ('InvalidVolume.NotFound',)
SNAPSHOT_NOT_FOUND_CODES = ('InvalidSnapshot.NotFound',)
FILE_SYSTEM_NOT_FOUND_CODES = ('FileSystemNotFound',)
RESOURCE_NOT_FOUND_CODES = ('ResourceNotFoundException',)
ALREADY_EXISTS_CODES = ('AlreadyExistsException',)

ClientError = botocore_exceptions.ClientError


def get_config(config, storage_type):
    """Validate a provider configuration mapping.

    :returns: a tuple of the region and the keyword arguments used to
        build a :class:`boto3.session.Session`.
    """
    utils.check_required_keys(config, REQUIRED_KEYS, storage_type)
    credentials = {
        'aws_access_key_id': config[ACCESS_KEY_ID],
        'aws_secret_access_key': config[SECRET_ACCESS_KEY],
    }
    if config.get(SESSION_TOKEN):
        credentials['aws_session_token'] = config[SESSION_TOKEN]
    return config[CONFIG_REGION], credentials


def get_session(config, storage_type):
    """Build a boto3 session from a provider configuration mapping.

    When the mapping names a ``role``, the static credentials are
    exchanged for temporary credentials of that role through STS.
    """
    region, credentials = get_config(config, storage_type)
    session = boto3.session.Session(region_name=region, **credentials)
    role = config.get(CONFIG_ROLE)
    if role:
        session = assume_role(session, region, role)
    return session, region


def assume_role(session, region, role):
    sts = get_client(session, 'sts', region)
    try:
        resp = sts.assume_role(RoleArn=role,
                               RoleSessionName=ROLE_SESSION_NAME)
    except ClientError as e:
        LOG.error("Failed to assume role %(role)s: %(err)s",
                  {'role': role, 'err': e})
        raise backend_error('assume_role', role, e)
    creds = resp['Credentials']
    LOG.debug("Assumed role %s.", role)
    return boto3.session.Session(
        aws_access_key_id=creds['AccessKeyId'],
        aws_secret_access_key=creds['SecretAccessKey'],
        aws_session_token=creds['SessionToken'],
        region_name=region)


def client_config():
    return botocore_config.Config(
        retries={'max_attempts': CONF.aws_max_retries, 'mode': 'standard'})


def get_client(session, service, region):
    return session.client(service, region_name=region,
                          config=client_config())


def get_account_id(session, region):
    """Return the AWS account owning the session credentials."""
    sts = get_client(session, 'sts', region)
    try:
        return sts.get_caller_identity()['Account']
    except ClientError as e:
        raise backend_error('get_caller_identity', region, e)


def get_region_from_ec2_metadata():
    """Return the region of the EC2 instance running this process.

    Only works from inside AWS. A single attempt is made with a short
    timeout.
    """
    LOG.debug("Retrieving region from metadata.")
    fetcher = botocore_utils.InstanceMetadataRegionFetcher(
        timeout=METADATA_TIMEOUT, num_attempts=1)
    region = fetcher.retrieve_region()
    if not region:
        raise exception.BackendError(
            operation='get_region_from_ec2_metadata',
            resource='instance metadata',
            reason=_('failed to get AWS region'))
    return region


def error_code(exc):
    return exc.response.get('Error', {}).get('Code', '')


def is_dry_run(exc):
    return error_code(exc) in DRY_RUN_CODES


def backend_error(operation, resource, exc):
    """Wrap a botocore ClientError into a BackendError."""
    return exception.BackendError(operation=operation, resource=resource,
                                  reason=exc, error_code=error_code(exc))


def translate_client_error(operation):
    """Turn ClientErrors escaping a provider method into BackendError.

    The wrapped method must take the request context and the resource
    it acts on as its first two arguments.
    """
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, context, resource, *args, **kwargs):
            try:
                return method(self, context, resource, *args, **kwargs)
            except ClientError as e:
                resource_id = getattr(resource, 'id', resource)
                LOG.error("%(operation)s failed for %(resource)s: %(err)s",
                          {'operation': operation,
                           'resource': resource_id, 'err': e})
                raise backend_error(operation, resource_id, e)
        return wrapper
    return decorator


def to_aws_tags(tags):
    """Convert a tag dict to the ``[{'Key': k, 'Value': v}]`` form."""
    return [{'Key': k, 'Value': v} for k, v in sorted(tags.items())]


def from_aws_tags(aws_tags):
    return dict((t['Key'], t.get('Value', '')) for t in aws_tags or [])


def backup_role_arn(account_id, role):
    return 'arn:aws:iam::%s:role/%s' % (account_id, role)


def efs_resource_arn(region, account_id, file_system_id):
    return 'arn:aws:elasticfilesystem:%s:%s:file-system/%s' % (
        region, account_id, file_system_id)


def efs_id_from_resource_arn(arn):
    """Extract the file system ID from an EFS resource ARN."""
    parts = arn.split(':', 5)
    if len(parts) != 6 or parts[0] != 'arn':
        raise exception.InvalidInput(
            reason=_('malformed resource ARN %s') % arn)
    resource = parts[5].split('/')
    if len(resource) != 2 or not resource[1]:
        raise exception.InvalidInput(
            reason=_('bad resource in ARN %s') % arn)
    return resource[1]
