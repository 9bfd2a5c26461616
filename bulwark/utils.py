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

"""Utilities and helper functions."""

import string
import uuid

from oslo_log import log
import tenacity

from bulwark import exception
from bulwark.i18n import _

LOG = log.getLogger(__name__)

TOKEN_CHARS = string.ascii_letters + string.digits


class Backoff(object):
    """Exponential wait schedule.

    The n-th call to ``duration()`` returns
    ``min_interval * factor ^ n`` capped at ``max_interval``. With
    ``jitter`` enabled each interval is drawn uniformly between
    ``min_interval`` and the computed value using ``rng``.

    """

    def __init__(self, min_interval, max_interval, factor=2, jitter=False,
                 rng=None):
        if min_interval <= 0 or max_interval < min_interval:
            raise ValueError(_('Backoff requires 0 < min_interval <= '
                               'max_interval (received: %(min)s, %(max)s).')
                             % {'min': min_interval, 'max': max_interval})
        if factor < 1:
            raise ValueError(_('Backoff factor must be greater than or '
                               'equal to 1 (received: %s).') % factor)
        if jitter and rng is None:
            raise ValueError(_('Backoff with jitter requires a random '
                               'source.'))
        self.min_interval = min_interval
        self.max_interval = max_interval
        self.factor = factor
        self.jitter = jitter
        self._rng = rng
        self.attempt = 0

    def for_attempt(self, attempt):
        wait_for = self.min_interval * self.factor ** attempt
        wait_for = min(wait_for, self.max_interval)
        if self.jitter:
            wait_for = self._rng.uniform(self.min_interval, wait_for)
        return wait_for

    def duration(self):
        wait_for = self.for_attempt(self.attempt)
        self.attempt += 1
        return wait_for

    def reset(self):
        self.attempt = 0


def wait_with_backoff(context, backoff, func):
    """Call ``func(context)`` until it reports completion.

    ``func`` returns True when the awaited condition holds and False
    when it should be polled again. Any exception raised by ``func``
    aborts the wait immediately. Between attempts the caller's context
    is slept on for the next ``backoff`` interval; a cancelled context
    or an expired deadline ends the wait with OperationCancelled.

    """
    def _sleep(wait_for):
        LOG.debug("Sleeping for %s seconds.", wait_for)
        if context.wait(wait_for):
            context.check_cancelled()

    retryer = tenacity.Retrying(
        sleep=_sleep,
        wait=lambda retry_state: backoff.duration(),
        retry=tenacity.retry_if_result(lambda done: not done),
        before=lambda retry_state: context.check_cancelled())
    retryer(func, context)


def generate_token(rng, length=16):
    """Return a random alphanumeric token drawn from ``rng``."""
    return ''.join(rng.choice(TOKEN_CHARS) for _i in range(length))


def generate_uuid(rng):
    """Return a random UUID4 string drawn from ``rng``."""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def check_required_keys(config, keys, storage_type):
    """Fail with MissingConfigValue for the first absent key."""
    for key in keys:
        if not config.get(key):
            raise exception.MissingConfigValue(key=key,
                                               storage_type=storage_type)
