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

"""RequestContext: cancellable context carried through every provider call."""

import threading

from oslo_context import context
from oslo_utils import timeutils

from bulwark import exception
from bulwark.i18n import _


class RequestContext(context.RequestContext):
    """Request information plus a cancellation signal.

    Waits inside the storage layer sleep on the context rather than on
    ``time.sleep`` so that ``cancel()`` or an expired deadline wakes them
    immediately.

    """

    def __init__(self, timeout=None, timestamp=None, **kwargs):
        """Initialize RequestContext.

        :param timeout: Optional number of seconds after which the context
            is treated as cancelled.
        :param kwargs: Extra arguments passed transparently to
            oslo_context.RequestContext.
        """
        super(RequestContext, self).__init__(**kwargs)

        if not timestamp:
            timestamp = timeutils.utcnow()
        elif isinstance(timestamp, str):
            timestamp = timeutils.parse_isotime(timestamp)
        self.timestamp = timestamp
        self._cancelled = threading.Event()
        self._watch = None
        if timeout is not None:
            self._watch = timeutils.StopWatch(duration=timeout)
            self._watch.start()

    @property
    def deadline_expired(self):
        return self._watch is not None and self._watch.expired()

    @property
    def cancelled(self):
        return self._cancelled.is_set() or self.deadline_expired

    def cancel(self):
        self._cancelled.set()

    def wait(self, interval):
        """Sleep for up to ``interval`` seconds.

        :returns: True if the context was cancelled or its deadline passed
            before or during the sleep, False otherwise.
        """
        if self._watch is not None:
            interval = max(0, min(interval, self._watch.leftover()))
        self._cancelled.wait(interval)
        return self.cancelled

    def check_cancelled(self):
        if self._cancelled.is_set():
            raise exception.OperationCancelled(
                reason=_("context was cancelled"))
        if self.deadline_expired:
            raise exception.OperationCancelled(
                reason=_("context deadline exceeded"))


def get_admin_context(timeout=None):
    return RequestContext(is_admin=True, overwrite=False, timeout=timeout)
