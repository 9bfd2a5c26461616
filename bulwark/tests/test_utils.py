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

import random
from unittest import mock
import uuid

import ddt

from bulwark import context
from bulwark import exception
from bulwark import test
from bulwark import utils


@ddt.ddt
class BackoffTestCase(test.TestCase):

    def test_schedule_is_capped(self):
        backoff = utils.Backoff(1, 10, factor=2)

        durations = [backoff.duration() for _i in range(6)]

        self.assertEqual([1, 2, 4, 8, 10, 10], durations)

    def test_reset(self):
        backoff = utils.Backoff(1, 10, factor=2)
        backoff.duration()
        backoff.duration()

        backoff.reset()

        self.assertEqual(1, backoff.duration())

    def test_factor_one_is_constant(self):
        backoff = utils.Backoff(0.5, 10, factor=1)

        self.assertEqual([0.5] * 4, [backoff.duration() for _i in range(4)])

    def test_jitter_stays_within_bounds(self):
        backoff = utils.Backoff(1, 10, factor=2, jitter=True,
                                rng=random.Random(7))

        for attempt in range(6):
            wait_for = backoff.duration()
            self.assertGreaterEqual(wait_for, 1)
            self.assertLessEqual(wait_for, min(2 ** attempt, 10))

    @ddt.data((0, 1, 2), (2, 1, 2), (1, 10, 0.5), (-1, 10, 2))
    @ddt.unpack
    def test_invalid_arguments(self, min_interval, max_interval, factor):
        self.assertRaises(ValueError, utils.Backoff, min_interval,
                          max_interval, factor)

    def test_jitter_without_rng(self):
        self.assertRaises(ValueError, utils.Backoff, 1, 10, jitter=True)


class WaitWithBackoffTestCase(test.TestCase):

    def setUp(self):
        super(WaitWithBackoffTestCase, self).setUp()
        self.context = mock.Mock()
        self.context.wait.return_value = False
        self.backoff = utils.Backoff(1, 10, factor=2)

    def test_done_on_first_call(self):
        func = mock.Mock(return_value=True)

        utils.wait_with_backoff(self.context, self.backoff, func)

        func.assert_called_once_with(self.context)
        self.context.wait.assert_not_called()

    def test_waits_follow_schedule(self):
        func = mock.Mock(side_effect=[False, False, False, True])

        utils.wait_with_backoff(self.context, self.backoff, func)

        self.assertEqual(4, func.call_count)
        self.assertEqual([mock.call(1), mock.call(2), mock.call(4)],
                         self.context.wait.call_args_list)

    def test_error_stops_immediately(self):
        func = mock.Mock(side_effect=exception.StorageStateError(
            resource_id='snap-1', state='error'))

        self.assertRaises(exception.StorageStateError,
                          utils.wait_with_backoff,
                          self.context, self.backoff, func)

        func.assert_called_once_with(self.context)
        self.context.wait.assert_not_called()

    def test_cancelled_before_start(self):
        ctxt = context.get_admin_context()
        ctxt.cancel()
        func = mock.Mock(return_value=True)

        self.assertRaises(exception.OperationCancelled,
                          utils.wait_with_backoff, ctxt, self.backoff, func)

        func.assert_not_called()

    def test_cancelled_while_waiting(self):
        ctxt = context.get_admin_context()

        def _cancel(ctxt):
            ctxt.cancel()
            return False

        self.assertRaises(exception.OperationCancelled,
                          utils.wait_with_backoff, ctxt, self.backoff,
                          mock.Mock(side_effect=_cancel))

    def test_deadline_exceeded(self):
        ctxt = context.get_admin_context(timeout=0.05)
        backoff = utils.Backoff(0.001, 0.01)

        self.assertRaises(exception.OperationCancelled,
                          utils.wait_with_backoff, ctxt, backoff,
                          mock.Mock(return_value=False))


@ddt.ddt
class HelpersTestCase(test.TestCase):

    def test_generate_token(self):
        token = utils.generate_token(random.Random(1))

        self.assertEqual(16, len(token))
        self.assertTrue(token.isalnum())
        self.assertEqual(token, utils.generate_token(random.Random(1)))

    def test_generate_token_length(self):
        self.assertEqual(8, len(utils.generate_token(random.Random(), 8)))

    def test_generate_uuid(self):
        value = utils.generate_uuid(random.Random(1))

        self.assertEqual(4, uuid.UUID(value).version)
        self.assertEqual(value, utils.generate_uuid(random.Random(1)))

    def test_check_required_keys(self):
        utils.check_required_keys({'a': '1', 'b': '2'}, ('a', 'b'), 'EBS')

    @ddt.data({}, {'a': '1'}, {'a': '1', 'b': ''})
    def test_check_required_keys_missing(self, config):
        exc = self.assertRaises(exception.MissingConfigValue,
                                utils.check_required_keys,
                                config, ('a', 'b'), 'EBS')
        self.assertIn('EBS', exc.msg)
