# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import threading
from ..common.errors import (
    InvalidConfigurationError,
    ServiceException,
    WaiterFailureError,
    WaiterNotSupportedError,
    WaiterTimeoutError,
)
from botocore.waiter import SingleWaiterConfig
from concurrent.futures import CancelledError, Future
from loguru import logger
from typing import Any


SUCCESS = 'success'
FAILURE = 'failure'


class Waiter:
    """Polls an operation until one of the waiter's acceptors reaches a terminal state.

    ``run`` polls on the calling thread. ``start`` polls on a daemon thread and
    returns immediately; the waiter then behaves like a future through
    ``wait``, ``cancel`` and ``done``. The sleep between attempts is
    interrupted as soon as the waiter is cancelled.
    """

    def __init__(
        self,
        client: Any,
        name: str,
        args: dict[str, Any] | None,
        template: SingleWaiterConfig | None,
        config: dict[str, Any] | None = None,
    ):
        """Initialize the waiter; fails if the service declares no such waiter."""
        if template is None:
            raise WaiterNotSupportedError(f'Waiter not found: {name}')

        config = dict(config or {})
        self.name = name
        self._client = client
        self._args = dict(args or {})
        self._template = template
        self._delay = config.get('delay', template.delay)
        self._max_attempts = config.get('max_attempts', template.max_attempts)
        if self._max_attempts < 1:
            raise InvalidConfigurationError('max_attempts', 'must be at least 1')
        if self._delay < 0:
            raise InvalidConfigurationError('delay', 'must not be negative')

        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._outcome: Future[Any] = Future()
        self._thread: threading.Thread | None = None
        self.attempts = 0
        self.last_response: Any = None

    @property
    def operation_name(self) -> str:
        """Return the name of the polled operation."""
        return self._template.operation

    def run(self) -> Any:
        """Poll on the calling thread and return the response that matched a success acceptor."""
        self._resolve()
        return self._outcome.result()

    def start(self) -> 'Waiter':
        """Start polling on a daemon thread and return the waiter."""
        self._thread = threading.Thread(
            target=self._resolve, name=f'waiter-{self.name}', daemon=True
        )
        self._thread.start()
        return self

    def wait(self, timeout: float | None = None) -> Any:
        """Block until the waiter reaches a terminal state, then return or raise its outcome."""
        return self._outcome.result(timeout)

    def cancel(self) -> bool:
        """Stop polling; returns False if the waiter already reached a terminal state."""
        with self._lock:
            if self._outcome.done():
                return False
            cancelled = self._outcome.cancel()
        if cancelled:
            logger.info('Waiter {} cancelled after {} attempts', self.name, self.attempts)
            self._stop.set()
        return cancelled

    def cancelled(self) -> bool:
        """Return True if the waiter was cancelled."""
        return self._outcome.cancelled()

    def done(self) -> bool:
        """Return True if the waiter reached a terminal state or was cancelled."""
        return self._outcome.done()

    def _resolve(self) -> None:
        try:
            outcome, error = self._poll(), None
        except CancelledError:
            return
        except Exception as exception:
            outcome, error = None, exception

        with self._lock:
            if self._outcome.cancelled():
                return
            if error is not None:
                self._outcome.set_exception(error)
            else:
                self._outcome.set_result(outcome)

    def _poll(self) -> Any:
        acceptors = self._template.acceptors
        last_matched = None

        while True:
            response, error = self._attempt()
            self.attempts += 1
            self.last_response = response
            state = None

            for acceptor in acceptors:
                if acceptor.matcher_func(response):
                    last_matched = acceptor
                    state = acceptor.state
                    break
            else:
                # An error no acceptor expects aborts the wait
                if error is not None:
                    raise error

            if state == SUCCESS:
                logger.info('Waiter {} succeeded after {} attempts', self.name, self.attempts)
                return response

            if state == FAILURE:
                raise WaiterFailureError(
                    self.name,
                    f'Waiter encountered a terminal failure state: {last_matched.explanation}',
                    last_response=response,
                    attempts=self.attempts,
                )

            if self.attempts >= self._max_attempts:
                reason = 'Max attempts exceeded'
                if last_matched is not None:
                    reason += f'. Previously accepted state: {last_matched.explanation}'
                logger.warning('Waiter {} timed out after {} attempts', self.name, self.attempts)
                raise WaiterTimeoutError(
                    self.name, reason, last_response=response, attempts=self.attempts
                )

            logger.info(
                'Waiter {} attempt {} of {}; retrying in {} seconds',
                self.name,
                self.attempts,
                self._max_attempts,
                self._delay,
            )
            if self._stop.wait(self._delay):
                raise CancelledError()

    def _attempt(self) -> tuple[Any, ServiceException | None]:
        if self._stop.is_set():
            raise CancelledError()
        try:
            return self._client.execute(self.operation_name, self._args), None
        except ServiceException as error:
            return error.as_waiter_response(), error

    def __repr__(self):
        """Return the string representation of the waiter."""
        state = 'done' if self.done() else 'pending'
        return f'<{self.__class__.__name__} {self.name} {state} attempts={self.attempts}>'
