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

from ..common.transaction import Transaction
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any


class FutureResult:
    """Handle to a transaction that is resolved asynchronously.

    The handle resolves exactly once, either to the transaction's result or to
    its translated error. ``wait`` is the only blocking primitive.
    """

    def __init__(
        self,
        transaction: Transaction,
        outcome: 'Future[Any]',
        cancel: Callable[[], bool],
    ):
        """Initialize the handle.

        Args:
            transaction: The transaction being resolved
            outcome: Future resolved with the result or the translated error
            cancel: Function attempting to cancel the in-flight transport operation
        """
        self._transaction = transaction
        self._outcome = outcome
        self._cancel = cancel

    @property
    def transaction(self) -> Transaction:
        """Return the underlying transaction."""
        return self._transaction

    def wait(self, timeout: float | None = None) -> Any:
        """Block until the transaction resolves, then return its result or raise its error.

        Raises ``concurrent.futures.CancelledError`` if the call was cancelled and
        ``TimeoutError`` if it did not resolve within ``timeout`` seconds.
        """
        return self._outcome.result(timeout)

    def cancel(self) -> bool:
        """Attempt to cancel the in-flight operation.

        Cancellation is best-effort: a request that already completed, or is
        being transmitted, cannot be stopped and this returns False.
        """
        if self._outcome.done():
            return False
        return self._cancel()

    def cancelled(self) -> bool:
        """Return True if the operation was cancelled."""
        return self._outcome.cancelled()

    def done(self) -> bool:
        """Return True if the transaction has resolved or was cancelled."""
        return self._outcome.done()

    def add_done_callback(self, fn: Callable[['FutureResult'], Any]) -> None:
        """Call ``fn`` with this handle once the transaction resolves."""
        self._outcome.add_done_callback(lambda _: fn(self))

    def __repr__(self):
        """Return the string representation of the handle."""
        state = 'done' if self.done() else 'pending'
        return f'<{self.__class__.__name__} {self._transaction.operation_name} {state}>'
