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

import abc
import threading
from ..common.command import RequestHook
from ..common.config import CONNECT_TIMEOUT, MAX_POOL_CONNECTIONS
from botocore.awsrequest import AWSRequest, AWSResponse
from botocore.httpsession import URLLib3Session
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from loguru import logger


class Transport(abc.ABC):
    """Transmits requests and signals their completion.

    A transport owns socket I/O, connection reuse and any low-level retry
    policy. It must run every ``before_send`` hook, in order, immediately
    before transmitting the request.
    """

    @abc.abstractmethod
    def send(
        self,
        request: AWSRequest,
        before_send: Sequence[RequestHook] = (),
        asynchronous: bool = False,
    ) -> 'Future[AWSResponse]':
        """Transmit the request.

        The returned future resolves to the received response, whatever its
        status code, or fails with the transport-level error. Synchronous
        sends return an already completed future. Cancelling the future
        attempts to cancel the in-flight request.
        """

    def close(self) -> None:
        """Release the resources held by the transport."""


class HttpTransport(Transport):
    """Transport sending requests over HTTP with botocore's urllib3 session.

    Asynchronous sends run on a thread pool created on first use.
    """

    def __init__(
        self,
        http_session: URLLib3Session | None = None,
        max_workers: int = MAX_POOL_CONNECTIONS,
        timeout: int = CONNECT_TIMEOUT,
    ):
        """Initialize the transport with an optional preconfigured HTTP session."""
        self._http_session = http_session or URLLib3Session(
            timeout=timeout, max_pool_connections=max_workers
        )
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    def send(
        self,
        request: AWSRequest,
        before_send: Sequence[RequestHook] = (),
        asynchronous: bool = False,
    ) -> 'Future[AWSResponse]':
        """Transmit the request inline, or on the thread pool when asynchronous."""
        if asynchronous:
            return self._get_executor().submit(self._transmit, request, before_send)

        future: Future[AWSResponse] = Future()
        future.set_running_or_notify_cancel()
        try:
            future.set_result(self._transmit(request, before_send))
        except Exception as error:
            future.set_exception(error)
        return future

    def close(self) -> None:
        """Shut down the thread pool and close pooled connections."""
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None
        self._http_session.close()

    def _transmit(self, request: AWSRequest, before_send: Sequence[RequestHook]) -> AWSResponse:
        for hook in before_send:
            hook(request)
        logger.debug('Sending {} request to {}', request.method, request.url)
        response = self._http_session.send(request.prepare())
        if not request.stream_output:
            # Buffer the body on the sending thread
            response.content
        return response

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix='aws-service-client'
                )
            return self._executor
