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

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from .transaction import Transaction


REQUEST_ID_HEADERS = ('x-amzn-requestid', 'x-amz-request-id')


class AwsClientError(Exception):
    """Base class for every error raised by the service client."""


class PreconditionError(AwsClientError, ValueError):
    """A caller-facing precondition was violated.

    These errors are raised before any network activity happens and are never retried.
    """


class OperationNotFoundError(PreconditionError):
    """The operation does not exist in the service description."""

    def __init__(self, operation_name: str, service_name: str | None = None):
        """Initialize the error with the operation that could not be found."""
        self.operation_name = operation_name
        self.service_name = service_name
        super().__init__(f'Operation not found: {operation_name}')


class InvalidConfigurationError(PreconditionError):
    """A client construction option is missing or malformed."""

    def __init__(self, option: str, reason: str):
        """Initialize the error with the offending option name."""
        self.option = option
        self.reason = reason
        super().__init__(f"Invalid configuration option '{option}': {reason}")


class PaginationNotSupportedError(PreconditionError):
    """The operation cannot be paginated."""


class WaiterNotSupportedError(PreconditionError):
    """The service description does not declare the requested waiter."""


class UnsupportedSignatureVersionError(PreconditionError):
    """No signer exists for the requested signature version."""

    def __init__(self, signature_version: str):
        """Initialize the error with the unsupported signature version."""
        self.signature_version = signature_version
        super().__init__(f'Unsupported signature version: {signature_version}')


class PaginationError(AwsClientError):
    """A paginator received the same continuation token twice."""


class HTTPStatusError(AwsClientError):
    """The service answered with a non-successful HTTP status code."""

    def __init__(self, request: Any, response: Any):
        """Initialize the error from the request and the received response."""
        self.request = request
        self.response = response
        kind = 'Server' if response.status_code >= 500 else 'Client'
        super().__init__(
            f'{kind} error response [url] {request.url} [status code] {response.status_code}'
        )


class ServiceException(AwsClientError):
    """The typed exception raised for any failed operation of a client.

    Every failure observed by callers (service errors, transport failures and
    unexpected exceptions) is normalized into this exception, or into the
    subclass registered for the client family.
    """

    def __init__(
        self,
        message: str,
        transaction: Transaction,
        previous: BaseException | None = None,
    ):
        """Initialize the exception with the failed transaction and its cause."""
        super().__init__(message)
        self.message = message
        self.transaction = transaction
        self.previous = previous
        self.__cause__ = previous

    @property
    def command(self):
        """Return the command that failed."""
        return self.transaction.command

    @property
    def response(self):
        """Return the HTTP response received for the command, if any."""
        return self.transaction.response

    @property
    def aws_error(self) -> dict[str, Any]:
        """Return the normalized error fields extracted from the response."""
        return self.transaction.context.get('aws_error') or {}

    @property
    def error_code(self) -> str | None:
        """Return the service error code, e.g. ``ResourceNotFoundException``."""
        return self.aws_error.get('code')

    @property
    def error_type(self) -> str | None:
        """Return the error type, ``client`` or ``server``."""
        return self.aws_error.get('type')

    @property
    def error_message(self) -> str | None:
        """Return the error message reported by the service."""
        return self.aws_error.get('message')

    @property
    def request_id(self) -> str | None:
        """Return the request identifier reported by the service."""
        request_id = self.aws_error.get('request_id')
        if request_id:
            return request_id
        response = self.response
        if response is None:
            return None
        for header in REQUEST_ID_HEADERS:
            if header in response.headers:
                return response.headers[header]
        return None

    @property
    def status_code(self) -> int | None:
        """Return the HTTP status code of the response, if any."""
        response = self.response
        return None if response is None else response.status_code

    @property
    def url(self) -> str | None:
        """Return the URL of the failed request, if it was built."""
        return self.transaction.context.get('url')

    def as_waiter_response(self) -> dict[str, Any]:
        """Return the error in the parsed-response shape that waiter acceptors match."""
        return {
            'Error': {'Code': self.error_code, 'Message': self.error_message},
            'ResponseMetadata': {'HTTPStatusCode': self.status_code},
        }


class WaiterError(AwsClientError):
    """A waiter reached a terminal failure state."""

    kind = 'failure'

    def __init__(
        self,
        name: str,
        reason: str,
        last_response: Any = None,
        attempts: int = 0,
    ):
        """Initialize the error with the waiter name and why it stopped."""
        self.name = name
        self.reason = reason
        self.last_response = last_response
        self.attempts = attempts
        super().__init__(f'Waiter {name} failed: {reason}')


class WaiterFailureError(WaiterError):
    """A failure acceptor matched the polled outcome."""

    kind = 'failure'


class WaiterTimeoutError(WaiterError):
    """The waiter exhausted its attempts without reaching a terminal state."""

    kind = 'timeout'
