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

from ..common.command import Command, RequestHook
from ..common.errors import HTTPStatusError, ServiceException
from ..common.transaction import Transaction
from .futures import FutureResult
from .resolver import ClientConfig
from botocore.awsrequest import AWSResponse
from collections.abc import Iterable
from concurrent.futures import Future
from functools import partial
from loguru import logger
from typing import Any


class ResponseTranslator:
    """Resolves a transaction into a parsed result or a single typed exception."""

    def __init__(self, config: ClientConfig):
        """Initialize the translator with the client's parser strategies."""
        self._service_name = config.service
        self._result_parser = config.result_parser
        self._error_parser = config.error_parser
        self._exception_class = config.exception_class

    def process(self, transaction: Transaction) -> None:
        """Populate the transaction's result, or replace its failure with a typed exception."""
        if transaction.exception is not None:
            transaction.exception = self.create_exception(transaction)
            return

        # Results injected by an earlier stage are kept as-is
        if transaction.result is not None:
            return

        if transaction.response is None:
            raise RuntimeError('No response was received.')

        transaction.result = self._result_parser(transaction.command, transaction.response)

    def create_exception(self, transaction: Transaction) -> ServiceException:
        """Translate the failure stored on the transaction into a typed exception.

        Exceptions that are already typed are returned unchanged.
        """
        error = transaction.exception
        if isinstance(error, ServiceException):
            return error

        url = transaction.request.url if transaction.request is not None else None
        transaction.context['url'] = url
        transaction.context['aws_error'] = {}
        service_error = str(error)

        if isinstance(error, HTTPStatusError) and error.response is not None:
            transaction.response = error.response
            aws_error = self._error_parser(error.response)
            transaction.context['aws_error'] = aws_error
            # Only use the service error code if the parser could parse the response
            if aws_error.get('type'):
                service_error = (
                    f'{aws_error.get("code")} ({aws_error.get("type")} error): '
                    f'{aws_error.get("message", "")}'
                ).strip()

        logger.warning(
            'Operation {}.{} failed: {}',
            self._service_name,
            transaction.command.name,
            service_error,
        )
        return self._exception_class(
            f'Error executing {self._service_name}::{transaction.command.name} '
            f'on "{url}"; {service_error}',
            transaction,
            error,
        )

    def wrap_uncaught(self, transaction: Transaction, error: Exception) -> ServiceException:
        """Wrap an unexpected failure raised while executing the transaction."""
        if isinstance(error, ServiceException):
            return error

        logger.exception(
            'Uncaught exception while executing {}.{}',
            self._service_name,
            transaction.command.name,
        )
        transaction.context.setdefault('aws_error', {})
        return self._exception_class(
            f'Uncaught exception while executing {self._service_name}::'
            f'{transaction.command.name} - {error}',
            transaction,
            error,
        )


class RequestPipeline:
    """Builds, signs and transmits the request of each command.

    The pipeline is shared by every call of a client and holds no per-call
    state: each call gets its own transaction and its own hook list.
    """

    def __init__(self, client: Any, config: ClientConfig):
        """Initialize the pipeline.

        Args:
            client: The client the transactions belong to
            config: The resolved client configuration
        """
        self._client = client
        self._config = config
        # Credentials are read when the hook runs, not when it is created
        self._sign = config.signer.create_hook(lambda: self._config.credentials)
        self._translator = ResponseTranslator(config)

    @property
    def translator(self) -> ResponseTranslator:
        """Return the response translator."""
        return self._translator

    def get_command(
        self,
        name: str,
        parameters: dict[str, Any] | None = None,
        is_async: bool = False,
        request_hooks: Iterable[RequestHook] = (),
    ) -> Command:
        """Build a command for the operation, failing fast if the operation is unknown."""
        operation_name = self._config.api.resolve_operation_name(name)

        # Explicit parameters win over the client defaults
        merged = {**self._config.defaults, **(parameters or {})}
        for interceptor in self._config.interceptors:
            merged = interceptor.prepare_parameters(self._client, operation_name, merged)

        return Command(
            name=operation_name,
            parameters=merged,
            is_async=is_async,
            request_hooks=tuple(request_hooks),
        )

    def execute(self, command: Command) -> Transaction:
        """Execute the command and block until its transaction is resolved."""
        transaction, outcome, _ = self._start(command)
        # Resolution failures are recorded on the transaction
        outcome.exception()
        return transaction

    def execute_async(self, command: Command) -> FutureResult:
        """Start executing the command and return a handle to its outcome."""
        transaction, outcome, cancel = self._start(command)
        return FutureResult(transaction, outcome, cancel)

    def _start(self, command: Command):
        transaction = Transaction(client=self._client, command=command)
        outcome: Future[Any] = Future()

        try:
            transaction.request = self._config.serializer(transaction)
            transaction.context['url'] = transaction.request.url
            sent = self._config.transport.send(
                transaction.request,
                self._build_hooks(transaction),
                asynchronous=command.is_async,
            )
        except Exception as error:
            self._fail(transaction, outcome, error)
            return transaction, outcome, _not_cancellable

        sent.add_done_callback(partial(self._on_complete, transaction, outcome))
        return transaction, outcome, sent.cancel

    def _build_hooks(self, transaction: Transaction) -> list[RequestHook]:
        hooks: list[RequestHook] = [
            partial(interceptor.before_send, transaction)
            for interceptor in self._config.interceptors
        ]
        hooks.extend(transaction.command.request_hooks)
        # Signing always runs last, right before transmission
        hooks.append(self._sign)
        return hooks

    def _on_complete(
        self, transaction: Transaction, outcome: Future, sent: 'Future[AWSResponse]'
    ) -> None:
        if sent.cancelled():
            logger.info(
                'Operation {}.{} was cancelled', self._config.service, transaction.command.name
            )
            transaction.context['cancelled'] = True
            outcome.cancel()
            return

        error = sent.exception()
        if error is not None:
            transaction.exception = error
        else:
            response = sent.result()
            transaction.response = response
            if response is not None and response.status_code >= 300:
                transaction.exception = HTTPStatusError(transaction.request, response)

        try:
            self._translator.process(transaction)
        except Exception as error:
            self._fail(transaction, outcome, error)
            return

        if transaction.exception is not None:
            outcome.set_exception(transaction.exception)
        else:
            outcome.set_result(transaction.result)

    def _fail(self, transaction: Transaction, outcome: Future, error: Exception) -> None:
        transaction.exception = self._translator.wrap_uncaught(transaction, error)
        outcome.set_exception(transaction.exception)


def _not_cancellable() -> bool:
    return False
