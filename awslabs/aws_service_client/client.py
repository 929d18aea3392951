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

import dataclasses
from .core.aws.driver import RequestPipeline
from .core.aws.futures import FutureResult
from .core.aws.pagination import ResultPaginator
from .core.aws.resolver import ClientConfig, ClientResolver
from .core.aws.services import ServiceDescription
from .core.aws.waiter import Waiter
from .core.common.command import Command, RequestHook
from .core.common.errors import OperationNotFoundError
from .core.common.helpers import operation_timer
from .core.common.models import Result
from .services.families import get_client_family
from botocore.credentials import Credentials
from collections.abc import Iterable, Iterator
from typing import Any


class Client:
    """A client for a single AWS service.

    Every operation declared by the service description can be executed by
    name, either blocking (``execute``) or through a future
    (``execute_async``), and paginated or waited on.

    Operations are also exposed as Pythonic methods::

        client = create_client('dynamodb', region='us-east-1')
        client.get_item(TableName='things', Key={'id': {'S': '1'}})
        client.get_item({'TableName': 'things', 'Key': {...}}, is_async=True).wait()
    """

    def __init__(self, resolver: ClientResolver | None = None, **options):
        """Initialize the client.

        Args:
            resolver: Resolver validating the options; defaults to one aware of the client families
            **options: Construction options, see ``ClientResolver.ARGUMENTS``
        """
        resolver = resolver or ClientResolver(family_lookup=get_client_family)
        self._config = resolver.resolve(options)
        self._pipeline = RequestPipeline(self, self._config)

    @property
    def config(self) -> ClientConfig:
        """Return the resolved client configuration."""
        return self._config

    @property
    def api(self) -> ServiceDescription:
        """Return the service description."""
        return self._config.api

    @property
    def credentials(self) -> Credentials | None:
        """Return the credentials requests are signed with."""
        return self._config.credentials

    @property
    def region(self) -> str:
        """Return the region of the client."""
        return self._config.region

    @property
    def endpoint(self) -> str:
        """Return the endpoint requests are sent to."""
        return self._config.endpoint

    def get_command(
        self,
        name: str,
        parameters: dict[str, Any] | None = None,
        is_async: bool = False,
        request_hooks: Iterable[RequestHook] = (),
    ) -> Command:
        """Create a command for the operation without executing it."""
        return self._pipeline.get_command(name, parameters, is_async, request_hooks)

    def execute(
        self,
        name: str | Command,
        parameters: dict[str, Any] | None = None,
        request_hooks: Iterable[RequestHook] = (),
    ) -> Result:
        """Execute the operation and return its result, blocking until it completes.

        Raises the client's ``ServiceException`` class if the operation fails.
        """
        command = self._as_command(name, parameters, False, request_hooks)
        with operation_timer(self._config.service, command.name):
            transaction = self._pipeline.execute(command)
        if transaction.exception is not None:
            raise transaction.exception
        return transaction.result

    def execute_async(
        self,
        name: str | Command,
        parameters: dict[str, Any] | None = None,
        request_hooks: Iterable[RequestHook] = (),
    ) -> FutureResult:
        """Start executing the operation and return a future for its result."""
        command = self._as_command(name, parameters, True, request_hooks)
        return self._pipeline.execute_async(command)

    def get_paginator(
        self,
        name: str,
        parameters: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
    ) -> ResultPaginator:
        """Return a paginator over the pages of the operation's results."""
        operation_name = self._config.api.resolve_operation_name(name)
        template = self._config.api.pagination_template(operation_name)
        return ResultPaginator(self, operation_name, parameters, template, config)

    def paginate(
        self,
        name: str,
        parameters: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
    ) -> Iterator[Result]:
        """Return a lazy iterator over the pages of the operation's results."""
        return iter(self.get_paginator(name, parameters, config))

    def get_iterator(
        self,
        name: str,
        parameters: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
    ) -> Iterator[Any]:
        """Return a lazy iterator over the items of the operation's first result key."""
        paginator = self.get_paginator(name, parameters, config)
        return paginator.search(paginator.result_keys[0])

    def get_waiter(
        self,
        name: str,
        parameters: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
    ) -> Waiter:
        """Return a waiter that has not started polling yet."""
        template = self._config.api.wait_template(name)
        if template is None:
            name = name[:1].upper() + name[1:]
            template = self._config.api.wait_template(name)
        return Waiter(self, name, parameters, template, config)

    def wait_until(
        self,
        name: str,
        parameters: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
        is_async: bool = False,
    ) -> Any:
        """Poll until the waiter reaches a terminal state.

        Blocks and returns the last response, or returns the started waiter when
        ``is_async`` is True.
        """
        waiter = self.get_waiter(name, parameters, config)
        if is_async:
            return waiter.start()
        return waiter.run()

    def close(self) -> None:
        """Release the resources held by the transport."""
        self._config.transport.close()

    def __enter__(self):
        """Return the client."""
        return self

    def __exit__(self, *exc_info):
        """Close the client."""
        self.close()

    def __getattr__(self, name: str):
        """Return a method executing the operation with the given Pythonic name."""
        if name.startswith('_'):
            raise AttributeError(name)

        api = self._config.api
        operation_name = api.python_operation_names.get(name)
        if operation_name is None:
            try:
                operation_name = api.resolve_operation_name(name)
            except OperationNotFoundError:
                raise AttributeError(
                    f"'{self.__class__.__name__}' object has no attribute '{name}'"
                ) from None

        def operation(parameters: dict[str, Any] | None = None, is_async: bool = False, **kwargs):
            merged = {**(parameters or {}), **kwargs}
            if is_async:
                return self.execute_async(operation_name, merged)
            return self.execute(operation_name, merged)

        operation.__name__ = name
        operation.__doc__ = f'Execute the {operation_name} operation.'
        return operation

    def __repr__(self):
        """Return the string representation of the client."""
        return f'{self.__class__.__name__}({self._config.service}, {self._config.region})'

    def _as_command(self, name, parameters, is_async, request_hooks) -> Command:
        if isinstance(name, Command):
            return dataclasses.replace(
                name,
                is_async=is_async,
                request_hooks=name.request_hooks + tuple(request_hooks),
            )
        return self.get_command(name, parameters, is_async, request_hooks)


def create_client(service: str, **options) -> Client:
    """Create a client for the service; options are those accepted by ``Client``."""
    return Client(service=service, **options)
