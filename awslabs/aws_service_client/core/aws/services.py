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
from ..common.errors import OperationNotFoundError
from botocore import loaders, xform_name
from botocore.exceptions import DataNotFoundError
from botocore.model import OperationModel, ServiceModel
from botocore.paginate import PaginatorModel
from botocore.waiter import SingleWaiterConfig, WaiterModel
from functools import cached_property
from loguru import logger
from typing import Any


loader = loaders.create_loader()


def _as_tuple(value: Any) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


@dataclasses.dataclass(frozen=True)
class PaginationTemplate:
    """Pagination settings of a single operation.

    Token and result key fields are normalized to tuples since service
    descriptions declare them either as a single value or as a list.
    """

    input_token: tuple[str, ...]
    output_token: tuple[str, ...]
    result_key: tuple[str, ...]
    limit_key: str | None = None
    more_results: str | None = None
    non_aggregate_keys: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> 'PaginationTemplate':
        """Build a template from a botocore paginator document entry."""
        return cls(
            input_token=_as_tuple(config.get('input_token')),
            output_token=_as_tuple(config.get('output_token')),
            result_key=_as_tuple(config.get('result_key')),
            limit_key=config.get('limit_key'),
            more_results=config.get('more_results'),
            non_aggregate_keys=_as_tuple(config.get('non_aggregate_keys')),
        )

    @property
    def has_tokens(self) -> bool:
        """Return True if the operation declares both input and output tokens."""
        return bool(self.input_token and self.output_token)


class ServiceDescription:
    """Read-only description of a service: operations, paginators and waiters."""

    def __init__(
        self,
        service_model: dict[str, Any] | ServiceModel,
        paginators: dict[str, Any] | None = None,
        waiters: dict[str, Any] | None = None,
        service_name: str | None = None,
    ):
        """Initialize the description from botocore-formatted documents."""
        if isinstance(service_model, ServiceModel):
            self._model = service_model
        else:
            self._model = ServiceModel(service_model, service_name=service_name)
        self._paginators = PaginatorModel(paginators) if paginators else None
        self._waiters = WaiterModel(waiters) if waiters else None

    @classmethod
    def load(cls, service_name: str, api_version: str | None = None) -> 'ServiceDescription':
        """Load the description of a service from the models shipped with botocore."""
        logger.debug('Loading service description for {}', service_name)
        service_model = loader.load_service_model(service_name, 'service-2', api_version)
        return cls(
            service_model,
            paginators=_load_optional(service_name, 'paginators-1', api_version),
            waiters=_load_optional(service_name, 'waiters-2', api_version),
            service_name=service_name,
        )

    @property
    def model(self) -> ServiceModel:
        """Return the underlying botocore service model."""
        return self._model

    @property
    def service_name(self) -> str:
        """Return the service name."""
        return self._model.service_name

    @property
    def service_full_name(self) -> str:
        """Return the human readable service name."""
        return self._model.metadata.get('serviceFullName', self.service_name)

    @property
    def signing_name(self) -> str:
        """Return the name used when signing requests."""
        return self._model.signing_name

    @property
    def signature_version(self) -> str | None:
        """Return the signature version declared by the service, if any."""
        return self._model.signature_version

    @property
    def protocol(self) -> str:
        """Return the wire protocol of the service."""
        return self._model.resolved_protocol

    @property
    def endpoint_prefix(self) -> str:
        """Return the endpoint prefix of the service."""
        return self._model.endpoint_prefix

    @cached_property
    def python_operation_names(self) -> dict[str, str]:
        """Return a mapping from Pythonic operation names to operation names."""
        return {xform_name(name): name for name in self._model.operation_names}

    def has_operation(self, name: str) -> bool:
        """Return True if the service declares the operation."""
        return name in self._model.operation_names

    def resolve_operation_name(self, name: str) -> str:
        """Return the declared operation name for the given name.

        The name is looked up as-is first, then once more with its first letter
        upper-cased.
        """
        if self.has_operation(name):
            return name
        normalized = name[:1].upper() + name[1:]
        if self.has_operation(normalized):
            return normalized
        raise OperationNotFoundError(normalized, self.service_name)

    def operation_model(self, name: str) -> OperationModel:
        """Return the botocore operation model of the operation."""
        return self._model.operation_model(self.resolve_operation_name(name))

    def pagination_template(self, name: str) -> PaginationTemplate | None:
        """Return the pagination template of the operation, or None."""
        if self._paginators is None:
            return None
        try:
            config = self._paginators.get_paginator(name)
        except ValueError:
            return None
        return PaginationTemplate.from_config(config)

    def wait_template(self, name: str) -> SingleWaiterConfig | None:
        """Return the waiter configuration with the given name, or None."""
        if self._waiters is None:
            return None
        try:
            return self._waiters.get_waiter(name)
        except ValueError:
            return None

    @property
    def waiter_names(self) -> list[str]:
        """Return the names of the declared waiters."""
        return [] if self._waiters is None else self._waiters.waiter_names

    def __repr__(self):
        """Return the string representation of the description."""
        return f'{self.__class__.__name__}({self.service_name})'


def _load_optional(service_name: str, type_name: str, api_version: str | None):
    try:
        return loader.load_service_model(service_name, type_name, api_version)
    except DataNotFoundError:
        logger.debug('No {} document for service {}', type_name, service_name)
        return None
