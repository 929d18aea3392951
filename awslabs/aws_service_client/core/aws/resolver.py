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

import boto3
import botocore.credentials
from ..common.config import DEFAULT_REGION, DEFAULT_SIGNATURE_VERSION, VALIDATE_PARAMETERS
from ..common.errors import InvalidConfigurationError, PreconditionError, ServiceException
from ..common.models import Credentials
from .interceptors import RequestInterceptor
from .protocol import ErrorParser, RequestSerializer, ResultParser
from .regions import NON_REGIONALIZED_SERVICES, resolve_endpoint, resolve_region
from .services import ServiceDescription
from .signing import ANONYMOUS, SignatureProvider, Signer, default_signature_provider
from .transport import HttpTransport, Transport
from botocore.exceptions import BotoCoreError
from collections.abc import Callable, Mapping
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, NamedTuple
from urllib.parse import urlparse


# Region used to sign requests to services that only have a global endpoint
GLOBAL_SIGNING_REGION = 'us-east-1'


class ClientConfig(BaseModel):
    """The immutable configuration of a client, produced once at construction."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service: str
    region: str
    endpoint: str
    credentials: botocore.credentials.Credentials | None
    api: ServiceDescription
    signature_version: str
    validate_parameters: bool
    serializer: Callable[..., Any]
    result_parser: Callable[..., Any]
    error_parser: Callable[..., Any]
    signature_provider: Callable[..., Any]
    signer: Signer
    defaults: dict[str, Any]
    exception_class: type[ServiceException]
    interceptors: tuple[RequestInterceptor, ...]
    transport: Transport | None = None


class ClientFamily(NamedTuple):
    """Exception class and interceptors a service family contributes to its clients."""

    exception_class: type[ServiceException] = ServiceException
    interceptor_factories: tuple[Callable[[], RequestInterceptor], ...] = ()


FamilyLookup = Callable[[str], ClientFamily]


def _base_family(service: str) -> ClientFamily:
    return ClientFamily()


class ClientResolver:
    """Validates client construction options and fills in their defaults.

    Options are resolved in a fixed order so that each default can be derived
    from the options resolved before it. The transport is only constructed
    once every other option is valid.
    """

    ARGUMENTS = (
        'service',
        'api',
        'region',
        'credentials',
        'signature_version',
        'endpoint',
        'validate_parameters',
        'serializer',
        'result_parser',
        'error_parser',
        'signature_provider',
        'defaults',
        'exception_class',
        'interceptors',
    )

    # Options consumed while resolving others
    AUXILIARY_ARGUMENTS = ('api_version', 'profile', 'transport')

    def __init__(self, family_lookup: FamilyLookup = _base_family):
        """Initialize the resolver.

        Args:
            family_lookup: Returns the exception class and interceptors of a service family
        """
        self._family_lookup = family_lookup

    def resolve(self, options: Mapping[str, Any]) -> ClientConfig:
        """Return the client configuration for the given options.

        Raises ``InvalidConfigurationError`` naming the first missing or invalid option.
        """
        known = set(self.ARGUMENTS) | set(self.AUXILIARY_ARGUMENTS)
        for name in options:
            if name not in known:
                raise InvalidConfigurationError(name, 'unknown option')

        resolved: dict[str, Any] = {}
        for name in self.ARGUMENTS:
            handler = getattr(self, f'_resolve_{name}')
            resolved[name] = handler(options.get(name), resolved, options)
        resolved['signer'] = self._resolve_signer(resolved)

        try:
            config = ClientConfig(**resolved)
        except ValidationError as error:
            first = error.errors()[0]
            option = str(first['loc'][0]) if first['loc'] else 'options'
            raise InvalidConfigurationError(option, first['msg']) from error

        transport = self._resolve_transport(options.get('transport'))
        logger.info(
            'Resolved {} client for region {} at {}',
            config.service,
            config.region,
            config.endpoint,
        )
        return config.model_copy(update={'transport': transport})

    def _resolve_service(self, value, resolved, options) -> str:
        if not value or not isinstance(value, str):
            raise InvalidConfigurationError('service', 'a service name is required')
        return value

    def _resolve_api(self, value, resolved, options) -> ServiceDescription:
        service = resolved['service']
        if value is None:
            try:
                return ServiceDescription.load(service, options.get('api_version'))
            except BotoCoreError as error:
                raise InvalidConfigurationError('api', str(error)) from error
        if isinstance(value, ServiceDescription):
            return value
        if isinstance(value, Mapping):
            return ServiceDescription(dict(value), service_name=service)
        raise InvalidConfigurationError('api', 'expected a service description')

    def _resolve_region(self, value, resolved, options) -> str:
        region = resolve_region(resolved['service'], value or DEFAULT_REGION)
        if region is None and resolved['api'].endpoint_prefix in NON_REGIONALIZED_SERVICES:
            region = GLOBAL_SIGNING_REGION
        if not region or not isinstance(region, str):
            raise InvalidConfigurationError('region', 'a region is required')
        return region

    def _resolve_credentials(self, value, resolved, options):
        if options.get('signature_version') == ANONYMOUS:
            return None

        if value is None:
            try:
                value = boto3.Session(profile_name=options.get('profile')).get_credentials()
            except BotoCoreError as error:
                raise InvalidConfigurationError('profile', str(error)) from error
            if value is None:
                raise InvalidConfigurationError('credentials', 'no credentials could be found')
            return value

        if isinstance(value, botocore.credentials.Credentials):
            return value
        if isinstance(value, Credentials):
            return value.to_botocore()
        if isinstance(value, Mapping):
            try:
                return Credentials(**value).to_botocore()
            except ValidationError as error:
                raise InvalidConfigurationError('credentials', str(error)) from error
        raise InvalidConfigurationError('credentials', 'unsupported credentials source')

    def _resolve_signature_version(self, value, resolved, options) -> str:
        if value is None:
            return resolved['api'].signature_version or DEFAULT_SIGNATURE_VERSION
        if not isinstance(value, str):
            raise InvalidConfigurationError('signature_version', 'expected a string')
        return value

    def _resolve_endpoint(self, value, resolved, options) -> str:
        if value is None:
            return resolve_endpoint(resolved['api'].endpoint_prefix, resolved['region'])
        parsed = urlparse(value) if isinstance(value, str) else None
        if parsed is None or parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise InvalidConfigurationError('endpoint', 'expected an http or https URL')
        return value

    def _resolve_validate_parameters(self, value, resolved, options) -> bool:
        return VALIDATE_PARAMETERS if value is None else value

    def _resolve_serializer(self, value, resolved, options):
        if value is None:
            return RequestSerializer(
                resolved['api'], resolved['endpoint'], validate=resolved['validate_parameters']
            )
        return self._require_callable('serializer', value)

    def _resolve_result_parser(self, value, resolved, options):
        if value is None:
            return ResultParser(resolved['api'])
        return self._require_callable('result_parser', value)

    def _resolve_error_parser(self, value, resolved, options):
        if value is None:
            return ErrorParser(resolved['api'])
        return self._require_callable('error_parser', value)

    def _resolve_signature_provider(self, value, resolved, options) -> SignatureProvider:
        if value is None:
            return default_signature_provider
        return self._require_callable('signature_provider', value)

    def _resolve_signer(self, resolved) -> Signer:
        try:
            signer = resolved['signature_provider'](
                resolved['signature_version'], resolved['api'].signing_name, resolved['region']
            )
        except PreconditionError as error:
            raise InvalidConfigurationError('signature_version', str(error)) from error
        if not isinstance(signer, Signer):
            raise InvalidConfigurationError('signature_provider', 'expected a Signer')
        logger.debug('Resolved signer {}', signer)
        return signer

    def _resolve_defaults(self, value, resolved, options) -> dict[str, Any]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise InvalidConfigurationError('defaults', 'expected a mapping of parameters')
        return dict(value)

    def _resolve_exception_class(self, value, resolved, options) -> type[ServiceException]:
        if value is None:
            return self._family_lookup(resolved['service']).exception_class
        if not isinstance(value, type) or not issubclass(value, ServiceException):
            raise InvalidConfigurationError(
                'exception_class', 'expected a subclass of ServiceException'
            )
        return value

    def _resolve_interceptors(self, value, resolved, options) -> tuple[RequestInterceptor, ...]:
        family = self._family_lookup(resolved['service'])
        interceptors = [factory() for factory in family.interceptor_factories]
        if value is None:
            return tuple(interceptors)
        for interceptor in value:
            if not isinstance(interceptor, RequestInterceptor):
                raise InvalidConfigurationError(
                    'interceptors', f'{interceptor!r} is not a RequestInterceptor'
                )
        # Family interceptors run before the caller's own
        return tuple(interceptors) + tuple(value)

    def _resolve_transport(self, value) -> Transport:
        if value is None:
            return HttpTransport()
        if not isinstance(value, Transport):
            raise InvalidConfigurationError('transport', 'expected a Transport')
        return value

    @staticmethod
    def _require_callable(name: str, value: Any):
        if not callable(value):
            raise InvalidConfigurationError(name, 'expected a callable')
        return value
