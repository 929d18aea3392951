"""Request execution: configuration, signing, transport, pagination and waiting."""

from .driver import RequestPipeline, ResponseTranslator
from .futures import FutureResult
from .interceptors import RequestInterceptor
from .pagination import ResultPaginator
from .resolver import ClientConfig, ClientFamily, ClientResolver
from .services import PaginationTemplate, ServiceDescription
from .signing import Signer, default_signature_provider
from .transport import HttpTransport, Transport
from .waiter import Waiter

__all__ = [
    'ClientConfig',
    'ClientFamily',
    'ClientResolver',
    'FutureResult',
    'HttpTransport',
    'PaginationTemplate',
    'RequestInterceptor',
    'RequestPipeline',
    'ResponseTranslator',
    'ResultPaginator',
    'ServiceDescription',
    'Signer',
    'Transport',
    'Waiter',
    'default_signature_provider',
]
