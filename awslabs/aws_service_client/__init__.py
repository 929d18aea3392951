"""Generic AWS service client built on botocore service descriptions."""

from .client import Client, create_client
from .core.aws.futures import FutureResult
from .core.aws.interceptors import RequestInterceptor
from .core.aws.transport import HttpTransport, Transport
from .core.common.config import configure_logging
from .core.common.errors import (
    AwsClientError,
    InvalidConfigurationError,
    OperationNotFoundError,
    PaginationError,
    PaginationNotSupportedError,
    PreconditionError,
    ServiceException,
    UnsupportedSignatureVersionError,
    WaiterError,
    WaiterFailureError,
    WaiterNotSupportedError,
    WaiterTimeoutError,
)
from .core.common.models import Credentials, Result

__version__ = '0.1.0'

__all__ = [
    'AwsClientError',
    'Client',
    'Credentials',
    'FutureResult',
    'HttpTransport',
    'InvalidConfigurationError',
    'OperationNotFoundError',
    'PaginationError',
    'PaginationNotSupportedError',
    'PreconditionError',
    'RequestInterceptor',
    'Result',
    'ServiceException',
    'Transport',
    'UnsupportedSignatureVersionError',
    'WaiterError',
    'WaiterFailureError',
    'WaiterNotSupportedError',
    'WaiterTimeoutError',
    'configure_logging',
    'create_client',
]
