"""Common utilities and models for the AWS service client."""

from .command import Command
from .errors import (
    AwsClientError,
    OperationNotFoundError,
    PreconditionError,
    ServiceException,
    WaiterError,
)
from .helpers import as_json, operation_timer
from .models import Credentials, Result
from .transaction import Transaction

__all__ = [
    'Command',
    'AwsClientError',
    'OperationNotFoundError',
    'PreconditionError',
    'ServiceException',
    'WaiterError',
    'as_json',
    'operation_timer',
    'Credentials',
    'Result',
    'Transaction',
]
