from ..common.transaction import Transaction
from botocore.awsrequest import AWSRequest
from typing import Any


class RequestInterceptor:
    """Extension point composed into a client at construction.

    Service-specific setup code supplies an ordered list of interceptors.
    Both hooks are optional; the default implementations leave the call
    untouched.
    """

    @property
    def name(self):
        """Return the name of the interceptor class."""
        return self.__class__.__name__

    def prepare_parameters(
        self, client: Any, operation_name: str, parameters: dict[str, Any]
    ) -> dict[str, Any]:
        """Return the parameters a command for the operation will be built with."""
        return parameters

    def before_send(self, transaction: Transaction, request: AWSRequest) -> None:
        """Inspect or modify the serialized request before it is signed."""

    def __str__(self):
        """Return the string representation of the interceptor."""
        return f'{self.name}'
