import dataclasses
from .command import Command
from botocore.awsrequest import AWSRequest, AWSResponse
from typing import Any


@dataclasses.dataclass
class Transaction:
    """Binds everything that happens while executing one command.

    A transaction is created at the start of an execution and mutated in place
    as the request is built, transmitted and its outcome translated.
    """

    client: Any
    command: Command
    request: AWSRequest | None = None
    response: AWSResponse | None = None
    result: Any = None
    exception: BaseException | None = None
    context: dict[str, Any] = dataclasses.field(default_factory=dict)

    @property
    def operation_name(self) -> str:
        """Return the operation name of the transaction's command."""
        return self.command.name
