import dataclasses
from botocore.awsrequest import AWSRequest
from collections.abc import Callable
from typing import Any


RequestHook = Callable[[AWSRequest], None]


@dataclasses.dataclass(frozen=True)
class Command:
    """A single invocation of a service operation."""

    name: str
    parameters: dict[str, Any] = dataclasses.field(default_factory=dict)
    is_async: bool = False
    request_hooks: tuple[RequestHook, ...] = ()

    def __getitem__(self, key: str) -> Any:
        """Return the value of a parameter of the command."""
        return self.parameters[key]

    def __contains__(self, key: object) -> bool:
        """Return True if the command carries the given parameter."""
        return key in self.parameters
