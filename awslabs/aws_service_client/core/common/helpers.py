import base64
import json
import time
from botocore.response import StreamingBody
from contextlib import contextmanager
from datetime import datetime
from loguru import logger
from typing import Any


@contextmanager
def operation_timer(service: str, operation: str):
    """Context manager for timing operation executions.

    :param service: The service name.
    :param operation: The operation name.
    """
    start = time.perf_counter()
    logger.info('Starting executing operation {}.{}', service, operation)
    try:
        yield
    finally:
        elapsed_time = time.perf_counter() - start
        logger.info('Operation {}.{} executed in {} seconds', service, operation, elapsed_time)


class Boto3Encoder(json.JSONEncoder):
    """Custom JSON encoder for parsed service responses."""

    def default(self, o):
        """Return a JSON-serializable version of the object."""
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, StreamingBody):
            return o.read().decode('utf-8')
        if isinstance(o, (bytes, bytearray)):
            return base64.b64encode(o).decode('ascii')

        return super().default(o)


def as_json(response: dict[str, Any]) -> str:
    """Convert a parsed response dictionary to a JSON string."""
    return json.dumps(response, cls=Boto3Encoder)
