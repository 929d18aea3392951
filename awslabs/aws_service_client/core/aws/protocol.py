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

"""Protocol strategies: request serialization, result parsing and error parsing.

Each strategy is built from a service description and is opaque to the
pipeline, which only relies on their call signatures.
"""

import botocore.parsers
import botocore.serialize
from ..common.command import Command
from ..common.models import Result
from ..common.transaction import Transaction
from .services import ServiceDescription
from botocore.awsrequest import (
    AWSRequest,
    AWSResponse,
    create_request_object,
    prepare_request_dict,
)
from botocore.endpoint import convert_to_response_dict
from botocore.model import OperationModel
from typing import Any


USER_AGENT = 'awslabs-aws-service-client'


class RequestSerializer:
    """Serializes a transaction's command into a transport request."""

    def __init__(
        self,
        api: ServiceDescription,
        endpoint: str,
        validate: bool = True,
        user_agent: str = USER_AGENT,
    ):
        """Initialize the serializer for the service protocol and endpoint."""
        self._api = api
        self._endpoint = endpoint
        self._user_agent = user_agent
        self._serializer = botocore.serialize.create_serializer(
            api.protocol, include_validation=validate
        )

    @property
    def endpoint(self) -> str:
        """Return the endpoint requests are addressed to."""
        return self._endpoint

    def __call__(self, transaction: Transaction) -> AWSRequest:
        """Return the request for the transaction's command."""
        command = transaction.command
        return self.build_request(self._api.operation_model(command.name), command.parameters)

    def build_request(
        self, operation_model: OperationModel, parameters: dict[str, Any]
    ) -> AWSRequest:
        """Serialize the parameters of an operation into an unsigned request."""
        request_dict = self._serializer.serialize_to_request(parameters, operation_model)
        prepare_request_dict(
            request_dict,
            endpoint_url=self._endpoint,
            context={'operation_name': operation_model.name},
            user_agent=self._user_agent,
        )
        request = create_request_object(request_dict)
        request.stream_output = (
            operation_model.has_streaming_output or operation_model.has_event_stream_output
        )
        return request


class ResultParser:
    """Parses a successful response into a result."""

    def __init__(self, api: ServiceDescription):
        """Initialize the parser for the service protocol."""
        self._api = api
        self._parser = botocore.parsers.create_parser(api.protocol)

    def __call__(self, command: Command, response: AWSResponse) -> Result:
        """Return the result parsed from the response to the command."""
        operation_model = self._api.operation_model(command.name)
        response_dict = convert_to_response_dict(response, operation_model)
        parsed = self._parser.parse(response_dict, operation_model.output_shape)
        return Result(parsed)


class ErrorParser:
    """Extracts normalized error fields from an error response.

    Returns ``code``, ``type``, ``message`` and ``request_id`` when the body
    carries a structured service error, and an empty dictionary otherwise.
    """

    def __init__(self, api: ServiceDescription):
        """Initialize the parser for the service protocol."""
        self._api = api
        self._parser = botocore.parsers.create_parser(api.protocol)

    def __call__(self, response: AWSResponse) -> dict[str, Any]:
        """Return the normalized error fields of the response."""
        response_dict = {
            'headers': response.headers,
            'status_code': response.status_code,
            'body': response.content,
            'context': {},
        }
        try:
            parsed = self._parser.parse(response_dict, None)
        except (botocore.parsers.ResponseParserError, AttributeError, TypeError):
            return {}
        if not isinstance(parsed, dict):
            return {}

        error = parsed.get('Error') or {}
        code = error.get('Code')
        # Parsers fall back to the status code when the body has no error code
        if not code or code == str(response.status_code):
            return {}

        return {
            'code': code,
            'type': 'server' if response.status_code >= 500 else 'client',
            'message': error.get('Message', ''),
            'request_id': parsed.get('ResponseMetadata', {}).get('RequestId'),
        }
