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

from ...core.aws.interceptors import RequestInterceptor
from ...core.aws.protocol import RequestSerializer
from ...core.aws.regions import resolve_endpoint
from ...core.common.errors import InvalidConfigurationError
from botocore.auth import SigV4QueryAuth
from botocore.awsrequest import AWSRequest
from loguru import logger
from typing import Any


COPY_SNAPSHOT = 'CopySnapshot'
PRESIGNED_URL_EXPIRES = 3600


class CopySnapshotInterceptor(RequestInterceptor):
    """Adds the presigned URL EC2 requires to copy a snapshot across regions.

    The URL is a SigV4 query-signed ``CopySnapshot`` call against the source
    region's endpoint, with ``DestinationRegion`` set to the client region.
    Calls that already carry a ``PresignedUrl``, or no ``SourceRegion``, are
    left untouched.
    """

    def prepare_parameters(
        self, client: Any, operation_name: str, parameters: dict[str, Any]
    ) -> dict[str, Any]:
        """Return the parameters with ``DestinationRegion`` and ``PresignedUrl`` filled in."""
        if operation_name != COPY_SNAPSHOT:
            return parameters
        if 'SourceRegion' not in parameters or parameters.get('PresignedUrl'):
            return parameters

        config = client.config
        parameters = dict(parameters)
        parameters['DestinationRegion'] = config.region
        parameters['PresignedUrl'] = self.presign(config, parameters)
        return parameters

    def presign(self, config: Any, parameters: dict[str, Any]) -> str:
        """Return a presigned URL for the call against its source region."""
        source_region = parameters['SourceRegion']
        api = config.api
        serializer = RequestSerializer(
            api, resolve_endpoint(api.endpoint_prefix, source_region), validate=False
        )
        serialized = serializer.build_request(api.operation_model(COPY_SNAPSHOT), parameters)
        request = AWSRequest(method='GET', url=serialized.url, data=serialized.data)

        if config.credentials is None:
            raise InvalidConfigurationError('credentials', 'presigning requires credentials')
        credentials = config.credentials.get_frozen_credentials()
        SigV4QueryAuth(
            credentials, api.signing_name, source_region, expires=PRESIGNED_URL_EXPIRES
        ).add_auth(request)

        logger.debug('Presigned {} from {} to {}', COPY_SNAPSHOT, source_region, config.region)
        return request.url
