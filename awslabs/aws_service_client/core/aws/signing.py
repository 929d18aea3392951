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

import botocore.auth
from ..common.command import RequestHook
from ..common.errors import UnsupportedSignatureVersionError
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from collections.abc import Callable
from loguru import logger


ANONYMOUS = 'anonymous'


class Signer:
    """Signs requests for one (signature version, signing name, region) triple."""

    def __init__(
        self,
        signature_version: str,
        signing_name: str,
        region: str,
        auth_class: type[botocore.auth.BaseSigner] | None,
    ):
        """Initialize the signer with the botocore auth class to delegate to."""
        self.signature_version = signature_version
        self.signing_name = signing_name
        self.region = region
        self._auth_class = auth_class

    def sign_request(self, request: AWSRequest, credentials: Credentials | None) -> None:
        """Sign the serialized request in place with a snapshot of the credentials."""
        if self._auth_class is None:
            return

        frozen_credentials = None
        if credentials is not None:
            frozen_credentials = credentials.get_frozen_credentials()

        kwargs = {'credentials': frozen_credentials}
        if self._auth_class.REQUIRES_REGION:
            kwargs['service_name'] = self.signing_name
            kwargs['region_name'] = self.region
        self._auth_class(**kwargs).add_auth(request)

    def create_hook(self, credentials: Callable[[], Credentials | None]) -> RequestHook:
        """Return a request hook that signs with the credentials current at call time."""

        def sign(request: AWSRequest) -> None:
            logger.debug('Signing request to {} with {}', request.url, self.signature_version)
            self.sign_request(request, credentials())

        return sign

    def __repr__(self):
        """Return the string representation of the signer."""
        return (
            f'{self.__class__.__name__}({self.signature_version}, '
            f'{self.signing_name}, {self.region})'
        )


SignatureProvider = Callable[[str, str, str], Signer]


def default_signature_provider(signature_version: str, signing_name: str, region: str) -> Signer:
    """Resolve the signer for the given signature version, signing name and region."""
    if signature_version == ANONYMOUS:
        return Signer(signature_version, signing_name, region, None)

    auth_class = botocore.auth.AUTH_TYPE_MAPS.get(signature_version)
    if auth_class is None or not _is_credential_signer(auth_class):
        raise UnsupportedSignatureVersionError(signature_version)
    return Signer(signature_version, signing_name, region, auth_class)


def _is_credential_signer(auth_class: type) -> bool:
    # Token and identity-cache based signers need collaborators the pipeline does not own
    return not getattr(auth_class, 'REQUIRES_TOKEN', False) and not getattr(
        auth_class, 'REQUIRES_IDENTITY_CACHE', False
    )
