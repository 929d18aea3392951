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

import botocore.credentials
import jmespath
from .helpers import as_json
from pydantic import BaseModel
from typing import Any


class Credentials(BaseModel):
    """Credentials model.

    See structure in https://sdk.amazonaws.com/java/api/latest/software/amazon/awssdk/auth/credentials/AwsSessionCredentials.html
    """

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None

    def to_botocore(self) -> botocore.credentials.Credentials:
        """Return the equivalent botocore credentials object."""
        return botocore.credentials.Credentials(
            access_key=self.access_key_id,
            secret_key=self.secret_access_key,
            token=self.session_token,
        )


class Result(dict):
    """The parsed output of an operation.

    Behaves like the dictionary returned by the service parser and adds
    JMESPath searching over its content.
    """

    def search(self, expression: str) -> Any:
        """Return the value matched by the JMESPath expression, or None."""
        return jmespath.search(expression, dict(self))

    @property
    def response_metadata(self) -> dict[str, Any]:
        """Return the response metadata injected by the parser."""
        return self.get('ResponseMetadata', {})

    def to_json(self) -> str:
        """Return the result serialized as JSON."""
        return as_json(self)

    def __repr__(self):
        """Return the string representation of the result."""
        return f'{self.__class__.__name__}({dict.__repr__(self)})'
