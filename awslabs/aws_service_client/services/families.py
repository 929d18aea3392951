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

from ..core.aws.resolver import ClientFamily
from .dynamodb.exceptions import DynamoDbException
from .ec2.copy_snapshot import CopySnapshotInterceptor
from .ec2.exceptions import Ec2Exception


# Services without an entry use the base family
CLIENT_FAMILIES = {
    'dynamodb': ClientFamily(exception_class=DynamoDbException),
    'ec2': ClientFamily(
        exception_class=Ec2Exception,
        interceptor_factories=(CopySnapshotInterceptor,),
    ),
}

BASE_FAMILY = ClientFamily()


def get_client_family(service: str) -> ClientFamily:
    """Return the exception class and interceptors registered for the service."""
    return CLIENT_FAMILIES.get(service, BASE_FAMILY)
