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

import os
import sys
from loguru import logger


TRUTHY_VALUES = frozenset(['true', 'yes', '1'])


def get_env_bool(env_key: str, default: bool) -> bool:
    """Get a boolean value from an environment variable, with a default."""
    return os.getenv(env_key, str(default)).casefold() in TRUTHY_VALUES


def get_env_int(env_key: str, default: int) -> int:
    """Get an integer value from an environment variable, with a default."""
    value = os.getenv(env_key)
    if value is None or not value.strip():
        return default
    return int(value)


LOG_LEVEL = os.getenv('AWS_SERVICE_CLIENT_LOG_LEVEL', 'WARNING')
DEFAULT_REGION = os.getenv('AWS_REGION')
DEFAULT_SIGNATURE_VERSION = 'v4'
CONNECT_TIMEOUT = get_env_int('AWS_SERVICE_CLIENT_CONNECT_TIMEOUT', 10)
MAX_POOL_CONNECTIONS = get_env_int('AWS_SERVICE_CLIENT_MAX_POOL_CONNECTIONS', 10)
VALIDATE_PARAMETERS = get_env_bool('AWS_SERVICE_CLIENT_VALIDATE_PARAMETERS', True)


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Replace the default loguru sink with a stderr sink at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level)
