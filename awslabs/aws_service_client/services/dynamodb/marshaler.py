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

import json
from ...core.common.helpers import Boto3Encoder
from .values import BinaryValue, NumberValue, SetValue, to_number
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import Any


AttributeValue = dict[str, Any]
ErrorHandler = Callable[[str, Any], AttributeValue | None]


class ItemEncoder(Boto3Encoder):
    """JSON encoder for unmarshaled items; sets are encoded as lists."""

    def default(self, o):
        """Return a JSON-serializable version of the object."""
        if isinstance(o, SetValue):
            return o.to_list()
        if isinstance(o, Decimal):
            return to_number(o)
        return super().default(o)


class Marshaler:
    """Converts native values and JSON documents to DynamoDB items and back.

    The optional ``error_handler`` is called with the type name and the value
    when a value cannot be marshaled (an empty string, for instance). It
    returns an attribute value such as ``{'NULL': True}``, or None to let the
    marshaler raise.
    """

    def __init__(self, error_handler: ErrorHandler | None = None):
        """Initialize the marshaler with an optional handler for invalid values."""
        self._error_handler = error_handler

    def binary(self, value: Any) -> BinaryValue:
        """Return the value wrapped as a DynamoDB binary value."""
        return value if isinstance(value, BinaryValue) else BinaryValue(value)

    def set(self, values: Iterable[Any]) -> SetValue:
        """Return a set value whose type is inferred from its first member."""
        values = list(values)
        if not values:
            raise ValueError('Sets cannot be empty.')
        set_type = next(iter(self.marshal_value(values[0]))) + 'S'
        return SetValue(set_type, values)

    def marshal_json(self, document: str) -> dict[str, AttributeValue]:
        """Marshal a JSON document into a DynamoDB item."""
        try:
            data = json.loads(document, parse_float=Decimal)
        except ValueError as error:
            raise ValueError(
                'The JSON document must be valid and be an object at its root.'
            ) from error
        if not isinstance(data, dict):
            raise ValueError('The JSON document must be valid and be an object at its root.')
        return self.marshal_item(data)

    def marshal_item(self, item: Mapping[str, Any]) -> dict[str, AttributeValue]:
        """Marshal a mapping into a DynamoDB item."""
        return self.marshal_value(dict(item))['M']

    def marshal_value(self, value: Any) -> AttributeValue:
        """Marshal a native value into a ``{type: value}`` attribute value."""
        if isinstance(value, bool):
            return {'BOOL': value}
        if isinstance(value, NumberValue):
            return {'N': str(value)}
        if isinstance(value, str) and value != '':
            return {'S': value}
        if isinstance(value, (int, float, Decimal)):
            return {'N': str(value)}
        if value is None:
            return {'NULL': True}
        if isinstance(value, SetValue):
            return {value.type: value.values()}
        if isinstance(value, (bytes, bytearray)) or hasattr(value, 'read'):
            return {'B': bytes(self.binary(value))}
        if isinstance(value, Mapping):
            return {'M': {str(key): self.marshal_value(item) for key, item in value.items()}}
        if isinstance(value, (list, tuple)):
            return {'L': [self.marshal_value(item) for item in value]}
        if isinstance(value, (set, frozenset)) and value:
            return self.marshal_value(self.set(value))

        type_name = type(value).__name__
        if self._error_handler is not None:
            result = self._error_handler(type_name, value)
            if result:
                return result
        raise ValueError(f'Marshaling error: encountered unexpected type "{type_name}".')

    def unmarshal_json(self, data: Mapping[str, AttributeValue], **kwargs) -> str:
        """Unmarshal a DynamoDB item into a JSON document; kwargs go to ``json.dumps``."""
        return json.dumps(self.unmarshal_item(data), cls=ItemEncoder, **kwargs)

    def unmarshal_item(self, data: Mapping[str, AttributeValue]) -> dict[str, Any]:
        """Unmarshal a DynamoDB item into a dictionary."""
        return self.unmarshal_value({'M': data})

    def unmarshal_value(self, value: Mapping[str, Any]) -> Any:
        """Unmarshal a ``{type: value}`` attribute value into a native value."""
        if len(value) != 1:
            raise ValueError(f'Expected a single-key attribute value, got {sorted(value)}.')
        attribute_type, data = next(iter(value.items()))

        if attribute_type in ('S', 'BOOL'):
            return data
        if attribute_type == 'NULL':
            return None
        if attribute_type == 'N':
            return to_number(data)
        if attribute_type == 'M':
            return {key: self.unmarshal_value(item) for key, item in data.items()}
        if attribute_type == 'L':
            return [self.unmarshal_value(item) for item in data]
        if attribute_type == 'B':
            return BinaryValue(data)
        if attribute_type in ('SS', 'NS', 'BS'):
            return SetValue(attribute_type, data)

        raise ValueError(f'Unexpected type: {attribute_type}.')
