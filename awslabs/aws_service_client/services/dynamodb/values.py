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

from collections.abc import Iterable, Iterator
from decimal import Decimal, InvalidOperation
from typing import Any


SET_TYPES = ('SS', 'NS', 'BS')


class BinaryValue(bytes):
    """A DynamoDB binary (B) value.

    Accepts bytes, text (encoded as UTF-8) or a readable file-like object.
    """

    def __new__(cls, value: Any = b''):
        """Create the value from bytes, text or a readable object."""
        if hasattr(value, 'read'):
            value = value.read()
        if isinstance(value, str):
            value = value.encode('utf-8')
        return super().__new__(cls, value)

    def __repr__(self):
        """Return the string representation of the value."""
        return f'{self.__class__.__name__}({bytes(self)!r})'


class NumberValue(str):
    """A DynamoDB number (N) kept in its exact text form.

    Use it for numbers that must not lose precision on their way through
    int or float conversion.
    """

    def __new__(cls, value: Any):
        """Create the value from a number or its text form."""
        text = str(value)
        if isinstance(value, str):
            try:
                Decimal(text)
            except InvalidOperation as error:
                raise ValueError(f'Invalid number: {text!r}') from error
        return super().__new__(cls, text)

    def __repr__(self):
        """Return the string representation of the value."""
        return f'{self.__class__.__name__}({str(self)!r})'


def to_number(value: str | int | float | Decimal) -> int | float:
    """Convert a DynamoDB number to an int when it is integral, or to a float."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    text = str(value)
    try:
        return int(text)
    except ValueError:
        return float(text)


class SetValue:
    """A DynamoDB set (SS, NS or BS) value.

    Members are unique and kept in insertion order. String and number members
    are stored in their wire form (text); binary members as bytes.
    """

    def __init__(self, set_type: str, values: Iterable[Any] = ()):
        """Initialize the set with its type and optional members."""
        if set_type not in SET_TYPES:
            raise ValueError('Invalid set type. Must be BS, NS, or SS')
        self._type = set_type
        self._values: dict[Any, None] = {}
        for value in values:
            self.add(value)

    @property
    def type(self) -> str:
        """Return the set type."""
        return self._type

    def add(self, value: Any) -> None:
        """Add a member to the set."""
        self._values[self._normalize(value)] = None

    def discard(self, value: Any) -> None:
        """Remove a member from the set if present."""
        self._values.pop(self._normalize(value), None)

    def values(self) -> list[Any]:
        """Return the members formatted for a DynamoDB request."""
        if not self._values:
            raise ValueError('DynamoDB does not allow empty sets.')
        return list(self._values)

    def to_list(self) -> list[Any]:
        """Return the members as native values."""
        if self._type == 'NS':
            return [to_number(value) for value in self._values]
        if self._type == 'BS':
            return [BinaryValue(value) for value in self._values]
        return list(self._values)

    def _normalize(self, value: Any) -> Any:
        if self._type == 'BS':
            return bytes(BinaryValue(value))
        if isinstance(value, bytes):
            return value.decode('utf-8')
        return str(value)

    def __contains__(self, value: object) -> bool:
        """Return True if the value is a member of the set."""
        return self._normalize(value) in self._values

    def __iter__(self) -> Iterator[Any]:
        """Iterate over the members in their wire form."""
        return iter(list(self._values))

    def __len__(self) -> int:
        """Return the number of members."""
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        """Return True if both sets have the same type and members."""
        if not isinstance(other, SetValue):
            return NotImplemented
        return self._type == other._type and set(self._values) == set(other._values)

    def __repr__(self):
        """Return the string representation of the set."""
        return f'{self.__class__.__name__}({self._type!r}, {list(self._values)!r})'
