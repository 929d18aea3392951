"""Amazon DynamoDB support: attribute value marshaling and the service exception."""

from .exceptions import DynamoDbException
from .marshaler import Marshaler
from .values import BinaryValue, NumberValue, SetValue

__all__ = ['BinaryValue', 'DynamoDbException', 'Marshaler', 'NumberValue', 'SetValue']
