from ...core.common.errors import ServiceException


class DynamoDbException(ServiceException):
    """Raised for any failed Amazon DynamoDB operation."""
