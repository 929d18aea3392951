from ...core.common.errors import ServiceException


class Ec2Exception(ServiceException):
    """Raised for any failed Amazon EC2 operation."""
