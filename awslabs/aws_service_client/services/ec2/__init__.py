"""Amazon EC2 support: snapshot copy presigning and the service exception."""

from .copy_snapshot import CopySnapshotInterceptor
from .exceptions import Ec2Exception

__all__ = ['CopySnapshotInterceptor', 'Ec2Exception']
