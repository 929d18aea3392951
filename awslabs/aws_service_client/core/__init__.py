"""Core functionality for the AWS service client."""

from . import aws, common

__all__ = ['aws', 'common']
