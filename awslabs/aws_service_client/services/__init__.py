"""Service-specific extensions composed into clients at construction."""

from .families import CLIENT_FAMILIES, get_client_family

__all__ = ['CLIENT_FAMILIES', 'get_client_family']
