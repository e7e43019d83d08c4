"""Exceptions for interface implementations."""


class InterfaceError(Exception):
    """Base exception for all interface-related errors."""


class IdentityProviderError(InterfaceError):
    """Exception for identity provider operations."""


class RepositoryRegistryError(InterfaceError):
    """Exception for repository registry operations."""


class ClusterManagerError(InterfaceError):
    """Exception for cluster manager operations."""
