"""Adapter implementations for external services."""

from provisioner.adapters.aws_adapter import AWSAdapter

__all__ = [
    "AWSAdapter",
]
