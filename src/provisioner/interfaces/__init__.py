"""Interface definitions for the provisioning collaborators."""

from provisioner.interfaces.cloud_types import ClusterInfo, ImageInfo, RepositoryInfo
from provisioner.interfaces.cluster_manager import ClusterManager
from provisioner.interfaces.identity_provider import IdentityProvider
from provisioner.interfaces.repository_registry import RepositoryRegistry
from provisioner.interfaces.targets import ProvisioningTargets

__all__ = [
    "ClusterInfo",
    "ClusterManager",
    "IdentityProvider",
    "ImageInfo",
    "ProvisioningTargets",
    "RepositoryInfo",
    "RepositoryRegistry",
]
