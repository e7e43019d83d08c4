"""Collaborators that act with a freshly issued credential."""

from dataclasses import dataclass

from provisioner.interfaces.cluster_manager import ClusterManager
from provisioner.interfaces.identity_provider import IdentityProvider
from provisioner.interfaces.repository_registry import RepositoryRegistry


@dataclass
class ProvisioningTargets:
    """Registry, cluster manager and identity provider bound to one credential.

    ``identity`` is used for calls made after rotation, such as revoking the
    issued key: the bootstrap key may already be inactive by then.
    """

    registry: RepositoryRegistry
    clusters: ClusterManager
    identity: IdentityProvider
