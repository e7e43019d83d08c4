"""Cluster manager interface for container clusters."""

from abc import ABC, abstractmethod

from provisioner.interfaces.cloud_types import ClusterInfo


class ClusterManager(ABC):
    """Abstract interface for container cluster management."""

    @abstractmethod
    def create_cluster(self, name: str, capacity_providers: list[str]) -> ClusterInfo:
        """Create a cluster.

        Args:
            name: Cluster name
            capacity_providers: Compute backends for the cluster

        Returns:
            ClusterInfo for the new cluster

        Raises:
            ClusterManagerError: If creation fails
        """
