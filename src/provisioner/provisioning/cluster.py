"""Create the container cluster."""

from provisioner.core.config import ClusterConfig
from provisioner.core.models import ClusterOutcome
from provisioner.interfaces.cluster_manager import ClusterManager
from provisioner.utils.logging import get_logger

logger = get_logger(__name__)


class ClusterProvisioner:
    """Issues one create-cluster call per run.

    There is no lookup first: an existing cluster with the same name is left
    to the cluster manager to handle.
    """

    def __init__(self, clusters: ClusterManager, config: ClusterConfig):
        self.clusters = clusters
        self.config = config

    def ensure(self) -> ClusterOutcome:
        """Create the cluster.

        Raises:
            ClusterManagerError: If creation fails
        """
        info = self.clusters.create_cluster(self.config.name, list(self.config.capacity_providers))
        logger.info("cluster_ensured", cluster_name=info.name, status=info.status)
        return ClusterOutcome(
            name=info.name,
            capacity_providers=list(self.config.capacity_providers),
            status=info.status,
            arn=info.arn,
        )
