"""AWS adapter implementing the identity, registry and cluster interfaces."""

from provisioner.clients.aws_client import AWSClient
from provisioner.core.exceptions import AWSError, CredentialsNotReadyError
from provisioner.core.models import AccessKeyMetadata, IssuedCredential, KeyStatus
from provisioner.interfaces.cloud_types import ClusterInfo, ImageInfo, RepositoryInfo
from provisioner.interfaces.cluster_manager import ClusterManager
from provisioner.interfaces.exceptions import (
    ClusterManagerError,
    IdentityProviderError,
    RepositoryRegistryError,
)
from provisioner.interfaces.identity_provider import IdentityProvider
from provisioner.interfaces.repository_registry import RepositoryRegistry
from provisioner.interfaces.targets import ProvisioningTargets
from provisioner.utils.logging import get_logger

logger = get_logger(__name__)


class AWSAdapter(IdentityProvider, RepositoryRegistry, ClusterManager):
    """Adapter wrapping AWSClient to implement the provisioning interfaces.

    IAM backs the identity provider, ECR the repository registry and ECS the
    cluster manager. boto3 and ClientError details stay behind this class.
    """

    def __init__(
        self,
        region: str = "us-east-2",
        profile: str | None = None,
        client: AWSClient | None = None,
    ):
        """Initialize AWS adapter.

        Args:
            region: AWS region
            profile: AWS profile name (optional)
            client: Existing AWSClient (optional, overrides region and profile)
        """
        self.client = client or AWSClient(region=region, profile=profile)
        logger.debug("aws_adapter_initialized", region=self.client.region)

    @property
    def region(self) -> str:
        return self.client.region

    def targets_for(self, credential: IssuedCredential) -> ProvisioningTargets:
        """Build registry, cluster and identity collaborators that act as ``credential``.

        Args:
            credential: Freshly issued access key

        Returns:
            ProvisioningTargets backed by a session using only that key
        """
        client = AWSClient.from_access_key(
            credential.access_key_id, credential.secret_access_key, region=self.region
        )
        adapter = AWSAdapter(client=client)
        logger.debug(
            "targets_bound_to_credential",
            access_key_id=credential.access_key_id,
            region=self.region,
        )
        return ProvisioningTargets(registry=adapter, clusters=adapter, identity=adapter)

    # IdentityProvider

    def list_access_keys(self, user_name: str, max_items: int) -> list[AccessKeyMetadata]:
        try:
            keys = self.client.list_access_keys(user_name, max_items=max_items)
        except AWSError as e:
            raise IdentityProviderError(str(e)) from e

        return [
            AccessKeyMetadata(
                access_key_id=key["AccessKeyId"],
                user_name=key.get("UserName", user_name),
                status=KeyStatus(key["Status"]),
                create_date=key.get("CreateDate"),
            )
            for key in keys
        ]

    def delete_access_key(self, user_name: str, access_key_id: str) -> None:
        try:
            self.client.delete_access_key(user_name, access_key_id)
        except AWSError as e:
            raise IdentityProviderError(str(e)) from e

    def deactivate_access_key(self, user_name: str, access_key_id: str) -> None:
        try:
            self.client.update_access_key_status(
                user_name, access_key_id, KeyStatus.INACTIVE.value
            )
        except AWSError as e:
            raise IdentityProviderError(str(e)) from e

    def create_access_key(self, user_name: str) -> IssuedCredential:
        try:
            access_key = self.client.create_access_key(user_name)
        except AWSError as e:
            raise IdentityProviderError(str(e)) from e

        return IssuedCredential(
            access_key_id=access_key["AccessKeyId"],
            secret_access_key=access_key["SecretAccessKey"],
            user_name=access_key.get("UserName", user_name),
            status=KeyStatus(access_key.get("Status", KeyStatus.ACTIVE.value)),
            create_date=access_key.get("CreateDate"),
        )

    def verify_credential(self, credential: IssuedCredential) -> None:
        client = AWSClient.from_access_key(
            credential.access_key_id, credential.secret_access_key, region=self.region
        )
        try:
            client.get_caller_identity()
        except AWSError as e:
            raise CredentialsNotReadyError(
                f"Access key {credential.access_key_id} not accepted yet: {e}"
            ) from e

    # RepositoryRegistry

    def list_repositories(self) -> list[RepositoryInfo]:
        try:
            repositories = self.client.describe_repositories()
        except AWSError as e:
            raise RepositoryRegistryError(str(e)) from e

        return [
            RepositoryInfo(
                name=repo["repositoryName"],
                uri=repo.get("repositoryUri"),
                arn=repo.get("repositoryArn"),
            )
            for repo in repositories
        ]

    def create_repository(self, name: str) -> RepositoryInfo:
        try:
            repo = self.client.create_repository(name)
        except AWSError as e:
            raise RepositoryRegistryError(str(e)) from e

        return RepositoryInfo(
            name=repo["repositoryName"],
            uri=repo.get("repositoryUri"),
            arn=repo.get("repositoryArn"),
        )

    def put_image(self, repository: str, tag: str, manifest: str) -> ImageInfo:
        try:
            image = self.client.put_image(repository, tag, manifest)
        except AWSError as e:
            raise RepositoryRegistryError(str(e)) from e

        image_id = image.get("imageId", {})
        return ImageInfo(digest=image_id.get("imageDigest"), tag=image_id.get("imageTag"))

    # ClusterManager

    def create_cluster(self, name: str, capacity_providers: list[str]) -> ClusterInfo:
        try:
            cluster = self.client.create_cluster(name, capacity_providers)
        except AWSError as e:
            raise ClusterManagerError(str(e)) from e

        return ClusterInfo(
            name=cluster.get("clusterName", name),
            status=cluster.get("status"),
            arn=cluster.get("clusterArn"),
        )
