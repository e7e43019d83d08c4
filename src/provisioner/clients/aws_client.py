"""AWS client for IAM, ECR, ECS and STS operations."""

from typing import Any, cast

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from provisioner.core.exceptions import AWSError
from provisioner.utils.logging import get_logger

logger = get_logger(__name__)


class AWSClient:
    """AWS client for the bootstrap calls.

    Calls are made exactly once: a failed call raises AWSError and is never
    retried here.
    """

    def __init__(
        self,
        region: str = "us-east-2",
        profile: str | None = None,
        session: boto3.Session | None = None,
    ):
        """Initialize AWS client.

        Args:
            region: AWS region
            profile: AWS profile name (optional)
            session: Existing boto3 session (optional, overrides profile)
        """
        self.region = region
        self.profile = profile

        # Create session
        if session:
            self.session = session
        elif profile:
            self.session = boto3.Session(profile_name=profile, region_name=region)
        else:
            self.session = boto3.Session(region_name=region)

        # Create clients
        self.iam = self.session.client("iam")
        self.ecr = self.session.client("ecr")
        self.ecs = self.session.client("ecs")
        self.sts = self.session.client("sts")

        logger.debug("aws_client_initialized", region=region, profile=profile)

    @classmethod
    def from_access_key(
        cls, access_key_id: str, secret_access_key: str, region: str = "us-east-2"
    ) -> "AWSClient":
        """Create AWSClient bound to an explicit access key.

        Args:
            access_key_id: Access key ID
            secret_access_key: Secret access key
            region: AWS region

        Returns:
            New AWSClient whose session uses only the given key
        """
        session = boto3.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
        )
        return cls(region=region, session=session)

    def list_access_keys(self, user_name: str, max_items: int = 10) -> list[dict[str, Any]]:
        """List access keys of an IAM user.

        Only the first page is read: at most ``max_items`` keys are returned.

        Args:
            user_name: IAM user name
            max_items: Page size

        Returns:
            List of AccessKeyMetadata dictionaries

        Raises:
            AWSError: If listing fails
        """
        try:
            logger.debug("listing_access_keys", user_name=user_name, max_items=max_items)

            response = self.iam.list_access_keys(UserName=user_name, MaxItems=max_items)
            keys = cast(list[dict[str, Any]], response.get("AccessKeyMetadata", []))

            logger.info("access_keys_listed", user_name=user_name, count=len(keys))
            return keys

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error("access_key_list_failed", user_name=user_name, error_code=error_code)
            raise AWSError(
                f"Failed to list access keys for {user_name}: {error_code}", error_code
            ) from e
        except BotoCoreError as e:
            logger.error("access_key_list_failed", user_name=user_name, error=str(e))
            raise AWSError(f"Failed to list access keys for {user_name}: {e}") from e

    def delete_access_key(self, user_name: str, access_key_id: str) -> None:
        """Delete an access key.

        Args:
            user_name: IAM user name
            access_key_id: Access key ID to delete

        Raises:
            AWSError: If deletion fails
        """
        try:
            self.iam.delete_access_key(UserName=user_name, AccessKeyId=access_key_id)
            logger.info("access_key_deleted", user_name=user_name, access_key_id=access_key_id)

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error(
                "access_key_delete_failed",
                user_name=user_name,
                access_key_id=access_key_id,
                error_code=error_code,
            )
            raise AWSError(
                f"Failed to delete access key {access_key_id}: {error_code}", error_code
            ) from e
        except BotoCoreError as e:
            logger.error("access_key_delete_failed", access_key_id=access_key_id, error=str(e))
            raise AWSError(f"Failed to delete access key {access_key_id}: {e}") from e

    def update_access_key_status(self, user_name: str, access_key_id: str, status: str) -> None:
        """Set an access key to Active or Inactive.

        Args:
            user_name: IAM user name
            access_key_id: Access key ID
            status: "Active" or "Inactive"

        Raises:
            AWSError: If the update fails
        """
        try:
            self.iam.update_access_key(
                UserName=user_name, AccessKeyId=access_key_id, Status=status
            )
            logger.info(
                "access_key_status_updated",
                user_name=user_name,
                access_key_id=access_key_id,
                status=status,
            )

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error(
                "access_key_update_failed",
                user_name=user_name,
                access_key_id=access_key_id,
                error_code=error_code,
            )
            raise AWSError(
                f"Failed to set access key {access_key_id} to {status}: {error_code}",
                error_code,
            ) from e
        except BotoCoreError as e:
            logger.error("access_key_update_failed", access_key_id=access_key_id, error=str(e))
            raise AWSError(f"Failed to set access key {access_key_id} to {status}: {e}") from e

    def create_access_key(self, user_name: str) -> dict[str, Any]:
        """Create a new access key for an IAM user.

        Args:
            user_name: IAM user name

        Returns:
            AccessKey dictionary including SecretAccessKey

        Raises:
            AWSError: If creation fails
        """
        try:
            response = self.iam.create_access_key(UserName=user_name)
            access_key = cast(dict[str, Any], response["AccessKey"])

            # Never log the secret
            logger.info(
                "access_key_created",
                user_name=user_name,
                access_key_id=access_key["AccessKeyId"],
            )
            return access_key

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error("access_key_create_failed", user_name=user_name, error_code=error_code)
            raise AWSError(
                f"Failed to create access key for {user_name}: {error_code}", error_code
            ) from e
        except BotoCoreError as e:
            logger.error("access_key_create_failed", user_name=user_name, error=str(e))
            raise AWSError(f"Failed to create access key for {user_name}: {e}") from e

    def get_caller_identity(self) -> dict[str, Any]:
        """Return the identity behind this client's credentials.

        Raises:
            AWSError: If the credentials are rejected or missing
        """
        try:
            identity = cast(dict[str, Any], self.sts.get_caller_identity())
            logger.debug("caller_identity_retrieved", arn=identity.get("Arn"))
            return identity

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.debug("caller_identity_failed", error_code=error_code)
            raise AWSError(f"Failed to get caller identity: {error_code}", error_code) from e
        except BotoCoreError as e:
            logger.debug("caller_identity_failed", error=str(e))
            raise AWSError(f"Failed to get caller identity: {e}") from e

    def describe_repositories(self) -> list[dict[str, Any]]:
        """Describe the ECR repositories of the account in this region.

        No repository filter is passed.

        Returns:
            List of repository dictionaries

        Raises:
            AWSError: If describing fails
        """
        try:
            logger.debug("describing_repositories", region=self.region)

            response = self.ecr.describe_repositories()
            repositories = cast(list[dict[str, Any]], response.get("repositories", []))

            logger.info("repositories_described", count=len(repositories))
            return repositories

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error("repository_describe_failed", error_code=error_code)
            raise AWSError(f"Failed to describe repositories: {error_code}", error_code) from e
        except BotoCoreError as e:
            logger.error("repository_describe_failed", error=str(e))
            raise AWSError(f"Failed to describe repositories: {e}") from e

    def create_repository(self, repository_name: str) -> dict[str, Any]:
        """Create an ECR repository.

        Args:
            repository_name: Repository name

        Returns:
            Repository dictionary

        Raises:
            AWSError: If creation fails
        """
        try:
            response = self.ecr.create_repository(repositoryName=repository_name)
            repository = cast(dict[str, Any], response["repository"])

            logger.info("repository_created", repository_name=repository["repositoryName"])
            return repository

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error(
                "repository_create_failed",
                repository_name=repository_name,
                error_code=error_code,
            )
            raise AWSError(
                f"Failed to create repository {repository_name}: {error_code}", error_code
            ) from e
        except BotoCoreError as e:
            logger.error("repository_create_failed", repository_name=repository_name, error=str(e))
            raise AWSError(f"Failed to create repository {repository_name}: {e}") from e

    def put_image(self, repository_name: str, image_tag: str, manifest: str) -> dict[str, Any]:
        """Upload an image manifest to an ECR repository.

        Args:
            repository_name: Repository name
            image_tag: Tag for the image
            manifest: Image manifest document

        Returns:
            Image dictionary

        Raises:
            AWSError: If the registry rejects the manifest
        """
        try:
            response = self.ecr.put_image(
                repositoryName=repository_name,
                imageManifest=manifest,
                imageTag=image_tag,
            )
            image = cast(dict[str, Any], response["image"])

            logger.info("image_pushed", repository_name=repository_name, image_tag=image_tag)
            return image

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.warning(
                "image_push_failed",
                repository_name=repository_name,
                image_tag=image_tag,
                error_code=error_code,
            )
            raise AWSError(
                f"Failed to push image {repository_name}:{image_tag}: {error_code}", error_code
            ) from e
        except BotoCoreError as e:
            logger.warning(
                "image_push_failed",
                repository_name=repository_name,
                image_tag=image_tag,
                error=str(e),
            )
            raise AWSError(f"Failed to push image {repository_name}:{image_tag}: {e}") from e

    def create_cluster(self, cluster_name: str, capacity_providers: list[str]) -> dict[str, Any]:
        """Create an ECS cluster.

        Args:
            cluster_name: Cluster name
            capacity_providers: Capacity providers to attach (e.g. FARGATE)

        Returns:
            Cluster dictionary

        Raises:
            AWSError: If creation fails
        """
        try:
            response = self.ecs.create_cluster(
                clusterName=cluster_name,
                capacityProviders=capacity_providers,
            )
            cluster = cast(dict[str, Any], response["cluster"])

            logger.info(
                "ecs_cluster_created",
                cluster_name=cluster.get("clusterName", cluster_name),
                status=cluster.get("status"),
            )
            return cluster

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error("ecs_cluster_create_failed", cluster_name=cluster_name, error_code=error_code)
            raise AWSError(
                f"Failed to create ECS cluster {cluster_name}: {error_code}", error_code
            ) from e
        except BotoCoreError as e:
            logger.error("ecs_cluster_create_failed", cluster_name=cluster_name, error=str(e))
            raise AWSError(f"Failed to create ECS cluster {cluster_name}: {e}") from e
