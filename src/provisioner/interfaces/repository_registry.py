"""Repository registry interface for container image repositories."""

from abc import ABC, abstractmethod

from provisioner.interfaces.cloud_types import ImageInfo, RepositoryInfo


class RepositoryRegistry(ABC):
    """Abstract interface for a container image registry."""

    @abstractmethod
    def list_repositories(self) -> list[RepositoryInfo]:
        """List every repository visible to the caller.

        Returns:
            All repositories, unfiltered

        Raises:
            RepositoryRegistryError: If listing fails
        """

    @abstractmethod
    def create_repository(self, name: str) -> RepositoryInfo:
        """Create a repository.

        Raises:
            RepositoryRegistryError: If creation fails
        """

    @abstractmethod
    def put_image(self, repository: str, tag: str, manifest: str) -> ImageInfo:
        """Upload an image manifest.

        Raises:
            RepositoryRegistryError: If the registry rejects the image
        """
