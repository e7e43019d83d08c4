"""Ensure the container image repository exists."""

from provisioner.core.config import RepositoryConfig
from provisioner.core.models import RepositoryOutcome
from provisioner.interfaces.repository_registry import RepositoryRegistry
from provisioner.utils.logging import get_logger

logger = get_logger(__name__)


class RepositoryProvisioner:
    """Creates the repository unless it is considered present.

    With ``existence_check="count"`` the repository counts as present when the
    account holds exactly one repository, whatever its name. Accounts with
    several repositories therefore always get a create call. ``"name"`` looks
    for a repository with the configured name instead.
    """

    def __init__(self, registry: RepositoryRegistry, config: RepositoryConfig):
        self.registry = registry
        self.config = config

    def ensure(self) -> RepositoryOutcome:
        """Create the repository if needed.

        Raises:
            RepositoryRegistryError: If listing or creation fails
        """
        repositories = self.registry.list_repositories()

        if self.config.existence_check == "name":
            existing = next((r for r in repositories if r.name == self.config.name), None)
        else:
            existing = repositories[0] if len(repositories) == 1 else None

        if existing is not None:
            logger.info(
                "repository_exists",
                repository_name=existing.name,
                existence_check=self.config.existence_check,
            )
            return RepositoryOutcome(
                name=existing.name,
                created=False,
                existing_count=len(repositories),
                uri=existing.uri,
            )

        created = self.registry.create_repository(self.config.name)
        return RepositoryOutcome(
            name=created.name,
            created=True,
            existing_count=len(repositories),
            uri=created.uri,
        )
