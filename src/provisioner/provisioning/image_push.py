"""Best-effort image push.

Building and pushing real images is not implemented. When enabled, this step
uploads the configured manifest, which by default is a placeholder that ECR
rejects. Failures never stop the run.
"""

from provisioner.core.config import ImagePushConfig
from provisioner.core.models import ImagePushOutcome
from provisioner.interfaces.exceptions import RepositoryRegistryError
from provisioner.interfaces.repository_registry import RepositoryRegistry
from provisioner.utils.logging import get_logger

logger = get_logger(__name__)


class ImagePusher:
    """Pushes an image manifest into the repository, tolerating errors."""

    def __init__(self, registry: RepositoryRegistry, config: ImagePushConfig):
        self.registry = registry
        self.config = config

    def push(self, repository: str) -> ImagePushOutcome:
        """Push the configured manifest.

        Args:
            repository: Target repository name

        Returns:
            ImagePushOutcome; ``attempted`` is False when pushing is disabled
        """
        if not self.config.enabled:
            logger.debug("image_push_skipped", repository_name=repository)
            return ImagePushOutcome()

        try:
            image = self.registry.put_image(repository, self.config.tag, self.config.manifest)
        except RepositoryRegistryError as e:
            logger.warning("image_push_error_ignored", repository_name=repository, error=str(e))
            return ImagePushOutcome(attempted=True, succeeded=False, error=str(e))

        return ImagePushOutcome(attempted=True, succeeded=True, image_digest=image.digest)
