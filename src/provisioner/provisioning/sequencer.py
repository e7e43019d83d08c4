"""Provisioning sequencer: the four bootstrap steps in fixed order."""

import time
from collections.abc import Callable, MutableMapping
from datetime import datetime, timezone
from typing import Any, TypeVar

from provisioner.core.config import ProvisionConfig
from provisioner.core.exceptions import ProvisionError, ProvisioningAbortedError
from provisioner.core.models import IssuedCredential, ProvisionReport
from provisioner.interfaces.exceptions import InterfaceError
from provisioner.interfaces.identity_provider import IdentityProvider
from provisioner.interfaces.targets import ProvisioningTargets
from provisioner.provisioning.cluster import ClusterProvisioner
from provisioner.provisioning.credential_rotator import CredentialRotator
from provisioner.provisioning.image_push import ImagePusher
from provisioner.provisioning.propagation import CredentialPropagator
from provisioner.provisioning.repository import RepositoryProvisioner
from provisioner.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

STEP_ROTATE = "rotate_credentials"
STEP_PROPAGATE = "propagate_credentials"
STEP_REPOSITORY = "ensure_repository"
STEP_CLUSTER = "ensure_cluster"
STEP_REVOKE = "revoke_credential"


class ProvisioningSequencer:
    """Runs rotate -> propagate -> ensure repository -> push -> ensure cluster.

    Each step starts only after the previous one returned. The first fatal
    error aborts the run with ProvisioningAbortedError; nothing already done is
    rolled back. Only the image push is allowed to fail.

    Downstream collaborators are built by ``connect`` from the newly issued key
    once propagation is over, so they never act with the bootstrap credentials.
    """

    def __init__(
        self,
        config: ProvisionConfig,
        identity: IdentityProvider,
        connect: Callable[[IssuedCredential], ProvisioningTargets],
        sleep: Callable[[float], None] = time.sleep,
        status: Callable[[str], Any] = print,
        environ: MutableMapping[str, str] | None = None,
    ):
        """Initialize sequencer.

        Args:
            config: Provisioning configuration
            identity: Identity provider acting with the bootstrap credentials
            connect: Builds registry, cluster and identity collaborators for a credential
            sleep: Blocking wait used during propagation
            status: Sink for human-readable status lines
            environ: Environment mapping the key is exported to (os.environ if None)
        """
        self.config = config
        self.identity = identity
        self.connect = connect
        self.sleep = sleep
        self.status = status
        self.environ = environ
        self._targets: ProvisioningTargets | None = None

    def run(self) -> ProvisionReport:
        """Run every step.

        Returns:
            ProvisionReport describing what was done

        Raises:
            ProvisioningAbortedError: On the first fatal step failure
        """
        started_at = datetime.now(timezone.utc)
        creds = self.config.credentials

        rotator = CredentialRotator(self.identity, creds.principal, max_keys=creds.max_keys)
        rotation = self._step(STEP_ROTATE, rotator.rotate)
        self.status(
            f"Rotated access keys for {rotation.principal}: "
            f"{len(rotation.deleted)} deleted, {len(rotation.deactivated)} deactivated, "
            f"new key {rotation.issued.access_key_id}"
        )

        self._targets = None
        try:
            report = self._provision(rotation.issued)
        except BaseException:
            self._release(rotator, rotation.issued, run_failed=True)
            raise
        self._release(rotator, rotation.issued, run_failed=False)

        finished_at = datetime.now(timezone.utc)
        logger.info(
            "provisioning_complete",
            repository_name=report["repository"].name,
            cluster_name=report["cluster"].name,
        )
        return ProvisionReport(
            rotation=rotation,
            started_at=started_at,
            finished_at=finished_at,
            **report,
        )

    def _provision(self, issued: IssuedCredential) -> dict[str, Any]:
        propagator = CredentialPropagator(
            self.config.propagation,
            self.identity,
            region=self.config.aws.region,
            export_environment=self.config.credentials.export_environment,
            environ=self.environ,
            sleep=self.sleep,
        )
        self._step(STEP_PROPAGATE, propagator.propagate, issued)
        targets = self._step(STEP_PROPAGATE, self.connect, issued)
        self._targets = targets
        self.status(f"Access key {issued.access_key_id} ready")

        repository = self._step(
            STEP_REPOSITORY,
            RepositoryProvisioner(targets.registry, self.config.repository).ensure,
        )
        if repository.created:
            self.status(f"Repository {repository.name} created")
        else:
            self.status(f"Repository {repository.name} already exists, skipping create")

        image_push = ImagePusher(targets.registry, self.config.image_push).push(
            self.config.repository.name
        )
        if image_push.error:
            self.status(f"Error pushing image manifest: {image_push.error}")
        elif image_push.succeeded:
            self.status(f"Image pushed: {image_push.image_digest}")

        cluster = self._step(
            STEP_CLUSTER,
            ClusterProvisioner(targets.clusters, self.config.cluster).ensure,
        )
        self.status(f"Cluster {cluster.name} created")

        return {"repository": repository, "image_push": image_push, "cluster": cluster}

    def _step(self, name: str, func: Callable[..., T], *args: Any) -> T:
        logger.debug("provisioning_step_started", step=name)
        try:
            return func(*args)
        except (InterfaceError, ProvisionError) as e:
            logger.error(
                "provisioning_step_failed",
                step=name,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise ProvisioningAbortedError(name, str(e)) from e

    def _release(self, rotator: CredentialRotator, issued: IssuedCredential, run_failed: bool) -> None:
        if not self.config.credentials.revoke_on_exit:
            logger.warning(
                "issued_credential_left_active",
                principal=rotator.principal,
                access_key_id=issued.access_key_id,
            )
            return

        # The bootstrap key was deactivated during rotation
        identity = self._targets.identity if self._targets is not None else self.identity
        try:
            rotator.revoke(issued.access_key_id, identity)
        except InterfaceError as e:
            logger.error(
                "issued_credential_revoke_failed",
                access_key_id=issued.access_key_id,
                error=str(e),
            )
            # Keep the original failure when the run already aborted
            if not run_failed:
                raise ProvisioningAbortedError(STEP_REVOKE, str(e)) from e
