"""Hand-off of a freshly issued key to the rest of the run."""

import os
import time
from collections.abc import Callable, MutableMapping

from provisioner.core.config import PropagationConfig
from provisioner.core.exceptions import CredentialsNotReadyError
from provisioner.core.models import IssuedCredential
from provisioner.interfaces.identity_provider import IdentityProvider
from provisioner.utils.logging import get_logger
from provisioner.utils.retry import retry_on_exception

logger = get_logger(__name__)

ACCESS_KEY_ID_VAR = "AWS_ACCESS_KEY_ID"
SECRET_ACCESS_KEY_VAR = "AWS_SECRET_ACCESS_KEY"
REGION_VAR = "REGION"


def export_credentials(
    credential: IssuedCredential,
    region: str,
    environ: MutableMapping[str, str] | None = None,
) -> None:
    """Install a credential and region into the process environment.

    Args:
        credential: Key to export
        region: Region string to export
        environ: Mapping to write to (defaults to os.environ)
    """
    if environ is None:
        environ = os.environ

    environ[ACCESS_KEY_ID_VAR] = credential.access_key_id
    environ[SECRET_ACCESS_KEY_VAR] = credential.secret_access_key
    environ[REGION_VAR] = region

    logger.info("credentials_exported", access_key_id=credential.access_key_id, region=region)


class CredentialPropagator:
    """Waits until a new key can be used by downstream calls.

    IAM is eventually consistent: a key returned by CreateAccessKey can be
    rejected for several seconds afterwards.
    """

    def __init__(
        self,
        config: PropagationConfig,
        identity: IdentityProvider,
        region: str,
        export_environment: bool = True,
        environ: MutableMapping[str, str] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize propagator.

        Args:
            config: Propagation settings
            identity: Identity provider used to probe the key in poll mode
            region: Region exported alongside the key
            export_environment: Whether to write the key into the environment
            environ: Environment mapping (defaults to os.environ)
            sleep: Blocking wait function
        """
        self.config = config
        self.identity = identity
        self.region = region
        self.export_environment = export_environment
        self.environ = environ
        self.sleep = sleep

    def propagate(self, credential: IssuedCredential) -> None:
        """Export the key if configured, then block until it is usable.

        Raises:
            CredentialsNotReadyError: If polling gives up
        """
        if self.export_environment:
            export_credentials(credential, self.region, self.environ)

        if self.config.strategy == "poll":
            self._poll(credential)
        else:
            self._wait_fixed()

    def _wait_fixed(self) -> None:
        logger.info("waiting_for_credential_propagation", seconds=self.config.wait_seconds)
        self.sleep(self.config.wait_seconds)

    def _poll(self, credential: IssuedCredential) -> None:
        logger.info(
            "polling_for_credential_propagation",
            access_key_id=credential.access_key_id,
            max_attempts=self.config.max_attempts,
        )

        probe = retry_on_exception(
            exceptions=(CredentialsNotReadyError,),
            max_attempts=self.config.max_attempts,
            min_wait=self.config.min_wait_seconds,
            max_wait=self.config.max_wait_seconds,
            sleep=self.sleep,
        )(self.identity.verify_credential)

        try:
            probe(credential)
        except CredentialsNotReadyError:
            logger.error(
                "credential_propagation_timed_out",
                access_key_id=credential.access_key_id,
                max_attempts=self.config.max_attempts,
            )
            raise

        logger.info("credential_propagated", access_key_id=credential.access_key_id)
