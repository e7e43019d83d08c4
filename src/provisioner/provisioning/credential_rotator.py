"""Access key rotation for the infra-admin principal."""

from provisioner.core.models import KeyStatus, RotationResult
from provisioner.interfaces.identity_provider import IdentityProvider
from provisioner.utils.logging import get_logger

logger = get_logger(__name__)


class CredentialRotator:
    """Rotates a principal's access keys so only a new key stays active.

    Inactive keys are deleted. Every other key (active or expired) is
    deactivated and kept so a rollback stays possible. Then one new key is
    created.
    """

    def __init__(self, identity: IdentityProvider, principal: str, max_keys: int = 10):
        """Initialize rotator.

        Args:
            identity: Identity provider issuing the keys
            principal: User whose keys are rotated
            max_keys: Maximum number of existing keys to inspect
        """
        self.identity = identity
        self.principal = principal
        self.max_keys = max_keys

    def rotate(self) -> RotationResult:
        """Rotate the principal's keys.

        Returns:
            RotationResult with deleted and deactivated key ids and the new key

        Raises:
            IdentityProviderError: On the first failing call
        """
        logger.info("credential_rotation_started", principal=self.principal)

        existing = self.identity.list_access_keys(self.principal, self.max_keys)

        deleted: list[str] = []
        deactivated: list[str] = []
        for key in existing:
            if key.status == KeyStatus.INACTIVE:
                self.identity.delete_access_key(key.user_name, key.access_key_id)
                deleted.append(key.access_key_id)
            else:
                self.identity.deactivate_access_key(key.user_name, key.access_key_id)
                deactivated.append(key.access_key_id)

        issued = self.identity.create_access_key(self.principal)

        logger.info(
            "credential_rotation_complete",
            principal=self.principal,
            deleted=len(deleted),
            deactivated=len(deactivated),
            access_key_id=issued.access_key_id,
        )
        return RotationResult(
            principal=self.principal,
            deleted=deleted,
            deactivated=deactivated,
            issued=issued,
        )

    def revoke(self, access_key_id: str, identity: IdentityProvider | None = None) -> None:
        """Deactivate a key issued by an earlier rotation.

        Args:
            access_key_id: Key to deactivate
            identity: Identity provider to call through (defaults to the rotating one)
        """
        (identity or self.identity).deactivate_access_key(self.principal, access_key_id)
        logger.info("issued_credential_revoked", principal=self.principal, access_key_id=access_key_id)
