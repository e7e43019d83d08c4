"""Identity provider interface for access key management."""

from abc import ABC, abstractmethod

from provisioner.core.models import AccessKeyMetadata, IssuedCredential


class IdentityProvider(ABC):
    """Abstract interface for issuing and revoking access keys.

    Implementation Note:
    Concrete implementations should hide provider-specific details
    (boto3 exceptions, response formats, etc.) behind this interface and
    raise IdentityProviderError on failure.
    """

    @abstractmethod
    def list_access_keys(self, user_name: str, max_items: int) -> list[AccessKeyMetadata]:
        """List at most ``max_items`` access keys of a principal.

        Raises:
            IdentityProviderError: If listing fails
        """

    @abstractmethod
    def delete_access_key(self, user_name: str, access_key_id: str) -> None:
        """Delete an access key.

        Raises:
            IdentityProviderError: If deletion fails
        """

    @abstractmethod
    def deactivate_access_key(self, user_name: str, access_key_id: str) -> None:
        """Mark an access key inactive.

        Raises:
            IdentityProviderError: If the update fails
        """

    @abstractmethod
    def create_access_key(self, user_name: str) -> IssuedCredential:
        """Create a new active access key.

        Raises:
            IdentityProviderError: If creation fails
        """

    @abstractmethod
    def verify_credential(self, credential: IssuedCredential) -> None:
        """Make a cheap authenticated call with the given credential.

        Raises:
            CredentialsNotReadyError: If the credential is not accepted yet
        """
