"""Pytest configuration and shared fixtures."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from provisioner.core.config import ProvisionConfig
from provisioner.core.exceptions import CredentialsNotReadyError
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


class FakeIdentityProvider(IdentityProvider):
    """In-memory IAM user keyring that records every call."""

    def __init__(
        self,
        calls: list[tuple[Any, ...]],
        label: str = "identity",
        keys: dict[str, AccessKeyMetadata] | None = None,
    ):
        self.calls = calls
        self.label = label
        self.keys: dict[str, AccessKeyMetadata] = keys if keys is not None else {}
        self.fail_on: set[str] = set()
        self.not_ready_for = 0
        self._counter = 0

    def add_key(self, access_key_id: str, status: KeyStatus, user_name: str = "infra-admin") -> None:
        self.keys[access_key_id] = AccessKeyMetadata(
            access_key_id=access_key_id, user_name=user_name, status=status
        )

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((f"{self.label}.{operation}", *args))
        if operation in self.fail_on:
            raise IdentityProviderError(f"{operation} failed: AccessDenied")

    def list_access_keys(self, user_name: str, max_items: int) -> list[AccessKeyMetadata]:
        self._record("list", user_name, max_items)
        owned = [k for k in self.keys.values() if k.user_name == user_name]
        return owned[:max_items]

    def delete_access_key(self, user_name: str, access_key_id: str) -> None:
        self._record("delete", access_key_id)
        del self.keys[access_key_id]

    def deactivate_access_key(self, user_name: str, access_key_id: str) -> None:
        self._record("deactivate", access_key_id)
        self.keys[access_key_id] = self.keys[access_key_id].model_copy(
            update={"status": KeyStatus.INACTIVE}
        )

    def create_access_key(self, user_name: str) -> IssuedCredential:
        self._record("create", user_name)
        self._counter += 1
        access_key_id = f"AKIANEWKEY{self._counter:010d}"
        self.add_key(access_key_id, KeyStatus.ACTIVE, user_name)
        return IssuedCredential(
            access_key_id=access_key_id,
            secret_access_key=f"secret-{self._counter}",
            user_name=user_name,
        )

    def verify_credential(self, credential: IssuedCredential) -> None:
        self._record("verify", credential.access_key_id)
        if self.not_ready_for > 0:
            self.not_ready_for -= 1
            raise CredentialsNotReadyError("InvalidClientTokenId")


class FakeRepositoryRegistry(RepositoryRegistry):
    """In-memory container registry that records every call."""

    def __init__(self, calls: list[tuple[Any, ...]]):
        self.calls = calls
        self.repositories: list[str] = []
        self.fail_on: set[str] = set()

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((f"registry.{operation}", *args))
        if operation in self.fail_on:
            raise RepositoryRegistryError(f"{operation} failed: InvalidParameterException")

    def list_repositories(self) -> list[RepositoryInfo]:
        self._record("list")
        return [RepositoryInfo(name=name) for name in self.repositories]

    def create_repository(self, name: str) -> RepositoryInfo:
        self._record("create", name)
        self.repositories.append(name)
        return RepositoryInfo(name=name, uri=f"123456789012.dkr.ecr.us-east-2.amazonaws.com/{name}")

    def put_image(self, repository: str, tag: str, manifest: str) -> ImageInfo:
        self._record("put_image", repository, tag)
        return ImageInfo(digest="sha256:abc", tag=tag)


class FakeClusterManager(ClusterManager):
    """In-memory cluster manager that records every call."""

    def __init__(self, calls: list[tuple[Any, ...]]):
        self.calls = calls
        self.clusters: list[str] = []
        self.fail_on: set[str] = set()

    def create_cluster(self, name: str, capacity_providers: list[str]) -> ClusterInfo:
        self.calls.append(("clusters.create", name, tuple(capacity_providers)))
        if "create" in self.fail_on:
            raise ClusterManagerError("create failed: ClientException")
        self.clusters.append(name)
        return ClusterInfo(name=name, status="ACTIVE", arn=f"arn:aws:ecs:us-east-2:123456789012:cluster/{name}")


@pytest.fixture
def calls() -> list[tuple[Any, ...]]:
    """Ordered log of every collaborator call and sleep."""
    return []


@pytest.fixture
def identity(calls: list[tuple[Any, ...]]) -> FakeIdentityProvider:
    """Fake identity provider."""
    return FakeIdentityProvider(calls)


@pytest.fixture
def issued_identity(
    calls: list[tuple[Any, ...]], identity: FakeIdentityProvider
) -> FakeIdentityProvider:
    """Identity provider signed with the issued key, sharing the same keyring."""
    return FakeIdentityProvider(calls, label="issued_identity", keys=identity.keys)


@pytest.fixture
def registry(calls: list[tuple[Any, ...]]) -> FakeRepositoryRegistry:
    """Fake repository registry."""
    return FakeRepositoryRegistry(calls)


@pytest.fixture
def cluster_manager(calls: list[tuple[Any, ...]]) -> FakeClusterManager:
    """Fake cluster manager."""
    return FakeClusterManager(calls)


@pytest.fixture
def connect(
    calls: list[tuple[Any, ...]],
    registry: FakeRepositoryRegistry,
    cluster_manager: FakeClusterManager,
    issued_identity: FakeIdentityProvider,
) -> MagicMock:
    """Connect callable returning the fakes bound to the issued key."""

    def _connect(credential: IssuedCredential) -> ProvisioningTargets:
        calls.append(("connect", credential.access_key_id))
        return ProvisioningTargets(
            registry=registry, clusters=cluster_manager, identity=issued_identity
        )

    return MagicMock(side_effect=_connect)


@pytest.fixture
def fake_sleep(calls: list[tuple[Any, ...]]) -> MagicMock:
    """Sleep replacement that records the requested duration."""
    return MagicMock(side_effect=lambda seconds: calls.append(("sleep", seconds)))


@pytest.fixture
def provision_config() -> ProvisionConfig:
    """Default configuration."""
    return ProvisionConfig()


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests against a real AWS account")
