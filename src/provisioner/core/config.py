"""Configuration management for the provisioner."""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from provisioner.core.exceptions import ConfigurationError

# Manifest left over from the unfinished image push. It is not a valid image
# manifest, so a real registry rejects it.
PLACEHOLDER_MANIFEST = 'locationName:"dockerfile" min:"1" type:"string" required:"true"'


class AWSConfig(BaseModel):
    """AWS configuration."""

    region: str = "us-east-2"
    profile: str | None = None


class CredentialsConfig(BaseModel):
    """Access key rotation configuration."""

    principal: str = "infra-admin"
    max_keys: int = Field(default=10, ge=1, le=1000)
    export_environment: bool = True
    revoke_on_exit: bool = False


class PropagationConfig(BaseModel):
    """Settings for waiting on a freshly issued key."""

    strategy: Literal["fixed", "poll"] = "fixed"
    wait_seconds: float = Field(default=9.0, ge=0)
    max_attempts: int = Field(default=6, ge=1)
    min_wait_seconds: float = Field(default=1.0, ge=0)
    max_wait_seconds: float = Field(default=10.0, ge=0)


class RepositoryConfig(BaseModel):
    """ECR repository configuration."""

    name: str = "skodaice"
    # "count" treats exactly one existing repository as "already exists".
    existence_check: Literal["count", "name"] = "count"


class ImagePushConfig(BaseModel):
    """Image push configuration."""

    enabled: bool = False
    tag: str = "latest"
    manifest: str = PLACEHOLDER_MANIFEST


class ClusterConfig(BaseModel):
    """ECS cluster configuration."""

    name: str = "skodaiceecs"
    capacity_providers: list[str] = Field(default_factory=lambda: ["FARGATE"])


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["json", "console"] = "console"
    output: Literal["stdout", "stderr"] = "stderr"


class ProvisionConfig(BaseModel):
    """Main provisioner configuration."""

    aws: AWSConfig = Field(default_factory=AWSConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    propagation: PropagationConfig = Field(default_factory=PropagationConfig)
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    image_push: ImagePushConfig = Field(default_factory=ImagePushConfig)
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "ProvisionConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            ProvisionConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration: expected a mapping, got {type(data).__name__}"
            )

        try:
            return cls(**data)
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation
        """
        return self.model_dump()
