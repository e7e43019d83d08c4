"""Core data models for the provisioner."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class KeyStatus(str, Enum):
    """IAM access key status."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    EXPIRED = "Expired"


class AccessKeyMetadata(BaseModel):
    """An existing access key as reported by the identity provider."""

    access_key_id: str
    user_name: str
    status: KeyStatus
    create_date: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == KeyStatus.ACTIVE


class IssuedCredential(BaseModel):
    """A freshly created access key, including its secret."""

    access_key_id: str
    secret_access_key: str = Field(..., repr=False)
    user_name: str
    status: KeyStatus = KeyStatus.ACTIVE
    create_date: datetime | None = None


class RotationResult(BaseModel):
    """Outcome of rotating the principal's access keys."""

    principal: str
    deleted: list[str] = Field(default_factory=list)
    deactivated: list[str] = Field(default_factory=list)
    issued: IssuedCredential


class RepositoryOutcome(BaseModel):
    """Outcome of the ensure-repository step."""

    name: str
    created: bool
    existing_count: int
    uri: str | None = None


class ImagePushOutcome(BaseModel):
    """Outcome of the best-effort image push."""

    attempted: bool = False
    succeeded: bool = False
    image_digest: str | None = None
    error: str | None = None


class ClusterOutcome(BaseModel):
    """Outcome of the cluster creation step."""

    name: str
    capacity_providers: list[str]
    status: str | None = None
    arn: str | None = None


class ProvisionReport(BaseModel):
    """Summary of a complete provisioning run."""

    rotation: RotationResult
    repository: RepositoryOutcome
    image_push: ImagePushOutcome
    cluster: ClusterOutcome
    started_at: datetime
    finished_at: datetime

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()
