"""Data types shared by the registry and cluster interfaces."""

from dataclasses import dataclass


@dataclass
class RepositoryInfo:
    """Container image repository."""

    name: str
    uri: str | None = None
    arn: str | None = None


@dataclass
class ImageInfo:
    """Image stored in a repository."""

    digest: str | None = None
    tag: str | None = None


@dataclass
class ClusterInfo:
    """Container cluster."""

    name: str
    status: str | None = None
    arn: str | None = None
