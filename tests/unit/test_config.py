"""Tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from provisioner.core.config import (
    ClusterConfig,
    CredentialsConfig,
    PropagationConfig,
    ProvisionConfig,
    RepositoryConfig,
)
from provisioner.core.exceptions import ConfigurationError


def test_defaults_match_bootstrap_constants():
    """A config built without input reproduces the built-in constants."""
    config = ProvisionConfig()

    assert config.aws.region == "us-east-2"
    assert config.credentials.principal == "infra-admin"
    assert config.credentials.max_keys == 10
    assert config.credentials.export_environment is True
    assert config.credentials.revoke_on_exit is False
    assert config.propagation.strategy == "fixed"
    assert config.propagation.wait_seconds == 9
    assert config.repository.name == "skodaice"
    assert config.repository.existence_check == "count"
    assert config.image_push.enabled is False
    assert config.cluster.name == "skodaiceecs"
    assert config.cluster.capacity_providers == ["FARGATE"]


def test_cluster_config_lists_are_independent():
    """Default capacity provider lists are not shared."""
    first = ClusterConfig()
    first.capacity_providers.append("FARGATE_SPOT")

    assert ClusterConfig().capacity_providers == ["FARGATE"]


def test_invalid_strategy_rejected():
    """Unknown wait strategies fail validation."""
    with pytest.raises(ValueError):
        PropagationConfig(strategy="forever")


def test_invalid_existence_check_rejected():
    with pytest.raises(ValueError):
        RepositoryConfig(existence_check="fuzzy")


def test_max_keys_must_be_positive():
    with pytest.raises(ValueError):
        CredentialsConfig(max_keys=0)


def test_from_file(tmp_path: Path):
    """Values from YAML override defaults, the rest keep them."""
    config_file = tmp_path / "provision.yaml"
    config_file.write_text(
        yaml.safe_dump(
            {
                "aws": {"region": "eu-west-1", "profile": "bootstrap"},
                "propagation": {"strategy": "poll", "max_attempts": 4},
                "repository": {"existence_check": "name"},
            }
        )
    )

    config = ProvisionConfig.from_file(config_file)

    assert config.aws.region == "eu-west-1"
    assert config.aws.profile == "bootstrap"
    assert config.propagation.strategy == "poll"
    assert config.propagation.max_attempts == 4
    assert config.repository.existence_check == "name"
    assert config.repository.name == "skodaice"


def test_from_file_empty_uses_defaults(tmp_path: Path):
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    assert ProvisionConfig.from_file(config_file) == ProvisionConfig()


def test_from_file_not_found(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="not found"):
        ProvisionConfig.from_file(tmp_path / "missing.yaml")


def test_from_file_invalid_yaml(tmp_path: Path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("aws: [unclosed")

    with pytest.raises(ConfigurationError, match="Failed to load"):
        ProvisionConfig.from_file(config_file)


def test_from_file_not_a_mapping(tmp_path: Path):
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- a\n- b\n")

    with pytest.raises(ConfigurationError, match="expected a mapping"):
        ProvisionConfig.from_file(config_file)


def test_from_file_invalid_values(tmp_path: Path):
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text(yaml.safe_dump({"propagation": {"wait_seconds": -1}}))

    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        ProvisionConfig.from_file(config_file)


def test_to_dict():
    data = ProvisionConfig().to_dict()

    assert data["repository"]["name"] == "skodaice"
    assert data["cluster"]["capacity_providers"] == ["FARGATE"]
