"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from rca_taxonomy.config.policies import LookupPolicy, Policies, SimilarityPolicy, load_policies
from rca_taxonomy.config.settings import Settings
from rca_taxonomy.entities.core import CodeStatus


@pytest.fixture
def minimal_policy_dict() -> dict:
    return {
        "policy_version": "test-version",
        "similarity": {
            "default_threshold": 0.4,
            "max_results": 3,
            "weights": {"main_category": 0.25},
            "gates": {"level": 0.8},
        },
        "lookup": {"eligible_statuses": ["APPROVED"]},
    }


@pytest.fixture
def config_dir(tmp_path: Path, minimal_policy_dict: dict) -> Path:
    default_yaml = {
        "environment": "development",
        "paths": {
            "data_dir": str(tmp_path / "data"),
            "output_dir": str(tmp_path / "output"),
            "logs_dir": str(tmp_path / "logs"),
        },
        "catalog_filename": "catalog.jsonl",
        **minimal_policy_dict,
    }
    production_yaml = {
        "environment": "production",
        "lookup": {"respect_site_visibility": True},
    }
    (tmp_path / "default.yaml").write_text(yaml.safe_dump(default_yaml), encoding="utf-8")
    (tmp_path / "production.yaml").write_text(yaml.safe_dump(production_yaml), encoding="utf-8")
    return tmp_path


def test_policy_defaults() -> None:
    policies = Policies()
    assert policies.similarity.default_threshold == 0.3
    assert policies.similarity.max_results == 5
    assert policies.similarity.weights.level == 0.15
    assert policies.similarity.gates.definition == 0.5
    assert policies.lookup.eligible_statuses == [CodeStatus.PENDING, CodeStatus.APPROVED]
    assert policies.lookup.respect_site_visibility is False


def test_load_policies_from_dict(minimal_policy_dict: dict) -> None:
    policies = load_policies(minimal_policy_dict)
    assert isinstance(policies, Policies)
    assert policies.policy_version == "test-version"
    assert policies.similarity.weights.main_category == 0.25
    assert policies.similarity.weights.tags == 0.15
    assert policies.similarity.gates.level == 0.8
    assert policies.lookup.eligible_statuses == [CodeStatus.APPROVED]


def test_load_policies_does_not_mutate_source(minimal_policy_dict: dict, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RCA_TAXONOMY_POLICY__SIMILARITY__MAX_RESULTS", "9")
    load_policies(minimal_policy_dict)
    assert minimal_policy_dict["similarity"]["max_results"] == 3


def test_load_policies_from_yaml(tmp_path: Path, minimal_policy_dict: dict) -> None:
    policy_file = tmp_path / "policies.yaml"
    policy_file.write_text(yaml.safe_dump(minimal_policy_dict), encoding="utf-8")

    policies = load_policies(policy_file)

    assert policies.similarity.max_results == 3


def test_load_policies_env_override(monkeypatch: pytest.MonkeyPatch, minimal_policy_dict: dict) -> None:
    monkeypatch.setenv("RCA_TAXONOMY_POLICY__SIMILARITY__DEFAULT_THRESHOLD", "0.55")
    monkeypatch.setenv("RCA_TAXONOMY_POLICY__LOOKUP__RESPECT_SITE_VISIBILITY", "true")

    policies = load_policies(minimal_policy_dict)

    assert policies.similarity.default_threshold == 0.55
    assert policies.lookup.respect_site_visibility is True


def test_load_policies_env_override_rejects_scalar_parent(
    monkeypatch: pytest.MonkeyPatch, minimal_policy_dict: dict
) -> None:
    monkeypatch.setenv("RCA_TAXONOMY_POLICY__POLICY_VERSION__NESTED", "x")

    with pytest.raises(ValueError, match="non-mapping"):
        load_policies(minimal_policy_dict)


def test_load_policies_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_policies(tmp_path / "absent.yaml")


def test_load_policies_requires_mapping(tmp_path: Path) -> None:
    policy_file = tmp_path / "policies.yaml"
    policy_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_policies(policy_file)


def test_threshold_must_not_exceed_cap() -> None:
    with pytest.raises(ValidationError):
        SimilarityPolicy(default_threshold=0.9, score_cap=0.8)


@pytest.mark.parametrize("threshold", [0.0, -0.1, 1.5])
def test_threshold_bounds(threshold: float) -> None:
    with pytest.raises(ValidationError):
        SimilarityPolicy(default_threshold=threshold)


def test_lookup_policy_accepts_comma_separated_statuses() -> None:
    policy = LookupPolicy(eligible_statuses="approved, pending, approved")
    assert policy.eligible_statuses == [CodeStatus.APPROVED, CodeStatus.PENDING]


def test_lookup_policy_requires_a_status() -> None:
    with pytest.raises(ValidationError):
        LookupPolicy(eligible_statuses=[])


def test_settings_load_default_yaml(config_dir: Path) -> None:
    settings = Settings(config_dir=config_dir, create_dirs=False)

    assert settings.environment == "development"
    assert settings.policy_version == "test-version"
    assert settings.policies.similarity.default_threshold == 0.4
    assert settings.catalog_file == config_dir / "data" / "catalog.jsonl"
    assert settings.log_file == config_dir / "logs" / "rca_taxonomy.log"


def test_settings_environment_override(config_dir: Path) -> None:
    settings = Settings(config_dir=config_dir, environment="production", create_dirs=False)

    assert settings.environment == "production"
    assert settings.policies.lookup.respect_site_visibility is True
    assert settings.policies.similarity.max_results == 3


def test_settings_env_override(monkeypatch: pytest.MonkeyPatch, config_dir: Path, tmp_path: Path) -> None:
    monkeypatch.setenv("RCA_TAXONOMY_SETTINGS__PATHS__LOGS_DIR", str(tmp_path / "elsewhere"))
    monkeypatch.setenv("RCA_TAXONOMY_SETTINGS__CATALOG_FILENAME", "override.jsonl")

    settings = Settings(config_dir=config_dir, create_dirs=False)

    assert settings.paths.logs_dir == tmp_path / "elsewhere"
    assert settings.catalog_filename == "override.jsonl"


def test_settings_explicit_policies_merge_over_files(config_dir: Path) -> None:
    settings = Settings(
        config_dir=config_dir,
        create_dirs=False,
        policies={"similarity": {"default_threshold": 0.6}},
    )

    assert settings.policies.similarity.default_threshold == 0.6
    assert settings.policies.similarity.max_results == 3
    assert settings.policy_version == "test-version"


def test_settings_accepts_policies_instance(config_dir: Path) -> None:
    policies = Policies(policy_version="pinned")

    settings = Settings(config_dir=config_dir, create_dirs=False, policies=policies)

    assert settings.policy_version == "pinned"


def test_settings_creates_directories(config_dir: Path) -> None:
    settings = Settings(config_dir=config_dir)

    assert settings.paths.data_dir.is_dir()
    assert settings.paths.logs_dir.is_dir()


def test_load_policies_explicit_overrides_beat_environment(
    monkeypatch: pytest.MonkeyPatch, minimal_policy_dict: dict
) -> None:
    monkeypatch.setenv("RCA_TAXONOMY_POLICY__SIMILARITY__DEFAULT_THRESHOLD", "0.55")
    monkeypatch.setenv("RCA_TAXONOMY_POLICY__SIMILARITY__MAX_RESULTS", "7")
    overrides = {"similarity": {"default_threshold": 0.65}}

    policies = load_policies(minimal_policy_dict, overrides=overrides)

    assert policies.similarity.default_threshold == 0.65
    assert policies.similarity.max_results == 7
    assert overrides == {"similarity": {"default_threshold": 0.65}}


def test_settings_explicit_policies_beat_policy_environment(
    monkeypatch: pytest.MonkeyPatch, config_dir: Path
) -> None:
    monkeypatch.setenv("RCA_TAXONOMY_POLICY__SIMILARITY__DEFAULT_THRESHOLD", "0.55")

    from_env = Settings(config_dir=config_dir, create_dirs=False)
    explicit = Settings(
        config_dir=config_dir,
        create_dirs=False,
        policies={"similarity": {"default_threshold": 0.6}},
    )

    assert from_env.policies.similarity.default_threshold == 0.55
    assert explicit.policies.similarity.default_threshold == 0.6
