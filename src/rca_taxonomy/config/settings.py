"""Runtime settings: filesystem layout, environment selection and policies."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal, Mapping

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .policies import Policies, load_policies

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "config"

_SETTINGS_ENV_PREFIX = "RCA_TAXONOMY_SETTINGS__"
_ENVIRONMENT_VARIABLE = "RCA_TAXONOMY_ENV"


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated by ``override``; nested dictionaries merge key by key."""

    merged = dict(base)
    for key, value in override.items():
        existing = merged.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(existing, value)
        else:
            merged[key] = value
    return merged


def _read_yaml_mapping(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Configuration file '{path}' must contain a mapping at the top level")
    return loaded


def _settings_env_overrides() -> Dict[str, Any]:
    """Collect ``RCA_TAXONOMY_SETTINGS__A__B=value`` variables as ``{"a": {"b": value}}``."""

    overrides: Dict[str, Any] = {}
    for name, value in os.environ.items():
        if not name.startswith(_SETTINGS_ENV_PREFIX):
            continue
        keys = name[len(_SETTINGS_ENV_PREFIX) :].lower().split("__")
        nested: Any = value
        for key in reversed(keys):
            nested = {key: nested}
        overrides = _deep_merge(overrides, nested)
    return overrides


class PathsConfig(BaseModel):
    """Where the code catalog lives and where exports and logs are written."""

    data_dir: Path = Field(default=PROJECT_ROOT / "data")
    output_dir: Path = Field(default=PROJECT_ROOT / "output")
    logs_dir: Path = Field(default=PROJECT_ROOT / "logs")

    def ensure_exists(self) -> None:
        """Anchor relative paths at the project root and create the directories."""

        for name in type(self).model_fields:
            directory = Path(getattr(self, name))
            if not directory.is_absolute():
                directory = PROJECT_ROOT / directory
            directory.mkdir(parents=True, exist_ok=True)
            object.__setattr__(self, name, directory)


class Settings(BaseSettings):
    """Resolved configuration for the RCA taxonomy tooling.

    Sources, lowest precedence first: class defaults, ``default.yaml``, the
    ``<environment>.yaml`` selected by ``environment`` or ``RCA_TAXONOMY_ENV``,
    ``RCA_TAXONOMY_SETTINGS__`` variables, then ``RCA_TAXONOMY_*`` variables
    and explicit keyword arguments. Top-level ``policy_version``,
    ``similarity`` and ``lookup`` keys in the YAML files feed :class:`Policies`;
    ``RCA_TAXONOMY_POLICY__`` variables apply on top of them and an explicit
    ``policies`` mapping applies on top of those.
    """

    model_config = SettingsConfigDict(
        env_prefix="RCA_TAXONOMY_",
        validate_assignment=True,
        extra="ignore",
    )

    environment: Literal["development", "testing", "production"] = Field(default="development")
    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    create_dirs: bool = Field(
        default=True,
        description="Create the directories declared in `paths` on initialisation.",
    )
    catalog_filename: str = Field(default="codes.jsonl", min_length=1)
    policies: Policies

    @model_validator(mode="before")
    @classmethod
    def _layer_sources(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        explicit = {key: value for key, value in values.items() if value is not None}
        config_dir = Path(explicit.get("config_dir") or DEFAULT_CONFIG_DIR)
        environment = explicit.get("environment") or os.getenv(_ENVIRONMENT_VARIABLE, "development")

        from_files = _deep_merge(
            _read_yaml_mapping(config_dir / "default.yaml"),
            _read_yaml_mapping(config_dir / f"{environment}.yaml"),
        )
        layered = _deep_merge(from_files, _settings_env_overrides())

        policy_layer = {key: layered.pop(key) for key in list(layered) if key in Policies.model_fields}
        resolved = _deep_merge(layered, explicit)
        resolved.setdefault("environment", environment)

        requested = resolved.pop("policies", None)
        if isinstance(requested, Policies):
            resolved["policies"] = requested
        else:
            resolved["policies"] = load_policies(policy_layer, overrides=requested)
        return resolved

    @model_validator(mode="after")
    def _create_directories(self) -> "Settings":
        if self.create_dirs:
            self.paths.ensure_exists()
        return self

    @property
    def policy_version(self) -> str:
        return self.policies.policy_version

    @property
    def log_file(self) -> Path:
        return self.paths.logs_dir / "rca_taxonomy.log"

    @property
    def catalog_file(self) -> Path:
        return self.paths.data_dir / self.catalog_filename


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings built from the default sources."""

    return Settings()


__all__ = ["Settings", "get_settings", "PathsConfig", "PROJECT_ROOT"]
