"""Policy models for duplicate detection and candidate lookup, plus their loader."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Sequence

import yaml
from pydantic import BaseModel, Field, field_validator

from .lookup import LookupPolicy
from .similarity import SignalGates, SignalWeights, SimilarityPolicy

_ENV_PREFIX = "RCA_TAXONOMY_POLICY__"


class Policies(BaseModel):
    """All tunable governance rules, versioned together."""

    policy_version: str = Field(default="2024-06-01")
    similarity: SimilarityPolicy = Field(default_factory=SimilarityPolicy)
    lookup: LookupPolicy = Field(default_factory=LookupPolicy)

    @field_validator("policy_version")
    @classmethod
    def _require_version(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("policy_version must be provided")
        return value


def _plain_copy(source: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        key: _plain_copy(value) if isinstance(value, Mapping) else value
        for key, value in source.items()
    }


def _descend(root: MutableMapping[str, Any], keys: Sequence[str]) -> MutableMapping[str, Any]:
    """Walk ``keys`` from ``root``, creating empty mappings for missing segments."""

    node = root
    for depth, key in enumerate(keys, start=1):
        child = node.setdefault(key, {})
        if not isinstance(child, MutableMapping):
            raise ValueError(
                f"Cannot override policy path '{'/'.join(keys[:depth])}' because it "
                "resolves to a non-mapping value"
            )
        node = child
    return node


def _apply_env_overrides(raw: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Apply ``RCA_TAXONOMY_POLICY__SECTION__FIELD=value`` variables to ``raw``.

    Names are lowercased and split on ``__``. Values are JSON-decoded when
    possible (``0.4``, ``true``, ``["APPROVED"]``) and kept as strings otherwise.
    """

    for name, value in os.environ.items():
        if not name.startswith(_ENV_PREFIX):
            continue
        keys = [part.lower() for part in name[len(_ENV_PREFIX) :].split("__") if part]
        if not keys:
            continue
        try:
            decoded: Any = json.loads(value)
        except json.JSONDecodeError:
            decoded = value
        _descend(raw, keys[:-1])[keys[-1]] = decoded
    return raw


def _read_policy_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Policy file not found: {path}")
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, Mapping):
        raise ValueError(f"Policy file '{path}' must contain a mapping at the top level")
    return _plain_copy(loaded)


def _merge_nested(target: MutableMapping[str, Any], update: Mapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in update.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, MutableMapping):
            _merge_nested(current, value)
        else:
            target[key] = _plain_copy(value) if isinstance(value, Mapping) else value
    return target


def load_policies(
    source: os.PathLike[str] | str | Mapping[str, Any],
    overrides: Mapping[str, Any] | None = None,
) -> Policies:
    """Validate policies from a mapping or a YAML file.

    Layers, lowest precedence first: ``source``, ``RCA_TAXONOMY_POLICY__``
    variables, then ``overrides`` (explicit keyword or command-line values).
    Mapping arguments are copied, never mutated.
    """

    raw = _plain_copy(source) if isinstance(source, Mapping) else _read_policy_file(Path(source))
    layered = _apply_env_overrides(raw)
    if overrides:
        _merge_nested(layered, overrides)
    return Policies.model_validate(layered)


__all__ = [
    "Policies",
    "load_policies",
    "SimilarityPolicy",
    "SignalWeights",
    "SignalGates",
    "LookupPolicy",
]
