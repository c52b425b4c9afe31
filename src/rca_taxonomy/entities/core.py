"""Core domain entities for RCA taxonomy codes and duplicate detection."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class MainCategory(str, Enum):
    """Top-level RCA classification."""

    AGENT = "AGENT"
    PROCESS = "PROCESS"
    TECHNOLOGY = "TECHNOLOGY"
    CUSTOMER = "CUSTOMER"


class CodeStatus(str, Enum):
    """Lifecycle status of a stored code."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    DEPRECATED = "DEPRECATED"
    MERGED = "MERGED"


class CodeScope(str, Enum):
    """Visibility scope of a stored code."""

    GLOBAL = "GLOBAL"
    SITE = "SITE"


class Site(str, Enum):
    """Organizational sites participating in the taxonomy."""

    UAE = "UAE"
    EG = "EG"
    KSA = "KSA"


class Role(str, Enum):
    """Governance roles, ordered from least to most privileged."""

    QA_MEMBER = "QA_MEMBER"
    QA_LEAD = "QA_LEAD"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


def as_string_list(value: Any) -> List[str]:
    """Coerce a loosely typed JSON value into a list of strings.

    Lists are stringified item by item, ``None`` becomes ``[]`` and any other
    scalar becomes a one-item list. A string holding a JSON-encoded array (as
    written by some exporters) is decoded first.
    """

    if value is None:
        return []
    if isinstance(value, str) and value.lstrip().startswith("["):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return [value]
        if value is None:
            return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


class TaxonomyEntry(BaseModel):
    """A stored RCA code or a draft being compared against stored codes.

    Field names accept both the snake_case form and the storage column names
    (``mainRca``, ``rca1`` .. ``rca5``). Blank hierarchy labels and definitions
    are coerced to ``None`` so that "not specified" has a single representation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, description="Opaque identifier; absent on drafts")
    main_category: MainCategory = Field(
        ...,
        validation_alias=AliasChoices("main_category", "mainCategory", "mainRca"),
    )
    level1: str | None = Field(default=None, validation_alias=AliasChoices("level1", "rca1"))
    level2: str | None = Field(default=None, validation_alias=AliasChoices("level2", "rca2"))
    level3: str | None = Field(default=None, validation_alias=AliasChoices("level3", "rca3"))
    level4: str | None = Field(default=None, validation_alias=AliasChoices("level4", "rca4"))
    level5: str | None = Field(default=None, validation_alias=AliasChoices("level5", "rca5"))
    definition: str | None = Field(default=None)
    tags: List[str] = Field(default_factory=list)
    status: CodeStatus | None = Field(default=None)
    scope: CodeScope | None = Field(default=None)
    site: Site | None = Field(default=None)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None

    @field_validator("level1", "level2", "level3", "level4", "level5", "definition", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> List[str]:
        return [tag.strip() for tag in as_string_list(value) if tag.strip()]

    @property
    def levels(self) -> Tuple[str | None, ...]:
        """Hierarchy labels ordered from level 1 to level 5."""

        return (self.level1, self.level2, self.level3, self.level4, self.level5)

    @property
    def path(self) -> str:
        """Human-readable ``MAIN > L1 > L2`` path of the populated levels."""

        parts = [self.main_category.value, *(level for level in self.levels if level)]
        return " > ".join(parts)


class SimilarityResult(BaseModel):
    """A candidate code flagged as a potential duplicate of a draft."""

    entry: TaxonomyEntry
    score: float = Field(..., ge=0.0)
    reason: str = Field(default="")
    contributions: Dict[str, float] = Field(
        default_factory=dict,
        description="Weighted contribution of every signal that fired, keyed by signal name.",
    )


__all__ = [
    "MainCategory",
    "CodeStatus",
    "CodeScope",
    "Site",
    "Role",
    "as_string_list",
    "TaxonomyEntry",
    "SimilarityResult",
]
