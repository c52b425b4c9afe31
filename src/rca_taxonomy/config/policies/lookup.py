"""Candidate lookup policy models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

from rca_taxonomy.entities.core import CodeStatus


class LookupPolicy(BaseModel):
    """Rules governing which stored codes participate in duplicate detection."""

    eligible_statuses: List[CodeStatus] = Field(
        default_factory=lambda: [CodeStatus.PENDING, CodeStatus.APPROVED],
        description="Statuses of stored codes compared against a draft.",
    )
    respect_site_visibility: bool = Field(
        default=False,
        description="Hide site-scoped codes the requesting principal cannot view.",
    )

    @field_validator("eligible_statuses", mode="before")
    @classmethod
    def _normalize_statuses(cls, value: object) -> object:
        if isinstance(value, str):
            value = [part for part in value.split(",")]
        if isinstance(value, list):
            return [item.strip().upper() if isinstance(item, str) else item for item in value]
        return value

    @field_validator("eligible_statuses")
    @classmethod
    def _require_statuses(cls, value: List[CodeStatus]) -> List[CodeStatus]:
        if not value:
            raise ValueError("eligible_statuses must list at least one status")
        return list(dict.fromkeys(value))


__all__ = ["LookupPolicy"]
