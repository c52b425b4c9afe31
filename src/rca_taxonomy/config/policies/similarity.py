"""Similarity scoring policy models."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class SignalWeights(BaseModel):
    """Contribution of each scoring signal to a candidate's total score.

    ``main_category`` and ``level`` are flat bonuses; ``definition`` and
    ``tags`` are multiplied by the underlying similarity value.
    """

    main_category: float = Field(default=0.20, ge=0.0)
    level: float = Field(default=0.15, ge=0.0)
    definition: float = Field(default=0.20, ge=0.0)
    tags: float = Field(default=0.15, ge=0.0)


class SignalGates(BaseModel):
    """Strict lower bounds a raw similarity must exceed before a signal fires."""

    level: float = Field(default=0.7, ge=0.0, le=1.0)
    definition: float = Field(default=0.5, ge=0.0, le=1.0)
    tags: float = Field(default=0.3, ge=0.0, le=1.0)


class SimilarityPolicy(BaseModel):
    """Configuration for duplicate detection at proposal time."""

    default_threshold: float = Field(
        default=0.3,
        gt=0.0,
        le=1.0,
        description="Minimum aggregate score for a candidate to be reported.",
    )
    max_results: int = Field(default=5, ge=1)
    score_cap: float = Field(
        default=1.0,
        gt=0.0,
        description="Upper bound applied to reported scores; totals are never renormalized.",
    )
    weights: SignalWeights = Field(default_factory=SignalWeights)
    gates: SignalGates = Field(default_factory=SignalGates)

    @model_validator(mode="after")
    def _validate_threshold_reachable(self) -> "SimilarityPolicy":
        if self.default_threshold > self.score_cap:
            raise ValueError("default_threshold must not exceed score_cap")
        return self


__all__ = ["SignalWeights", "SignalGates", "SimilarityPolicy"]
