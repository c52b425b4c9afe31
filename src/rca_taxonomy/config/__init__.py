"""Configuration utilities for the RCA taxonomy tooling."""

from .policies import (
    LookupPolicy,
    Policies,
    SignalGates,
    SignalWeights,
    SimilarityPolicy,
    load_policies,
)
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "Policies",
    "load_policies",
    "SimilarityPolicy",
    "SignalWeights",
    "SignalGates",
    "LookupPolicy",
]
