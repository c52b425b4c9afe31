"""Top-level package for RCA taxonomy governance tooling."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rca-taxonomy")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.1.0"

from .config.settings import Settings, get_settings
from .entities import MainCategory, SimilarityResult, TaxonomyEntry
from .matching import find_similar_codes, lookup_similar_codes

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "MainCategory",
    "TaxonomyEntry",
    "SimilarityResult",
    "find_similar_codes",
    "lookup_similar_codes",
]
