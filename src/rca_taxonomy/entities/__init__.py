"""Domain entities for the RCA taxonomy."""

from .core import (
    CodeScope,
    CodeStatus,
    MainCategory,
    Role,
    SimilarityResult,
    Site,
    TaxonomyEntry,
    as_string_list,
)

__all__ = [
    "MainCategory",
    "CodeStatus",
    "CodeScope",
    "Site",
    "Role",
    "TaxonomyEntry",
    "SimilarityResult",
    "as_string_list",
]
