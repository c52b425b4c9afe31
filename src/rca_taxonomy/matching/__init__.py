"""Duplicate detection for drafted RCA codes."""

from .io import (
    CodeRepository,
    InMemoryCodeRepository,
    JsonlCodeRepository,
    load_entries,
    parse_tag_list,
    write_results,
)
from .main import lookup_similar_codes
from .matcher import CandidateScore, SimilarityMatcher, find_similar_codes

__all__ = [
    "CodeRepository",
    "InMemoryCodeRepository",
    "JsonlCodeRepository",
    "load_entries",
    "parse_tag_list",
    "write_results",
    "lookup_similar_codes",
    "CandidateScore",
    "SimilarityMatcher",
    "find_similar_codes",
]
