"""Utility helpers shared across RCA taxonomy modules."""

from .helpers import (
    ensure_directory,
    normalize_string,
    normalize_whitespace,
    serialize_json,
    truncate,
)
from .logging import configure_logging, get_logger, log_timing, logging_context
from .similarity import levenshtein_distance, string_similarity, tag_overlap

__all__ = [
    "ensure_directory",
    "normalize_string",
    "normalize_whitespace",
    "serialize_json",
    "truncate",
    "configure_logging",
    "get_logger",
    "log_timing",
    "logging_context",
    "levenshtein_distance",
    "string_similarity",
    "tag_overlap",
]
