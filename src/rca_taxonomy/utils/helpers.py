"""General-purpose text and filesystem helpers."""

from __future__ import annotations

import json
import re
from pathlib import Path

from .logging import get_logger

_WORD_BOUNDARY_PATTERN = re.compile(r"\s+")
_DISALLOWED_PATTERN = re.compile(r"[^a-z0-9\s]+")

_LOGGER = get_logger(module=__name__)


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace into single spaces."""

    return _WORD_BOUNDARY_PATTERN.sub(" ", text.strip())


def normalize_string(text: str) -> str:
    """Canonical comparison form: lowercase ``[a-z0-9]`` words separated by single spaces.

    Characters outside ``[a-z0-9]`` and whitespace act as separators, so
    ``"vat-calculation!!"`` and ``"VAT Calculation"`` normalize identically.
    """

    if not text:
        return ""
    lowered = text.lower()
    stripped = _DISALLOWED_PATTERN.sub(" ", lowered)
    return normalize_whitespace(stripped)


def truncate(text: str, length: int) -> str:
    """Shorten ``text`` to ``length`` characters, marking the cut with an ellipsis."""

    if len(text) <= length:
        return text
    return text[:length] + "..."


def ensure_directory(path: Path | str) -> Path:
    """Ensure that a directory exists and return the resolved Path."""

    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target.resolve()


def serialize_json(data: object, destination: Path | str, *, indent: int = 2) -> Path:
    """Serialize data to JSON with deterministic key ordering."""

    dest_path = Path(destination)
    ensure_directory(dest_path.parent)
    dest_path.write_text(
        json.dumps(data, indent=indent, sort_keys=True, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    _LOGGER.debug("Serialized JSON", path=str(dest_path), size=dest_path.stat().st_size)
    return dest_path


__all__ = [
    "normalize_whitespace",
    "normalize_string",
    "truncate",
    "ensure_directory",
    "serialize_json",
]
