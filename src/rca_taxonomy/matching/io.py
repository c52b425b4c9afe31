"""Candidate repositories and result serialization for duplicate detection."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Collection, Iterable, Iterator, List, Protocol, Sequence

from pydantic import ValidationError

from rca_taxonomy.entities.core import CodeStatus, MainCategory, SimilarityResult, TaxonomyEntry
from rca_taxonomy.utils.helpers import serialize_json
from rca_taxonomy.utils.logging import get_logger

_LOGGER = get_logger(module=__name__)


class CodeRepository(Protocol):
    """Read access to stored RCA codes."""

    def find_candidates(
        self, main_category: MainCategory, statuses: Collection[CodeStatus]
    ) -> List[TaxonomyEntry]:
        """Return stored codes in ``main_category`` whose status is in ``statuses``."""
        ...


def _matches(entry: TaxonomyEntry, main_category: MainCategory, statuses: Collection[CodeStatus]) -> bool:
    return entry.main_category == main_category and entry.status in statuses


class InMemoryCodeRepository:
    """Repository over an already materialized list of codes."""

    def __init__(self, entries: Iterable[TaxonomyEntry]) -> None:
        self._entries = list(entries)

    def find_candidates(
        self, main_category: MainCategory, statuses: Collection[CodeStatus]
    ) -> List[TaxonomyEntry]:
        return [entry for entry in self._entries if _matches(entry, main_category, statuses)]


def load_entries(path: str | Path) -> Iterator[TaxonomyEntry]:
    """Yield codes from a JSONL file, one JSON object per line."""

    with Path(path).open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
                yield TaxonomyEntry.model_validate(payload)
            except (json.JSONDecodeError, ValidationError) as exc:
                raise ValueError(f"{path}:{line_number}: invalid code record: {exc}") from exc


class JsonlCodeRepository:
    """Repository reading the code catalog from a JSONL export on every query."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def find_candidates(
        self, main_category: MainCategory, statuses: Collection[CodeStatus]
    ) -> List[TaxonomyEntry]:
        if not self.path.exists():
            raise FileNotFoundError(f"Code catalog not found: {self.path}")
        candidates = [
            entry for entry in load_entries(self.path) if _matches(entry, main_category, statuses)
        ]
        _LOGGER.debug(
            "Loaded candidates from catalog",
            path=str(self.path),
            main_category=main_category.value,
            count=len(candidates),
        )
        return candidates


def parse_tag_list(raw: str | None) -> List[str]:
    """Split a comma-separated tag string, dropping blank items."""

    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def results_payload(results: Sequence[SimilarityResult]) -> List[dict]:
    return [result.model_dump(mode="json", exclude_none=True) for result in results]


def write_results(results: Sequence[SimilarityResult], destination: str | Path) -> Path:
    """Persist similarity results as a JSON array."""

    return serialize_json(results_payload(results), destination)


__all__ = [
    "CodeRepository",
    "InMemoryCodeRepository",
    "JsonlCodeRepository",
    "load_entries",
    "parse_tag_list",
    "results_payload",
    "write_results",
]
